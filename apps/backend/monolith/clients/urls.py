from django.urls import path

from . import views

urlpatterns = [
    path('', views.user_profile, name='user_profile'),
    path('wallet/', views.update_wallet, name='user_wallet'),
    path('cliq/', views.update_cliq, name='user_cliq'),
    path('bank/', views.update_bank, name='user_bank'),
    path('verify-mobile/', views.verify_mobile, name='user_verify_mobile'),
]
