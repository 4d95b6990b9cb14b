"""
JWT authentication and registration routes, mounted under /api/auth/.
"""

from django.urls import path
from rest_framework_simplejwt.views import (
    TokenBlacklistView,
    TokenRefreshView,
    TokenVerifyView,
)

from ..views.auth import SarrafTokenObtainPairView, logout, register

urlpatterns = [
    path('token/', SarrafTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('token/verify/', TokenVerifyView.as_view(), name='token_verify'),
    path('token/blacklist/', TokenBlacklistView.as_view(), name='token_blacklist'),
    path('register/', register, name='register'),
    path('logout/', logout, name='logout'),
]

"""
POST /api/auth/token/
{"username": "ahmad", "password": "..."}
Response: {"access": "...", "refresh": "...", "user": {...profile...}}

POST /api/auth/register/
{"username": "ahmad", "password": "...", "email": "ahmad@example.com", "full_name": "Ahmad N."}
Response (201): {"access": "...", "refresh": "...", "user": {...profile...}}

POST /api/auth/token/refresh/   {"refresh": "..."} -> {"access": "...", "refresh": "..."}
POST /api/auth/token/verify/    {"token": "..."}   -> {} (200 if valid, 401 if invalid)
POST /api/auth/token/blacklist/ {"refresh": "..."} -> {}
"""
