"""
API routes, mounted under /api/.
"""

from django.urls import include, path

from ..views import admin_views, kyc, notifications, settings_views, trade, transactions

urlpatterns = [
    path('auth/', include('api.urls.auth')),
    path('user/', include('clients.urls')),

    # Trading
    path('trade/', trade.create_trade, name='trade_create'),
    path('trade/quote/', trade.quote_trade, name='trade_quote'),
    path('transactions/', transactions.list_transactions, name='transactions'),

    # KYC
    path('kyc/', kyc.submit_kyc, name='kyc_submit'),

    # Notifications
    path('notifications/', notifications.list_notifications, name='notifications'),
    path('notifications/mark-all-read/', notifications.mark_all_notifications_read,
         name='notifications_mark_all_read'),
    path('notifications/<int:notification_id>/read/', notifications.mark_notification_read,
         name='notification_read'),

    # Platform settings
    path('settings/payment/', settings_views.payment_settings, name='payment_settings'),

    # Admin desk
    path('admin/transactions/', admin_views.list_all_transactions, name='admin_transactions'),
    path('admin/approve-transaction/<int:transaction_id>/', admin_views.approve_transaction,
         name='admin_approve_transaction'),
    path('admin/payment-proof/<int:transaction_id>/', admin_views.payment_proof,
         name='admin_payment_proof'),
    path('admin/users/', admin_views.list_users, name='admin_users'),
    path('admin/approve-kyc/<int:user_id>/', admin_views.approve_kyc, name='admin_approve_kyc'),
    path('admin/kyc-document/<int:user_id>/', admin_views.kyc_document, name='admin_kyc_document'),
    path('admin/settings/payment/', settings_views.update_payment_settings,
         name='admin_payment_settings'),
]
