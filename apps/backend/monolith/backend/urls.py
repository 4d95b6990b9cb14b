"""
Main URL configuration for the Sarraf backend.
"""

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path

from api.views.health import healthz, readyz

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('api.urls')),

    # Kubernetes probes
    path('healthz', healthz, name='healthz'),
    path('readyz', readyz, name='readyz'),

    # Prometheus /metrics
    path('', include('django_prometheus.urls')),
]

if settings.DEBUG:
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)

"""
Main API Routes:

Authentication:
- POST /api/auth/token/                 - Login (access & refresh tokens)
- POST /api/auth/token/refresh/         - Refresh access token
- POST /api/auth/register/              - Create an account
- POST /api/auth/logout/                - Blacklist a refresh token

Profile:
- GET  /api/user/                       - Profile
- POST /api/user/wallet/ | cliq/ | bank/ | verify-mobile/

Trading:
- POST /api/trade/                      - Submit an order (multipart, proof_of_payment)
- POST /api/trade/quote/                - Price an order
- GET  /api/transactions/               - Own transactions
- POST /api/kyc/                        - Upload KYC document
- GET  /api/notifications/              - Inbox
- GET  /api/settings/payment/           - Rates and receiving details (public)

Admin:
- GET  /api/admin/transactions/
- POST /api/admin/approve-transaction/{id}/
- GET  /api/admin/payment-proof/{id}/
- GET  /api/admin/users/
- POST /api/admin/approve-kyc/{user_id}/
- GET  /api/admin/kyc-document/{user_id}/
- POST /api/admin/settings/payment/
"""
