"""
REST API views for platform payment settings.

Endpoints:
- GET  /api/settings/payment/        - Public: rates and receiving details
- POST /api/admin/settings/payment/  - Admin: replace the whole configuration
"""

import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from apps.backend.core.wiring.container import (
    get_rate_configuration_uc,
    get_update_rate_configuration_uc,
)
from api.permissions import IsPlatformAdmin
from api.serializers import RateConfigurationSerializer
from .errors import error_response, validation_response

logger = logging.getLogger(__name__)


@api_view(['GET'])
@permission_classes([AllowAny])
def payment_settings(request):
    try:
        config = get_rate_configuration_uc().execute()
    except Exception as e:
        return error_response(e)
    return Response(config.to_settings())


@api_view(['POST'])
@permission_classes([IsPlatformAdmin])
def update_payment_settings(request):
    """
    Replace the rate configuration. There is no partial update: every rate
    field is required and omitted receiving details are cleared.
    """
    serializer = RateConfigurationSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_response(serializer.errors)

    try:
        config = get_update_rate_configuration_uc().execute(
            serializer.validated_data, request.user.id
        )
    except Exception as e:
        return error_response(e)
    return Response(config.to_settings())
