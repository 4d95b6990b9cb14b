"""
Profile endpoints for the authenticated user.

Endpoints:
- GET  /api/user/                - Profile
- POST /api/user/wallet/         - USDT receiving address (used to settle buys)
- POST /api/user/cliq/           - CliQ receiving details (used to settle sells)
- POST /api/user/bank/           - Bank account details
- POST /api/user/verify-mobile/  - Verify a Jordanian mobile number
"""

import logging

from django.db import IntegrityError
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from api.views.errors import error_body, validation_response
from .serializers import (
    BankSerializer,
    CliqSerializer,
    MobileVerificationSerializer,
    UserProfileSerializer,
    WalletSerializer,
)

logger = logging.getLogger(__name__)


def _update_user(user, fields):
    for name, value in fields.items():
        setattr(user, name, value)
    user.save(update_fields=list(fields))
    return Response(UserProfileSerializer(user).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_profile(request):
    return Response(UserProfileSerializer(request.user).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def update_wallet(request):
    serializer = WalletSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_response(serializer.errors)
    logger.info(f"User {request.user.id} updated USDT wallet ({serializer.validated_data['usdt_network']})")
    return _update_user(request.user, dict(serializer.validated_data))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def update_cliq(request):
    serializer = CliqSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_response(serializer.errors)
    data = serializer.validated_data
    logger.info(f"User {request.user.id} updated CliQ settings ({data['cliq_type']})")
    return _update_user(request.user, {
        'cliq_bank_name': data['bank_name'],
        'cliq_type': data['cliq_type'],
        'cliq_alias': data['cliq_alias'],
        'cliq_number': data['cliq_number'],
        'cliq_account_holder': data['account_holder_name'],
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def update_bank(request):
    serializer = BankSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_response(serializer.errors)
    logger.info(f"User {request.user.id} updated bank details")
    return _update_user(request.user, dict(serializer.validated_data))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def verify_mobile(request):
    serializer = MobileVerificationSerializer(data=request.data, context={'request': request})
    if not serializer.is_valid():
        return validation_response(serializer.errors)
    try:
        response = _update_user(request.user, {
            'mobile_number': serializer.validated_data['mobile_number'],
            'mobile_verified': True,
        })
    except IntegrityError:
        # Lost a race against another user claiming the same number
        return Response(
            error_body('VALIDATION_ERROR', 'This mobile number is already in use', 'mobile_number'),
            status=status.HTTP_400_BAD_REQUEST,
        )
    logger.info(f"User {request.user.id} verified mobile number")
    return response
