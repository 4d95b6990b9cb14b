"""
Authentication views: JWT login, logout and registration.
"""

import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView

from clients.serializers import RegisterSerializer, UserProfileSerializer
from .errors import error_body, validation_response

logger = logging.getLogger(__name__)


class SarrafTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    Adds identity and role claims to the token and to the login response.
    """

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        token['role'] = 'admin' if user.is_platform_admin else user.role
        return token

    def validate(self, attrs):
        data = super().validate(attrs)
        data['user'] = UserProfileSerializer(self.user).data
        logger.info(f"User {self.user.username} logged in")
        return data


class SarrafTokenObtainPairView(TokenObtainPairView):
    serializer_class = SarrafTokenObtainPairSerializer

    def post(self, request, *args, **kwargs):
        response = super().post(request, *args, **kwargs)
        if response.status_code != status.HTTP_200_OK:
            username = request.data.get('username', 'unknown')
            logger.warning(f"Authentication failed for user: {username}")
        return response


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([AnonRateThrottle])
def register(request):
    """
    Create an account and return a token pair.

    Body: {"username", "password", "email"?, "full_name"?}
    Admins are notified of the new registration.
    """
    serializer = RegisterSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_response(serializer.errors)

    user = serializer.save()
    refresh = SarrafTokenObtainPairSerializer.get_token(user)
    logger.info(f"User registered: {user.username} (id={user.id})")
    return Response(
        {
            'access': str(refresh.access_token),
            'refresh': str(refresh),
            'user': UserProfileSerializer(user).data,
        },
        status=status.HTTP_201_CREATED,
    )


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """Blacklist the given refresh token."""
    refresh_token = request.data.get('refresh')
    if not refresh_token:
        return Response(
            error_body('VALIDATION_ERROR', 'Refresh token required', 'refresh'),
            status=status.HTTP_400_BAD_REQUEST,
        )
    try:
        RefreshToken(refresh_token).blacklist()
    except TokenError as e:
        logger.warning(f"Logout failed for user {request.user.username}: {e}")
        return Response(
            error_body('VALIDATION_ERROR', 'Invalid refresh token', 'refresh'),
            status=status.HTTP_400_BAD_REQUEST,
        )
    logger.info(f"User {request.user.username} logged out")
    return Response({'message': 'Successfully logged out'})
