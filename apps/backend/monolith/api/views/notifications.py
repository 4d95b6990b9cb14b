"""
REST API views for the caller's notification inbox.
"""

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.backend.core.wiring.container import get_notification_inbox
from api.serializers import NotificationSerializer
from .errors import error_response


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def list_notifications(request):
    try:
        notifications = get_notification_inbox().list_for_user(request.user.id)
    except Exception as e:
        return error_response(e)
    return Response(NotificationSerializer(notifications, many=True).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def mark_notification_read(request, notification_id):
    try:
        get_notification_inbox().mark_read(notification_id, request.user.id)
    except Exception as e:
        return error_response(e)
    return Response({'id': notification_id, 'read': True})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def mark_all_notifications_read(request):
    try:
        updated = get_notification_inbox().mark_all_read(request.user.id)
    except Exception as e:
        return error_response(e)
    return Response({'updated': updated})
