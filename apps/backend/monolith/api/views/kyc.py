"""
KYC document submission.
"""

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.backend.core.wiring.container import get_submit_kyc_uc
from .errors import error_response
from .uploads import document_from


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def submit_kyc(request):
    """
    POST /api/kyc/ with a multipart `document` (JPEG, PNG or PDF, max 5MB).

    Resets the caller's KYC status to pending and notifies admins.
    """
    try:
        get_submit_kyc_uc().execute(request.user.id, document_from(request, 'document'))
    except Exception as e:
        return error_response(e)
    return Response({'kyc_status': 'pending'}, status=status.HTTP_201_CREATED)
