"""
REST API views for the caller's own transactions.
"""

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.backend.core.wiring.container import get_transaction_queries
from api.serializers import TransactionSerializer
from .errors import error_response


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def list_transactions(request):
    """GET /api/transactions/ - caller's transactions, newest first."""
    try:
        transactions = get_transaction_queries().list_for_user(request.user.id)
    except Exception as e:
        return error_response(e)
    return Response(TransactionSerializer(transactions, many=True).data)
