"""
REST API views for the admin review desk.

Endpoints:
- GET  /api/admin/transactions/                  - Review queue (pending first)
- POST /api/admin/approve-transaction/{id}/      - Approve a pending transaction
- GET  /api/admin/payment-proof/{id}/            - Download the proof of payment
- GET  /api/admin/users/                         - List users
- POST /api/admin/approve-kyc/{user_id}/         - Approve a user's KYC
- GET  /api/admin/kyc-document/{user_id}/        - Download a user's KYC document
"""

import logging

from django.contrib.auth import get_user_model
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.backend.core.domain.errors import NotFound
from apps.backend.core.wiring.container import (
    get_approve_kyc_uc,
    get_approve_transaction_uc,
    get_document_storage,
    get_transaction_queries,
)
from api.permissions import IsPlatformAdmin
from api.serializers import AdminTransactionSerializer
from clients.serializers import UserProfileSerializer
from .errors import error_response
from .uploads import document_response

logger = logging.getLogger(__name__)

User = get_user_model()


def _usernames_for(transactions):
    user_ids = {t.user_id for t in transactions}
    return dict(User.objects.filter(pk__in=user_ids).values_list('pk', 'username'))


# ============================================================================
# Transactions
# ============================================================================

@api_view(['GET'])
@permission_classes([IsPlatformAdmin])
def list_all_transactions(request):
    try:
        transactions = get_transaction_queries().list_all()
        context = {'usernames': _usernames_for(transactions)}
    except Exception as e:
        return error_response(e)
    return Response(AdminTransactionSerializer(transactions, many=True, context=context).data)


@api_view(['POST'])
@permission_classes([IsPlatformAdmin])
def approve_transaction(request, transaction_id):
    """
    Approve a pending transaction.

    404 when the transaction does not exist, 409 when it is already approved.
    A repeated approval never awards loyalty points twice.
    """
    try:
        transaction = get_approve_transaction_uc().execute(transaction_id, request.user.id)
        context = {'usernames': _usernames_for([transaction])}
    except Exception as e:
        return error_response(e)
    return Response(AdminTransactionSerializer(transaction, context=context).data)


@api_view(['GET'])
@permission_classes([IsPlatformAdmin])
def payment_proof(request, transaction_id):
    try:
        transaction = get_transaction_queries().get(transaction_id)
        content = get_document_storage().open(transaction.proof_of_payment)
    except Exception as e:
        return error_response(e)
    logger.info(f"Payment proof of transaction {transaction_id} viewed by user {request.user.id}")
    return document_response(content, f"payment-proof-{transaction_id}")


# ============================================================================
# Users and KYC
# ============================================================================

@api_view(['GET'])
@permission_classes([IsPlatformAdmin])
def list_users(request):
    users = User.objects.order_by('-date_joined', '-id')
    return Response(UserProfileSerializer(users, many=True).data)


@api_view(['POST'])
@permission_classes([IsPlatformAdmin])
def approve_kyc(request, user_id):
    try:
        profile = get_approve_kyc_uc().execute(user_id, request.user.id)
    except Exception as e:
        return error_response(e)
    return Response({'id': profile.id, 'kyc_status': profile.kyc_status.value})


@api_view(['GET'])
@permission_classes([IsPlatformAdmin])
def kyc_document(request, user_id):
    try:
        user = User.objects.filter(pk=user_id).first()
        if user is None or not user.kyc_document:
            raise NotFound(f"No KYC document for user {user_id}")
        content = get_document_storage().open(user.kyc_document)
    except Exception as e:
        return error_response(e)
    logger.info(f"KYC document of user {user_id} viewed by user {request.user.id}")
    return document_response(content, f"kyc-{user_id}")
