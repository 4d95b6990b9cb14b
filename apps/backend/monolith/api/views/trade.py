"""
REST API views for trade submission.

Endpoints:
- POST /api/trade/        - Submit a buy or sell order with proof of payment
- POST /api/trade/quote/  - Price a trade without submitting it
"""

import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.backend.core.wiring.container import get_create_transaction_uc, get_quote_trade_uc
from api.serializers import TransactionSerializer
from .errors import error_response
from .uploads import document_from

logger = logging.getLogger(__name__)

TRADE_FIELDS = ('type', 'amount', 'basis', 'network', 'payment_method')


def _trade_payload(data):
    return {key: data.get(key) for key in TRADE_FIELDS if key in data}


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def create_trade(request):
    """
    Submit a trade. Multipart body:

        type: "buy" | "sell"
        amount: "100.00" (up to 2 decimal places)
        basis: "native" | "foreign" (optional, defaults to native)
        network: "trc20" | "bep20" (sell only)
        payment_method: "cliq" | "wallet" (buy only)
        proof_of_payment: JPEG, PNG or PDF file

    Returns 201 with the pending transaction.
    """
    try:
        transaction = get_create_transaction_uc().execute(
            request.user.id,
            _trade_payload(request.data),
            document_from(request, 'proof_of_payment'),
        )
        data = TransactionSerializer(transaction).data
    except Exception as e:
        return error_response(e)

    return Response(data, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def quote_trade(request):
    """
    Preview pricing for {type, amount, basis} against the current rates.

    Response:
        {
            "type": "buy", "basis": "foreign",
            "amount": "100.00", "amount_currency": "USDT",
            "rate": "0.71", "commission_rate": "0.02",
            "equivalent_amount": "71.00", "equivalent_currency": "JOD",
            "commission_amount": "1.42", "commission_currency": "JOD",
            "final_amount": "72.42", "final_currency": "JOD"
        }
    """
    try:
        quote = get_quote_trade_uc().execute(_trade_payload(request.data))
    except Exception as e:
        return error_response(e)
    return Response(quote.to_dict())
