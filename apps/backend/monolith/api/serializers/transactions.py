"""
Serializers for ledger transactions.

Transactions come out of the exchange engine as domain dataclasses, not
model instances, so these are plain Serializers reading attributes.
"""

from rest_framework import serializers


class EnumValueField(serializers.Field):
    """Read-only field rendering a str Enum as its value (None stays None)."""

    def __init__(self, **kwargs):
        kwargs['read_only'] = True
        super().__init__(**kwargs)

    def to_representation(self, value):
        return getattr(value, 'value', value)


class TransactionSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    user_id = serializers.IntegerField(read_only=True)
    type = EnumValueField()
    amount = serializers.DecimalField(max_digits=20, decimal_places=2, read_only=True)
    currency = EnumValueField()
    rate = serializers.DecimalField(max_digits=20, decimal_places=8, read_only=True)
    commission = serializers.DecimalField(max_digits=7, decimal_places=6, read_only=True)
    fee = serializers.DecimalField(max_digits=20, decimal_places=2, read_only=True)
    basis = EnumValueField()
    final_amount = serializers.DecimalField(max_digits=20, decimal_places=2, read_only=True)
    status = EnumValueField()
    network = EnumValueField()
    payment_method = EnumValueField()
    cliq_type = EnumValueField()
    cliq_alias = serializers.CharField(read_only=True, allow_null=True)
    cliq_number = serializers.CharField(read_only=True, allow_null=True)
    has_proof = serializers.SerializerMethodField()
    created_at = serializers.DateTimeField(read_only=True)
    approved_at = serializers.DateTimeField(read_only=True, allow_null=True)
    approved_by = serializers.IntegerField(read_only=True, allow_null=True)

    def get_has_proof(self, obj):
        return bool(obj.proof_of_payment)


class AdminTransactionSerializer(TransactionSerializer):
    """
    Adds the owner's username for the review queue.

    Expects `usernames` ({user_id: username}) in the serializer context.
    """

    username = serializers.SerializerMethodField()

    def get_username(self, obj):
        return self.context.get('usernames', {}).get(obj.user_id)
