"""
Serializers for the platform payment settings (rates and receiving details).
"""

from rest_framework import serializers

from apps.backend.core.domain.exchange import RECEIVING_FIELDS


class RateConfigurationSerializer(serializers.Serializer):
    """
    Input for a full replace of the rate configuration.

    All four rate fields are required. Receiving details may be omitted,
    which clears them.
    """

    buy_rate = serializers.DecimalField(max_digits=20, decimal_places=8)
    buy_commission_rate = serializers.DecimalField(
        max_digits=7, decimal_places=6, min_value=0, max_value=1
    )
    sell_rate = serializers.DecimalField(max_digits=20, decimal_places=8)
    sell_commission_rate = serializers.DecimalField(
        max_digits=7, decimal_places=6, min_value=0, max_value=1
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for name in RECEIVING_FIELDS:
            self.fields[name] = serializers.CharField(
                max_length=255, required=False, allow_blank=True, default=''
            )

    def validate(self, attrs):
        for name in ('buy_rate', 'sell_rate'):
            if attrs[name] <= 0:
                raise serializers.ValidationError({name: 'Rate must be positive'})
        return attrs
