"""
Serializers for user profile, receiving details and registration.
"""

import re

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from apps.backend.core.domain.exchange import CliqType, Network

User = get_user_model()

CLIQ_ALIAS_PATTERN = re.compile(r'^[A-Z0-9]*[A-Z]+[A-Z0-9]*$')
CLIQ_NUMBER_PATTERN = re.compile(r'^009627\d{8}$')
MOBILE_PATTERN = re.compile(r'^07[789]\d{7}$')


class UserProfileSerializer(serializers.ModelSerializer):
    role = serializers.SerializerMethodField()
    is_verified = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id', 'username', 'email', 'full_name', 'role',
            'mobile_number', 'mobile_verified', 'kyc_status', 'is_verified',
            'loyalty_points',
            'usdt_address', 'usdt_network',
            'cliq_bank_name', 'cliq_type', 'cliq_alias', 'cliq_number', 'cliq_account_holder',
            'bank_name', 'bank_branch', 'bank_account_name', 'bank_account_number', 'bank_iban',
            'date_joined',
        ]
        read_only_fields = fields

    def get_role(self, obj):
        return User.ROLE_ADMIN if obj.is_platform_admin else obj.role

    def get_is_verified(self, obj):
        return obj.to_profile().is_verified


class RegisterSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, min_length=8, style={'input_type': 'password'})

    class Meta:
        model = User
        fields = ['username', 'password', 'email', 'full_name']
        extra_kwargs = {
            'email': {'required': False},
            'full_name': {'required': False},
        }

    def validate_password(self, value):
        validate_password(value)
        return value

    def create(self, validated_data):
        return User.objects.create_user(
            username=validated_data['username'],
            password=validated_data['password'],
            email=validated_data.get('email', ''),
            full_name=validated_data.get('full_name', ''),
        )


class WalletSerializer(serializers.Serializer):
    usdt_address = serializers.CharField(max_length=100, trim_whitespace=True)
    usdt_network = serializers.ChoiceField(choices=[n.value for n in Network])


class CliqSerializer(serializers.Serializer):
    """
    CliQ receiving details. The identifier that matches `cliq_type` is
    required; the other one is cleared.
    """

    bank_name = serializers.CharField(max_length=100)
    cliq_type = serializers.ChoiceField(choices=[c.value for c in CliqType])
    cliq_alias = serializers.CharField(max_length=10, required=False, allow_blank=True)
    cliq_number = serializers.CharField(max_length=14, required=False, allow_blank=True)
    account_holder_name = serializers.CharField(max_length=150)

    def validate(self, attrs):
        if attrs['cliq_type'] == CliqType.ALIAS.value:
            alias = attrs.get('cliq_alias', '').strip().upper()
            if not 3 <= len(alias) <= 10 or not CLIQ_ALIAS_PATTERN.match(alias):
                raise serializers.ValidationError({
                    'cliq_alias': 'CliQ alias must be 3-10 uppercase letters and digits, '
                                  'with at least one letter',
                })
            attrs['cliq_alias'], attrs['cliq_number'] = alias, ''
        else:
            number = attrs.get('cliq_number', '').strip()
            if not CLIQ_NUMBER_PATTERN.match(number):
                raise serializers.ValidationError({
                    'cliq_number': 'CliQ number must look like 009627XXXXXXXX',
                })
            attrs['cliq_number'], attrs['cliq_alias'] = number, ''
        return attrs


class BankSerializer(serializers.Serializer):
    bank_name = serializers.CharField(max_length=100)
    bank_branch = serializers.CharField(max_length=100)
    bank_account_name = serializers.CharField(max_length=150)
    bank_account_number = serializers.CharField(max_length=50)
    bank_iban = serializers.CharField(max_length=34)


class MobileVerificationSerializer(serializers.Serializer):
    mobile_number = serializers.CharField(max_length=10)

    def validate_mobile_number(self, value):
        value = value.strip()
        if not MOBILE_PATTERN.match(value):
            raise serializers.ValidationError(
                'Mobile number must be a Jordanian number like 07XXXXXXXX'
            )
        user = self.context['request'].user
        if User.objects.filter(mobile_number=value).exclude(pk=user.pk).exists():
            raise serializers.ValidationError('This mobile number is already in use')
        return value
