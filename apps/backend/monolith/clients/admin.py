from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    list_display = ('username', 'full_name', 'role', 'mobile_verified', 'kyc_status', 'loyalty_points')
    list_filter = ('role', 'kyc_status', 'mobile_verified', 'is_staff')
    search_fields = ('username', 'full_name', 'email', 'mobile_number')
    fieldsets = UserAdmin.fieldsets + (
        ('Exchange', {'fields': ('full_name', 'role', 'mobile_number', 'mobile_verified',
                                 'kyc_status', 'kyc_document', 'loyalty_points')}),
        ('Receiving details', {'fields': ('usdt_address', 'usdt_network', 'cliq_bank_name',
                                          'cliq_type', 'cliq_alias', 'cliq_number',
                                          'cliq_account_holder')}),
        ('Bank', {'fields': ('bank_name', 'bank_branch', 'bank_account_name',
                             'bank_account_number', 'bank_iban')}),
    )
