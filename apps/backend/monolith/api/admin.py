from django.contrib import admin

from .models import Notification, PlatformSetting, Transaction


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'type', 'amount', 'rate', 'final_amount', 'status', 'created_at')
    list_filter = ('type', 'status', 'basis')
    search_fields = ('user__username',)
    # Status only changes through the approval endpoint
    readonly_fields = ('status', 'approved_at', 'approved_by', 'rate', 'commission', 'fee')


@admin.register(PlatformSetting)
class PlatformSettingAdmin(admin.ModelAdmin):
    list_display = ('key', 'value', 'updated_at')


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'type', 'read', 'created_at')
    list_filter = ('type', 'read')
