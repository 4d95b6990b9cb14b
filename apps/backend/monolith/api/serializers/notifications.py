from rest_framework import serializers

from .transactions import EnumValueField


class NotificationSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    type = EnumValueField()
    message = serializers.CharField(read_only=True)
    related_id = serializers.IntegerField(read_only=True, allow_null=True)
    read = serializers.BooleanField(read_only=True)
    created_at = serializers.DateTimeField(read_only=True)
