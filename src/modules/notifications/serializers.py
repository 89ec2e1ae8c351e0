from rest_framework import serializers

from modules.notifications.models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = [
            "id",
            "type",
            "product_id",
            "variant_id",
            "variant_key",
            "payload",
            "dedupe_key",
            "created_at",
            "read_at",
            "resolved_at",
        ]
        read_only_fields = fields
