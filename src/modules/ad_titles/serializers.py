from rest_framework import serializers

from modules.ad_titles.models import AdTitle


class AdTitleSerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = AdTitle
        fields = [
            "id",
            "product_id",
            "title",
            "title_normalized",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
