from rest_framework import serializers

from apps.shop.models import ShopSettings


class ShopSettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = ShopSettings
        fields = [
            "restaurant_name",
            "restaurant_description",
            "operation_mode",
            "currency",
            "tax_rate",
            "service_charge_rate",
            "enable_queue_system",
            "enable_table_ordering",
            "estimated_wait_per_queue",
            "updated_at",
        ]
        read_only_fields = ["updated_at"]
