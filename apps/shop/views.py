from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import generics

from apps.common.mixins import PublicReadMixin
from apps.shop.models import ShopSettings
from apps.shop.serializers import ShopSettingsSerializer


@extend_schema_view(
    get=extend_schema(summary="Public: Get shop settings."),
    patch=extend_schema(summary="Admin: Update shop settings."),
)
class ShopSettingsView(PublicReadMixin, generics.RetrieveUpdateAPIView):
    serializer_class = ShopSettingsSerializer
    required_permission = "shop.change_shopsettings"
    http_method_names = ["get", "patch", "options"]

    def get_object(self):
        return ShopSettings.load()
