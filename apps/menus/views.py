from drf_spectacular.utils import extend_schema
from rest_framework import generics

from apps.common.mixins import PublicReadMixin
from apps.menus.models import Category, MenuItem
from apps.menus.serializers import CategorySerializer, MenuItemSerializer


@extend_schema(summary="Public: List menu categories.")
class CategoriesView(PublicReadMixin, generics.ListAPIView):
    serializer_class = CategorySerializer
    pagination_class = None

    def get_queryset(self):
        return Category.objects.live()


@extend_schema(summary="Public: List menu items that can be ordered right now.")
class MenuItemsView(PublicReadMixin, generics.ListAPIView):
    serializer_class = MenuItemSerializer
    pagination_class = None
    filterset_fields = ["category"]

    def get_queryset(self):
        return MenuItem.objects.live().select_related("category").filter(
            is_available=True,
            category__is_active=True,
        )
