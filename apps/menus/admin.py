from django.contrib import admin
from unfold.admin import ModelAdmin, TabularInline

from apps.menus.models import Category, MenuItem


class MenuItemInline(TabularInline):
    model = MenuItem
    extra = 0
    exclude = ("deleted_at",)


@admin.register(Category)
class CategoryAdmin(ModelAdmin):
    list_display = ("name", "display_order", "is_active")
    inlines = [MenuItemInline]
    search_fields = ("name",)
    exclude = ("deleted_at",)


@admin.register(MenuItem)
class MenuItemAdmin(ModelAdmin):
    list_display = ("name", "category", "price", "is_available", "display_order")
    list_filter = ("category", "is_available")
    list_editable = ("is_available",)
    search_fields = ("name",)
    exclude = ("deleted_at",)
