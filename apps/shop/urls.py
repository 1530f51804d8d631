from django.urls import path

from apps.shop import views

app_name = "shop"

urlpatterns = [
    path("settings", views.ShopSettingsView.as_view(), name="settings"),  # GET, PATCH
]
