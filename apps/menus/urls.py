from django.urls import path

from . import views

app_name = "menus"

urlpatterns = [
    path("categories", views.CategoriesView.as_view(), name="categories"),  # GET list
    path("menu-items", views.MenuItemsView.as_view(), name="menu-items"),  # GET list, ?category=<uuid>
]
