from django.urls import path

from apps.orders import views

app_name = "orders"

urlpatterns = [
    path("", views.OrderListCreateView.as_view(), name="list"),  # GET list, POST table order
    path("<uuid:order_id>", views.OrderDetailView.as_view(), name="detail"),  # GET order by ID
    path("find/<str:order_no>", views.OrderByNumberView.as_view(), name="find"),  # GET order by order number
    path("<uuid:order_id>/advance", views.OrderAdvanceView.as_view(), name="advance"),  # POST
    path("<uuid:order_id>/cancel", views.OrderCancelView.as_view(), name="cancel"),  # POST
    path("<uuid:order_id>/status", views.OrderStatusView.as_view(), name="status"),  # PATCH
]
