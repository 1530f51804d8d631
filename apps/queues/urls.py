from django.urls import path

from apps.queues import views

app_name = "queues"

urlpatterns = [
    path("", views.TicketCheckoutView.as_view(), name="checkout"),  # POST - Customer checkout
    path("walk-in", views.WalkInView.as_view(), name="walk-in"),  # POST - Staff admits a walk-in
    path("active", views.QueueDisplayView.as_view(), name="active"),  # GET - Public display board
    path("board", views.QueueBoardView.as_view(), name="board"),  # GET - Staff board
    path("reset-counter", views.ResetCounterView.as_view(), name="reset-counter"),  # POST - Admin
    path("<str:ticket>", views.TicketView.as_view(), name="ticket"),  # GET poll, PATCH status
    path("<str:ticket>/qr", views.TicketQRView.as_view(), name="ticket-qr"),  # GET PNG
]
