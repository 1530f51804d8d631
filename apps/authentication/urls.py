from django.urls import path

from .views import LoginView, LogoutView, RefreshView, SessionView

app_name = "authentication"

urlpatterns = [
    path("login/", LoginView.as_view(), name="token_obtain_pair"),
    path("refresh/", RefreshView.as_view(), name="token_refresh"),
    path("logout/", LogoutView.as_view(), name="token_blacklist"),
    path("session/", SessionView.as_view(), name="session"),
]
