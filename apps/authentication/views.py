import logging

from django.conf import settings
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from apps.authentication.serializers import (
    REFRESH_COOKIE_NAME,
    RefreshSerializer,
    TokenWithRoleObtainPairSerializer,
)
from apps.users.serializers import UserSerializer

logger = logging.getLogger(__name__)


def cookie_opts(request=None):
    return {
        "path": "/",
        "samesite": "Lax",
        "secure": (request.is_secure() if request else not settings.DEBUG),
        "httponly": True,
    }


def set_refresh_cookie(response, refresh_token, request):
    """Set refresh token as httpOnly cookie and remove from response body."""
    if refresh_token:
        response.set_cookie(
            REFRESH_COOKIE_NAME,
            refresh_token,
            max_age=int(settings.SIMPLE_JWT["REFRESH_TOKEN_LIFETIME"].total_seconds()),
            **cookie_opts(request),
        )
        if hasattr(response, "data") and "refresh" in response.data:
            del response.data["refresh"]


@extend_schema(summary="Staff: Sign in", tags=["auth"])
class LoginView(TokenObtainPairView):
    serializer_class = TokenWithRoleObtainPairSerializer

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        logger.info(f"User {serializer.user.email} signed in")
        response = Response(serializer.validated_data, status=status.HTTP_200_OK)
        set_refresh_cookie(response, response.data.get("refresh"), request)
        return response


@extend_schema(summary="Staff: Refresh the access token", tags=["auth"])
class RefreshView(TokenRefreshView):
    serializer_class = RefreshSerializer

    def finalize_response(self, request, response, *args, **kwargs):
        if response.status_code == status.HTTP_200_OK:
            set_refresh_cookie(response, response.data.get("refresh"), request)
        return super().finalize_response(request, response, *args, **kwargs)


@extend_schema(summary="Staff: Sign out", request=None, responses={204: None}, tags=["auth"])
class LogoutView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        refresh = request.COOKIES.get(REFRESH_COOKIE_NAME)

        if refresh:
            try:
                RefreshToken(refresh).blacklist()
            except TokenError as e:
                # logout is idempotent, an expired or blacklisted token is already unusable
                logger.debug(f"Logout with unusable refresh token: {e}")

        resp = Response(status=status.HTTP_204_NO_CONTENT)
        resp.delete_cookie(REFRESH_COOKIE_NAME, path="/", samesite="Lax")
        return resp


@extend_schema(summary="Staff: Current session", responses={200: UserSerializer}, tags=["auth"])
class SessionView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(UserSerializer(request.user).data)
