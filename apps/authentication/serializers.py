from rest_framework import serializers
from rest_framework_simplejwt.exceptions import InvalidToken
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer

from apps.authentication.utils import get_custom_token

REFRESH_COOKIE_NAME = "refresh_token"


class TokenWithRoleObtainPairSerializer(TokenObtainPairSerializer):
    @classmethod
    def get_token(cls, user):
        return get_custom_token(user)


class RefreshSerializer(TokenRefreshSerializer):
    refresh = serializers.CharField(required=False, allow_blank=True, write_only=True)

    def validate(self, attrs):
        # cookie first, body as a fallback for non-browser clients
        refresh_token = self.context["request"].COOKIES.get(REFRESH_COOKIE_NAME) or attrs.get("refresh")
        if not refresh_token:
            raise InvalidToken(f"No valid token found in cookie '{REFRESH_COOKIE_NAME}'")

        attrs["refresh"] = refresh_token
        return super().validate(attrs)
