from rest_framework_simplejwt.tokens import RefreshToken


def get_custom_token(user):
    """
    Return a refresh token with custom claims.
    """
    refresh = RefreshToken.for_user(user)
    refresh["role"] = user.role
    refresh["email"] = user.email
    return refresh
