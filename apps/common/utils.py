def is_authenticated(user) -> bool:
    return getattr(user, "is_authenticated", False)
