from rest_framework.throttling import AnonRateThrottle, SimpleRateThrottle


class CheckoutRateThrottle(AnonRateThrottle):
    # keyed by client IP, the rate covers a whole shop behind one address
    scope = "checkout"


class DisplayBoardThrottle(AnonRateThrottle):
    scope = "display"


class TicketPollingThrottle(SimpleRateThrottle):
    """
    Limits anonymous polling per ticket rather than per client IP.

    Requests without a ticket in the URL fall back to the client IP.
    """

    scope = "ticket"

    def get_cache_key(self, request, view):
        if request.user and request.user.is_authenticated:
            return None

        ident = view.kwargs.get("ticket") or self.get_ident(request)
        return self.cache_format % {"scope": self.scope, "ident": ident}
