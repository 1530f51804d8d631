TICKET_NOT_FOUND_MESSAGE = "Ticket not found."


class TicketError(Exception):
    pass


class OrderDraftError(TicketError):
    """Checkout input that cannot become an order (no items, nothing to pay)."""


class TicketNotFound(TicketError):
    pass


class InvalidTicketFormat(TicketNotFound):
    pass


class TicketForbidden(TicketError):
    pass


class AllocationError(TicketError):
    pass


class InvalidStatus(TicketError):
    pass
