"""
Queue ticket identifiers.

A ticket looks like ``Q007-1a2b3c4d``: the queue label followed by the first
8 hex characters of an HMAC-SHA256 of the order id. The digest is keyed with
``settings.QUEUE_SECRET`` and bound to the order id rather than the queue
number, so knowing a label is no help in guessing the rest of the ticket.
"""

import hashlib
import hmac
import re
from dataclasses import dataclass

from django.conf import settings

DIGEST_LENGTH = 8
MIN_DIGITS = 3
TICKET_PATH_PREFIX = "/queue/"

LABEL_PATTERN = re.compile(r"[A-Z]+([0-9]+)")
TICKET_PATTERN = re.compile(rf"([A-Z]+[0-9]+)-([a-f0-9]{{{DIGEST_LENGTH}}})")


@dataclass(frozen=True)
class QueueUrl:
    path: str
    url: str
    hash: str


@dataclass(frozen=True)
class ParsedTicket:
    queue_number: int
    label: str
    hash: str


@dataclass(frozen=True)
class TicketValidation:
    valid: bool
    error: str | None = None


def _default_prefix() -> str:
    return getattr(settings, "QUEUE_LABEL_PREFIX", "Q")


def format_queue_number(number: int, prefix: str | None = None) -> str:
    """``7 -> "Q007"``, ``1000 -> "Q1000"``."""
    if number < 1:
        raise ValueError(f"Queue numbers start at 1, got {number}")
    prefix = _default_prefix() if prefix is None else prefix
    return f"{prefix}{number:0{MIN_DIGITS}d}"


def parse_queue_label(label: str) -> int | None:
    match = LABEL_PATTERN.fullmatch(label or "")
    if not match:
        return None
    return int(match.group(1))


def queue_digest(order_id) -> str:
    key = settings.QUEUE_SECRET.encode()
    mac = hmac.new(key, str(order_id).encode(), hashlib.sha256)
    return mac.hexdigest()[:DIGEST_LENGTH]


def verify_queue_digest(order_id, digest: str) -> bool:
    return hmac.compare_digest(queue_digest(order_id), digest)


def ticket_for(queue_number: int, order_id) -> str:
    return f"{format_queue_number(queue_number)}-{queue_digest(order_id)}"


def mint_queue_url(queue_number: int, order_id, base_url: str | None = None) -> QueueUrl:
    digest = queue_digest(order_id)
    path = f"{TICKET_PATH_PREFIX}{format_queue_number(queue_number)}-{digest}"
    url = f"{base_url.rstrip('/')}{path}" if base_url else path
    return QueueUrl(path=path, url=url, hash=digest)


def parse_ticket(value: str) -> ParsedTicket | None:
    """Split ``Q007-1a2b3c4d`` into its parts, or ``None`` when it isn't a ticket."""
    match = TICKET_PATTERN.fullmatch(value or "")
    if not match:
        return None

    label, digest = match.groups()
    queue_number = parse_queue_label(label)
    if queue_number is None:
        return None

    return ParsedTicket(queue_number=queue_number, label=label, hash=digest)


def validate_ticket(value: str, order_id) -> TicketValidation:
    parsed = parse_ticket(value)
    if parsed is None:
        return TicketValidation(valid=False, error="Invalid queue ticket format")

    if not verify_queue_digest(order_id, parsed.hash):
        return TicketValidation(valid=False, error="Invalid queue ticket hash")

    return TicketValidation(valid=True)
