"""Messaging engine and tag scanning."""

from .engine import SHARE_SEPARATOR, IMessagingEngine, MessagingEngine, Transaction
from .tags import unique_tags

__all__ = [
    "SHARE_SEPARATOR",
    "IMessagingEngine",
    "MessagingEngine",
    "Transaction",
    "unique_tags",
]
