"""Enum definitions for application constants."""

from coursemail.db.enums.messages import (
    ALL_MESSAGE_TYPES,
    MessageType,
    NO_ALTERNATE_SENDER_ID,
    NO_SIGNATURE_ID,
    NOREPLY_SENDER_ID,
    RecipientKind,
)

__all__ = [
    "ALL_MESSAGE_TYPES",
    "MessageType",
    "NO_ALTERNATE_SENDER_ID",
    "NO_SIGNATURE_ID",
    "NOREPLY_SENDER_ID",
    "RecipientKind",
]
