"""Messaging-related enums."""

from enum import Enum


class MessageType(str, Enum):
    """Delivery channel for a composed message."""

    MESSAGE = "message"
    EMAIL = "email"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid message type."""
        return value in cls._value2member_map_


class RecipientKind(str, Enum):
    """Kinds of course entities that can be included or excluded as recipients."""

    ROLE = "role"
    GROUP = "group"
    USER = "user"


# Value of message_types_available that unlocks message type selection
ALL_MESSAGE_TYPES = "all"

# Sender option keys
NO_ALTERNATE_SENDER_ID = 0
NOREPLY_SENDER_ID = -1

# Signature option key meaning "no signature"
NO_SIGNATURE_ID = 0
