"""Course capability registry with metadata.

Capabilities are granted per course role. Site admins hold every capability.
A missing capability defaults to False (deny).
"""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class CapabilityDef:
    """Capability definition with metadata."""
    key: str
    label: str
    description: str
    category: str


class CapabilityCategory(str, Enum):
    """Capability categories for UI grouping."""
    MESSAGING = "Messaging"
    SETTINGS = "Settings"


# =============================================================================
# Capability Registry
# =============================================================================

CAPABILITY_REGISTRY: dict[str, CapabilityDef] = {
    "cansend": CapabilityDef(
        "cansend", "Send Messages",
        "Compose and send messages to course participants", CapabilityCategory.MESSAGING
    ),
    "allowalternate": CapabilityDef(
        "allowalternate", "Send From Alternate Email",
        "Choose an alternate sender address when composing", CapabilityCategory.MESSAGING
    ),
    "canconfig": CapabilityDef(
        "canconfig", "Configure Messaging",
        "Override block-level messaging settings for a course", CapabilityCategory.SETTINGS
    ),
}


# =============================================================================
# Role Defaults
# =============================================================================

ROLE_DEFAULTS: dict[str, set[str]] = {
    "student": set(),
    "teacher": {"cansend"},
    "editingteacher": {"cansend", "allowalternate", "canconfig"},
    "manager": {"cansend", "allowalternate", "canconfig"},
}


def is_valid_capability(key: str) -> bool:
    """Check if capability key exists in registry."""
    return key in CAPABILITY_REGISTRY


def get_role_default_capabilities(role: str) -> set[str]:
    """Get default capabilities for a course role shortname."""
    return ROLE_DEFAULTS.get(role, set())
