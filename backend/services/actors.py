"""
Acting users and their roles.

The identity layer in front of this service supplies the name and role for
every call; the engines decide what each role may do.
"""
from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    MANAGER = "manager"
    PURCHASER = "purchaser"
    INVENTORY_MANAGER = "inventory_manager"


@dataclass(frozen=True)
class Actor:
    name: str
    role: Role

    @property
    def is_manager(self) -> bool:
        return self.role == Role.MANAGER

    @property
    def is_purchaser(self) -> bool:
        return self.role == Role.PURCHASER


# Who may do what
ORDER_RAISERS = frozenset({Role.MANAGER, Role.PURCHASER})
ORDER_RECEIVERS = frozenset({Role.MANAGER, Role.INVENTORY_MANAGER})
INTENT_RAISERS = frozenset({Role.INVENTORY_MANAGER, Role.PURCHASER})
INTENT_REVIEWERS = frozenset({Role.MANAGER, Role.PURCHASER})
INTENT_CONVERTERS = frozenset({Role.MANAGER, Role.PURCHASER})
STOCK_KEEPERS = frozenset({Role.MANAGER, Role.INVENTORY_MANAGER})
