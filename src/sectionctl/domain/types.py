"""Core domain enums and constants.

Section types, editions, and the identifier rules shared by sections and
entry types.
"""

from __future__ import annotations

import re
from enum import IntEnum, StrEnum


class SectionType(StrEnum):
    """How a section organizes its entries."""

    SINGLE = "single"
    CHANNEL = "channel"
    STRUCTURE = "structure"


class Edition(IntEnum):
    """Product editions, ordered from least to most capable."""

    PERSONAL = 0
    CLIENT = 1
    PRO = 2

    @property
    def label(self) -> str:
        return self.name.capitalize()


# URL format stored on every locale row of the homepage section.
HOMEPAGE_URI = "__home__"

HANDLE_PATTERN = re.compile(r"[A-Za-z][A-Za-z0-9_]*")


def is_valid_handle(handle: str) -> bool:
    """Check whether *handle* is a legal machine name."""
    return HANDLE_PATTERN.fullmatch(handle) is not None
