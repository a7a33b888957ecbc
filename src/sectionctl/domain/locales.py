"""Locale registry — the set of site locales a section may target."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LocaleRegistry:
    """Configured site locales plus the primary one.

    The primary locale is always part of :attr:`locales`, even when the
    configuration lists it separately.
    """

    primary: str
    locales: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.primary not in self.locales:
            object.__setattr__(self, "locales", (self.primary, *self.locales))

    @property
    def is_localized(self) -> bool:
        """True when more than one site locale is configured."""
        return len(self.locales) > 1

    def __contains__(self, locale: object) -> bool:
        return locale in self.locales

    @classmethod
    def from_config(cls, locales: list[str], primary: str | None = None) -> LocaleRegistry:
        """Build a registry from ``[site]`` settings.

        Falls back to the first listed locale when no primary is given.
        """
        ordered = tuple(dict.fromkeys(locales))
        if primary is None:
            if not ordered:
                msg = "At least one site locale must be configured"
                raise ValueError(msg)
            primary = ordered[0]
        return cls(primary=primary, locales=ordered)
