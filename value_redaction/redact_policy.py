"""
Allow/deny matching policy for location names.

A location name is the field name or mapping key under which a value is
reached. Matching is case-insensitive and is decided once per location:

- allow mode: redact unless the name is listed
- deny mode:  redact only if the name is listed

Values reached without a name (the top-level value, sequence elements in allow
mode) are treated as "never listed", so allow mode redacts them and deny mode
keeps them. In deny mode sequence elements inherit the name of the field or
key that holds the sequence.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal, Optional


RedactMode = Literal["allow", "deny"]

REDACT_MODES: tuple[RedactMode, ...] = ("allow", "deny")


def normalize_name(name: object) -> str:
    return str(name).casefold()


@dataclass(frozen=True, slots=True)
class RedactPolicy:
    mode: RedactMode
    names: frozenset[str]

    @classmethod
    def from_names(cls, mode: RedactMode, names: Optional[Iterable[str]]) -> "RedactPolicy":
        """
        Build a policy from a raw name list.

        Names are normalized once here so each lookup during traversal is a
        single set membership test.
        """
        if mode not in REDACT_MODES:
            raise ValueError(f"mode must be one of {REDACT_MODES!r}, got {mode!r}")
        if isinstance(names, (str, bytes)):
            raise TypeError(f"{mode} list must be an iterable of names, not a single {type(names).__name__}")
        return cls(mode=mode, names=frozenset(normalize_name(n) for n in names or ()))

    def is_listed(self, name: Optional[str]) -> bool:
        return name is not None and normalize_name(name) in self.names

    def should_redact(self, name: Optional[str]) -> bool:
        if self.mode == "allow":
            return not self.is_listed(name)
        return self.is_listed(name)

    def element_name(self, name: Optional[str]) -> Optional[str]:
        """
        Location name given to the elements of a sequence found under name.

        In deny mode elements inherit the containing name, so a listed field
        holding a list has every element redacted. In allow mode elements stay
        unnamed and are redacted regardless of the containing name.
        """
        return name if self.mode == "deny" else None
