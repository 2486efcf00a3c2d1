from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Suggestion domain model and SecurityKind enum.

A Suggestion is a validated, ready-to-register Wi-Fi network descriptor.
Instances are immutable and enforce the passphrase invariant on creation.
"""

__all__ = [
    "SecurityKind",
    "Suggestion",
]


class SecurityKind(Enum):
    """Authentication scheme of a suggested network.

    - OPEN: no passphrase
    - WPA2_PERSONAL: pre-shared key (WPA / WPA2)
    - WPA3_PERSONAL: SAE
    """
    OPEN = "open"
    WPA2_PERSONAL = "wpa2_personal"
    WPA3_PERSONAL = "wpa3_personal"

    @property
    def requires_passphrase(self) -> bool:
        return self is not SecurityKind.OPEN


@dataclass(frozen=True)
class Suggestion:
    """Validated network suggestion.

    Invariants:
        - ssid is non-empty
        - passphrase is a non-empty string for WPA2_PERSONAL / WPA3_PERSONAL
        - passphrase is None for OPEN
    """
    ssid: str
    passphrase: str | None
    security_kind: SecurityKind

    def __post_init__(self) -> None:
        if not self.ssid:
            raise ValueError("suggestion requires a non-empty ssid")
        if self.security_kind.requires_passphrase:
            if not self.passphrase:
                raise ValueError(
                    f"{self.security_kind.name} suggestion '{self.ssid}' requires a passphrase"
                )
        elif self.passphrase is not None:
            raise ValueError(f"OPEN suggestion '{self.ssid}' must not carry a passphrase")

    def __repr__(self) -> str:
        # パスフレーズはログに出さない
        masked = None if self.passphrase is None else "***"
        return (
            f"Suggestion(ssid={self.ssid!r}, passphrase={masked!r}, "
            f"security_kind={self.security_kind.name})"
        )
