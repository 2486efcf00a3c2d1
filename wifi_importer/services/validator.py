from __future__ import annotations

import logging
from dataclasses import dataclass

from ..models.suggestion import SecurityKind, Suggestion

"""Record validation: one CSV record -> Suggestion or Rejection.

Processing order:
1. Trim ssid/password; trim + uppercase security type for matching only
2. Empty SSID check (before any security type check)
3. Security type taxonomy lookup, passphrase requirement per kind
"""

__all__ = [
    "Rejection",
    "classify_security_type",
    "validate_record",
]

logger = logging.getLogger(__name__)

WPA2_TOKENS = frozenset({"WPA", "WPA2", "WPA-PSK", "WPA_WPA2_PERSONAL", "WPA_PERSONAL"})
WPA3_TOKENS = frozenset({"WPA3", "WPA3_PERSONAL"})
OPEN_TOKENS = frozenset({"OPEN", "NONE", "UNKNOWN"})

_TAXONOMY: dict[str, SecurityKind] = {
    **{t: SecurityKind.WPA2_PERSONAL for t in WPA2_TOKENS},
    **{t: SecurityKind.WPA3_PERSONAL for t in WPA3_TOKENS},
    **{t: SecurityKind.OPEN for t in OPEN_TOKENS},
}

_EMPTY_PASSWORD_LABELS = {
    SecurityKind.WPA2_PERSONAL: "WPA/WPA2",
    SecurityKind.WPA3_PERSONAL: "WPA3",
}


@dataclass(frozen=True)
class Rejection:
    """Reason a record did not produce a Suggestion (row number attached by caller)."""
    reason: str


def classify_security_type(token: str) -> SecurityKind | None:
    """Map a raw security type token to a SecurityKind (None if unsupported)."""
    return _TAXONOMY.get(token.strip().upper())


def validate_record(ssid: str, password: str, security_type: str) -> Suggestion | Rejection:
    ssid = ssid.strip()
    password = password.strip()
    token = security_type.strip()
    logger.debug("Processing network: SSID='%s', Security='%s'", ssid, token.upper())

    if not ssid:
        return Rejection("Skipping network with empty SSID")

    kind = classify_security_type(token)
    if kind is None:
        return Rejection(f"Unsupported security type: '{token}' for network '{ssid}'")

    if kind is SecurityKind.OPEN:
        # 指定されたパスワードは無視
        return Suggestion(ssid=ssid, passphrase=None, security_kind=kind)

    if not password:
        label = _EMPTY_PASSWORD_LABELS[kind]
        return Rejection(f"Skipping {label} network '{ssid}' with empty password")
    return Suggestion(ssid=ssid, passphrase=password, security_kind=kind)
