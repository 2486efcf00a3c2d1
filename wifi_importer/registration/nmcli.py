from __future__ import annotations

import logging
import re
import shutil
import subprocess
from collections.abc import Callable, Sequence
from typing import Any

from ..models.suggestion import SecurityKind, Suggestion
from .base import RegistrationError, RegistrationStatus

"""NetworkManager (nmcli) registration backends.

Each suggestion becomes a saved Wi-Fi connection profile:

    nmcli connection add type wifi con-name <prefix><ssid> ssid <ssid>
        [wifi-sec.key-mgmt wpa-psk|sae wifi-sec.psk <passphrase>]

Profiles are only saved, never activated. nmcli reports the UUID of every
profile it adds; rollback deletes by that UUID, because con-names are not
unique and a profile with the same name may already exist.

nmcli takes the passphrase as a command line argument, so it is visible in
the process list (/proc/<pid>/cmdline) while the add command runs. Failure
details never echo the command line, so the passphrase stays out of the
logs and the error log.
"""

__all__ = [
    "NmcliChannel",
    "NmcliRegistrar",
    "parse_added_uuid",
    "profile_args",
]

logger = logging.getLogger(__name__)

_KEY_MGMT = {
    SecurityKind.WPA2_PERSONAL: "wpa-psk",
    SecurityKind.WPA3_PERSONAL: "sae",
}

# 例: Connection 'Home' (0f6d6e3a-...) successfully added.
_ADDED_RE = re.compile(r"\(([0-9a-fA-F-]{36})\) successfully added")


def profile_args(suggestion: Suggestion, connection_name: str) -> list[str]:
    """Build the nmcli arguments that save one suggestion as a profile."""
    args = [
        "connection", "add",
        "type", "wifi",
        "con-name", connection_name,
        "ssid", suggestion.ssid,
    ]
    key_mgmt = _KEY_MGMT.get(suggestion.security_kind)
    if key_mgmt is not None:
        args += ["wifi-sec.key-mgmt", key_mgmt, "wifi-sec.psk", suggestion.passphrase or ""]
    return args


def parse_added_uuid(output: str) -> str | None:
    """Return the UUID from nmcli's `connection add` output, or None."""
    m = _ADDED_RE.search(output or "")
    return m.group(1) if m else None


class _NmcliClient:
    def __init__(
        self,
        binary: str = "nmcli",
        connection_prefix: str = "",
        runner: Callable[..., Any] | None = None,
    ) -> None:
        self.binary = binary
        self.connection_prefix = connection_prefix
        self._runner = runner if runner is not None else subprocess.run

    def is_available(self) -> bool:
        return shutil.which(self.binary) is not None

    def connection_name(self, suggestion: Suggestion) -> str:
        return f"{self.connection_prefix}{suggestion.ssid}"

    def _run(self, args: list[str]) -> str:
        try:
            completed = self._runner([self.binary, *args], capture_output=True, text=True, check=True)
        except subprocess.CalledProcessError as e:
            # str(e) はコマンドライン (パスフレーズ含む) を含むので使わない
            detail = (e.stderr or e.stdout or "").strip() or f"nmcli exited with status {e.returncode}"
            raise RegistrationError(detail) from e
        except OSError as e:
            raise RegistrationError(str(e)) from e
        return completed.stdout or ""

    def add_profile(self, suggestion: Suggestion) -> str | None:
        """Save one profile and return its UUID (None if nmcli did not report one)."""
        name = self.connection_name(suggestion)
        uuid = parse_added_uuid(self._run(profile_args(suggestion, name)))
        logger.debug(f"nmcli: saved profile '{name}' uuid={uuid} ({suggestion.security_kind.name})")
        return uuid

    def delete_profile(self, uuid: str) -> None:
        self._run(["connection", "delete", "uuid", uuid])


class NmcliRegistrar(_NmcliClient):
    """All-or-nothing bulk registrar.

    On the first failing profile the profiles already saved by this call are
    deleted again and FAILURE is returned, so a failed call leaves nothing behind.
    """

    def add_suggestions(self, suggestions: Sequence[Suggestion]) -> RegistrationStatus:
        added: list[tuple[str, str | None]] = []
        for suggestion in suggestions:
            try:
                added.append((suggestion.ssid, self.add_profile(suggestion)))
            except RegistrationError as e:
                logger.error(f"nmcli: failed to add '{suggestion.ssid}': {e}")
                self._rollback(added)
                return RegistrationStatus.FAILURE
        return RegistrationStatus.SUCCESS

    def _rollback(self, added: list[tuple[str, str | None]]) -> None:
        for ssid, uuid in reversed(added):
            if uuid is None:
                # UUID 不明のプロファイルは名前で消さない (既存プロファイル保護)
                logger.warning(f"nmcli: cannot roll back '{ssid}': no uuid reported")
                continue
            try:
                self.delete_profile(uuid)
            except RegistrationError as e:
                # 削除失敗は記録のみ (元の失敗ステータスを優先)
                logger.warning(f"nmcli: rollback of '{ssid}' ({uuid}) failed: {e}")


class NmcliChannel(_NmcliClient):
    """Fire-and-forget chunked channel: failures are logged, never raised."""

    def send(self, batch: Sequence[Suggestion]) -> None:
        for suggestion in batch:
            try:
                self.add_profile(suggestion)
            except RegistrationError as e:
                logger.warning(f"nmcli: failed to add '{suggestion.ssid}': {e}")
