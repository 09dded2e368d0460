"""Application settings -- reads from environment and ``.env`` file.

Required keys are not checked at import time so tooling and tests can
load the module without a full environment; :meth:`Settings.validate`
is called by the entry points before the bot starts.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

from ..errors import ConfigError
from ..util.env_file import EnvFile
from ..util.singletons import register_singleton

REQUIRED_KEYS: tuple[str, ...] = ("BOT_TOKEN", "CATEGORY_ID", "DB_PATH", "GUILD_ID")
_ID_KEYS: frozenset[str] = frozenset({"CATEGORY_ID", "GUILD_ID"})
_DIGITS = re.compile(r"[0-9]+")


def parse_id(raw: str) -> int | None:
    """Return *raw* as a snowflake id, or ``None`` if it is not all digits."""
    raw = raw.strip()
    return int(raw) if _DIGITS.fullmatch(raw) else None


def _parse_timeout(raw: str) -> float:
    # -1 marks an unparsable value for validate() to report
    try:
        return float(raw) if raw.strip() else 10.0
    except ValueError:
        return -1.0


class Settings:
    """Runtime configuration sourced from environment variables and ``.env``."""

    def __init__(self) -> None:
        self.env = EnvFile(os.getenv("DOTENV_PATH") or ".env")
        self.reload()

    def reload(self) -> None:
        """Re-read the ``.env`` file and environment variables."""
        e = self._read

        self.bot_token: str = e("BOT_TOKEN")
        self.category_id: int | None = parse_id(e("CATEGORY_ID"))
        self.guild_id: int | None = parse_id(e("GUILD_ID"))
        raw_db = e("DB_PATH")
        self.db_path: Path | None = Path(raw_db).expanduser() if raw_db else None

        self.subscribe_prefix: str = e("SUBSCRIBE_PREFIX") or "!sub"
        self.unsubscribe_prefix: str = e("UNSUBSCRIBE_PREFIX") or "!unsub"
        self.call_timeout: float = _parse_timeout(e("RELAY_CALL_TIMEOUT"))
        self.log_level: str = (e("LOG_LEVEL") or "INFO").upper()

    def _read(self, key: str) -> str:
        return self.env.read(key) or os.getenv(key, "")

    def validate(self) -> None:
        """Raise :class:`ConfigError` listing every missing or malformed key."""
        problems = [f"{key} is not set" for key in REQUIRED_KEYS if not self._read(key)]
        for key in sorted(_ID_KEYS):
            raw = self._read(key)
            if raw and parse_id(raw) is None:
                problems.append(f"{key} must be a numeric id, got {raw!r}")
        if self.call_timeout < 0:
            problems.append(
                f"RELAY_CALL_TIMEOUT must be a non-negative number, got {self._read('RELAY_CALL_TIMEOUT')!r}"
            )
        if not self.subscribe_prefix.strip() or not self.unsubscribe_prefix.strip():
            problems.append("command prefixes must not be blank")
        if problems:
            raise ConfigError(problems)

    def summary(self) -> dict[str, str]:
        """Resolved settings with the token masked, for display."""
        token = self.bot_token
        masked = f"{token[:4]}...{token[-4:]}" if len(token) > 12 else ("***" if token else "")
        return {
            "BOT_TOKEN": masked,
            "CATEGORY_ID": str(self.category_id or ""),
            "GUILD_ID": str(self.guild_id or ""),
            "DB_PATH": str(self.db_path or ""),
            "SUBSCRIBE_PREFIX": self.subscribe_prefix,
            "UNSUBSCRIBE_PREFIX": self.unsubscribe_prefix,
            "RELAY_CALL_TIMEOUT": f"{self.call_timeout:g}",
            "LOG_LEVEL": self.log_level,
        }


# Module-level singleton
cfg = Settings()


@register_singleton
def _reset_cfg() -> None:
    global cfg
    cfg = Settings()
