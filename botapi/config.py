"""Client configuration -- explicit settings object plus environment loading.

:class:`ClientConfig` is what a :class:`~botapi.client.BotClient` is built
from.  :meth:`ClientConfig.from_env` reads ``BOT_TOKEN``, ``BOT_API_BASE_URL``,
``BOT_API_TIMEOUT`` and ``BOT_API_IGNORE_ERRORS`` after loading a ``.env`` file
via ``python-dotenv``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

import requests
from dotenv import load_dotenv

from botapi.exceptions import ArgumentError

logger = logging.getLogger("botapi.config")

DEFAULT_BASE_URL: str = "https://api.telegram.org"
DEFAULT_TIMEOUT: float = 10

_TRUTHY = frozenset({"1", "true", "yes", "on"})


# ── Helper functions (private) ───────────────────────────────────────────────


def _parse_bool(raw: Optional[str], default: bool = False) -> bool:
    """Parse an environment flag; ``1/true/yes/on`` (any case) mean True."""
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


def _parse_timeout(raw: Optional[str]) -> float:
    if raw is None or not raw.strip():
        return DEFAULT_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        raise ArgumentError(f"BOT_API_TIMEOUT must be a number, got {raw!r}") from None
    if value <= 0:
        raise ArgumentError(f"BOT_API_TIMEOUT must be positive, got {raw!r}")
    return value


# ── Public API ───────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ClientConfig:
    """Settings shared by every call a client makes.

    Attributes:
        token: Bot token issued by @BotFather.
        base_url: Bot API server root, without the ``/bot<token>`` suffix.
        timeout: Per-request timeout in seconds.
        ignore_bot_exceptions: When true, ``ok: false`` responses return a
            zero value instead of raising :class:`~botapi.exceptions.BotRequestError`.
        session: HTTP session to use; the shared default is used when ``None``.
    """

    token: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    ignore_bot_exceptions: bool = False
    session: Optional[requests.Session] = None

    def __post_init__(self) -> None:
        if not self.token:
            raise ArgumentError("token is required")

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None, session: Optional[requests.Session] = None) -> "ClientConfig":
        """Build a config from the process environment (after loading ``.env``).

        Raises:
            ArgumentError: If ``BOT_TOKEN`` is unset or a value is malformed.
        """
        load_dotenv(dotenv_path)
        token = os.environ.get("BOT_TOKEN")
        if not token:
            raise ArgumentError("BOT_TOKEN is not set")
        config = cls(
            token=token,
            base_url=os.environ.get("BOT_API_BASE_URL") or DEFAULT_BASE_URL,
            timeout=_parse_timeout(os.environ.get("BOT_API_TIMEOUT")),
            ignore_bot_exceptions=_parse_bool(os.environ.get("BOT_API_IGNORE_ERRORS")),
            session=session,
        )
        logger.debug("Config loaded", extra={"base_url": config.base_url, "timeout": config.timeout})
        return config

    def __repr__(self) -> str:
        return (
            f"ClientConfig(token='***', base_url={self.base_url!r}, timeout={self.timeout!r}, "
            f"ignore_bot_exceptions={self.ignore_bot_exceptions!r})"
        )
