"""Exception hierarchy for the botapi client.

Every error the client raises derives from :class:`BotAPIError` so callers can
catch the whole family at once, while the concrete classes keep the failure
kinds apart:

* :class:`ArgumentError` -- local misuse, raised before any network activity.
* :class:`DecodeError` -- response bytes do not match the envelope or a union schema.
* :class:`EncodingError` -- a parameter bag cannot be turned into a request body.
* :class:`BotRequestError` -- the remote side answered ``{"ok": false, ...}``.
* :class:`TransportError` -- connectivity failures and non-JSON HTTP errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from botapi.models import ResponseParameters


class BotAPIError(Exception):
    """Base class for all errors raised by :mod:`botapi`."""


class ArgumentError(BotAPIError, ValueError):
    """A required argument was absent or invalid."""


class DecodeError(BotAPIError, ValueError):
    """Response payload could not be decoded.

    Attributes:
        reason: Short, human-readable explanation of what did not match.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class EncodingError(BotAPIError, ValueError):
    """A parameter bag could not be encoded for the wire."""


class BotRequestError(BotAPIError):
    """The Bot API reported a failed call.

    Attributes:
        error_code: Remote error code (usually mirrors the HTTP status).
        description: Remote, human-readable description.
        parameters: Optional retry / migration hints, passed through untouched.
    """

    def __init__(
        self,
        error_code: int,
        description: str,
        parameters: Optional["ResponseParameters"] = None,
    ) -> None:
        self.error_code = error_code
        self.description = description
        self.parameters = parameters
        super().__init__(f"Bot API error {error_code}: {description}")

    @property
    def retry_after(self) -> Optional[int]:
        """Seconds the remote side asked us to wait, if it said so."""
        return self.parameters.retry_after if self.parameters is not None else None


class TransportError(BotAPIError):
    """HTTP-level failure that carried no JSON error envelope.

    Attributes:
        status_code: HTTP status code, or ``None`` when no response arrived.
        response_body: Raw response body; empty when no response arrived.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[bytes] = None,
    ) -> None:
        self.status_code = status_code
        self.response_body: bytes = response_body if response_body is not None else b""
        super().__init__(message if status_code is None else f"HTTP {status_code}: {message}")
