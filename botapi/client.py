"""BotClient -- RPC layer for the Telegram Bot API.

Every call goes through :meth:`BotClient.rpc` (blocking) or
:meth:`BotClient.rpc_async` (awaitable, cancellable):

1. argument-less calls are plain ``GET`` requests;
2. otherwise the body is encoded by :func:`botapi.transport.choose_transport`
   (JSON, or multipart when raw bytes are present), or sent verbatim when the
   caller passes pre-serialised JSON bytes / a binary stream;
3. the response is parsed as an envelope (:mod:`botapi.envelope`);
4. ``ok: false`` raises :class:`BotRequestError`, or yields the zero value of the
   expected result type when remote errors are ignored.

HTTP calls use :mod:`requests`.  The async path offloads the blocking send
and the body read to worker threads via :func:`asyncio.to_thread`, and checks
an optional cancellation event around both.

The module also owns the process-wide default :class:`requests.Session`, created
lazily under a lock and used by clients built without an explicit session.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import IO, Any, List, Mapping, Optional, Union

import requests

from botapi import methods
from botapi.args import (
    AnswerInlineQueryArgs,
    BotArgs,
    GetChatAdministratorsArgs,
    GetChatMemberArgs,
    PromoteChatMemberArgs,
    RestrictChatMemberArgs,
    SendAnimationArgs,
    SendDocumentArgs,
    SendMediaGroupArgs,
    SendMessageArgs,
)
from botapi.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, ClientConfig
from botapi.envelope import BotResponse, default_for, parse_envelope
from botapi.exceptions import ArgumentError, TransportError
from botapi.models import ChatMember, ChatPermissions, Message, User
from botapi.transport import APPLICATION_JSON, MULTIPART_FORM_DATA, MultipartForm, choose_transport, dumps

logger = logging.getLogger("botapi.client")

Args = Union[BotArgs, Mapping[str, Any], bytes, bytearray, IO[bytes]]


# ── Shared default session ───────────────────────────────────────────────────

_default_session: Optional[requests.Session] = None
_default_session_lock = threading.Lock()


def _with_accept_headers(session: requests.Session) -> requests.Session:
    """Make sure the session advertises both JSON and multipart."""
    accepted = [v.strip() for v in session.headers.get("Accept", "").split(",") if v.strip() and v.strip() != "*/*"]
    for media_type in (APPLICATION_JSON, MULTIPART_FORM_DATA):
        if media_type not in accepted:
            accepted.append(media_type)
    session.headers["Accept"] = ", ".join(accepted)
    return session


def get_default_session() -> requests.Session:
    """Return (and lazily create) the process-wide default session."""
    global _default_session
    if _default_session is None:
        with _default_session_lock:
            if _default_session is None:
                _default_session = _with_accept_headers(requests.Session())
    return _default_session


def set_default_session(session: Optional[requests.Session] = None) -> requests.Session:
    """Replace the default session (a fresh one when *session* is ``None``)."""
    global _default_session
    with _default_session_lock:
        _default_session = _with_accept_headers(session or requests.Session())
        return _default_session


def _is_json(response: requests.Response) -> bool:
    content_type = response.headers.get("Content-Type", "")
    return content_type.split(";", 1)[0].strip().lower() == APPLICATION_JSON


def _raise_if_cancelled(cancel_event: Optional[asyncio.Event]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise asyncio.CancelledError()


def _close_orphaned_response(sending: "asyncio.Future[requests.Response]") -> None:
    if sending.cancelled() or sending.exception() is not None:
        return
    sending.result().close()


def _require(**arguments: Any) -> None:
    missing = [name for name, value in arguments.items() if value is None]
    if missing:
        raise ArgumentError(f"missing required argument(s): {', '.join(missing)}")


class BotClient:
    """Client for one bot token.

    Args:
        token: Bot token.
        session: HTTP session; the shared default is used when ``None``.
        ignore_bot_exceptions: Return zero values instead of raising on ``ok: false``.
        base_url: Bot API server root.
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        token: str,
        session: Optional[requests.Session] = None,
        ignore_bot_exceptions: bool = False,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        if not token:
            raise ArgumentError("token is required")
        self.token = token
        self.ignore_bot_exceptions = ignore_bot_exceptions
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = _with_accept_headers(session) if session is not None else get_default_session()

    @classmethod
    def from_config(cls, config: ClientConfig) -> "BotClient":
        return cls(
            config.token,
            session=config.session,
            ignore_bot_exceptions=config.ignore_bot_exceptions,
            base_url=config.base_url,
            timeout=config.timeout,
        )

    def __repr__(self) -> str:
        return f"BotClient(base_url={self._base_url!r}, ignore_bot_exceptions={self.ignore_bot_exceptions!r})"

    # ------------------------------------------------------------------
    #  Request building
    # ------------------------------------------------------------------

    def method_url(self, method: str) -> str:
        if not method:
            raise ArgumentError("method is required")
        return f"{self._base_url}/bot{self.token}/{method}"

    def _get(self, method: str) -> requests.Request:
        return requests.Request("GET", self.method_url(method))

    def _post_json(self, method: str, body: bytes) -> requests.Request:
        return requests.Request("POST", self.method_url(method), data=body, headers={"Content-Type": APPLICATION_JSON})

    def _post_form(self, method: str, form: MultipartForm) -> requests.Request:
        # requests writes the boundary into the Content-Type header itself.
        return requests.Request("POST", self.method_url(method), files=form.to_requests_files())

    def _post(self, method: str, args: Optional[Args]) -> requests.Request:
        if args is None:
            raise ArgumentError("args is required for a POST request")
        if isinstance(args, (bytes, bytearray)):
            return self._post_json(method, bytes(args))
        if hasattr(args, "read"):
            return self._post_json(method, args.read())  # type: ignore[union-attr]
        transport = choose_transport(args)  # type: ignore[arg-type]
        if isinstance(transport, MultipartForm):
            return self._post_form(method, transport)
        return self._post_json(method, transport.encode())

    def _build(self, method: str, args: Optional[Args]) -> requests.Request:
        return self._get(method) if args is None else self._post(method, args)

    # ------------------------------------------------------------------
    #  Response handling
    # ------------------------------------------------------------------

    def _read_envelope(self, method: str, response: requests.Response, body: bytes, result_type: Any) -> BotResponse[Any]:
        logger.debug("Response received", extra={"api_endpoint": method, "status_code": response.status_code})
        if not response.ok and not _is_json(response):
            raise TransportError(response.reason or "request failed", response.status_code, body)
        return parse_envelope(body, result_type)

    def _send(self, method: str, request: requests.Request, result_type: Any) -> BotResponse[Any]:
        prepared = self._session.prepare_request(request)
        logger.debug("Sending request", extra={"api_endpoint": method, "http_method": request.method})
        try:
            response = self._session.send(prepared, timeout=self._timeout)
            body = response.content
        except requests.RequestException as exc:
            raise TransportError(str(exc)) from exc
        return self._read_envelope(method, response, body, result_type)

    async def _send_async(
        self,
        method: str,
        request: requests.Request,
        result_type: Any,
        cancel_event: Optional[asyncio.Event],
    ) -> BotResponse[Any]:
        prepared = self._session.prepare_request(request)
        _raise_if_cancelled(cancel_event)
        logger.debug("Sending request", extra={"api_endpoint": method, "http_method": request.method})
        sending = asyncio.ensure_future(asyncio.to_thread(self._session.send, prepared, timeout=self._timeout, stream=True))
        try:
            response = await asyncio.shield(sending)
        except asyncio.CancelledError:
            # The worker thread keeps running; close whatever it hands back.
            sending.add_done_callback(_close_orphaned_response)
            raise
        except requests.RequestException as exc:
            raise TransportError(str(exc)) from exc
        try:
            # A request already sent is not aborted remotely; we only stop waiting.
            _raise_if_cancelled(cancel_event)
            try:
                body = await asyncio.to_thread(lambda: response.content)
            except requests.RequestException as exc:
                raise TransportError(str(exc)) from exc
            _raise_if_cancelled(cancel_event)
        finally:
            response.close()
        return self._read_envelope(method, response, body, result_type)

    def _unwrap(self, method: str, response: BotResponse[Any], result_type: Any, ignore_errors: Optional[bool]) -> Any:
        if response.ok:
            return response.result
        ignore = self.ignore_bot_exceptions if ignore_errors is None else ignore_errors
        if ignore:
            logger.debug("Remote error ignored", extra={"api_endpoint": method, "error_code": response.error_code})
            return default_for(result_type)
        raise response.to_error()

    # ------------------------------------------------------------------
    #  Public request API
    # ------------------------------------------------------------------

    def get_request(self, method: str, result_type: Any = Any) -> BotResponse[Any]:
        """Send an argument-less ``GET`` and return the parsed envelope."""
        return self._send(method, self._build(method, None), result_type)

    def post_request(self, method: str, args: Args, result_type: Any = Any) -> BotResponse[Any]:
        """``POST`` *args* (bag, mapping, or pre-serialised JSON) and return the envelope."""
        return self._send(method, self._post(method, args), result_type)

    def post_multipart(self, method: str, form: MultipartForm, result_type: Any = Any) -> BotResponse[Any]:
        """``POST`` an already-built multipart form and return the envelope."""
        return self._send(method, self._post_form(method, form), result_type)

    async def get_request_async(self, method: str, result_type: Any = Any, cancel_event: Optional[asyncio.Event] = None) -> BotResponse[Any]:
        return await self._send_async(method, self._build(method, None), result_type, cancel_event)

    async def post_request_async(
        self, method: str, args: Args, result_type: Any = Any, cancel_event: Optional[asyncio.Event] = None
    ) -> BotResponse[Any]:
        return await self._send_async(method, self._post(method, args), result_type, cancel_event)

    async def post_multipart_async(
        self, method: str, form: MultipartForm, result_type: Any = Any, cancel_event: Optional[asyncio.Event] = None
    ) -> BotResponse[Any]:
        return await self._send_async(method, self._post_form(method, form), result_type, cancel_event)

    def rpc(self, method: str, args: Optional[Args] = None, result_type: Any = Any, *, ignore_errors: Optional[bool] = None) -> Any:
        """Call *method* and return its result.

        Args:
            method: Remote method name, e.g. :data:`botapi.methods.GET_ME`.
            args: ``None`` for a ``GET``; otherwise a parameter bag, a mapping,
                pre-serialised JSON bytes, or a binary stream of JSON.
            result_type: Type ``result`` is validated against.
            ignore_errors: Per-call override of ``ignore_bot_exceptions``.

        Raises:
            ArgumentError: If *method* is empty.
            BotRequestError: When the remote side reports failure (unless ignored).
            DecodeError: When the response does not match the envelope or *result_type*.
            TransportError: On connectivity failures and non-JSON HTTP errors.
        """
        response = self._send(method, self._build(method, args), result_type)
        return self._unwrap(method, response, result_type, ignore_errors)

    async def rpc_async(
        self,
        method: str,
        args: Optional[Args] = None,
        result_type: Any = Any,
        *,
        ignore_errors: Optional[bool] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Any:
        """Awaitable :meth:`rpc`.

        Cancellation (task cancellation, or setting *cancel_event*) is observed
        around the network send and the body read and raises
        :class:`asyncio.CancelledError`.
        """
        request = self._build(method, args)
        response = await self._send_async(method, request, result_type, cancel_event)
        return self._unwrap(method, response, result_type, ignore_errors)

    def close(self) -> None:
        """Close the session unless it is the shared default."""
        if self._session is not _default_session:
            self._session.close()

    def __enter__(self) -> "BotClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    #  Endpoint wrappers
    # ------------------------------------------------------------------

    def get_me(self) -> User:
        """A simple method for testing your bot's auth token."""
        return self.rpc(methods.GET_ME, result_type=User)

    async def get_me_async(self, cancel_event: Optional[asyncio.Event] = None) -> User:
        return await self.rpc_async(methods.GET_ME, result_type=User, cancel_event=cancel_event)

    def send_message(self, chat_id: Union[int, str], text: str, **options: Any) -> Message:
        """Send a text message. Extra keyword arguments map to :class:`SendMessageArgs` fields."""
        _require(chat_id=chat_id, text=text)
        return self.rpc(methods.SEND_MESSAGE, SendMessageArgs(chat_id=chat_id, text=text, **options), Message)

    async def send_message_async(self, chat_id: Union[int, str], text: str, cancel_event: Optional[asyncio.Event] = None, **options: Any) -> Message:
        _require(chat_id=chat_id, text=text)
        args = SendMessageArgs(chat_id=chat_id, text=text, **options)
        return await self.rpc_async(methods.SEND_MESSAGE, args, Message, cancel_event=cancel_event)

    def restrict_chat_member(
        self,
        chat_id: Union[int, str],
        user_id: int,
        permissions: ChatPermissions,
        until_date: Optional[int] = None,
        **options: Any,
    ) -> bool:
        """Restrict a user in a supergroup. Returns True on success."""
        args = self._restrict_args(chat_id, user_id, permissions, until_date, options)
        return self.rpc(methods.RESTRICT_CHAT_MEMBER, args, bool)

    async def restrict_chat_member_async(
        self,
        chat_id: Union[int, str],
        user_id: int,
        permissions: ChatPermissions,
        until_date: Optional[int] = None,
        cancel_event: Optional[asyncio.Event] = None,
        **options: Any,
    ) -> bool:
        args = self._restrict_args(chat_id, user_id, permissions, until_date, options)
        return await self.rpc_async(methods.RESTRICT_CHAT_MEMBER, args, bool, cancel_event=cancel_event)

    @staticmethod
    def _restrict_args(chat_id: Any, user_id: Any, permissions: Any, until_date: Any, options: dict) -> RestrictChatMemberArgs:
        _require(chat_id=chat_id, user_id=user_id, permissions=permissions)
        return RestrictChatMemberArgs(chat_id=chat_id, user_id=user_id, permissions=permissions, until_date=until_date, **options)

    def promote_chat_member(self, chat_id: Union[int, str], user_id: int, **rights: Optional[bool]) -> bool:
        """Promote or demote a user. Keyword arguments are ``can_*`` / ``is_anonymous`` flags."""
        _require(chat_id=chat_id, user_id=user_id)
        return self.rpc(methods.PROMOTE_CHAT_MEMBER, PromoteChatMemberArgs(chat_id=chat_id, user_id=user_id, **rights), bool)

    async def promote_chat_member_async(self, chat_id: Union[int, str], user_id: int, cancel_event: Optional[asyncio.Event] = None, **rights: Optional[bool]) -> bool:
        _require(chat_id=chat_id, user_id=user_id)
        args = PromoteChatMemberArgs(chat_id=chat_id, user_id=user_id, **rights)
        return await self.rpc_async(methods.PROMOTE_CHAT_MEMBER, args, bool, cancel_event=cancel_event)

    def get_chat_member(self, chat_id: Union[int, str], user_id: int) -> Any:
        """Return the :data:`~botapi.models.ChatMember` variant for a user."""
        _require(chat_id=chat_id, user_id=user_id)
        return self.rpc(methods.GET_CHAT_MEMBER, GetChatMemberArgs(chat_id=chat_id, user_id=user_id), ChatMember)

    async def get_chat_member_async(self, chat_id: Union[int, str], user_id: int, cancel_event: Optional[asyncio.Event] = None) -> Any:
        _require(chat_id=chat_id, user_id=user_id)
        args = GetChatMemberArgs(chat_id=chat_id, user_id=user_id)
        return await self.rpc_async(methods.GET_CHAT_MEMBER, args, ChatMember, cancel_event=cancel_event)

    def get_chat_administrators(self, chat_id: Union[int, str]) -> List[Any]:
        _require(chat_id=chat_id)
        return self.rpc(methods.GET_CHAT_ADMINISTRATORS, GetChatAdministratorsArgs(chat_id=chat_id), List[ChatMember])

    async def get_chat_administrators_async(self, chat_id: Union[int, str], cancel_event: Optional[asyncio.Event] = None) -> List[Any]:
        _require(chat_id=chat_id)
        args = GetChatAdministratorsArgs(chat_id=chat_id)
        return await self.rpc_async(methods.GET_CHAT_ADMINISTRATORS, args, List[ChatMember], cancel_event=cancel_event)

    def send_document(self, args: SendDocumentArgs) -> Message:
        """Send a general file; uploads go multipart automatically."""
        _require(args=args)
        return self.rpc(methods.SEND_DOCUMENT, args, Message)

    async def send_document_async(self, args: SendDocumentArgs, cancel_event: Optional[asyncio.Event] = None) -> Message:
        _require(args=args)
        return await self.rpc_async(methods.SEND_DOCUMENT, args, Message, cancel_event=cancel_event)

    def send_animation(self, args: SendAnimationArgs) -> Message:
        _require(args=args)
        return self.rpc(methods.SEND_ANIMATION, args, Message)

    async def send_animation_async(self, args: SendAnimationArgs, cancel_event: Optional[asyncio.Event] = None) -> Message:
        _require(args=args)
        return await self.rpc_async(methods.SEND_ANIMATION, args, Message, cancel_event=cancel_event)

    def send_media_group(self, args: SendMediaGroupArgs) -> List[Message]:
        _require(args=args)
        return self.rpc(methods.SEND_MEDIA_GROUP, args, List[Message])

    async def send_media_group_async(self, args: SendMediaGroupArgs, cancel_event: Optional[asyncio.Event] = None) -> List[Message]:
        _require(args=args)
        return await self.rpc_async(methods.SEND_MEDIA_GROUP, args, List[Message], cancel_event=cancel_event)

    def answer_inline_query(self, args: AnswerInlineQueryArgs) -> bool:
        _require(args=args)
        return self.rpc(methods.ANSWER_INLINE_QUERY, args, bool)

    async def answer_inline_query_async(self, args: AnswerInlineQueryArgs, cancel_event: Optional[asyncio.Event] = None) -> bool:
        _require(args=args)
        return await self.rpc_async(methods.ANSWER_INLINE_QUERY, args, bool, cancel_event=cancel_event)

    def delete_forum_topic(self, chat_id: Union[int, str], message_thread_id: int) -> bool:
        """Delete a forum topic along with all its messages."""
        return self.rpc(methods.DELETE_FORUM_TOPIC, self._topic_body(chat_id, message_thread_id), bool)

    async def delete_forum_topic_async(self, chat_id: Union[int, str], message_thread_id: int, cancel_event: Optional[asyncio.Event] = None) -> bool:
        body = self._topic_body(chat_id, message_thread_id)
        return await self.rpc_async(methods.DELETE_FORUM_TOPIC, body, bool, cancel_event=cancel_event)

    @staticmethod
    def _topic_body(chat_id: Any, message_thread_id: Any) -> bytes:
        # Small fixed-shape calls skip the bag and send pre-serialised JSON.
        _require(chat_id=chat_id, message_thread_id=message_thread_id)
        return dumps({"chat_id": chat_id, "message_thread_id": message_thread_id}).encode("utf-8")

    def close_general_forum_topic(self, chat_id: Union[int, str]) -> bool:
        _require(chat_id=chat_id)
        return self.rpc(methods.CLOSE_GENERAL_FORUM_TOPIC, {"chat_id": chat_id}, bool)

    async def close_general_forum_topic_async(self, chat_id: Union[int, str], cancel_event: Optional[asyncio.Event] = None) -> bool:
        _require(chat_id=chat_id)
        return await self.rpc_async(methods.CLOSE_GENERAL_FORUM_TOPIC, {"chat_id": chat_id}, bool, cancel_event=cancel_event)


__all__ = [
    "BotClient",
    "get_default_session",
    "set_default_session",
]
