"""Named method channels between the UI layer and the native host.

A channel carries a method name plus arguments and answers with one of three
outcomes: success, error or not-implemented. Messages travel as UTF-8 JSON in
the same shape the Flutter ``JSONMethodCodec`` uses, so a reply is one of::

    [result]                    success
    [code, message, details]    error
    b""                         not implemented
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional

_logger = logging.getLogger(__name__)

MessageHandler = Callable[[bytes], Optional[bytes]]


class MethodCodecError(ValueError):
    """Raised when a message or reply envelope cannot be decoded."""


class Outcome(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    NOT_IMPLEMENTED = "not_implemented"


@dataclass(frozen=True)
class MethodCall:
    method: str
    arguments: Any = None

    def argument(self, key: str) -> Any:
        """Return the named argument or ``None`` when absent.

        Arguments that are not a mapping have no named entries.
        """

        if isinstance(self.arguments, Mapping):
            return self.arguments.get(key)
        return None


@dataclass(frozen=True)
class MethodResult:
    outcome: Outcome
    value: Any = None
    code: Optional[str] = None
    message: Optional[str] = None
    details: Any = None

    @classmethod
    def success(cls, value: Any = None) -> "MethodResult":
        return cls(Outcome.SUCCESS, value=value)

    @classmethod
    def error(cls, code: str, message: Optional[str] = None, details: Any = None) -> "MethodResult":
        return cls(Outcome.ERROR, code=code, message=message, details=details)

    @classmethod
    def not_implemented(cls) -> "MethodResult":
        return cls(Outcome.NOT_IMPLEMENTED)

    @property
    def is_success(self) -> bool:
        return self.outcome is Outcome.SUCCESS

    @property
    def is_not_implemented(self) -> bool:
        return self.outcome is Outcome.NOT_IMPLEMENTED


MethodCallHandler = Callable[[MethodCall], MethodResult]


class JSONMethodCodec:
    """Encode method calls and reply envelopes as UTF-8 JSON."""

    def encode_method_call(self, call: MethodCall) -> bytes:
        return self._dump({"method": call.method, "args": call.arguments})

    def decode_method_call(self, data: bytes) -> MethodCall:
        decoded = self._load(data)
        if not isinstance(decoded, dict):
            raise MethodCodecError("method call must be a JSON object")
        method = decoded.get("method")
        if not isinstance(method, str):
            raise MethodCodecError("method call is missing a string 'method'")
        return MethodCall(method=method, arguments=decoded.get("args"))

    def encode_success(self, value: Any = None) -> bytes:
        return self._dump([value])

    def encode_error(self, code: str, message: Optional[str] = None, details: Any = None) -> bytes:
        return self._dump([code, message, details])

    def encode_result(self, result: MethodResult) -> bytes:
        if result.outcome is Outcome.SUCCESS:
            return self.encode_success(result.value)
        if result.outcome is Outcome.ERROR:
            return self.encode_error(result.code or "error", result.message, result.details)
        return b""

    def decode_envelope(self, data: Optional[bytes]) -> MethodResult:
        if not data:
            return MethodResult.not_implemented()
        decoded = self._load(data)
        if isinstance(decoded, list):
            if len(decoded) == 1:
                return MethodResult.success(decoded[0])
            if len(decoded) == 3 and isinstance(decoded[0], str):
                code, message, details = decoded
                return MethodResult.error(code, message, details)
        raise MethodCodecError(f"invalid reply envelope: {decoded!r}")

    @staticmethod
    def _dump(payload: Any) -> bytes:
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")

    @staticmethod
    def _load(data: bytes) -> Any:
        try:
            return json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise MethodCodecError(f"malformed message: {exc}") from exc


class BinaryMessenger:
    """Route raw messages to the handler registered for a channel name."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._handlers: Dict[str, MessageHandler] = {}

    def set_message_handler(self, channel: str, handler: Optional[MessageHandler]) -> None:
        with self._lock:
            if handler is None:
                self._handlers.pop(channel, None)
            else:
                self._handlers[channel] = handler

    def has_handler(self, channel: str) -> bool:
        with self._lock:
            return channel in self._handlers

    def send(self, channel: str, message: bytes) -> Optional[bytes]:
        """Deliver *message* and return the reply, or ``None`` if nobody listens."""

        with self._lock:
            handler = self._handlers.get(channel)
        if handler is None:
            _logger.debug("No handler registered for channel %s", channel)
            return None
        return handler(message)


class MethodChannel:
    """Bind a method call handler to a channel name on a messenger."""

    def __init__(
        self,
        name: str,
        messenger: BinaryMessenger,
        codec: Optional[JSONMethodCodec] = None,
    ) -> None:
        self.name = name
        self.messenger = messenger
        self.codec = codec or JSONMethodCodec()
        self._handler: Optional[MethodCallHandler] = None

    def set_method_call_handler(self, handler: Optional[MethodCallHandler]) -> None:
        self._handler = handler
        if handler is None:
            self.messenger.set_message_handler(self.name, None)
        else:
            self.messenger.set_message_handler(self.name, self._on_message)

    def _on_message(self, message: bytes) -> bytes:
        handler = self._handler
        if handler is None:
            return b""
        try:
            call = self.codec.decode_method_call(message)
        except MethodCodecError as exc:
            _logger.warning("Rejected message on %s: %s", self.name, exc)
            return self.codec.encode_error("bad-message", str(exc))
        try:
            result = handler(call)
        except Exception as exc:
            _logger.exception("Handler for %s.%s failed", self.name, call.method)
            return self.codec.encode_error("error", str(exc))
        return self.codec.encode_result(result)

    def invoke_method(self, method: str, arguments: Any = None) -> MethodResult:
        """Send a call over the channel and decode the reply."""

        message = self.codec.encode_method_call(MethodCall(method, arguments))
        reply = self.messenger.send(self.name, message)
        return self.codec.decode_envelope(reply)


__all__ = [
    "BinaryMessenger",
    "JSONMethodCodec",
    "MethodCall",
    "MethodCallHandler",
    "MethodChannel",
    "MethodCodecError",
    "MethodResult",
    "Outcome",
]
