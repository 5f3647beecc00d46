"""JSend response value object.

A JSend envelope carries one of three statuses:

* ``success``: everything went well, ``data`` holds the payload (or null).
* ``fail``: the submitted data or a precondition was rejected, ``data`` explains why.
* ``error``: processing failed, ``message`` is required, ``code`` and ``data`` are optional.

Instances are immutable once built, except for the encoding options, which only
change the layout of ``encode()`` output. Setting them while another thread
encodes the same instance needs external locking.
"""
import copy
import json
import math
import re
from enum import Enum, IntFlag
from typing import Any, Dict, Mapping, Optional, Protocol, Union

from pydantic import ValidationError

from jsend.config import get_settings
from jsend.errors import (InvalidEnvelopeError, MalformedTextError,
                          PreconditionViolationError, SerializationError)
from jsend.schemas import Envelope

KEY_STATUS = "status"
KEY_DATA = "data"
KEY_MESSAGE = "message"
KEY_CODE = "code"

CONTENT_TYPE = "application/json"

_NUMERIC_PREFIX = re.compile(r"[ \t\n\r\v\f]*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)")

ErrorCode = Union[str, int]

# integer strings saturate at the 64-bit range instead of growing unbounded
_INT_MAX = 2 ** 63 - 1
_INT_MIN = -(2 ** 63)


class Status(str, Enum):
    SUCCESS = "success"
    FAIL = "fail"
    ERROR = "error"


class EncodingOption(IntFlag):
    NONE = 0
    PRETTY_PRINT = 1
    UNESCAPED_UNICODE = 2
    ESCAPE_SLASHES = 4


class DecodeOption(IntFlag):
    NONE = 0
    REJECT_DUPLICATE_KEYS = 1
    REJECT_CONSTANTS = 2


class ResponseSink(Protocol):
    def set_header(self, name: str, value: str) -> None:
        ...

    def write(self, body: str) -> None:
        ...


def lenient_int(value: Any) -> int:
    """
    Cast a code to int the forgiving way.

    Strings keep their longest leading numeric prefix ("42abc" -> 42,
    "4.7" -> 4, "1e3" -> 1000) and anything unparseable becomes 0.
    Integer strings outside the signed 64-bit range saturate at its bounds.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        match = _NUMERIC_PREFIX.match(value)
        if match is None:
            return 0
        number = match.group(1)
        if any(char in number for char in ".eE"):
            return lenient_int(float(number))
        digits = number.lstrip("+-").lstrip("0")
        if len(digits) > len(str(_INT_MAX)):
            return _INT_MIN if number.startswith("-") else _INT_MAX
        result = int(digits or "0")
        if number.startswith("-"):
            result = -result
        return max(_INT_MIN, min(_INT_MAX, result))
    return 0


def _is_empty_code(code: Optional[ErrorCode]) -> bool:
    return code is None or code in ("", "0") or (isinstance(code, int) and code == 0)


def _nesting_depth(value: Any) -> int:
    depth = 0
    stack = [(value, 1)]
    while stack:
        item, level = stack.pop()
        if isinstance(item, dict):
            children = item.values()
        elif isinstance(item, list):
            children = item
        else:
            continue
        depth = max(depth, level)
        stack.extend((child, level + 1) for child in children)
    return depth


def _reject_duplicate_keys(pairs):
    result = {}
    for key, value in pairs:
        if key in result:
            raise ValueError(f"Duplicate key: {key!r}")
        result[key] = value
    return result


def _reject_constant(name):
    raise ValueError(f"Non-standard constant: {name}")


class JSendResponse:
    def __init__(
        self,
        status: Union[Status, str],
        data: Optional[Mapping[str, Any]] = None,
        error_message: Optional[str] = None,
        error_code: Optional[ErrorCode] = None,
    ):
        """
        Build a validated response.

        Args:
            status: One of "success", "fail" or "error" (exact, case-sensitive).
            data: Optional mapping payload.
            error_message: Required and non-empty when status is "error".
            error_code: Optional string or integer code, only kept for errors.

        Raises:
            InvalidEnvelopeError: If the combination breaks the JSend rules.
        """
        try:
            self._status = Status(status)
        except ValueError:
            raise InvalidEnvelopeError("Status must be one of 'success', 'fail' or 'error'.") from None

        self._error_message = None
        self._error_code = None
        if self._status is Status.ERROR:
            if error_message is None or error_message == "":
                raise InvalidEnvelopeError("Errors must contain a message.")
            if error_code is not None and (isinstance(error_code, bool) or not isinstance(error_code, (str, int))):
                raise InvalidEnvelopeError("Error code must be a string or an integer.")
            self._error_message = error_message
            self._error_code = error_code

        if data is not None and not isinstance(data, Mapping):
            raise InvalidEnvelopeError("Data must be a mapping or None.")
        self._data = copy.deepcopy(dict(data)) if data is not None else None
        self._encoding_options = EncodingOption(get_settings().encoding_options)

    @classmethod
    def success(cls, data: Optional[Mapping[str, Any]] = None) -> "JSendResponse":
        """All went well, and (usually) some data was returned."""
        return cls(Status.SUCCESS, data)

    @classmethod
    def fail(cls, data: Optional[Mapping[str, Any]] = None) -> "JSendResponse":
        """The submitted data was rejected, or a precondition of the call was not met."""
        return cls(Status.FAIL, data)

    @classmethod
    def error(
        cls,
        error_message: str,
        error_code: Optional[ErrorCode] = None,
        data: Optional[Mapping[str, Any]] = None,
    ) -> "JSendResponse":
        """An error occurred while processing the request."""
        return cls(Status.ERROR, data, error_message, error_code)

    @property
    def status(self) -> Status:
        return self._status

    @property
    def data(self) -> Optional[Dict[str, Any]]:
        """A copy of the payload; changing it leaves the response untouched."""
        return copy.deepcopy(self._data)

    @property
    def error_message(self) -> str:
        if self.is_error():
            return self._error_message
        raise PreconditionViolationError("Only responses with a status of error may have an error message.")

    @property
    def error_code(self) -> Optional[ErrorCode]:
        if self.is_error():
            return self._error_code
        raise PreconditionViolationError("Only responses with a status of error may have an error code.")

    @property
    def encoding_options(self) -> EncodingOption:
        return self._encoding_options

    def is_success(self) -> bool:
        return self._status is Status.SUCCESS

    def is_fail(self) -> bool:
        return self._status is Status.FAIL

    def is_error(self) -> bool:
        return self._status is Status.ERROR

    def as_dict(self) -> Dict[str, Any]:
        """
        Project the response onto its wire mapping.

        Keys come in the order status, data, message, code. An empty data
        mapping counts as no data: success and fail emit ``"data": null``,
        errors leave the key out.
        """
        result: Dict[str, Any] = {KEY_STATUS: self._status.value}

        has_data = self._data is not None and len(self._data) > 0
        if has_data:
            result[KEY_DATA] = copy.deepcopy(self._data)
        elif not self.is_error():
            result[KEY_DATA] = None

        if self.is_error():
            result[KEY_MESSAGE] = str(self._error_message)
            if not _is_empty_code(self._error_code):
                result[KEY_CODE] = lenient_int(self._error_code)

        return result

    def set_encoding_options(self, options: Union[EncodingOption, int]) -> None:
        self._encoding_options = EncodingOption(options)

    def encode(self) -> str:
        """
        Encode the response as JSON text using the current encoding options.

        Raises:
            SerializationError: If the data holds values JSON cannot represent.
        """
        options = self._encoding_options
        pretty = EncodingOption.PRETTY_PRINT in options
        try:
            text = json.dumps(
                self.as_dict(),
                ensure_ascii=EncodingOption.UNESCAPED_UNICODE not in options,
                indent=4 if pretty else None,
                separators=(",", ": ") if pretty else (",", ":"),
                allow_nan=False,
            )
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"Response could not be encoded: {exc}") from exc

        if EncodingOption.ESCAPE_SLASHES in options:
            # "/" can only appear inside string literals in JSON text
            text = text.replace("/", "\\/")
        return text

    def respond(self, sink: ResponseSink) -> None:
        """Send the encoded response to ``sink`` with a JSON content type header."""
        body = self.encode()
        sink.set_header("Content-Type", CONTENT_TYPE)
        sink.write(body)

    @classmethod
    def decode(
        cls,
        text: Union[str, bytes, bytearray],
        depth: Optional[int] = None,
        options: Union[DecodeOption, int] = DecodeOption.NONE,
    ) -> "JSendResponse":
        """
        Build a response from raw JSend text.

        Args:
            text: The JSON text to decode.
            depth: Maximum container nesting, the envelope itself counting as 1.
                Defaults to the configured max depth.
            options: DecodeOption flags tightening the JSON parser.

        Returns:
            The reconstructed response.

        Raises:
            MalformedTextError: If the text is not valid JSON or nests too deep.
            InvalidEnvelopeError: If the parsed value is not a valid JSend object.
        """
        if depth is None:
            depth = get_settings().max_depth
        if depth < 1:
            raise ValueError("Depth must be greater than zero.")

        options = DecodeOption(options)
        hooks: Dict[str, Any] = {}
        if DecodeOption.REJECT_DUPLICATE_KEYS in options:
            hooks["object_pairs_hook"] = _reject_duplicate_keys
        if DecodeOption.REJECT_CONSTANTS in options:
            hooks["parse_constant"] = _reject_constant

        try:
            raw = json.loads(text, **hooks)
        except (TypeError, ValueError, RecursionError):
            raise MalformedTextError("JSON is invalid.") from None

        if _nesting_depth(raw) > depth:
            raise MalformedTextError("JSON is invalid.")

        return cls.from_dict(raw)

    @classmethod
    def from_dict(cls, raw: Any) -> "JSendResponse":
        """Validate a parsed JSend mapping and build a response from it."""
        if not isinstance(raw, Mapping) or KEY_STATUS not in raw:
            raise InvalidEnvelopeError("JSend must be an object with a valid status.")

        try:
            envelope = Envelope.model_validate(dict(raw))
        except ValidationError as exc:
            field = exc.errors()[0]["loc"][0]
            raise InvalidEnvelopeError(f"JSend field '{field}' has an invalid type.") from exc

        if envelope.status == Status.ERROR and envelope.message is None:
            raise InvalidEnvelopeError("JSend errors must contain a message.")
        if envelope.status != Status.ERROR and not envelope.has_data_key():
            raise InvalidEnvelopeError("JSend must contain data unless it is an error.")

        return cls(envelope.status, envelope.data, envelope.message, envelope.code)

    def __eq__(self, other):
        if not isinstance(other, JSendResponse):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    __hash__ = None

    def __str__(self):
        try:
            return self.encode()
        except SerializationError:
            return ""

    def __repr__(self):
        return f"{type(self).__name__}({self.as_dict()!r})"
