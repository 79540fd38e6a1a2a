import json
import math
from typing import Any, List, Optional, Union

from src.estransport.transport.errors import (
    ParseError,
    SerializationError,
    SerializationOverflowError,
)


class JsonNumber:
    """
    A JSON number that remembers the text it was parsed from.

    Re-serialization emits the original text, so values like 1.0 or
    1e3 come back exactly as the server sent them.
    """

    __slots__ = ("text",)

    def __init__(self, text: str):
        self.text = text

    @property
    def is_integer_text(self) -> bool:
        return not any(c in self.text for c in ".eE")

    def __int__(self) -> int:
        if self.is_integer_text:
            return int(self.text)
        return int(float(self.text))

    def __float__(self) -> float:
        return float(self.text)

    def _integer_key(self) -> str:
        # JSON has no leading zeros, so integer texts only differ by the sign of zero
        return "0" if self.text in ("0", "-0") else self.text

    def _finite_equal(self, other: Union[int, float]) -> bool:
        value = float(self)
        return math.isfinite(value) and value == other

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, JsonNumber):
            if self.is_integer_text and other.is_integer_text:
                return self._integer_key() == other._integer_key()
            return self.text == other.text or self._finite_equal(float(other))
        if isinstance(other, int) and not isinstance(other, bool):
            if not self.is_integer_text:
                return self._finite_equal(other)
            try:
                return self._integer_key() == str(other)
            except ValueError:
                return False
        if isinstance(other, float):
            return self._finite_equal(other)
        return NotImplemented

    def __hash__(self) -> int:
        if self.is_integer_text:
            try:
                return hash(int(self.text))
            except ValueError:
                return hash(self._integer_key())
        value = float(self)
        return hash(value) if math.isfinite(value) else hash(self.text)

    def __repr__(self) -> str:
        return f"JsonNumber({self.text!r})"


JsonValue = Union[None, bool, str, JsonNumber, int, float, dict, list]


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def parse(text: Union[str, bytes]) -> JsonValue:
    """
    Parse a JSON document, keeping numbers as JsonNumber.

    Raises:
        ParseError: on malformed input
    """
    if isinstance(text, (bytes, bytearray)):
        try:
            text = bytes(text).decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"response is not valid UTF-8: {e}") from e
    try:
        return json.loads(
            text,
            parse_int=JsonNumber,
            parse_float=JsonNumber,
            parse_constant=_reject_constant,
        )
    except (ValueError, RecursionError) as e:
        raise ParseError(f"invalid JSON: {e}") from e


class TextSink:
    """Accumulates serialized text, optionally bounded to a capacity."""

    def __init__(self, capacity: Optional[int] = None):
        self.capacity = capacity
        self._parts: List[str] = []
        self.size = 0

    def write(self, text: str) -> None:
        if self.capacity is not None and self.size + len(text) > self.capacity:
            room = self.capacity - self.size
            if room > 0:
                self._parts.append(text[:room])
                self.size += room
            raise SerializationOverflowError(f"serialized value exceeds {self.capacity} characters")
        self._parts.append(text)
        self.size += len(text)

    def getvalue(self) -> str:
        return "".join(self._parts)


def _write_number(sink: TextSink, value: Union[int, float]) -> None:
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise SerializationError(f"{value!r} has no JSON representation")
        sink.write(repr(value))
    else:
        sink.write(str(value))


def serialize_value(sink: TextSink, value: JsonValue) -> None:
    """Write value to sink as compact JSON, keeping object key order."""
    if value is None:
        sink.write("null")
    elif isinstance(value, bool):
        sink.write("true" if value else "false")
    elif isinstance(value, str):
        sink.write(json.dumps(value, ensure_ascii=False))
    elif isinstance(value, JsonNumber):
        sink.write(value.text)
    elif isinstance(value, (int, float)):
        _write_number(sink, value)
    elif isinstance(value, dict):
        sink.write("{")
        for i, (key, item) in enumerate(value.items()):
            if not isinstance(key, str):
                raise SerializationError(f"object key {key!r} is not a string")
            if i:
                sink.write(",")
            sink.write(json.dumps(key, ensure_ascii=False))
            sink.write(":")
            serialize_value(sink, item)
        sink.write("}")
    elif isinstance(value, (list, tuple)):
        sink.write("[")
        for i, item in enumerate(value):
            if i:
                sink.write(",")
            serialize_value(sink, item)
        sink.write("]")
    else:
        raise SerializationError(f"unexpected JSON value of type {type(value).__name__}")


def serialize(value: JsonValue, capacity: Optional[int] = None) -> str:
    """
    Serialize a parsed JSON value back to compact text.

    Raises:
        SerializationOverflowError: when capacity is given and exceeded
        SerializationError: for values that are not JSON
    """
    sink = TextSink(capacity)
    serialize_value(sink, value)
    return sink.getvalue()
