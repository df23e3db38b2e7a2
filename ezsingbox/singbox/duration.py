"""
sing-box duration type.

Accepted forms: "1h", "30m", "5s", "300ms", "1h30m", "1m30s" ...
Docs: https://sing-box.sagernet.org/configuration/
"""

from datetime import timedelta
from typing import Any, Optional

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from ezsingbox.exceptions import (
    DurationOverflowError,
    EmptyDurationError,
    InvalidFormatError,
    InvalidNumberError,
    InvalidUnitError,
)

U64_MAX = 2**64 - 1

MILLIS_PER_SECOND = 1_000
MILLIS_PER_MINUTE = 60 * MILLIS_PER_SECOND
MILLIS_PER_HOUR = 60 * MILLIS_PER_MINUTE

_UNIT_MILLIS = {
    "h": MILLIS_PER_HOUR,
    "m": MILLIS_PER_MINUTE,
    "s": MILLIS_PER_SECOND,
    "ms": 1,
}

_DIGITS = "0123456789"


class Duration:
    """
    Time interval stored as a non-negative millisecond count.

    A Duration parsed from text keeps that text and formats back to it
    unchanged; a Duration built from a number formats with the largest unit
    that divides it exactly.
    """

    __slots__ = ("_millis", "_raw")

    def __init__(self, millis: int = 0, raw: Optional[str] = None):
        # whole milliseconds only, "1500.0ms" would not parse back
        if isinstance(millis, bool) or not isinstance(millis, int):
            raise InvalidNumberError(repr(millis))
        if millis < 0:
            raise ValueError("duration cannot be negative")
        if millis > U64_MAX:
            raise DurationOverflowError()
        self._millis = millis
        self._raw = raw

    # ========================================================================
    # CONSTRUCTORS
    # ========================================================================

    @classmethod
    def from_millis(cls, millis: int) -> "Duration":
        return cls(millis)

    @classmethod
    def from_secs(cls, secs: int) -> "Duration":
        return cls(secs * MILLIS_PER_SECOND)

    @classmethod
    def from_mins(cls, mins: int) -> "Duration":
        return cls(mins * MILLIS_PER_MINUTE)

    @classmethod
    def from_hours(cls, hours: int) -> "Duration":
        return cls(hours * MILLIS_PER_HOUR)

    @classmethod
    def from_timedelta(cls, value: timedelta) -> "Duration":
        return cls(value // timedelta(milliseconds=1))

    @classmethod
    def parse(cls, text: str) -> "Duration":
        """
        Parse a compound duration string.

        Args:
            text: Sequence of <digits><unit> pairs, unit is one of h, m, s, ms

        Returns:
            Duration that formats back to the (trimmed) input

        Raises:
            EmptyDurationError: Blank input
            InvalidNumberError: Number does not fit into 64 bits
            InvalidUnitError: Unknown unit letter
            InvalidFormatError: Unit without number, stray characters or trailing digits
            DurationOverflowError: Total does not fit into 64 bits
        """
        text = text.strip()
        if not text:
            raise EmptyDurationError()

        total = 0
        number = ""
        index = 0

        while index < len(text):
            char = text[index]
            index += 1

            if char in _DIGITS:
                number += char
            elif char.isalpha():
                if not number:
                    raise InvalidFormatError(text)

                value = int(number)
                if value > U64_MAX:
                    raise InvalidNumberError(number)
                number = ""

                # "ms" must win over "m" followed by a literal "s"
                if char == "m" and index < len(text) and text[index] == "s":
                    index += 1
                    unit = "ms"
                elif char in _UNIT_MILLIS:
                    unit = char
                else:
                    raise InvalidUnitError(char)

                total += value * _UNIT_MILLIS[unit]
                if total > U64_MAX:
                    raise DurationOverflowError()
            elif not char.isspace():
                raise InvalidFormatError(text)

        if number:
            raise InvalidFormatError(text)

        return cls(total, raw=text)

    # ========================================================================
    # ACCESSORS
    # ========================================================================

    def as_millis(self) -> int:
        return self._millis

    def as_secs(self) -> int:
        return self._millis // MILLIS_PER_SECOND

    def as_mins(self) -> int:
        return self._millis // MILLIS_PER_MINUTE

    def to_timedelta(self) -> timedelta:
        return timedelta(milliseconds=self._millis)

    def _format(self) -> str:
        if self._raw is not None:
            return self._raw

        millis = self._millis
        if millis == 0:
            return "0s"
        if millis % MILLIS_PER_HOUR == 0:
            return f"{millis // MILLIS_PER_HOUR}h"
        if millis % MILLIS_PER_MINUTE == 0:
            return f"{millis // MILLIS_PER_MINUTE}m"
        if millis % MILLIS_PER_SECOND == 0:
            return f"{millis // MILLIS_PER_SECOND}s"
        return f"{millis}ms"

    def __str__(self) -> str:
        return self._format()

    def __repr__(self) -> str:
        return f"Duration({self._format()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._millis == other._millis

    def __hash__(self) -> int:
        return hash(self._millis)

    # ========================================================================
    # PYDANTIC INTEGRATION
    # ========================================================================

    @classmethod
    def coerce(cls, value: Any) -> "Duration":
        """Build a Duration from a Duration, a string, a timedelta or an int of milliseconds"""
        if isinstance(value, Duration):
            return value
        if isinstance(value, str):
            return cls.parse(value)
        if isinstance(value, timedelta):
            return cls.from_timedelta(value)
        if isinstance(value, int) and not isinstance(value, bool):
            return cls.from_millis(value)
        raise ValueError(f"cannot convert {type(value).__name__} to Duration")

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls.coerce,
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )
