"""Restrictions, availability windows and sale periods of catalogue items.

Messages are mappings keyed by protobuf field name; absent keys take the
protobuf default.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_country_codes(country_codes: str) -> list[str]:
    """Split a run of two-letter country codes into a list."""
    if len(country_codes) % 2:
        raise ValueError(f"country code list has odd length: {country_codes!r}")
    return [country_codes[i : i + 2] for i in range(0, len(country_codes), 2)]


def date_from_message(msg: Mapping[str, Any]) -> datetime:
    """Build a UTC datetime from a date message.

    A missing month or day means the first; a missing year means the epoch year.
    """
    try:
        return datetime(
            msg.get("year", 1970),
            msg.get("month", 1),
            msg.get("day", 1),
            msg.get("hour", 0),
            msg.get("minute", 0),
            tzinfo=timezone.utc,
        )
    except (TypeError, ValueError, OverflowError) as exc:
        raise ValueError(f"invalid date: {exc}") from None


def date_from_timestamp_ms(timestamp: int) -> datetime:
    """Convert milliseconds since the Unix epoch to a UTC datetime."""
    try:
        return _EPOCH + timedelta(milliseconds=timestamp)
    except OverflowError:
        raise ValueError(f"timestamp out of range: {timestamp}") from None


@dataclass(frozen=True)
class Restriction:
    catalogues: tuple[int, ...] = ()
    restriction_type: int = 0
    catalogue_strs: tuple[str, ...] = ()
    countries_allowed: tuple[str, ...] | None = None
    countries_forbidden: tuple[str, ...] | None = None

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> Restriction:
        allowed = msg.get("countries_allowed")
        forbidden = msg.get("countries_forbidden")
        return cls(
            catalogues=tuple(msg.get("catalogue", ())),
            restriction_type=msg.get("type", 0),
            catalogue_strs=tuple(msg.get("catalogue_str", ())),
            countries_allowed=None if allowed is None else tuple(parse_country_codes(allowed)),
            countries_forbidden=(
                None if forbidden is None else tuple(parse_country_codes(forbidden))
            ),
        )


class UnavailabilityReason(enum.Enum):
    """Why an item cannot be played by the current user."""

    BLACKLISTED = "blacklist present and country on it"
    EMBARGO = "available date is in the future"
    NO_DATA = "required data was not present"
    NOT_WHITELISTED = "whitelist present and country not on it"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Availability:
    start: datetime
    catalogue_strs: tuple[str, ...] = ()

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> Availability:
        return cls(
            start=date_from_message(msg.get("start", {})),
            catalogue_strs=tuple(msg.get("catalogue_str", ())),
        )


@dataclass(frozen=True)
class SalePeriod:
    start: datetime
    end: datetime
    restrictions: tuple[Restriction, ...] = field(default=())

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> SalePeriod:
        return cls(
            start=date_from_message(msg.get("start", {})),
            end=date_from_message(msg.get("end", {})),
            restrictions=tuple(
                Restriction.from_message(r) for r in msg.get("restriction", ())
            ),
        )