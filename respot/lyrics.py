"""Lyrics documents as delivered by the lyrics service in JSON."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass
from typing import Any, Mapping

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


def _field(data: Mapping[str, Any], key: str, kind: type) -> Any:
    if not isinstance(data, Mapping):
        raise ValueError(f"expected an object, got {type(data).__name__}")
    try:
        value = data[key]
    except KeyError:
        raise ValueError(f"missing field `{key}`") from None
    if kind is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"field `{key}` must be an integer")
        if not _I32_MIN <= value <= _I32_MAX:
            raise ValueError(f"field `{key}` is out of range")
    elif not isinstance(value, kind):
        raise ValueError(f"field `{key}` must be of type {kind.__name__}")
    return value


class SyncType(enum.Enum):
    UNSYNCED = "UNSYNCED"
    LINE_SYNCED = "LINE_SYNCED"


@dataclass(frozen=True)
class Colors:
    background: int
    highlight_text: int
    text: int

    @classmethod
    def _parse(cls, data: Mapping[str, Any]) -> Colors:
        return cls(
            background=_field(data, "background", int),
            highlight_text=_field(data, "highlightText", int),
            text=_field(data, "text", int),
        )


@dataclass(frozen=True)
class Line:
    start_time_ms: str
    end_time_ms: str
    words: str

    @classmethod
    def _parse(cls, data: Mapping[str, Any]) -> Line:
        return cls(
            start_time_ms=_field(data, "startTimeMs", str),
            end_time_ms=_field(data, "endTimeMs", str),
            words=_field(data, "words", str),
        )


@dataclass(frozen=True)
class LyricsInner:
    fullscreen_action: str
    is_dense_typeface: bool
    is_rtl_language: bool
    language: str
    lines: tuple[Line, ...]
    provider: str
    provider_display_name: str
    provider_lyrics_id: str
    sync_lyrics_uri: str
    sync_type: SyncType

    @classmethod
    def _parse(cls, data: Mapping[str, Any]) -> LyricsInner:
        sync_name = _field(data, "syncType", str)
        try:
            sync_type = SyncType(sync_name)
        except ValueError:
            raise ValueError(f"unknown sync type {sync_name!r}") from None
        return cls(
            fullscreen_action=_field(data, "fullscreenAction", str),
            is_dense_typeface=_field(data, "isDenseTypeface", bool),
            is_rtl_language=_field(data, "isRtlLanguage", bool),
            language=_field(data, "language", str),
            lines=tuple(Line._parse(line) for line in _field(data, "lines", list)),
            provider=_field(data, "provider", str),
            provider_display_name=_field(data, "providerDisplayName", str),
            provider_lyrics_id=_field(data, "providerLyricsId", str),
            sync_lyrics_uri=_field(data, "syncLyricsUri", str),
            sync_type=sync_type,
        )


@dataclass(frozen=True)
class Lyrics:
    colors: Colors
    has_vocal_removal: bool
    lyrics: LyricsInner

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Lyrics:
        """Build lyrics from a decoded JSON object; raise ValueError if malformed."""
        return cls(
            colors=Colors._parse(_field(data, "colors", Mapping)),
            has_vocal_removal=_field(data, "hasVocalRemoval", bool),
            lyrics=LyricsInner._parse(_field(data, "lyrics", Mapping)),
        )

    @classmethod
    def from_json(cls, data: bytes | str) -> Lyrics:
        """Decode a JSON document; raise ValueError if it is not valid lyrics."""
        try:
            decoded = json.loads(data)
        except UnicodeDecodeError as exc:
            raise ValueError(str(exc)) from None
        return cls.from_dict(decoded)