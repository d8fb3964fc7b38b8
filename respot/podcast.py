"""Podcast episodes and shows built from catalogue metadata messages.

Messages are mappings keyed by protobuf field name; absent keys take the
protobuf default. Item ids are the raw gid bytes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping

from .audio_files import AudioFiles
from .basic import (
    ContentRating,
    Copyright,
    Image,
    convert_all,
    images_from_group,
    video_files_from_messages,
)
from .restriction import Availability, Restriction, date_from_message

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _all(msg: Mapping[str, Any], key: str, convert) -> tuple:
    return tuple(convert_all(msg.get(key, ()), convert))


@dataclass(frozen=True)
class Episode:
    id: bytes = b""
    name: str = ""
    duration: int = 0
    audio: AudioFiles = field(default_factory=AudioFiles)
    description: str = ""
    number: int = 0
    publish_time: datetime = _EPOCH
    covers: tuple[Image, ...] = ()
    language: str = ""
    is_explicit: bool = False
    show_name: str = ""
    videos: tuple[bytes, ...] = ()
    video_previews: tuple[bytes, ...] = ()
    audio_previews: AudioFiles = field(default_factory=AudioFiles)
    restrictions: tuple[Restriction, ...] = ()
    freeze_frames: tuple[Image, ...] = ()
    keywords: tuple[str, ...] = ()
    allow_background_playback: bool = False
    availability: tuple[Availability, ...] = ()
    external_url: str = ""
    episode_type: int = 0
    has_music_and_talk: bool = False
    content_rating: tuple[ContentRating, ...] = ()
    is_audiobook_chapter: bool = False

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> Episode:
        return cls(
            id=bytes(msg.get("gid", b"")),
            name=msg.get("name", ""),
            duration=msg.get("duration", 0),
            audio=AudioFiles.from_messages(msg.get("audio", ())),
            description=msg.get("description", ""),
            number=msg.get("number", 0),
            publish_time=date_from_message(msg.get("publish_time", {})),
            covers=tuple(images_from_group(msg.get("cover_image", {}))),
            language=msg.get("language", ""),
            is_explicit=msg.get("explicit", False),
            show_name=msg.get("show", {}).get("name", ""),
            videos=tuple(video_files_from_messages(msg.get("video", ()))),
            video_previews=tuple(video_files_from_messages(msg.get("video_preview", ()))),
            audio_previews=AudioFiles.from_messages(msg.get("audio_preview", ())),
            restrictions=_all(msg, "restriction", Restriction.from_message),
            freeze_frames=tuple(images_from_group(msg.get("freeze_frame", {}))),
            keywords=tuple(msg.get("keyword", ())),
            allow_background_playback=msg.get("allow_background_playback", False),
            availability=_all(msg, "availability", Availability.from_message),
            external_url=msg.get("external_url", ""),
            episode_type=msg.get("type", 0),
            has_music_and_talk=msg.get("music_and_talk", False),
            content_rating=_all(msg, "content_rating", ContentRating.from_message),
            is_audiobook_chapter=msg.get("is_audiobook_chapter", False),
        )


@dataclass(frozen=True)
class Show:
    id: bytes = b""
    name: str = ""
    description: str = ""
    publisher: str = ""
    language: str = ""
    is_explicit: bool = False
    covers: tuple[Image, ...] = ()
    episodes: tuple[bytes, ...] = ()
    copyrights: tuple[Copyright, ...] = ()
    restrictions: tuple[Restriction, ...] = ()
    keywords: tuple[str, ...] = ()
    media_type: int = 0
    consumption_order: int = 0
    availability: tuple[Availability, ...] = ()
    trailer_uri: str = ""
    has_music_and_talk: bool = False
    is_audiobook: bool = False

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> Show:
        return cls(
            id=bytes(msg.get("gid", b"")),
            name=msg.get("name", ""),
            description=msg.get("description", ""),
            publisher=msg.get("publisher", ""),
            language=msg.get("language", ""),
            is_explicit=msg.get("explicit", False),
            covers=tuple(images_from_group(msg.get("cover_image", {}))),
            episodes=tuple(bytes(e.get("gid", b"")) for e in msg.get("episode", ())),
            copyrights=_all(msg, "copyright", Copyright.from_message),
            restrictions=_all(msg, "restriction", Restriction.from_message),
            keywords=tuple(msg.get("keyword", ())),
            media_type=msg.get("media_type", 0),
            consumption_order=msg.get("consumption_order", 0),
            availability=_all(msg, "availability", Availability.from_message),
            trailer_uri=msg.get("trailer_uri", ""),
            has_music_and_talk=msg.get("music_and_talk", False),
            is_audiobook=msg.get("is_audiobook", False),
        )