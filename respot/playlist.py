"""Playlists, their selected content and annotations.

Messages are mappings keyed by protobuf field name; absent keys take the
protobuf default. Enumerations are kept as their wire numbers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping

from .basic import TranscodedPicture, convert_all
from .playlist_attribute import Capabilities, PlaylistAttributes
from .playlist_item import PlaylistDiff, PlaylistItemList
from .restriction import date_from_timestamp_ms

_log = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Timestamps above this are far out of range for milliseconds; some
# playlists (artist mixes, for one) carry microseconds instead.
_MILLISECOND_LIMIT = 9295169800000

_BASE62 = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"


def _to_base62(gid: bytes) -> str:
    if len(gid) != 16:
        raise ValueError(f"playlist id must be 16 bytes, got {len(gid)}")
    number = int.from_bytes(gid, "big")
    digits = []
    for _ in range(22):
        number, rest = divmod(number, 62)
        digits.append(_BASE62[rest])
    return "".join(reversed(digits))


def normalise_timestamp(timestamp: int) -> int:
    """Return a timestamp in milliseconds, scaling down ones given in microseconds."""
    if timestamp > _MILLISECOND_LIMIT:
        _log.warning("timestamp is very large; assuming it's in microseconds")
        return timestamp // 1000
    return timestamp


def _optional_diff(value: Mapping[str, Any] | None) -> PlaylistDiff | None:
    return None if value is None else PlaylistDiff.from_message(value)


@dataclass(frozen=True)
class SelectedListContent:
    revision: bytes = b""
    length: int = 0
    attributes: PlaylistAttributes = field(default_factory=PlaylistAttributes)
    contents: PlaylistItemList = field(default_factory=PlaylistItemList)
    diff: PlaylistDiff | None = None
    sync_result: PlaylistDiff | None = None
    resulting_revisions: tuple[bytes, ...] = ()
    has_multiple_heads: bool = False
    is_up_to_date: bool = False
    nonces: tuple[int, ...] = ()
    timestamp: datetime = _EPOCH
    owner_username: str = ""
    has_abuse_reporting: bool = False
    capabilities: Capabilities = field(default_factory=Capabilities)
    geoblocks: tuple[int, ...] = ()

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> SelectedListContent:
        timestamp = normalise_timestamp(msg.get("timestamp", 0))
        return cls(
            revision=bytes(msg.get("revision", b"")),
            length=msg.get("length", 0),
            attributes=PlaylistAttributes.from_message(msg.get("attributes", {})),
            contents=PlaylistItemList.from_message(msg.get("contents", {})),
            diff=_optional_diff(msg.get("diff")),
            sync_result=_optional_diff(msg.get("sync_result")),
            resulting_revisions=tuple(
                bytes(revision) for revision in msg.get("resulting_revisions", ())
            ),
            has_multiple_heads=msg.get("multiple_heads", False),
            is_up_to_date=msg.get("up_to_date", False),
            nonces=tuple(msg.get("nonces", ())),
            timestamp=date_from_timestamp_ms(timestamp),
            owner_username=msg.get("owner_username", ""),
            has_abuse_reporting=msg.get("abuse_reporting_enabled", False),
            capabilities=Capabilities.from_message(msg.get("capabilities", {})),
            geoblocks=tuple(msg.get("geoblock", ())),
        )


@dataclass(frozen=True)
class Playlist:
    """A playlist, identified by its id together with its owner's name."""

    id: bytes = b""
    owner_username: str = ""
    revision: bytes = b""
    length: int = 0
    attributes: PlaylistAttributes = field(default_factory=PlaylistAttributes)
    contents: PlaylistItemList = field(default_factory=PlaylistItemList)
    diff: PlaylistDiff | None = None
    sync_result: PlaylistDiff | None = None
    resulting_revisions: tuple[bytes, ...] = ()
    has_multiple_heads: bool = False
    is_up_to_date: bool = False
    nonces: tuple[int, ...] = ()
    timestamp: datetime = _EPOCH
    has_abuse_reporting: bool = False
    capabilities: Capabilities = field(default_factory=Capabilities)
    geoblocks: tuple[int, ...] = ()

    @classmethod
    def from_message(cls, msg: Mapping[str, Any], playlist_id: bytes) -> Playlist:
        """Build a playlist; the message lacks the id, so it is passed in."""
        content = SelectedListContent.from_message(msg)
        return cls(
            id=bytes(playlist_id),
            owner_username=content.owner_username,
            revision=content.revision,
            length=content.length,
            attributes=content.attributes,
            contents=content.contents,
            diff=content.diff,
            sync_result=content.sync_result,
            resulting_revisions=content.resulting_revisions,
            has_multiple_heads=content.has_multiple_heads,
            is_up_to_date=content.is_up_to_date,
            nonces=content.nonces,
            timestamp=content.timestamp,
            has_abuse_reporting=content.has_abuse_reporting,
            capabilities=content.capabilities,
            geoblocks=content.geoblocks,
        )

    def tracks(self) -> list[str]:
        """Ids of the items, warning if their count differs from the stated length."""
        tracks = [item.id for item in self.contents.items]
        if len(tracks) != self.length:
            _log.warning(
                "Got %d tracks, but the list should contain %d tracks.",
                len(tracks),
                self.length,
            )
        return tracks

    def name(self) -> str:
        return self.attributes.name


@dataclass(frozen=True)
class PlaylistAnnotation:
    description: str = ""
    picture: str = ""
    transcoded_pictures: tuple[TranscodedPicture, ...] = ()
    has_abuse_reporting: bool = False
    abuse_report_state: int = 0

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> PlaylistAnnotation:
        return cls(
            description=msg.get("description", ""),
            picture=msg.get("picture", ""),
            transcoded_pictures=tuple(
                convert_all(
                    msg.get("transcoded_picture", ()), TranscodedPicture.from_message
                )
            ),
            has_abuse_reporting=msg.get("is_abuse_reporting_enabled", False),
            abuse_report_state=msg.get("abuse_report_state", 0),
        )


def annotation_uri(username: str, playlist_id: bytes) -> str:
    """Address of a user's annotation of a playlist."""
    return (
        f"hm://playlist-annotate/v1/annotation/user/{username}"
        f"/playlist/{_to_base62(bytes(playlist_id))}"
    )