"""Playlist contents, edit operations and revision diffs.

Messages are mappings keyed by protobuf field name; absent keys take the
protobuf default. Items are identified by their URI, revisions by raw bytes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping

from .basic import convert_all
from .playlist_attribute import (
    Capabilities,
    PlaylistAttributes,
    PlaylistItemAttributes,
    PlaylistUpdateAttributes,
    PlaylistUpdateItemAttributes,
)
from .restriction import date_from_timestamp_ms

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _all(msg: Mapping[str, Any], key: str, convert) -> tuple:
    return tuple(convert_all(msg.get(key, ()), convert))


@dataclass(frozen=True)
class PlaylistItem:
    id: str = ""
    attributes: PlaylistItemAttributes = field(default_factory=PlaylistItemAttributes)

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> PlaylistItem:
        return cls(
            id=msg.get("uri", ""),
            attributes=PlaylistItemAttributes.from_message(msg.get("attributes", {})),
        )


@dataclass(frozen=True)
class PlaylistMetaItem:
    revision: bytes = b""
    attributes: PlaylistAttributes = field(default_factory=PlaylistAttributes)
    length: int = 0
    timestamp: datetime = _EPOCH
    owner_username: str = ""
    has_abuse_reporting: bool = False
    capabilities: Capabilities = field(default_factory=Capabilities)

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> PlaylistMetaItem:
        return cls(
            revision=bytes(msg.get("revision", b"")),
            attributes=PlaylistAttributes.from_message(msg.get("attributes", {})),
            length=msg.get("length", 0),
            timestamp=date_from_timestamp_ms(msg.get("timestamp", 0)),
            owner_username=msg.get("owner_username", ""),
            has_abuse_reporting=msg.get("abuse_reporting_enabled", False),
            capabilities=Capabilities.from_message(msg.get("capabilities", {})),
        )


@dataclass(frozen=True)
class PlaylistItemList:
    position: int = 0
    is_truncated: bool = False
    items: tuple[PlaylistItem, ...] = ()
    meta_items: tuple[PlaylistMetaItem, ...] = ()

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> PlaylistItemList:
        return cls(
            position=msg.get("pos", 0),
            is_truncated=msg.get("truncated", False),
            items=_all(msg, "items", PlaylistItem.from_message),
            meta_items=_all(msg, "meta_items", PlaylistMetaItem.from_message),
        )


@dataclass(frozen=True)
class PlaylistOperationAdd:
    from_index: int = 0
    items: tuple[PlaylistItem, ...] = ()
    add_last: bool = False
    add_first: bool = False

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> PlaylistOperationAdd:
        return cls(
            from_index=msg.get("from_index", 0),
            items=_all(msg, "items", PlaylistItem.from_message),
            add_last=msg.get("add_last", False),
            add_first=msg.get("add_first", False),
        )


@dataclass(frozen=True)
class PlaylistOperationMove:
    from_index: int = 0
    length: int = 0
    to_index: int = 0

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> PlaylistOperationMove:
        return cls(
            from_index=msg.get("from_index", 0),
            length=msg.get("length", 0),
            to_index=msg.get("to_index", 0),
        )


@dataclass(frozen=True)
class PlaylistOperationRemove:
    from_index: int = 0
    length: int = 0
    items: tuple[PlaylistItem, ...] = ()
    has_items_as_key: bool = False

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> PlaylistOperationRemove:
        return cls(
            from_index=msg.get("from_index", 0),
            length=msg.get("length", 0),
            items=_all(msg, "items", PlaylistItem.from_message),
            has_items_as_key=msg.get("items_as_key", False),
        )


@dataclass(frozen=True)
class PlaylistOperation:
    """One edit; ``kind`` tells which of the parts is meaningful."""

    kind: int = 0
    add: PlaylistOperationAdd = field(default_factory=PlaylistOperationAdd)
    rem: PlaylistOperationRemove = field(default_factory=PlaylistOperationRemove)
    mov: PlaylistOperationMove = field(default_factory=PlaylistOperationMove)
    update_item_attributes: PlaylistUpdateItemAttributes = field(
        default_factory=PlaylistUpdateItemAttributes
    )
    update_list_attributes: PlaylistUpdateAttributes = field(
        default_factory=PlaylistUpdateAttributes
    )

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> PlaylistOperation:
        return cls(
            kind=msg.get("kind", 0),
            add=PlaylistOperationAdd.from_message(msg.get("add", {})),
            rem=PlaylistOperationRemove.from_message(msg.get("rem", {})),
            mov=PlaylistOperationMove.from_message(msg.get("mov", {})),
            update_item_attributes=PlaylistUpdateItemAttributes.from_message(
                msg.get("update_item_attributes", {})
            ),
            update_list_attributes=PlaylistUpdateAttributes.from_message(
                msg.get("update_list_attributes", {})
            ),
        )


@dataclass(frozen=True)
class PlaylistDiff:
    from_revision: bytes = b""
    operations: tuple[PlaylistOperation, ...] = ()
    to_revision: bytes = b""

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> PlaylistDiff:
        return cls(
            from_revision=bytes(msg.get("from_revision") or b""),
            operations=_all(msg, "ops", PlaylistOperation.from_message),
            to_revision=bytes(msg.get("to_revision") or b""),
        )