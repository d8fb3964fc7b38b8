"""Playlist and playlist item attributes, their partial updates and capabilities.

Messages are mappings keyed by protobuf field name; absent keys take the
protobuf default. Enumerations are kept as their wire numbers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from .basic import PictureSize, convert_all
from .restriction import date_from_timestamp_ms

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def format_attributes_from_messages(
    messages: Iterable[Mapping[str, Any]],
) -> dict[str, str]:
    """Collect key/value format attribute messages; later keys win."""
    return {message.get("key", ""): message.get("value", "") for message in messages}


@dataclass(frozen=True)
class PlaylistAttributes:
    name: str = ""
    description: str = ""
    picture: bytes = b""
    is_collaborative: bool = False
    pl3_version: str = ""
    is_deleted_by_owner: bool = False
    client_id: str = ""
    format: str = ""
    format_attributes: dict[str, str] = field(default_factory=dict)
    picture_sizes: tuple[PictureSize, ...] = ()

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> PlaylistAttributes:
        return cls(
            name=msg.get("name", ""),
            description=msg.get("description", ""),
            picture=bytes(msg.get("picture", b"")),
            is_collaborative=msg.get("collaborative", False),
            pl3_version=msg.get("pl3_version", ""),
            is_deleted_by_owner=msg.get("deleted_by_owner", False),
            client_id=msg.get("client_id", ""),
            format=msg.get("format", ""),
            format_attributes=format_attributes_from_messages(
                msg.get("format_attributes", ())
            ),
            picture_sizes=tuple(
                convert_all(msg.get("picture_size", ()), PictureSize.from_message)
            ),
        )


@dataclass(frozen=True)
class PlaylistItemAttributes:
    added_by: str = ""
    timestamp: datetime = _EPOCH
    seen_at: datetime = _EPOCH
    is_public: bool = False
    format_attributes: dict[str, str] = field(default_factory=dict)
    item_id: bytes = b""

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> PlaylistItemAttributes:
        return cls(
            added_by=msg.get("added_by", ""),
            timestamp=date_from_timestamp_ms(msg.get("timestamp", 0)),
            seen_at=date_from_timestamp_ms(msg.get("seen_at", 0)),
            is_public=msg.get("public", False),
            format_attributes=format_attributes_from_messages(
                msg.get("format_attributes", ())
            ),
            item_id=bytes(msg.get("item_id", b"")),
        )


@dataclass(frozen=True)
class PlaylistPartialAttributes:
    """Attribute values set by an update, and the kinds it cleared."""

    values: PlaylistAttributes = field(default_factory=PlaylistAttributes)
    no_value: tuple[int, ...] = ()

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> PlaylistPartialAttributes:
        return cls(
            values=PlaylistAttributes.from_message(msg.get("values", {})),
            no_value=tuple(msg.get("no_value", ())),
        )


@dataclass(frozen=True)
class PlaylistPartialItemAttributes:
    """Item attribute values set by an update, and the kinds it cleared."""

    values: PlaylistItemAttributes = field(default_factory=PlaylistItemAttributes)
    no_value: tuple[int, ...] = ()

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> PlaylistPartialItemAttributes:
        return cls(
            values=PlaylistItemAttributes.from_message(msg.get("values", {})),
            no_value=tuple(msg.get("no_value", ())),
        )


@dataclass(frozen=True)
class PlaylistUpdateAttributes:
    new_attributes: PlaylistPartialAttributes = field(
        default_factory=PlaylistPartialAttributes
    )
    old_attributes: PlaylistPartialAttributes = field(
        default_factory=PlaylistPartialAttributes
    )

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> PlaylistUpdateAttributes:
        return cls(
            new_attributes=PlaylistPartialAttributes.from_message(
                msg.get("new_attributes", {})
            ),
            old_attributes=PlaylistPartialAttributes.from_message(
                msg.get("old_attributes", {})
            ),
        )


@dataclass(frozen=True)
class PlaylistUpdateItemAttributes:
    index: int = 0
    new_attributes: PlaylistPartialItemAttributes = field(
        default_factory=PlaylistPartialItemAttributes
    )
    old_attributes: PlaylistPartialItemAttributes = field(
        default_factory=PlaylistPartialItemAttributes
    )

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> PlaylistUpdateItemAttributes:
        return cls(
            index=msg.get("index", 0),
            new_attributes=PlaylistPartialItemAttributes.from_message(
                msg.get("new_attributes", {})
            ),
            old_attributes=PlaylistPartialItemAttributes.from_message(
                msg.get("old_attributes", {})
            ),
        )


@dataclass(frozen=True)
class Capabilities:
    """What the current user may do with a playlist."""

    can_view: bool = False
    can_administrate_permissions: bool = False
    grantable_levels: tuple[int, ...] = ()
    can_edit_metadata: bool = False
    can_edit_items: bool = False
    can_cancel_membership: bool = False

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> Capabilities:
        return cls(
            can_view=msg.get("can_view", False),
            can_administrate_permissions=msg.get("can_administrate_permissions", False),
            grantable_levels=tuple(msg.get("grantable_level", ())),
            can_edit_metadata=msg.get("can_edit_metadata", False),
            can_edit_items=msg.get("can_edit_items", False),
            can_cancel_membership=msg.get("can_cancel_membership", False),
        )