from datetime import datetime, timezone

import pytest

from respot.playlist_attribute import Capabilities, PlaylistAttributes
from respot.playlist_item import (
    PlaylistDiff,
    PlaylistItem,
    PlaylistItemList,
    PlaylistMetaItem,
    PlaylistOperation,
    PlaylistOperationAdd,
    PlaylistOperationMove,
    PlaylistOperationRemove,
)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
TRACK_URI = "spotify:track:4uLU6hMCjMI75M1A2tKUQC"


def test_item_from_message():
    item = PlaylistItem.from_message(
        {"uri": TRACK_URI, "attributes": {"added_by": "someone"}}
    )
    assert item.id == TRACK_URI
    assert item.attributes.added_by == "someone"
    assert item.attributes.timestamp == EPOCH


def test_item_bad_timestamp_raises():
    with pytest.raises(ValueError):
        PlaylistItem.from_message({"uri": TRACK_URI, "attributes": {"timestamp": 10**20}})


def test_meta_item_from_message():
    msg = {
        "revision": b"\x00\x01",
        "attributes": {"name": "List"},
        "length": 3,
        "timestamp": 0,
        "owner_username": "owner",
        "abuse_reporting_enabled": True,
        "capabilities": {"can_view": True},
    }
    meta = PlaylistMetaItem.from_message(msg)
    assert meta.revision == b"\x00\x01"
    assert meta.attributes.name == "List"
    assert meta.length == 3
    assert meta.timestamp == EPOCH
    assert meta.owner_username == "owner"
    assert meta.has_abuse_reporting is True
    assert meta.capabilities.can_view is True


def test_meta_item_defaults():
    meta = PlaylistMetaItem.from_message({})
    assert meta.attributes == PlaylistAttributes()
    assert meta.capabilities == Capabilities()
    assert meta.revision == b""


def test_item_list_keeps_order():
    uris = [TRACK_URI, "spotify:episode:abc", "spotify:track:def"]
    msg = {
        "pos": 2,
        "truncated": True,
        "items": [{"uri": uri} for uri in uris],
        "meta_items": [{"length": 1}],
    }
    contents = PlaylistItemList.from_message(msg)
    assert contents.position == 2
    assert contents.is_truncated is True
    assert [item.id for item in contents.items] == uris
    assert len(contents.meta_items) == 1
    assert contents.meta_items[0].length == 1


def test_item_list_empty():
    assert PlaylistItemList.from_message({}) == PlaylistItemList()


def test_operation_add():
    add = PlaylistOperationAdd.from_message(
        {"from_index": 5, "items": [{"uri": TRACK_URI}], "add_last": True}
    )
    assert add.from_index == 5
    assert [item.id for item in add.items] == [TRACK_URI]
    assert add.add_last is True
    assert add.add_first is False


def test_operation_move():
    mov = PlaylistOperationMove.from_message(
        {"from_index": 1, "length": 2, "to_index": 7}
    )
    assert (mov.from_index, mov.length, mov.to_index) == (1, 2, 7)


def test_operation_remove():
    rem = PlaylistOperationRemove.from_message(
        {"from_index": 3, "length": 1, "items": [{"uri": TRACK_URI}], "items_as_key": True}
    )
    assert rem.from_index == 3
    assert rem.length == 1
    assert rem.items[0].id == TRACK_URI
    assert rem.has_items_as_key is True


def test_operation_parts():
    msg = {
        "kind": 4,
        "mov": {"from_index": 0, "length": 1, "to_index": 2},
        "update_list_attributes": {"new_attributes": {"values": {"name": "Renamed"}}},
        "update_item_attributes": {"index": 9},
    }
    op = PlaylistOperation.from_message(msg)
    assert op.kind == 4
    assert op.mov.to_index == 2
    assert op.update_list_attributes.new_attributes.values.name == "Renamed"
    assert op.update_item_attributes.index == 9
    assert op.add == PlaylistOperationAdd()
    assert op.rem == PlaylistOperationRemove()


def test_operation_error_in_nested_item():
    with pytest.raises(ValueError):
        PlaylistOperation.from_message(
            {"add": {"items": [{"uri": TRACK_URI, "attributes": {"seen_at": 10**20}}]}}
        )


def test_diff_from_message():
    msg = {
        "from_revision": b"\x01",
        "ops": [{"kind": 2, "add": {"items": [{"uri": TRACK_URI}]}}, {"kind": 3}],
        "to_revision": b"\x02",
    }
    diff = PlaylistDiff.from_message(msg)
    assert diff.from_revision == b"\x01"
    assert diff.to_revision == b"\x02"
    assert [op.kind for op in diff.operations] == [2, 3]
    assert diff.operations[0].add.items[0].id == TRACK_URI


def test_diff_missing_revisions_are_empty():
    diff = PlaylistDiff.from_message({"from_revision": None})
    assert diff.from_revision == b""
    assert diff.to_revision == b""
    assert diff.operations == ()