"""Small metadata records: ratings, copyrights, external ids and images.

Messages are mappings keyed by protobuf field name; absent keys take the
protobuf default.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, TypeVar

T = TypeVar("T")
M = TypeVar("M")


def convert_all(messages: Iterable[M], convert: Callable[[M], T]) -> list[T]:
    """Convert each message of a repeated field, keeping order."""
    return [convert(message) for message in messages]


@dataclass(frozen=True)
class ContentRating:
    country: str
    tags: tuple[str, ...] = ()

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> ContentRating:
        return cls(country=msg.get("country", ""), tags=tuple(msg.get("tag", ())))


@dataclass(frozen=True)
class Copyright:
    copyright_type: int
    text: str

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> Copyright:
        return cls(copyright_type=msg.get("type", 0), text=msg.get("text", ""))


@dataclass(frozen=True)
class ExternalId:
    external_type: str
    id: str  # anything from a URL to an ISRC, EAN or UPC

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> ExternalId:
        return cls(external_type=msg.get("type", ""), id=msg.get("id", ""))


@dataclass(frozen=True)
class Image:
    id: bytes
    size: int
    width: int
    height: int

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> Image:
        return cls(
            id=bytes(msg.get("file_id", b"")),
            size=msg.get("size", 0),
            width=msg.get("width", 0),
            height=msg.get("height", 0),
        )


def images_from_group(group: Mapping[str, Any]) -> list[Image]:
    """Images listed in an image group message."""
    return convert_all(group.get("image", ()), Image.from_message)


@dataclass(frozen=True)
class PictureSize:
    target_name: str
    url: str

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> PictureSize:
        return cls(target_name=msg.get("target_name", ""), url=msg.get("url", ""))


@dataclass(frozen=True)
class TranscodedPicture:
    target_name: str
    uri: str

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> TranscodedPicture:
        return cls(target_name=msg.get("target_name", ""), uri=msg.get("uri", ""))


def video_files_from_messages(messages: Iterable[Mapping[str, Any]]) -> list[bytes]:
    """File ids of video file messages."""
    return [bytes(message.get("file_id", b"")) for message in messages]