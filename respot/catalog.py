"""Albums, artists and tracks built from catalogue metadata messages.

Messages are mappings keyed by protobuf field name; absent keys take the
protobuf default. Item ids are the raw gid bytes.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Iterator, Mapping

from .audio_files import AudioFiles
from .basic import (
    ContentRating,
    Copyright,
    ExternalId,
    Image,
    convert_all,
    images_from_group,
)
from .restriction import (
    Availability,
    Restriction,
    SalePeriod,
    date_from_message,
    date_from_timestamp_ms,
)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _gid(msg: Mapping[str, Any], key: str = "gid") -> bytes:
    return bytes(msg.get(key, b""))


def _ids(messages: Iterable[Mapping[str, Any]]) -> tuple[bytes, ...]:
    return tuple(_gid(m) for m in messages)


def _u16(value: int, name: str) -> int:
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"{name} out of range: {value}")
    return value


def _all(msg: Mapping[str, Any], key: str, convert) -> tuple:
    return tuple(convert_all(msg.get(key, ()), convert))


@dataclass(frozen=True)
class Disc:
    number: int = 0
    name: str = ""
    tracks: tuple[bytes, ...] = ()

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> Disc:
        return cls(
            number=msg.get("number", 0),
            name=msg.get("name", ""),
            tracks=_ids(msg.get("track", ())),
        )


@dataclass(frozen=True)
class Album:
    id: bytes = b""
    name: str = ""
    artists: tuple[Artist, ...] = ()
    album_type: int = 0
    label: str = ""
    date: datetime = _EPOCH
    popularity: int = 0
    genres: tuple[str, ...] = ()
    covers: tuple[Image, ...] = ()
    external_ids: tuple[ExternalId, ...] = ()
    discs: tuple[Disc, ...] = ()
    reviews: tuple[str, ...] = ()
    copyrights: tuple[Copyright, ...] = ()
    restrictions: tuple[Restriction, ...] = ()
    related: tuple[bytes, ...] = ()
    sale_periods: tuple[SalePeriod, ...] = ()
    cover_group: tuple[Image, ...] = ()
    original_title: str = ""
    version_title: str = ""
    type_str: str = ""
    availability: tuple[Availability, ...] = ()

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> Album:
        cover_group = tuple(images_from_group(msg.get("cover_group", {})))
        return cls(
            id=_gid(msg),
            name=msg.get("name", ""),
            artists=_all(msg, "artist", Artist.from_message),
            album_type=msg.get("type", 0),
            label=msg.get("label", ""),
            date=date_from_message(msg.get("date", {})),
            popularity=msg.get("popularity", 0),
            genres=tuple(msg.get("genre", ())),
            covers=cover_group,
            external_ids=_all(msg, "external_id", ExternalId.from_message),
            discs=_all(msg, "disc", Disc.from_message),
            reviews=tuple(msg.get("review", ())),
            copyrights=_all(msg, "copyright", Copyright.from_message),
            restrictions=_all(msg, "restriction", Restriction.from_message),
            related=_ids(msg.get("related", ())),
            sale_periods=_all(msg, "sale_period", SalePeriod.from_message),
            cover_group=cover_group,
            original_title=msg.get("original_title", ""),
            version_title=msg.get("version_title", ""),
            type_str=msg.get("type_str", ""),
            availability=_all(msg, "availability", Availability.from_message),
        )

    def tracks(self) -> Iterator[bytes]:
        """Track ids of every disc, in order."""
        for disc in self.discs:
            yield from disc.tracks


@dataclass(frozen=True)
class ArtistWithRole:
    id: bytes = b""
    name: str = ""
    role: int = 0

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> ArtistWithRole:
        return cls(
            id=_gid(msg, "artist_gid"),
            name=msg.get("artist_name", ""),
            role=msg.get("role", 0),
        )


@dataclass(frozen=True)
class TopTracks:
    country: str = ""
    tracks: tuple[bytes, ...] = ()

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> TopTracks:
        return cls(country=msg.get("country", ""), tracks=_ids(msg.get("track", ())))


class CountryTopTracks(tuple):
    """Top tracks per country; an empty country stands for the global list."""

    def for_country(self, country: str) -> tuple[bytes, ...]:
        """Top tracks for a country, falling back to the global list."""
        for top in self:
            if top.country == country:
                return top.tracks
        for top in self:
            if not top.country:
                return top.tracks
        return ()


class AlbumGroups(tuple):
    """Groups of album ids; each group holds variants of one album, newest first."""

    @classmethod
    def from_messages(cls, messages: Iterable[Mapping[str, Any]]) -> AlbumGroups:
        return cls(_ids(group.get("album", ())) for group in messages)

    def current_releases(self) -> Iterator[bytes]:
        """The current variant of every album, skipping empty groups."""
        for group in self:
            if group:
                yield group[0]


@dataclass(frozen=True)
class Biography:
    text: str = ""
    portraits: tuple[Image, ...] = ()
    portrait_group: tuple[tuple[Image, ...], ...] = ()

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> Biography:
        return cls(
            text=msg.get("text", ""),
            portraits=_all(msg, "portrait", Image.from_message),
            portrait_group=tuple(
                tuple(images_from_group(group)) for group in msg.get("portrait_group", ())
            ),
        )


@dataclass(frozen=True)
class Timespan:
    start_year: int
    end_year: int | None = None


@dataclass(frozen=True)
class Decade:
    decade: int


def activity_period_from_message(msg: Mapping[str, Any]) -> Timespan | Decade:
    """A period is either a decade or a timespan with an optional end year."""
    has_decade = "decade" in msg
    has_start = "start_year" in msg
    has_end = "end_year" in msg
    if has_decade and not has_start and not has_end:
        return Decade(_u16(msg["decade"], "decade"))
    if not has_decade and has_start:
        return Timespan(
            start_year=_u16(msg["start_year"], "start_year"),
            end_year=_u16(msg["end_year"], "end_year") if has_end else None,
        )
    raise ValueError("ActivityPeriod is expected to be either a decade or timespan")


@dataclass(frozen=True)
class Artist:
    id: bytes = b""
    name: str = ""
    popularity: int = 0
    top_tracks: CountryTopTracks = field(default_factory=CountryTopTracks)
    albums: AlbumGroups = field(default_factory=AlbumGroups)
    singles: AlbumGroups = field(default_factory=AlbumGroups)
    compilations: AlbumGroups = field(default_factory=AlbumGroups)
    appears_on_albums: AlbumGroups = field(default_factory=AlbumGroups)
    genre: tuple[str, ...] = ()
    external_ids: tuple[ExternalId, ...] = ()
    portraits: tuple[Image, ...] = ()
    biographies: tuple[Biography, ...] = ()
    activity_periods: tuple[Timespan | Decade, ...] = ()
    restrictions: tuple[Restriction, ...] = ()
    related: tuple[Artist, ...] = ()
    is_portrait_album_cover: bool = False
    portrait_group: tuple[Image, ...] = ()
    sales_periods: tuple[SalePeriod, ...] = ()
    availabilities: tuple[Availability, ...] = ()

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> Artist:
        return cls(
            id=_gid(msg),
            name=msg.get("name", ""),
            popularity=msg.get("popularity", 0),
            top_tracks=CountryTopTracks(_all(msg, "top_track", TopTracks.from_message)),
            albums=AlbumGroups.from_messages(msg.get("album_group", ())),
            singles=AlbumGroups.from_messages(msg.get("single_group", ())),
            compilations=AlbumGroups.from_messages(msg.get("compilation_group", ())),
            appears_on_albums=AlbumGroups.from_messages(msg.get("appears_on_group", ())),
            genre=tuple(msg.get("genre", ())),
            external_ids=_all(msg, "external_id", ExternalId.from_message),
            portraits=_all(msg, "portrait", Image.from_message),
            biographies=_all(msg, "biography", Biography.from_message),
            activity_periods=_all(msg, "activity_period", activity_period_from_message),
            restrictions=_all(msg, "restriction", Restriction.from_message),
            related=_all(msg, "related", Artist.from_message),
            is_portrait_album_cover=msg.get("is_portrait_album_cover", False),
            portrait_group=tuple(images_from_group(msg.get("portrait_group", {}))),
            sales_periods=_all(msg, "sale_period", SalePeriod.from_message),
            availabilities=_all(msg, "availability", Availability.from_message),
        )

    def albums_current(self) -> Iterator[bytes]:
        """Albums, each in its current release only."""
        return self.albums.current_releases()

    def singles_current(self) -> Iterator[bytes]:
        """Singles, each in its current release only."""
        return self.singles.current_releases()

    def compilations_current(self) -> Iterator[bytes]:
        """Compilations, each in its current release only."""
        return self.compilations.current_releases()

    def appears_on_albums_current(self) -> Iterator[bytes]:
        """Albums the artist appears on, each in its current release only."""
        return self.appears_on_albums.current_releases()


def _licensor(msg: Mapping[str, Any]) -> uuid.UUID:
    raw = bytes(msg.get("licensor", {}).get("uuid", b""))
    try:
        return uuid.UUID(bytes=raw)
    except ValueError:
        return uuid.UUID(int=0)


@dataclass(frozen=True)
class Track:
    id: bytes = b""
    name: str = ""
    album: Album = field(default_factory=Album)
    artists: tuple[Artist, ...] = ()
    number: int = 0
    disc_number: int = 0
    duration: int = 0
    popularity: int = 0
    is_explicit: bool = False
    external_ids: tuple[ExternalId, ...] = ()
    restrictions: tuple[Restriction, ...] = ()
    files: AudioFiles = field(default_factory=AudioFiles)
    alternatives: tuple[bytes, ...] = ()
    sale_periods: tuple[SalePeriod, ...] = ()
    previews: AudioFiles = field(default_factory=AudioFiles)
    tags: tuple[str, ...] = ()
    earliest_live_timestamp: datetime = _EPOCH
    has_lyrics: bool = False
    availability: tuple[Availability, ...] = ()
    licensor: uuid.UUID = field(default_factory=lambda: uuid.UUID(int=0))
    language_of_performance: tuple[str, ...] = ()
    content_ratings: tuple[ContentRating, ...] = ()
    original_title: str = ""
    version_title: str = ""
    artists_with_role: tuple[ArtistWithRole, ...] = ()

    @classmethod
    def from_message(cls, msg: Mapping[str, Any]) -> Track:
        return cls(
            id=_gid(msg),
            name=msg.get("name", ""),
            album=Album.from_message(msg.get("album", {})),
            artists=_all(msg, "artist", Artist.from_message),
            number=msg.get("number", 0),
            disc_number=msg.get("disc_number", 0),
            duration=msg.get("duration", 0),
            popularity=msg.get("popularity", 0),
            is_explicit=msg.get("explicit", False),
            external_ids=_all(msg, "external_id", ExternalId.from_message),
            restrictions=_all(msg, "restriction", Restriction.from_message),
            files=AudioFiles.from_messages(msg.get("file", ())),
            alternatives=_ids(msg.get("alternative", ())),
            sale_periods=_all(msg, "sale_period", SalePeriod.from_message),
            previews=AudioFiles.from_messages(msg.get("preview", ())),
            tags=tuple(msg.get("tags", ())),
            earliest_live_timestamp=date_from_timestamp_ms(
                msg.get("earliest_live_timestamp", 0)
            ),
            has_lyrics=msg.get("has_lyrics", False),
            availability=_all(msg, "availability", Availability.from_message),
            licensor=_licensor(msg),
            language_of_performance=tuple(msg.get("language_of_performance", ())),
            content_ratings=_all(msg, "content_rating", ContentRating.from_message),
            original_title=msg.get("original_title", ""),
            version_title=msg.get("version_title", ""),
            artists_with_role=_all(msg, "artist_with_role", ArtistWithRole.from_message),
        )