"""Playable audio items: a track or episode checked against the current user."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Mapping

from .audio_files import AudioFiles
from .basic import Image
from .catalog import ArtistWithRole, Track
from .errors import ExplicitContentFilteredError, InvalidDurationError
from .podcast import Episode
from .restriction import Availability, Restriction, UnavailabilityReason

DEFAULT_IMAGE_URL = "https://i.scdn.co/image/{file_id}"

_BASE62 = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"


def _to_uri(kind: str, gid: bytes) -> str:
    if len(gid) != 16:
        raise ValueError(f"item id must be 16 bytes, got {len(gid)}")
    number = int.from_bytes(gid, "big")
    digits = []
    for _ in range(22):
        number, rest = divmod(number, 62)
        digits.append(_BASE62[rest])
    return f"spotify:{kind}:{''.join(reversed(digits))}"


@dataclass(frozen=True)
class UserData:
    country: str = ""
    attributes: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class CoverImage:
    url: str
    size: int
    width: int
    height: int


@dataclass(frozen=True)
class TrackFields:
    artists: tuple[ArtistWithRole, ...]
    album: str
    album_artists: list[str]
    popularity: int
    number: int
    disc_number: int


@dataclass(frozen=True)
class EpisodeFields:
    description: str
    publish_time: datetime
    show_name: str


@dataclass(frozen=True)
class AudioItem:
    """A playable item; ``availability`` is None when the user may play it."""

    track_id: bytes
    uri: str
    files: AudioFiles
    name: str
    covers: list[CoverImage]
    language: list[str]
    duration_ms: int
    is_explicit: bool
    availability: UnavailabilityReason | None
    alternatives: tuple[bytes, ...] | None
    unique_fields: TrackFields | EpisodeFields

    @classmethod
    def from_track(
        cls,
        track: Track,
        user_data: UserData,
        filter_explicit: bool = False,
        image_url: str | None = None,
        now: datetime | None = None,
    ) -> AudioItem:
        """Build an item from a track; raise if it must not be played at all."""
        now = now or datetime.now(timezone.utc)
        if track.duration <= 0:
            raise InvalidDurationError(track.duration)
        if track.is_explicit and filter_explicit:
            raise ExplicitContentFilteredError()

        if now < track.earliest_live_timestamp:
            availability: UnavailabilityReason | None = UnavailabilityReason.EMBARGO
        else:
            availability = available_for_user(
                user_data, track.availability, track.restrictions, now
            )

        unique = TrackFields(
            artists=track.artists_with_role,
            album=track.album.name,
            album_artists=[artist.name for artist in track.album.artists],
            popularity=min(max(track.popularity, 0), 100),
            number=max(track.number, 0),
            disc_number=max(track.disc_number, 0),
        )
        return cls(
            track_id=track.id,
            uri=_to_uri("track", track.id),
            files=track.files,
            name=track.name,
            covers=get_covers(track.album.covers, image_url or DEFAULT_IMAGE_URL),
            language=list(track.language_of_performance),
            duration_ms=track.duration,
            is_explicit=track.is_explicit,
            availability=availability,
            alternatives=track.alternatives or None,
            unique_fields=unique,
        )

    @classmethod
    def from_episode(
        cls,
        episode: Episode,
        user_data: UserData,
        filter_explicit: bool = False,
        image_url: str | None = None,
        now: datetime | None = None,
    ) -> AudioItem:
        """Build an item from an episode; raise if it must not be played at all."""
        now = now or datetime.now(timezone.utc)
        if episode.duration <= 0:
            raise InvalidDurationError(episode.duration)
        if episode.is_explicit and filter_explicit:
            raise ExplicitContentFilteredError()

        unique = EpisodeFields(
            description=episode.description,
            publish_time=episode.publish_time,
            show_name=episode.show_name,
        )
        return cls(
            track_id=episode.id,
            uri=_to_uri("episode", episode.id),
            files=episode.audio,
            name=episode.name,
            covers=get_covers(episode.covers, image_url or DEFAULT_IMAGE_URL),
            language=[episode.language],
            duration_ms=episode.duration,
            is_explicit=episode.is_explicit,
            availability=available_for_user(
                user_data, episode.availability, episode.restrictions, now
            ),
            alternatives=None,
            unique_fields=unique,
        )


def get_covers(covers: Iterable[Image], image_url: str) -> list[CoverImage]:
    """Cover images widest first, with ``{file_id}`` filled into the URL template."""
    result = []
    for cover in sorted(covers, key=lambda image: image.width, reverse=True):
        cover_id = cover.id.hex()
        if not cover_id:
            continue
        result.append(
            CoverImage(
                url=image_url.replace("{file_id}", cover_id),
                size=cover.size,
                width=cover.width,
                height=cover.height,
            )
        )
    return result


def allowed_for_user(
    user_data: UserData, restrictions: Iterable[Restriction]
) -> UnavailabilityReason | None:
    """Check the user's country against restrictions for the user's catalogue."""
    country = user_data.country
    catalogue = user_data.attributes.get("catalogue", "premium")
    for restriction in restrictions:
        if catalogue not in restriction.catalogue_strs:
            continue
        # A restriction carries either a whitelist or a blacklist, never both.
        if restriction.countries_allowed is not None:
            if country in restriction.countries_allowed:
                return None
            return UnavailabilityReason.NOT_WHITELISTED
        if restriction.countries_forbidden is not None:
            if country in restriction.countries_forbidden:
                return UnavailabilityReason.BLACKLISTED
            return None
    return None


def available(
    availabilities: Iterable[Availability], now: datetime | None = None
) -> UnavailabilityReason | None:
    """Embargoed unless some availability window has started; none given means open."""
    availabilities = list(availabilities)
    if not availabilities:
        return None
    now = now or datetime.now(timezone.utc)
    if not any(now >= a.start for a in availabilities):
        return UnavailabilityReason.EMBARGO
    return None


def available_for_user(
    user_data: UserData,
    availabilities: Iterable[Availability],
    restrictions: Iterable[Restriction],
    now: datetime | None = None,
) -> UnavailabilityReason | None:
    """Combine the availability windows and the user's restrictions."""
    return available(availabilities, now) or allowed_for_user(user_data, restrictions)