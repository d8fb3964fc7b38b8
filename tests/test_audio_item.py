from datetime import datetime, timedelta, timezone

import pytest

from respot.audio_item import (
    AudioItem,
    EpisodeFields,
    TrackFields,
    UserData,
    allowed_for_user,
    available,
    available_for_user,
    get_covers,
)
from respot.basic import Image
from respot.catalog import Album, Artist, Track
from respot.errors import ExplicitContentFilteredError, InvalidDurationError
from respot.podcast import Episode
from respot.restriction import Availability, Restriction, UnavailabilityReason

NOW = datetime(2022, 6, 1, tzinfo=timezone.utc)
USER = UserData(country="SE", attributes={})


def _track(**kwargs):
    base = dict(
        id=bytes(16),
        name="Song",
        duration=1000,
        album=Album(
            name="Record",
            artists=(Artist(name="A"), Artist(name="B")),
            covers=(
                Image(id=b"\x01", size=0, width=64, height=64),
                Image(id=b"\x02", size=1, width=640, height=640),
                Image(id=b"", size=2, width=300, height=300),
            ),
        ),
    )
    base.update(kwargs)
    return Track(**base)


def test_track_uri_and_fields():
    item = AudioItem.from_track(_track(), USER, now=NOW)
    assert item.uri == "spotify:track:0000000000000000000000"
    assert item.name == "Song"
    assert item.duration_ms == 1000
    assert isinstance(item.unique_fields, TrackFields)
    assert item.unique_fields.album == "Record"
    assert item.unique_fields.album_artists == ["A", "B"]
    assert item.availability is None
    assert item.alternatives is None


def test_track_alternatives_kept():
    item = AudioItem.from_track(_track(alternatives=(b"x", b"y")), USER, now=NOW)
    assert item.alternatives == (b"x", b"y")


def test_track_clamps_popularity_and_numbers():
    item = AudioItem.from_track(
        _track(popularity=150, number=-3, disc_number=-1), USER, now=NOW
    )
    assert item.unique_fields.popularity == 100
    assert item.unique_fields.number == 0
    assert item.unique_fields.disc_number == 0


@pytest.mark.parametrize("duration", [0, -5])
def test_invalid_duration_raises(duration):
    with pytest.raises(InvalidDurationError) as info:
        AudioItem.from_track(_track(duration=duration), USER, now=NOW)
    assert info.value.duration == duration


def test_explicit_filtered():
    with pytest.raises(ExplicitContentFilteredError):
        AudioItem.from_track(_track(is_explicit=True), USER, filter_explicit=True, now=NOW)
    item = AudioItem.from_track(_track(is_explicit=True), USER, now=NOW)
    assert item.is_explicit is True


def test_track_embargo_by_earliest_live_timestamp():
    track = _track(earliest_live_timestamp=NOW + timedelta(days=1))
    item = AudioItem.from_track(track, USER, now=NOW)
    assert item.availability is UnavailabilityReason.EMBARGO


def test_track_with_wrong_id_length_rejected():
    with pytest.raises(ValueError):
        AudioItem.from_track(_track(id=b"short"), USER, now=NOW)


def test_covers_sorted_and_empty_ids_skipped():
    covers = get_covers(_track().album.covers, "img/{file_id}")
    widths = [c.width for c in covers]
    assert widths == sorted(widths, reverse=True)
    assert [c.url for c in covers] == ["img/" + b"\x02".hex(), "img/" + b"\x01".hex()]


def test_episode_item():
    episode = Episode(
        id=bytes(16),
        name="Ep",
        duration=500,
        language="de",
        description="desc",
        show_name="Show",
    )
    item = AudioItem.from_episode(episode, USER, now=NOW)
    assert item.uri.startswith("spotify:episode:")
    assert item.language == ["de"]
    assert isinstance(item.unique_fields, EpisodeFields)
    assert item.unique_fields.show_name == "Show"
    assert item.alternatives is None


def test_episode_invalid_duration():
    with pytest.raises(InvalidDurationError):
        AudioItem.from_episode(Episode(id=bytes(16), duration=0), USER, now=NOW)


def test_whitelist():
    allowed = Restriction(catalogue_strs=("premium",), countries_allowed=("SE", "DE"))
    other = Restriction(catalogue_strs=("premium",), countries_allowed=("FR",))
    assert allowed_for_user(USER, [allowed]) is None
    assert allowed_for_user(USER, [other]) is UnavailabilityReason.NOT_WHITELISTED


def test_blacklist():
    forbidden = Restriction(catalogue_strs=("premium",), countries_forbidden=("SE",))
    assert allowed_for_user(USER, [forbidden]) is UnavailabilityReason.BLACKLISTED
    fine = Restriction(catalogue_strs=("premium",), countries_forbidden=("FR",))
    assert allowed_for_user(USER, [fine]) is None


def test_restriction_for_other_catalogue_ignored():
    forbidden = Restriction(catalogue_strs=("premium",), countries_forbidden=("SE",))
    free_user = UserData(country="SE", attributes={"catalogue": "free"})
    assert allowed_for_user(free_user, [forbidden]) is None


def test_available_windows():
    assert available([], NOW) is None
    future = Availability(start=NOW + timedelta(days=1))
    past = Availability(start=NOW - timedelta(days=1))
    assert available([future], NOW) is UnavailabilityReason.EMBARGO
    assert available([future, past], NOW) is None


def test_available_for_user_checks_embargo_first():
    future = Availability(start=NOW + timedelta(days=1))
    forbidden = Restriction(catalogue_strs=("premium",), countries_forbidden=("SE",))
    assert available_for_user(USER, [future], [forbidden], NOW) is UnavailabilityReason.EMBARGO
    assert available_for_user(USER, [], [forbidden], NOW) is UnavailabilityReason.BLACKLISTED