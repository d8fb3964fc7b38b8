"""Audio files of a track or episode, keyed by encoding format."""

from __future__ import annotations

import enum
import logging
from typing import Any, Iterable, Mapping

_log = logging.getLogger(__name__)


class AudioFileFormat(enum.IntEnum):
    """Encoding of an audio file as numbered in the metadata messages."""

    OGG_VORBIS_96 = 0
    OGG_VORBIS_160 = 1
    OGG_VORBIS_320 = 2
    MP3_256 = 3
    MP3_320 = 4
    MP3_160 = 5
    MP3_96 = 6
    MP3_160_ENC = 7
    AAC_24 = 8
    AAC_48 = 9
    FLAC_FLAC = 16


_OGG_VORBIS = frozenset(
    {
        AudioFileFormat.OGG_VORBIS_320,
        AudioFileFormat.OGG_VORBIS_160,
        AudioFileFormat.OGG_VORBIS_96,
    }
)

_MP3 = frozenset(
    {
        AudioFileFormat.MP3_320,
        AudioFileFormat.MP3_256,
        AudioFileFormat.MP3_160,
        AudioFileFormat.MP3_96,
        AudioFileFormat.MP3_160_ENC,
    }
)


def _to_format(value: int) -> AudioFileFormat | int:
    try:
        return AudioFileFormat(value)
    except ValueError:
        return value


class AudioFiles(dict):
    """Mapping from file format to file id."""

    @staticmethod
    def is_ogg_vorbis(fmt: AudioFileFormat | int) -> bool:
        return fmt in _OGG_VORBIS

    @staticmethod
    def is_mp3(fmt: AudioFileFormat | int) -> bool:
        return fmt in _MP3

    @staticmethod
    def is_flac(fmt: AudioFileFormat | int) -> bool:
        return fmt == AudioFileFormat.FLAC_FLAC

    @classmethod
    def from_messages(cls, messages: Iterable[Mapping[str, Any]]) -> AudioFiles:
        """Collect file messages; files without a format are skipped."""
        files = cls()
        for message in messages:
            file_id = bytes(message.get("file_id", b""))
            if "format" not in message:
                _log.debug("Ignoring file <%s> with unspecified format", file_id.hex())
                continue
            files[_to_format(message["format"])] = file_id
        return files