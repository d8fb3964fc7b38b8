"""Playback configuration: bitrates, sample formats, normalisation and volume control."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import timedelta
from typing import ClassVar


class Bitrate(enum.Enum):
    """Streaming bitrate in kbit/s."""

    BITRATE_96 = 96
    BITRATE_160 = 160
    BITRATE_320 = 320

    @classmethod
    def parse(cls, text: str) -> Bitrate:
        """Parse "96", "160" or "320"; raise ValueError otherwise."""
        for member in cls:
            if str(member.value) == text:
                return member
        raise ValueError(f"invalid bitrate: {text!r}")

    @classmethod
    def default(cls) -> Bitrate:
        return cls.BITRATE_160


class AudioFormat(enum.Enum):
    """Sample format handed to an audio sink."""

    F64 = "F64"
    F32 = "F32"
    S32 = "S32"
    S24 = "S24"
    S24_3 = "S24_3"
    S16 = "S16"

    @classmethod
    def parse(cls, text: str) -> AudioFormat:
        """Parse a format name, ignoring case; raise ValueError otherwise."""
        try:
            return cls(text.upper())
        except ValueError:
            raise ValueError(f"invalid audio format: {text!r}") from None

    @classmethod
    def default(cls) -> AudioFormat:
        return cls.S16

    def size(self) -> int:
        """Bytes taken by one sample in this format."""
        return _SAMPLE_SIZES[self]


_SAMPLE_SIZES = {
    AudioFormat.F64: 8,
    AudioFormat.F32: 4,
    AudioFormat.S32: 4,
    AudioFormat.S24: 4,  # stored in 32 bits
    AudioFormat.S24_3: 3,
    AudioFormat.S16: 2,
}


class NormalisationType(enum.Enum):
    ALBUM = "album"
    TRACK = "track"
    AUTO = "auto"

    @classmethod
    def parse(cls, text: str) -> NormalisationType:
        """Parse a normalisation type, ignoring case; raise ValueError otherwise."""
        try:
            return cls(text.lower())
        except ValueError:
            raise ValueError(f"invalid normalisation type: {text!r}") from None

    @classmethod
    def default(cls) -> NormalisationType:
        return cls.AUTO


class NormalisationMethod(enum.Enum):
    BASIC = "basic"
    DYNAMIC = "dynamic"

    @classmethod
    def parse(cls, text: str) -> NormalisationMethod:
        """Parse a normalisation method, ignoring case; raise ValueError otherwise."""
        try:
            return cls(text.lower())
        except ValueError:
            raise ValueError(f"invalid normalisation method: {text!r}") from None

    @classmethod
    def default(cls) -> NormalisationMethod:
        return cls.DYNAMIC


@dataclass
class PlayerConfig:
    """Settings for the player; the defaults match the stock configuration."""

    bitrate: Bitrate = Bitrate.BITRATE_160
    gapless: bool = True
    passthrough: bool = False
    normalisation: bool = False
    normalisation_type: NormalisationType = NormalisationType.AUTO
    normalisation_method: NormalisationMethod = NormalisationMethod.DYNAMIC
    normalisation_pregain_db: float = 0.0
    normalisation_threshold_dbfs: float = -2.0
    normalisation_attack: timedelta = field(
        default_factory=lambda: timedelta(milliseconds=5)
    )
    normalisation_release: timedelta = field(
        default_factory=lambda: timedelta(milliseconds=100)
    )
    normalisation_knee_db: float = 5.0
    ditherer: str | None = "triangular"


class VolumeCtrlKind(enum.Enum):
    CUBIC = "cubic"
    FIXED = "fixed"
    LINEAR = "linear"
    LOG = "log"


@dataclass(frozen=True)
class VolumeCtrl:
    """Volume control curve; cubic and log curves carry a range in dB."""

    MAX_VOLUME: ClassVar[int] = 0xFFFF
    DEFAULT_DB_RANGE: ClassVar[float] = 60.0

    kind: VolumeCtrlKind = VolumeCtrlKind.LOG
    db_range: float | None = 60.0

    @classmethod
    def parse(cls, text: str, db_range: float = DEFAULT_DB_RANGE) -> VolumeCtrl:
        """Parse a curve name, ignoring case; raise ValueError otherwise."""
        try:
            kind = VolumeCtrlKind(text.lower())
        except ValueError:
            raise ValueError(f"invalid volume control: {text!r}") from None
        if kind in (VolumeCtrlKind.CUBIC, VolumeCtrlKind.LOG):
            return cls(kind, db_range)
        return cls(kind, None)