"""Exceptions raised by metadata handling and audio sinks."""

from __future__ import annotations


class MetadataError(Exception):
    """Base class for failures while handling catalogue metadata."""


class EmptyResponseError(MetadataError):
    """The metadata service answered without a payload."""

    def __init__(self) -> None:
        super().__init__("empty response")


class NonPlayableError(MetadataError):
    """The requested item is of a kind that cannot be played."""

    def __init__(self) -> None:
        super().__init__("audio item is non-playable when it should be")


class InvalidDurationError(MetadataError):
    """The item reports a duration that is zero or negative."""

    def __init__(self, duration: int) -> None:
        super().__init__(f"audio item duration can not be: {duration}")
        self.duration = duration


class ExplicitContentFilteredError(MetadataError):
    """The item is explicit and the client is set to filter explicit content."""

    def __init__(self) -> None:
        super().__init__("track is marked as explicit, which client setting forbids")


class SinkError(Exception):
    """Base class for audio sink failures; carries a detail message."""

    kind = "Audio Sink Error"

    def __init__(self, detail: str = "") -> None:
        super().__init__(f"{self.kind}: {detail}")
        self.detail = detail


class SinkNotConnectedError(SinkError):
    """The sink has no open output."""

    kind = "Audio Sink Error Not Connected"


class SinkConnectionRefusedError(SinkError):
    """The sink's output could not be opened."""

    kind = "Audio Sink Error Connection Refused"


class SinkWriteError(SinkError):
    """Writing to, flushing or closing the output failed."""

    kind = "Audio Sink Error On Write"


class SinkInvalidParamsError(SinkError):
    """The sink was configured with unusable parameters."""

    kind = "Audio Sink Error Invalid Parameters"


class SinkStateChangeError(SinkError):
    """The sink could not change between playing and paused."""

    kind = "Audio Sink Error Changing State"