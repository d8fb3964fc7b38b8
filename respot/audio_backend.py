"""Audio sinks and the registry of sink backends."""

from __future__ import annotations

import abc
import logging
import os
import sys
from typing import BinaryIO, Callable

from .config import AudioFormat
from .errors import (
    SinkConnectionRefusedError,
    SinkNotConnectedError,
    SinkWriteError,
)

_log = logging.getLogger(__name__)


class Sink(abc.ABC):
    """Destination of encoded sample bytes; usable as a context manager."""

    def start(self) -> None:
        """Open the output; the default does nothing."""

    def stop(self) -> None:
        """Flush and close the output; the default does nothing."""

    @abc.abstractmethod
    def write(self, data: bytes) -> None:
        """Write sample bytes to the output."""

    def __enter__(self) -> Sink:
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()


SinkBuilder = Callable[[str | None, AudioFormat], Sink]

_PIPE_USAGE = (
    "\nUsage:\n\nOutput to stdout:\n\n\t--backend pipe\n\n"
    "Output to file:\n\n\t--backend pipe --device {filename}\n"
)


class StdoutSink(Sink):
    """Writes bytes to standard output, or to a file when one is named."""

    NAME = "pipe"

    def __init__(
        self, file: str | None = None, audio_format: AudioFormat = AudioFormat.S16
    ) -> None:
        if file == "?":
            print(_PIPE_USAGE)
            raise SystemExit(0)
        _log.info("Using StdoutSink (pipe) with format: %s", audio_format.name)
        self.file = file
        self.format = audio_format
        self._output: BinaryIO | None = None

    def start(self) -> None:
        if self._output is not None:
            return
        if self.file is None:
            self._output = sys.stdout.buffer
            return
        try:
            # Opened for writing without truncating, created if missing.
            fd = os.open(self.file, os.O_WRONLY | os.O_CREAT, 0o666)
            self._output = os.fdopen(fd, "wb")
        except OSError as exc:
            raise SinkConnectionRefusedError(
                f"<StdoutSink> File Path {self.file} Can Not be Opened and/or Created, {exc}"
            ) from exc

    def stop(self) -> None:
        output = self._output
        if output is None:
            raise SinkNotConnectedError("<StdoutSink> The Output Stream is None")
        self._output = None
        try:
            output.flush()
        except OSError as exc:
            raise SinkWriteError(
                f"<StdoutSink> Failed to Flush the Output Stream, {exc}"
            ) from exc
        finally:
            if self.file is not None:
                output.close()

    def write(self, data: bytes) -> None:
        if self._output is None:
            raise SinkNotConnectedError("<StdoutSink> The Output Stream is None")
        try:
            self._output.write(data)
        except OSError as exc:
            raise SinkWriteError(f"<StdoutSink> {exc}") from exc


def _subprocess_builder(device: str | None, audio_format: AudioFormat) -> Sink:
    from .subprocess_sink import SubprocessSink

    return SubprocessSink(device, audio_format)


_BACKENDS: list[tuple[str, SinkBuilder]] = [
    (StdoutSink.NAME, StdoutSink),
    ("subprocess", _subprocess_builder),
]


def register_backend(name: str, builder: SinkBuilder) -> None:
    """Add a backend, or replace the builder of one with the same name."""
    for index, (existing, _) in enumerate(_BACKENDS):
        if existing == name:
            _BACKENDS[index] = (name, builder)
            return
    _BACKENDS.append((name, builder))


def backend_names() -> list[str]:
    """Names of the known backends; the default comes first."""
    return [name for name, _ in _BACKENDS]


def find(name: str | None = None) -> SinkBuilder | None:
    """Builder of the named backend, the default one for None, or None if unknown."""
    if name is None:
        return _BACKENDS[0][1] if _BACKENDS else None
    for existing, builder in _BACKENDS:
        if existing == name:
            return builder
    return None