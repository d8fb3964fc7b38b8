"""Audio sink that pipes sample bytes into the standard input of a command."""

from __future__ import annotations

import logging
import shlex
import subprocess

from .audio_backend import Sink
from .config import AudioFormat
from .errors import (
    SinkConnectionRefusedError,
    SinkError,
    SinkInvalidParamsError,
    SinkNotConnectedError,
    SinkWriteError,
)

_log = logging.getLogger(__name__)

_USAGE = (
    "\nUsage:\n\nOutput to a Subprocess:\n\n"
    "\t--backend subprocess --device {shell_command}\n"
)


class SubprocessSink(Sink):
    """Starts a shell-style command and writes sample bytes to its stdin."""

    NAME = "subprocess"

    def __init__(
        self,
        shell_command: str | None = None,
        audio_format: AudioFormat = AudioFormat.S16,
    ) -> None:
        if shell_command == "?":
            print(_USAGE)
            raise SystemExit(0)
        _log.info("Using SubprocessSink with format: %s", audio_format.name)
        self.shell_command = shell_command
        self.format = audio_format
        self._child: subprocess.Popen | None = None

    def start(self) -> None:
        if self._child is not None:
            return
        command = self.shell_command
        if command is None:
            raise SinkInvalidParamsError("<SubprocessSink> Missing Required Shell Command")
        try:
            args = shlex.split(command)
        except ValueError as exc:
            raise SinkInvalidParamsError(
                f"<SubprocessSink> Failed to Parse Command args for {command}, {exc}"
            ) from exc
        if not args:
            raise SinkInvalidParamsError(
                f"<SubprocessSink> Failed to Parse Command args for {command}, empty command"
            )
        try:
            self._child = subprocess.Popen(args, stdin=subprocess.PIPE, bufsize=0)
        except OSError as exc:
            raise SinkConnectionRefusedError(
                f"<SubprocessSink> Command {command} Can Not be Executed, {exc}"
            ) from exc

    def stop(self) -> None:
        child = self._child
        if child is None:
            raise SinkNotConnectedError("<SubprocessSink> The Subprocess is None")
        self._child = None

        if child.poll() is not None:
            # The process has already exited; nothing left to do.
            if child.stdin is not None:
                try:
                    child.stdin.close()
                except OSError:
                    pass
            return

        stdin = child.stdin
        if stdin is None:
            raise SinkNotConnectedError("<SubprocessSink> The Subprocess's stdin is None")
        try:
            stdin.flush()
        except OSError as exc:
            raise SinkWriteError(
                f"<SubprocessSink> Failed to Flush the Subprocess, {exc}"
            ) from exc
        finally:
            try:
                stdin.close()
            except OSError:
                pass

        try:
            child.kill()
        except OSError as exc:
            raise SinkWriteError(
                f"<SubprocessSink> Failed to Kill the Subprocess, {exc}"
            ) from exc
        try:
            child.wait()
        except OSError as exc:
            raise SinkWriteError(
                f"<SubprocessSink> Failed to Wait for the Subprocess to Exit, {exc}"
            ) from exc

    def write(self, data: bytes) -> None:
        """Write all bytes, restarting the command at most once per call."""
        restarted = False
        view = memoryview(data)
        start = 0
        while start < len(view):
            stdin = self._stdin()
            try:
                written = stdin.write(view[start:])
            except InterruptedError:
                continue
            except OSError as exc:
                restarted = self._try_restart(
                    SinkWriteError(f"<SubprocessSink> {exc}"), restarted
                )
                continue
            if not written:
                restarted = self._try_restart(
                    SinkWriteError(
                        "<SubprocessSink> The Subprocess is no longer able to accept Bytes"
                    ),
                    restarted,
                )
                continue
            start += written

    def _stdin(self):
        if self._child is None:
            raise SinkNotConnectedError("<SubprocessSink> The Subprocess is None")
        if self._child.stdin is None:
            raise SinkNotConnectedError("<SubprocessSink> The Subprocess's stdin is None")
        return self._child.stdin

    def _try_restart(self, error: SinkError, restarted: bool) -> bool:
        """Restart the command once; on any failure raise the original error."""
        if restarted:
            raise error
        try:
            self.stop()
            self.start()
        except SinkError:
            raise error from None
        return True