import pytest

from respot.audio_backend import (
    Sink,
    StdoutSink,
    backend_names,
    find,
    register_backend,
)
from respot.config import AudioFormat
from respot.errors import SinkConnectionRefusedError, SinkNotConnectedError


def test_write_to_file(tmp_path):
    path = tmp_path / "out.raw"
    sink = StdoutSink(str(path))
    sink.start()
    sink.write(b"abc")
    sink.write(b"def")
    sink.stop()
    assert path.read_bytes() == b"abcdef"


def test_file_is_not_truncated(tmp_path):
    path = tmp_path / "out.raw"
    path.write_bytes(b"XXXXXX")
    with StdoutSink(str(path)) as sink:
        sink.write(b"ab")
    assert path.read_bytes() == b"abXXXX"


def test_write_before_start_raises():
    sink = StdoutSink(None)
    with pytest.raises(SinkNotConnectedError) as info:
        sink.write(b"x")
    assert "The Output Stream is None" in str(info.value)


def test_stop_without_start_raises():
    with pytest.raises(SinkNotConnectedError):
        StdoutSink(None).stop()


def test_stop_twice_raises(tmp_path):
    sink = StdoutSink(str(tmp_path / "f"))
    sink.start()
    sink.stop()
    with pytest.raises(SinkNotConnectedError):
        sink.stop()


def test_unopenable_file_refused(tmp_path):
    sink = StdoutSink(str(tmp_path / "missing" / "out.raw"))
    with pytest.raises(SinkConnectionRefusedError) as info:
        sink.start()
    assert "Can Not be Opened and/or Created" in str(info.value)


def test_stdout_output(capsysbinary):
    sink = StdoutSink(None)
    sink.start()
    sink.write(b"\x00\x01\x02")
    sink.stop()
    assert capsysbinary.readouterr().out == b"\x00\x01\x02"


def test_question_mark_prints_usage_and_exits(capsys):
    with pytest.raises(SystemExit) as info:
        StdoutSink("?")
    assert info.value.code == 0
    assert "--backend pipe" in capsys.readouterr().out


def test_format_is_kept():
    assert StdoutSink(None, AudioFormat.F32).format is AudioFormat.F32


def test_default_backend_is_pipe():
    assert backend_names()[0] == "pipe"
    assert find(None) is find("pipe")
    assert "subprocess" in backend_names()


def test_find_pipe_builds_stdout_sink(tmp_path):
    builder = find("pipe")
    sink = builder(str(tmp_path / "x"), AudioFormat.S16)
    assert isinstance(sink, StdoutSink)
    assert sink.file == str(tmp_path / "x")


def test_find_unknown_returns_none():
    assert find("no-such-backend") is None


class _MemorySink(Sink):
    def __init__(self, device, audio_format):
        self.data = bytearray()

    def write(self, data):
        self.data.extend(data)


def test_register_backend_and_find():
    register_backend("test-memory", _MemorySink)
    assert "test-memory" in backend_names()
    sink = find("test-memory")(None, AudioFormat.S16)
    with sink:
        sink.write(b"hi")
    assert bytes(sink.data) == b"hi"


def test_register_backend_replaces_existing():
    register_backend("test-replace", _MemorySink)
    register_backend("test-replace", StdoutSink)
    assert backend_names().count("test-replace") == 1
    assert find("test-replace") is StdoutSink