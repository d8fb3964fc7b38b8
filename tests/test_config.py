from datetime import timedelta

import pytest

from respot.config import (
    AudioFormat,
    Bitrate,
    NormalisationMethod,
    NormalisationType,
    PlayerConfig,
    VolumeCtrl,
    VolumeCtrlKind,
)


@pytest.mark.parametrize(
    "text, expected",
    [("96", Bitrate.BITRATE_96), ("160", Bitrate.BITRATE_160), ("320", Bitrate.BITRATE_320)],
)
def test_bitrate_parse(text, expected):
    assert Bitrate.parse(text) is expected


@pytest.mark.parametrize("text", ["", "128", "096", "320kbps"])
def test_bitrate_parse_rejects(text):
    with pytest.raises(ValueError):
        Bitrate.parse(text)


def test_bitrate_default():
    assert Bitrate.default() is Bitrate.BITRATE_160


@pytest.mark.parametrize("fmt", list(AudioFormat))
def test_audio_format_parse_any_case(fmt):
    assert AudioFormat.parse(fmt.value.lower()) is fmt
    assert AudioFormat.parse(fmt.value) is fmt


def test_audio_format_parse_rejects():
    with pytest.raises(ValueError):
        AudioFormat.parse("S8")


def test_audio_format_sizes():
    assert AudioFormat.S16.size() == 2
    assert AudioFormat.S24_3.size() == 3
    assert AudioFormat.F64.size() == 8
    assert AudioFormat.S24.size() == AudioFormat.S32.size() == AudioFormat.F32.size()


def test_audio_format_default():
    assert AudioFormat.default() is AudioFormat.S16


def test_normalisation_type_parse():
    assert NormalisationType.parse("ALBUM") is NormalisationType.ALBUM
    assert NormalisationType.parse("Track") is NormalisationType.TRACK
    assert NormalisationType.parse("auto") is NormalisationType.AUTO
    with pytest.raises(ValueError):
        NormalisationType.parse("song")


def test_normalisation_method_parse():
    assert NormalisationMethod.parse("Basic") is NormalisationMethod.BASIC
    assert NormalisationMethod.parse("DYNAMIC") is NormalisationMethod.DYNAMIC
    with pytest.raises(ValueError):
        NormalisationMethod.parse("static")


def test_player_config_defaults():
    cfg = PlayerConfig()
    assert cfg.bitrate is Bitrate.default()
    assert cfg.gapless is True
    assert cfg.passthrough is False
    assert cfg.normalisation is False
    assert cfg.normalisation_type is NormalisationType.default()
    assert cfg.normalisation_method is NormalisationMethod.default()
    assert cfg.normalisation_pregain_db == 0.0
    assert cfg.normalisation_threshold_dbfs == -2.0
    assert cfg.normalisation_knee_db == 5.0
    assert cfg.normalisation_attack == timedelta(milliseconds=5)
    assert cfg.normalisation_release == timedelta(milliseconds=100)


def test_volume_ctrl_parse_with_range():
    ctrl = VolumeCtrl.parse("CUBIC", 30.0)
    assert ctrl == VolumeCtrl(VolumeCtrlKind.CUBIC, 30.0)


def test_volume_ctrl_parse_default_range():
    assert VolumeCtrl.parse("log").db_range == VolumeCtrl.DEFAULT_DB_RANGE


@pytest.mark.parametrize("text", ["fixed", "Linear"])
def test_volume_ctrl_without_range(text):
    assert VolumeCtrl.parse(text, 42.0).db_range is None


def test_volume_ctrl_default_is_log():
    ctrl = VolumeCtrl()
    assert ctrl.kind is VolumeCtrlKind.LOG
    assert ctrl.db_range == VolumeCtrl.DEFAULT_DB_RANGE


def test_volume_ctrl_rejects():
    with pytest.raises(ValueError):
        VolumeCtrl.parse("exponential")