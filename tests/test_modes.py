import pytest

from httprecorder.exceptions import ConfigurationError
from httprecorder.modes import Mode, coerce_mode


def test_exactly_four_modes():
    assert [mode.value for mode in Mode] == ["auto", "replay_only", "record", "passthrough"]


def test_coerce_mode_accepts_members_and_values():
    assert coerce_mode(Mode.RECORD) is Mode.RECORD
    assert coerce_mode("replay_only") is Mode.REPLAY_ONLY
    assert coerce_mode("PASSTHROUGH") is Mode.PASSTHROUGH


@pytest.mark.parametrize("value", ["replay", "", None, 4, 1.0])
def test_coerce_mode_rejects_unknown_values(value):
    with pytest.raises(ConfigurationError):
        coerce_mode(value)
