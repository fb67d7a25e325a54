import pytest

from tubefeed.domain.errors import NotFound
from tubefeed.domain.result import Err, Ok, capture


def test_capture_wraps_return_value():
    result = capture(lambda: 42)
    assert isinstance(result, Ok)
    assert result.ok is True
    assert result.value == 42


def test_capture_turns_exception_into_err():
    def boom():
        raise NotFound("gone")

    result = capture(boom)
    assert isinstance(result, Err)
    assert result.ok is False
    assert result.kind == "NotFound"
    assert result.message == "gone"


def test_capture_does_not_swallow_cancellation():
    def interrupted():
        raise KeyboardInterrupt()

    with pytest.raises(KeyboardInterrupt):
        capture(interrupted)
