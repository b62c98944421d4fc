from __future__ import annotations

import io
import logging

import pytest

from mrmath.core import progress
from mrmath.core.logfmt import (
    DETAIL,
    STATUS,
    VERBOSE,
    MRmathFormatter,
    configure_logging,
    ensure_custom_levels_registered,
    log_banner,
)


@pytest.fixture(autouse=True)
def _reset_state():
    yield
    logging.basicConfig(handlers=[logging.NullHandler()], level=logging.WARNING, force=True)
    progress.set_progress_enabled(None)


def test_custom_levels_registered() -> None:
    ensure_custom_levels_registered()
    assert logging.getLevelName(STATUS) == "STATUS"
    assert logging.getLevelName(DETAIL) == "DETAIL"
    assert logging.getLevelName(VERBOSE) == "VERBOSE"
    assert hasattr(logging.getLogger(), "verbose")


def test_formatter_prefixes() -> None:
    fmt = MRmathFormatter()
    info = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)
    warn = logging.LogRecord("x", logging.WARNING, __file__, 1, "careful", None, None)
    assert fmt.format(info) == "MRmath: hello"
    assert fmt.format(warn) == "MRmath [WARNING]: careful"


def test_configure_logging_quiet_mode() -> None:
    stream = io.StringIO()
    assert configure_logging("quiet", stream=stream) == STATUS
    logging.info("hidden")
    logging.log(STATUS, "shown")
    assert stream.getvalue() == "MRmath [STATUS]: shown\n"
    assert progress.is_progress_enabled() is False


def test_configure_logging_rejects_unknown_mode() -> None:
    with pytest.raises(ValueError):
        configure_logging("loud")


def test_log_banner(caplog) -> None:
    caplog.set_level(logging.INFO)
    log_banner("Quadratic Line Search")
    lines = [r.getMessage() for r in caplog.records]
    assert len(lines) == 3
    assert "Quadratic Line Search" in lines[1]
    assert lines[0] == lines[2]


def test_progress_priority(monkeypatch) -> None:
    monkeypatch.setenv("MRMATH_PROGRESS", "1")
    assert progress.is_progress_enabled() is True
    assert progress.is_progress_enabled(False) is False

    progress.set_progress_enabled(False)
    assert progress.is_progress_enabled() is False

    progress.set_progress_enabled(None)
    monkeypatch.setenv("MRMATH_PROGRESS", "off")
    assert progress.is_progress_enabled() is False


def test_make_progress_bar_respects_disable() -> None:
    with progress.make_progress_bar(total=5, desc="fitting", enabled=False) as bar:
        bar.update(1)
        assert bar.disable is True
        assert bar.total == 5
