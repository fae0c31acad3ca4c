"""Tests for the debug utility module.

The debug utility is toggled via the HONE_DEBUG environment variable, which
is read once at import time, so each test reloads the module.
"""

import importlib
from collections.abc import Callable, Iterator
from io import StringIO
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from hone.utils import debug as debug_module


@pytest.fixture
def reload_debug(
    monkeypatch: pytest.MonkeyPatch,
) -> Iterator[Callable[[str | None], Any]]:
    """Reload the debug module under a given HONE_DEBUG value."""

    def _reload(value: str | None) -> Any:
        if value is None:
            monkeypatch.delenv("HONE_DEBUG", raising=False)
        else:
            monkeypatch.setenv("HONE_DEBUG", value)
        importlib.reload(debug_module)
        return debug_module.debug

    yield _reload

    monkeypatch.delenv("HONE_DEBUG", raising=False)
    importlib.reload(debug_module)


def _capture(debug: Any, *messages: str) -> str:
    with patch("sys.stdout", new=StringIO()) as fake_stdout:
        for message in messages:
            debug(message)
        return fake_stdout.getvalue()


def test_debug_disabled_by_default(reload_debug: Callable[[str | None], Any]) -> None:
    """Test that debug output is disabled when HONE_DEBUG is not set."""
    debug = reload_debug(None)

    assert _capture(debug, "This should not print") == ""


@pytest.mark.parametrize("value", ["1", "true", "True", "TRUE", "yes", "YES"])
def test_debug_enabled_for_truthy_values(
    reload_debug: Callable[[str | None], Any], value: str
) -> None:
    debug = reload_debug(value)

    output = _capture(debug, f"Testing {value}")

    assert output == f"[DEBUG] Testing {value}\n"


@pytest.mark.parametrize("value", ["0", "false", "no", "off", ""])
def test_debug_disabled_for_falsy_values(
    reload_debug: Callable[[str | None], Any], value: str
) -> None:
    debug = reload_debug(value)

    assert _capture(debug, f"Testing {value}") == ""


def test_debug_multiple_messages(reload_debug: Callable[[str | None], Any]) -> None:
    """Test that each call prints its own prefixed line."""
    debug = reload_debug("1")

    output = _capture(debug, "First", "Second", "")

    assert output.count("[DEBUG]") == 3
    assert "First" in output
    assert "Second" in output


def test_fs_layer_reports_through_debug(
    reload_debug: Callable[[str | None], Any], tmp_path: Path
) -> None:
    """Test that staging and committing a write is visible in debug output."""
    reload_debug("1")
    from hone.fs.atomic import atomic_write_file

    with patch("sys.stdout", new=StringIO()) as fake_stdout:
        atomic_write_file(tmp_path / "notes.md", "hello")
        output = fake_stdout.getvalue()

    assert "[DEBUG] Staged" in output
    assert "[DEBUG] Committed" in output
