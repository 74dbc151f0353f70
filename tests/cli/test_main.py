"""Tests for the :mod:`react_boundary.__main__` entrypoint."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

from react_boundary.__main__ import main


def test_main_invokes_cli(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    fixtures_dir: Path,
) -> None:
    target = fixtures_dir / "server.tsx"

    monkeypatch.setenv("REACT_BOUNDARY_LOG_LEVEL", "warning")
    monkeypatch.setattr(sys, "argv", ["react-boundary", "analyze", str(target)])

    configured: dict[str, object] = {}

    def fake_configure_logging(*, level: str, log_file=None, console=None) -> None:
        configured["level"] = level
        configured["log_file"] = log_file

    monkeypatch.setattr(
        "react_boundary.cli.analyze.configure_logging", fake_configure_logging
    )

    with pytest.raises(SystemExit) as exc:
        main()

    assert exc.value.code == 0
    assert configured == {"level": "WARNING", "log_file": None}

    document = json.loads(capsys.readouterr().out)
    assert document["files"][0]["path"] == str(target)
