from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

import pytest
from loguru import logger

from pish.commands import ChainExecutor
from pish.core import ShellState
from pish.history import CommandHistory
from pish.ui import UIManager

REPO_ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("PISH_HISTORY", str(tmp_path / ".pish_history"))
    monkeypatch.setenv("PISH_CONFIG_DIR", str(tmp_path / ".pish"))
    monkeypatch.setenv("PISH_HIGHLIGHTER", "0")
    logger.remove()


@pytest.fixture
def workdir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    path = tmp_path / "work"
    path.mkdir()
    monkeypatch.chdir(path)
    return path


@pytest.fixture
def executor(workdir: Path) -> ChainExecutor:
    ui = UIManager()
    return ChainExecutor(ShellState(interactive=False), ui, CommandHistory(ui))


@pytest.fixture
def run_pish(tmp_path: Path):
    def _run(*args: str, input: str | None = None, cwd: Path | None = None) -> subprocess.CompletedProcess:
        env = dict(os.environ)
        env["HOME"] = str(tmp_path)
        env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(REPO_ROOT), env.get("PYTHONPATH")]))
        return subprocess.run(
            [sys.executable, "-m", "pish", *args],
            input=input,
            capture_output=True,
            text=True,
            cwd=str(cwd or tmp_path),
            env=env,
            timeout=30,
        )

    return _run
