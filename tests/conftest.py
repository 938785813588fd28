"""Shared fixtures for ghdispatch tests."""

import io
import os
import subprocess
import sys
import tempfile
from pathlib import Path

import pytest

# Add src to path for imports
repo_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(repo_root / "src"))

os.environ.setdefault("GHDISPATCH_LOG_DIR", tempfile.mkdtemp(prefix="ghdispatch-test-logs-"))
os.environ["NO_COLOR"] = "1"


@pytest.fixture(autouse=True)
def piped_stdin(monkeypatch):
    """Prompts see a non-terminal stdin unless a test says otherwise."""
    monkeypatch.setattr(sys, "stdin", io.StringIO())


@pytest.fixture
def feed_input(monkeypatch):
    """Script answers for builtins.input; exception classes are raised."""

    def _feed(*answers):
        remaining = iter(answers)

        def fake_input(prompt=""):
            try:
                value = next(remaining)
            except StopIteration:
                raise EOFError
            if isinstance(value, type) and issubclass(value, BaseException):
                raise value
            return value

        monkeypatch.setattr("builtins.input", fake_input)

    return _feed


class FakeRun:
    """Stand-in for subprocess.run that records the command line."""

    def __init__(self, stdout="", returncode=0, stderr="", exc=None):
        self.stdout = stdout
        self.returncode = returncode
        self.stderr = stderr
        self.exc = exc
        self.calls = []

    def __call__(self, cmd, **kwargs):
        self.calls.append(list(cmd))
        if self.exc is not None:
            raise self.exc
        return subprocess.CompletedProcess(cmd, self.returncode, self.stdout, self.stderr)


@pytest.fixture
def fake_run(monkeypatch):
    """Patch subprocess.run; call the fixture to configure the result."""
    monkeypatch.delenv("GH_PATH", raising=False)

    def _install(**kwargs):
        runner = FakeRun(**kwargs)
        monkeypatch.setattr(subprocess, "run", runner)
        return runner

    return _install
