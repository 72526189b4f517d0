"""Shared fixtures: a fresh session per test, with captured output."""

import io
import time

import pytest

from Engine.job_control import reap
from Engine.shell import Session


@pytest.fixture
def session() -> Session:
    """Return a session whose streams are in-memory buffers."""
    return Session(out=io.StringIO(), err=io.StringIO())


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run the test from inside an empty temporary directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _wait_until_finished(jobs, job, timeout: float = 5.0) -> bool:
    """Sweep the reaper until *job* is finished or *timeout* elapses."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        reap(jobs)
        if not job.running:
            return True
        time.sleep(0.05)
    return False


@pytest.fixture
def wait_finished():
    """Return a helper that polls the reaper until a job finishes."""
    return _wait_until_finished
