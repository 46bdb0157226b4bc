import pytest

from src.core import wait as wait_module
from tests.fakes import FakeSession


class FakeClock:
    """Virtual time: sleeping advances now, nothing actually waits."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock(monkeypatch):
    fake = FakeClock()
    monkeypatch.setattr(wait_module, "_clock", fake)
    monkeypatch.setattr(wait_module, "_sleep", fake.sleep)
    return fake


@pytest.fixture
def session():
    return FakeSession()
