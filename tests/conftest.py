from __future__ import annotations

import os

import pytest

from stargate_chain import FakeChainReader, make_stargate_chain


@pytest.fixture
def stargate_chain() -> FakeChainReader:
    return make_stargate_chain()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep real ORYX_* variables, .env files and config files out of tests."""
    for key in list(os.environ):
        if key.startswith("ORYX_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
