"""Integration-test fixtures for deterministic CLI behavior."""

from __future__ import annotations

import pytest
import requests

from orgbooks.config import ConfigLoader


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear `ORGBOOKS_*` variables so host settings never leak into CLI runs."""

    for name in ConfigLoader._ENV_KEYS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _block_network(monkeypatch: pytest.MonkeyPatch) -> None:
    """Fail loudly on unmocked metadata lookups in integration tests."""

    def _offline_get(*_: object, **__: object) -> None:
        """Raise a transport error in place of a real HTTP call."""

        raise requests.ConnectionError("network access is disabled in tests")

    monkeypatch.setattr("orgbooks.metadata.openlibrary.requests.get", _offline_get)
