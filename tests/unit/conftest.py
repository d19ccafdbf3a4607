"""
Unit Test Configuration
=======================
Unit tests never touch the network.
"""

import pytest


@pytest.fixture(autouse=True)
def no_network(monkeypatch):
    """Fail loudly if a unit test reaches for a real HTTP client."""
    import httpx

    async def blocked(*args, **kwargs):
        raise RuntimeError("Network access blocked in unit tests")

    monkeypatch.setattr(httpx.AsyncClient, "get", blocked)
    monkeypatch.setattr(httpx.AsyncClient, "post", blocked)
    yield
