"""Pytest configuration and fixtures."""

from pathlib import Path
from typing import Any

import pytest

from monzo_client import MonzoClient

BASE_URL = "https://api.monzo.test"
CLIENT_ID = "testClientId"
CLIENT_SECRET = "testClientSecret"
ACCESS_TOKEN = "testAccessToken"


@pytest.fixture(autouse=True)
def isolated_config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep config lookups away from the real user config and working dir."""
    config_home = tmp_path / "xdg_config"
    config_home.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.chdir(tmp_path)
    return config_home


@pytest.fixture
def client() -> MonzoClient:
    """Return an authenticated client pointed at the test API."""
    return MonzoClient(
        ACCESS_TOKEN,
        client_id=CLIENT_ID,
        client_secret=CLIENT_SECRET,
        base_url=BASE_URL,
    )


@pytest.fixture
def merchant_payload() -> dict[str, Any]:
    """Return an expanded merchant object."""
    return {
        "address": {
            "address": "98 Southgate Road",
            "city": "London",
            "country": "GB",
            "latitude": 51.54151,
            "longitude": -0.08482400000002599,
            "postcode": "N1 3JD",
            "region": "Greater London",
        },
        "created": "2015-08-22T12:20:18Z",
        "group_id": "grp_00008zIcpbBOaAr7TTP3sv",
        "id": "merch_00008zIcpbAKe8shBxXUtl",
        "logo": "https://pbs.twimg.com/profile_images/527043602623389696/68_SgUWJ.jpeg",
        "emoji": "🍞",
        "name": "The De Beauvoir Deli Co.",
        "category": "eating_out",
    }


@pytest.fixture
def transaction_payload() -> dict[str, Any]:
    """Return a transaction with the merchant as a bare id."""
    return {
        "account_balance": 13013,
        "amount": -510,
        "created": "2015-08-22T12:20:18Z",
        "currency": "GBP",
        "description": "THE DE BEAUVOIR DELI C LONDON        GBR",
        "id": "tx_00008zIcpb1TB4yeIFXMzx",
        "merchant": "merch_00008zIcpbAKe8shBxXUtl",
        "metadata": {},
        "notes": "Salmon sandwich 🍞",
        "is_load": False,
        "settled": True,
        "category": "eating_out",
    }
