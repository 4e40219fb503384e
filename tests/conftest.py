"""Pytest configuration and fixtures for RGB Push tests."""

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from core.accessory import LightAccessory
from models.types import Success


@pytest.fixture
def project_root():
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def test_config():
    """Return a complete accessory config using legacy string URLs."""
    return {
        "service": "Light",
        "name": "Light A",
        "switch": {
            "status": "http://localhost:8080/power/status",
            "notificationID": "notification-id-light-a",
            "notificationPassword": "notification-password",
            "powerOn": "http://localhost:8080/power/set/on",
            "powerOff": "http://localhost:8080/power/set/off"
        },
        "color": {
            "status": "http://localhost:8080/color/status",
            "url": "http://localhost:8080/color/set/%s",
            "brightness": False
        },
        "brightness": {
            "status": "http://localhost:8080/brightness/status",
            "url": "http://localhost:8080/brightness/set/%s"
        }
    }


@pytest.fixture
def http_client():
    """Return a stand-in HttpEndpointClient answering 200 with an empty body."""
    client = MagicMock()
    client.request.return_value = Success('')
    return client


@pytest.fixture
def make_accessory(test_config, http_client):
    """Return a factory building a LightAccessory around the mocked client."""
    def factory(config=None, **kwargs):
        return LightAccessory(config or test_config, http_client=http_client, **kwargs)
    return factory


@pytest.fixture
def config_file(tmp_path, test_config):
    """Write a config file holding one light named 'Desk'."""
    desk = dict(test_config, name='Desk')
    path = tmp_path / 'config.json'
    path.write_text(json.dumps({'accessories': [desk]}))
    return path
