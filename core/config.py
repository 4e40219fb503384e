"""Configuration loading and normalization.

This module handles:
- Loading/saving the JSON accessory configuration file
- Selecting one accessory by name
- Normalizing raw accessory config (legacy strings or structured objects)
  into canonical endpoint descriptors
"""

import json
import logging
import re
from pathlib import Path

from core.errors import ConfigurationError
from models.types import (
    DEFAULT_POWER_PATTERN,
    AccessoryConfig,
    ColorEndpoint,
    EndpointDescriptor,
)

_LOGGER = logging.getLogger(__name__)

# Configuration file paths
CONFIG_FILE = Path.home() / '.rgb_push' / 'config.json'

DEFAULT_TIMEOUT_MS = 5000
URL_PLACEHOLDER = '%s'


def load_config(path: Path = CONFIG_FILE) -> dict:
    """Load the accessory configuration file.

    The file holds either a single accessory object or
    {"accessories": [...]}. Both are returned in the list form.

    Returns:
        Dict with an 'accessories' list
    """
    path = Path(path)
    if not path.exists():
        return {'accessories': []}

    with open(path, 'r') as f:
        config = json.load(f)

    if isinstance(config, dict) and 'accessories' in config:
        return config
    return {'accessories': [config]}


def save_config(config: dict, path: Path = CONFIG_FILE):
    """Save configuration to file.

    Args:
        config: Configuration dict to save
        path: Destination file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w') as f:
        json.dump(config, f, indent=2)


def accessory_names(config: dict) -> list[str]:
    return [a.get('name', '') for a in config.get('accessories', []) if isinstance(a, dict)]


def find_accessory_config(config: dict, name: str) -> dict | None:
    """Find an accessory entry by name (case-insensitive)."""
    for accessory in config.get('accessories', []):
        if isinstance(accessory, dict) and accessory.get('name', '').lower() == name.lower():
            return accessory
    return None


def _url_of(value) -> str | None:
    """Accept a bare URL string or an {'url': ...} object."""
    if isinstance(value, str):
        return value or None
    if isinstance(value, dict):
        url = value.get('url')
        return url if isinstance(url, str) and url else None
    return None


def _optional_endpoint(value) -> EndpointDescriptor | None:
    url = _url_of(value)
    return EndpointDescriptor(url) if url else None


def _compile_body_pattern(status) -> re.Pattern:
    """Resolve the power-on match rule for switch.status.

    Only an object form carrying a valid bodyRegEx string overrides the
    default rule of "body contains 1".
    """
    if not isinstance(status, dict):
        return DEFAULT_POWER_PATTERN

    body_regex = status.get('bodyRegEx')
    if not isinstance(body_regex, str):
        return DEFAULT_POWER_PATTERN

    try:
        return re.compile(body_regex)
    except re.error as e:
        _LOGGER.warning("Ignoring invalid switch.status.bodyRegEx %r: %s", body_regex, e)
        return DEFAULT_POWER_PATTERN


def _normalize_color(color) -> ColorEndpoint:
    if not isinstance(color, dict):
        raise ConfigurationError('color.url')

    raw_url = color.get('url')
    template = _url_of(raw_url)
    if not template:
        raise ConfigurationError('color.url')
    if template.count(URL_PLACEHOLDER) != 1:
        raise ConfigurationError('color.url', f"must contain exactly one '{URL_PLACEHOLDER}' placeholder")

    get_url = _optional_endpoint(color.get('status'))
    if get_url is None and isinstance(raw_url, str):
        # Legacy single-string config: the same base URL serves reads
        get_url = EndpointDescriptor(template.replace(URL_PLACEHOLDER, ''))

    return ColorEndpoint(
        get_url=get_url,
        set_url=EndpointDescriptor(template),
        brightness=bool(color.get('brightness', False)),
    )


def normalize_config(raw: dict) -> AccessoryConfig:
    """Convert raw accessory configuration into an AccessoryConfig.

    Args:
        raw: Accessory config as provided by the host (parsed JSON)

    Returns:
        AccessoryConfig with every endpoint resolved

    Raises:
        ConfigurationError: if no usable colour set URL can be resolved
    """
    if not isinstance(raw, dict):
        raise ConfigurationError('accessory', 'must be an object')

    switch = raw.get('switch') or {}
    brightness = raw.get('brightness') or {}
    status = switch.get('status')

    timeout_ms = raw.get('timeout', DEFAULT_TIMEOUT_MS)
    if not isinstance(timeout_ms, (int, float)) or timeout_ms <= 0:
        raise ConfigurationError('timeout', 'must be a positive number of milliseconds')

    return AccessoryConfig(
        name=raw.get('name', 'RGB Light'),
        service=raw.get('service', 'Light'),
        power_status=EndpointDescriptor(_url_of(status), body_pattern=_compile_body_pattern(status)),
        power_on=_optional_endpoint(switch.get('powerOn')),
        power_off=_optional_endpoint(switch.get('powerOff')),
        color=_normalize_color(raw.get('color')),
        brightness_status=_optional_endpoint(brightness.get('status')),
        brightness_set=_optional_endpoint(brightness.get('url')),
        notification_id=switch.get('notificationID'),
        notification_password=switch.get('notificationPassword'),
        timeout=timeout_ms / 1000,
    )
