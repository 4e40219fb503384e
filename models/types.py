"""Type definitions for the RGB light adapter.

Endpoint descriptors are produced once by core.config.normalize_config() and
never change afterwards. The cached colour state is the only mutable value
and belongs to a single LightAccessory.
"""

import re
from dataclasses import dataclass
from typing import NamedTuple, TypedDict

DEFAULT_POWER_PATTERN = re.compile('1')


class RGB(NamedTuple):
    """An RGB colour with 0-255 channels."""
    r: int
    g: int
    b: int


@dataclass(frozen=True)
class EndpointDescriptor:
    """A single device endpoint.

    body_pattern is only used by status endpoints whose body is matched
    rather than parsed (switch status).
    """
    url: str | None
    method: str = 'GET'
    body_pattern: re.Pattern | None = None

    def matches(self, body: str) -> bool:
        pattern = self.body_pattern or DEFAULT_POWER_PATTERN
        return pattern.search(body) is not None

    def with_value(self, value) -> str:
        """Return the URL with its %s placeholder replaced by value."""
        return self.url.replace('%s', str(value), 1)


@dataclass(frozen=True)
class ColorEndpoint:
    """Resolved colour endpoints.

    set_url.url always holds exactly one %s placeholder for the hex payload.
    """
    get_url: EndpointDescriptor | None
    set_url: EndpointDescriptor
    brightness: bool = False


@dataclass
class CachedColorState:
    """Last known hue (0-360), saturation (0-100) and brightness (0-100)."""
    hue: int = 0
    saturation: int = 0
    brightness: int = 100


@dataclass(frozen=True)
class AccessoryConfig:
    """Canonical accessory configuration."""
    name: str
    service: str
    power_status: EndpointDescriptor
    power_on: EndpointDescriptor | None
    power_off: EndpointDescriptor | None
    color: ColorEndpoint
    brightness_status: EndpointDescriptor | None = None
    brightness_set: EndpointDescriptor | None = None
    notification_id: str | None = None
    notification_password: str | None = None
    timeout: float = 5.0


# HTTP outcomes. The client always returns one of these instead of raising.

@dataclass(frozen=True)
class Success:
    body: str


@dataclass(frozen=True)
class Failure:
    status_code: int
    body: str


@dataclass(frozen=True)
class TransportFailure:
    error: Exception


HttpOutcome = Success | Failure | TransportFailure


class NotificationBody(TypedDict):
    """Push notification payload delivered by the notification server."""
    characteristic: str
    value: bool | int
