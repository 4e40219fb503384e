"""LightAccessory: characteristic operations for an HTTP-controlled RGB light.

The accessory owns the cached HSB state of one light. The device only
accepts RGB, so hue, saturation and (optionally) brightness changes are
re-expressed as a full RGB value built from the cached triple.

Operations on one accessory are serialized with an asyncio.Lock so a
cache read-modify-write never interleaves with another request.
"""

import asyncio
import logging
from typing import Callable

from core.config import normalize_config
from core.errors import (
    ConfigurationError,
    HttpStatusError,
    InvalidColorFormat,
    TransportError,
)
from core.http_client import HttpEndpointClient
from models.color import hsb_to_rgb, rgb_to_hex, rgb_to_hsb
from models.types import (
    AccessoryConfig,
    CachedColorState,
    EndpointDescriptor,
    Failure,
    NotificationBody,
    Success,
)

_LOGGER = logging.getLogger(__name__)

# Host characteristic name -> cached colour field
COLOUR_CHARACTERISTICS = {
    'Hue': 'hue',
    'Saturation': 'saturation',
    'Brightness': 'brightness',
}
CHARACTERISTICS = ('On', *COLOUR_CHARACTERISTICS)
COLOUR_LIMITS = {'Hue': 360, 'Saturation': 100, 'Brightness': 100}


class LightAccessory:
    """Exposes power, hue, saturation and brightness of one RGB light."""

    def __init__(
        self,
        config: AccessoryConfig | dict,
        http_client: HttpEndpointClient | None = None,
        logger: logging.Logger | None = None,
        notification_registration: Callable | None = None,
        on_characteristic_update: Callable[[str, object], None] | None = None,
    ):
        """Initialise LightAccessory.

        Args:
            config: Normalized AccessoryConfig, or raw config dict to normalize
            http_client: Client used for device requests (created from config if omitted)
            logger: Logger for operation messages (module logger if omitted)
            notification_registration: Optional push-notification registration function
            on_characteristic_update: Optional callback for pushed characteristic values

        Raises:
            ConfigurationError: if a raw config cannot be normalized
        """
        if not isinstance(config, AccessoryConfig):
            config = normalize_config(config)

        self.config = config
        self.http = http_client or HttpEndpointClient(timeout=config.timeout)
        self.logger = logger or _LOGGER
        self.state = CachedColorState()
        self._notification_registration = notification_registration
        self._on_characteristic_update = on_characteristic_update
        self._lock: asyncio.Lock | None = None
        self._lock_loop = None

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def lock(self) -> asyncio.Lock:
        """Per-accessory operation lock for the running event loop."""
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    # ===== Request helpers =====

    @staticmethod
    def _require(endpoint: EndpointDescriptor | None, field: str) -> EndpointDescriptor:
        if endpoint is None or not endpoint.url:
            raise ConfigurationError(field, 'is not configured')
        return endpoint

    async def _get(self, url: str, operation: str) -> str:
        """Request url and return the body, raising a classified error otherwise."""
        outcome = await asyncio.to_thread(self.http.request, url)

        if isinstance(outcome, Success):
            return outcome.body
        if isinstance(outcome, Failure):
            self.logger.error('%s() returned HTTP error code: %s: "%s"',
                              operation, outcome.status_code, outcome.body)
            raise HttpStatusError(outcome.status_code, outcome.body)

        self.logger.error('%s() request to %s failed: %s', operation, url, outcome.error)
        raise TransportError(url, outcome.error) from outcome.error

    async def _read_colour(self, operation: str) -> tuple[int, int, int, str]:
        """Read the colour status endpoint and cache all three components."""
        endpoint = self._require(self.config.color.get_url, 'color.status')
        body = await self._get(endpoint.url, operation)

        try:
            hue, saturation, brightness = rgb_to_hsb(body)
        except InvalidColorFormat as e:
            self.logger.error('%s() received malformed colour: %s', operation, e)
            raise

        self.state.hue = hue
        self.state.saturation = saturation
        self.state.brightness = brightness
        return hue, saturation, brightness, body.strip()

    async def _set_rgb(self, operation: str):
        """Send the RGB value built from the cached HSB triple."""
        state = self.state
        rgb = rgb_to_hex(hsb_to_rgb(state.hue, state.saturation, state.brightness))
        self.logger.info('_build_rgb_request converting H:%s S:%s B:%s to RGB:%s ...',
                         state.hue, state.saturation, state.brightness, rgb)

        await self._get(self.config.color.set_url.with_value(rgb), operation)
        self.logger.info('... _set_rgb() successfully set')

    # ===== Power =====

    async def get_power_state(self) -> bool:
        """Return True if the switch status body matches the power-on rule."""
        async with self.lock:
            endpoint = self._require(self.config.power_status, 'switch.status')
            body = await self._get(endpoint.url, 'get_power_state')

        on = endpoint.matches(body)
        self.logger.info('power is currently %s', 'ON' if on else 'OFF')
        return on

    async def set_power_state(self, on: bool):
        async with self.lock:
            if on:
                endpoint = self._require(self.config.power_on, 'switch.powerOn')
            else:
                endpoint = self._require(self.config.power_off, 'switch.powerOff')
            await self._get(endpoint.url, 'set_power_state')

        self.logger.info('set_power_state() successfully set to %s', 'ON' if on else 'OFF')

    # ===== Colour =====

    async def get_hue(self) -> int:
        async with self.lock:
            hue, _, _, rgb = await self._read_colour('get_hue')
        self.logger.info('... hue is currently %s. RGB: %s', hue, rgb)
        return hue

    async def get_saturation(self) -> int:
        async with self.lock:
            _, saturation, _, rgb = await self._read_colour('get_saturation')
        self.logger.info('... saturation is currently %s. RGB: %s', saturation, rgb)
        return saturation

    async def get_brightness(self) -> int:
        """Return the current brightness.

        Reads the dedicated brightness endpoint when brightness is not carried
        by the colour endpoint and a brightness status URL is configured,
        otherwise derives it from the colour status.
        """
        async with self.lock:
            endpoint = self.config.brightness_status
            if self.config.color.brightness or endpoint is None:
                _, _, brightness, rgb = await self._read_colour('get_brightness')
                self.logger.info('... brightness is currently %s. RGB: %s', brightness, rgb)
                return brightness

            body = await self._get(endpoint.url, 'get_brightness')
            try:
                brightness = round(float(body.strip()))
            except (ValueError, OverflowError):
                self.logger.error('get_brightness() received malformed brightness: "%s"', body)
                raise InvalidColorFormat(f"Invalid brightness value: '{body.strip()}'")

            self.state.brightness = brightness

        self.logger.info('... brightness is currently %s', brightness)
        return brightness

    async def set_brightness(self, value: int):
        """Set brightness, via RGB when color.brightness is enabled."""
        async with self.lock:
            self.logger.info('Caching Brightness as %s ...', value)
            self.state.brightness = value

            if self.config.color.brightness:
                self.logger.info('Setting brightness via RGB.')
                await self._set_rgb('set_brightness')
                return

            endpoint = self._require(self.config.brightness_set, 'brightness.url')
            await self._get(endpoint.with_value(value), 'set_brightness')

        self.logger.info('set_brightness() successfully set to %s%%', value)

    async def set_hue(self, value: int):
        async with self.lock:
            self.logger.info('Caching Hue as %s ...', value)
            self.state.hue = value
            await self._set_rgb('set_hue')

    async def set_saturation(self, value: int):
        async with self.lock:
            self.logger.info('Caching Saturation as %s ...', value)
            self.state.saturation = value
            await self._set_rgb('set_saturation')

    # ===== Push notifications =====

    def did_finish_launching(self):
        """Register with the notification server, if one is available."""
        if self._notification_registration is None:
            self.logger.debug('No notification registration available, skipping')
            return

        self._notification_registration(
            self.config.notification_id,
            self.handle_notification,
            self.config.notification_password,
        )

    def handle_notification(self, body: NotificationBody):
        """Apply a pushed characteristic value from the notification server."""
        characteristic = body.get('characteristic')
        value = body.get('value')

        if characteristic not in CHARACTERISTICS:
            self.logger.warning('Ignoring notification for unknown characteristic: %s', characteristic)
            return

        field = COLOUR_CHARACTERISTICS.get(characteristic)
        if field:
            limit = COLOUR_LIMITS[characteristic]
            if (isinstance(value, bool) or not isinstance(value, (int, float))
                    or not 0 <= value <= limit):
                self.logger.warning('Ignoring notification for %s with invalid value: %r',
                                    characteristic, value)
                return
            setattr(self.state, field, value)

        self.logger.info('Received notification: %s = %s', characteristic, value)
        if self._on_characteristic_update:
            self._on_characteristic_update(characteristic, value)
