"""Binding between LightAccessory coroutines and the host callback convention.

The host expects one callback per request: callback(error) on failure,
callback(None, value) for a successful read and callback(None) for a
successful write.
"""

from typing import Callable

from core.accessory import LightAccessory
from core.errors import RgbPushError


class HostAdapter:
    """Dispatches host characteristic requests to a LightAccessory."""

    def __init__(self, accessory: LightAccessory):
        self.accessory = accessory
        self._getters = {
            'On': accessory.get_power_state,
            'Hue': accessory.get_hue,
            'Saturation': accessory.get_saturation,
            'Brightness': accessory.get_brightness,
        }
        self._setters = {
            'On': accessory.set_power_state,
            'Hue': accessory.set_hue,
            'Saturation': accessory.set_saturation,
            'Brightness': accessory.set_brightness,
        }

    @property
    def characteristics(self) -> list[str]:
        return list(self._getters)

    def _lookup(self, table: dict, characteristic: str) -> Callable:
        handler = table.get(characteristic)
        if handler is None:
            raise ValueError(f"Unknown characteristic: '{characteristic}'")
        return handler

    async def get(self, characteristic: str, callback: Callable):
        getter = self._lookup(self._getters, characteristic)
        try:
            value = await getter()
        except RgbPushError as e:
            callback(e)
            return
        callback(None, value)

    async def set(self, characteristic: str, value, callback: Callable):
        setter = self._lookup(self._setters, characteristic)
        try:
            await setter(value)
        except RgbPushError as e:
            callback(e)
            return
        callback(None)

    def finish_launching(self):
        """Forward the host's "finished launching" signal to the accessory."""
        self.accessory.did_finish_launching()
