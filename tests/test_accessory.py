"""
Tests for LightAccessory characteristic operations.

The HTTP client is replaced by a MagicMock so each test controls the
device response and inspects the URL that would have been requested.
"""

import asyncio
import logging
import threading
import time
from unittest.mock import MagicMock

import pytest
import requests

from core.errors import (
    ConfigurationError,
    HttpStatusError,
    InvalidColorFormat,
    TransportError,
)
from models.types import CachedColorState, Failure, Success, TransportFailure


@pytest.fixture(autouse=True)
def capture_info(caplog):
    caplog.set_level(logging.INFO, logger='core.accessory')


class TestConstruction:
    """Building an accessory from raw configuration."""

    def test_default_cache(self, make_accessory):
        accessory = make_accessory()

        assert accessory.state == CachedColorState(hue=0, saturation=0, brightness=100)
        assert accessory.name == 'Light A'

    def test_invalid_config_fails(self, make_accessory, test_config):
        del test_config['color']

        with pytest.raises(ConfigurationError):
            make_accessory(test_config)


class TestGetPowerState:
    """Test get_power_state()."""

    def test_sends_request_to_status_url(self, make_accessory, http_client):
        http_client.request.return_value = Success('1')

        asyncio.run(make_accessory().get_power_state())

        http_client.request.assert_called_once_with('http://localhost:8080/power/status')

    def test_body_1_is_on(self, make_accessory, http_client, caplog):
        http_client.request.return_value = Success('1')

        assert asyncio.run(make_accessory().get_power_state()) is True
        assert caplog.messages[0] == 'power is currently ON'

    def test_body_0_is_off(self, make_accessory, http_client, caplog):
        http_client.request.return_value = Success('0')

        assert asyncio.run(make_accessory().get_power_state()) is False
        assert caplog.messages[0] == 'power is currently OFF'

    def test_body_regex(self, make_accessory, http_client, test_config):
        test_config['switch']['status'] = {
            'url': 'http://localhost:8080/power/status',
            'bodyRegEx': '"switch": "on"',
        }
        accessory = make_accessory(test_config)

        http_client.request.return_value = Success('{"switch": "on"}')
        assert asyncio.run(accessory.get_power_state()) is True

        http_client.request.return_value = Success('{"switch": "off"}')
        assert asyncio.run(accessory.get_power_state()) is False

    def test_body_regex_none_matches_default(self, make_accessory, http_client, test_config):
        test_config['switch']['status'] = {
            'url': 'http://localhost:8080/power/status',
            'bodyRegEx': None,
        }
        http_client.request.return_value = Success('1')

        assert asyncio.run(make_accessory(test_config).get_power_state()) is True

    def test_http_404(self, make_accessory, http_client, caplog):
        http_client.request.return_value = Failure(404, 'Dummy error')

        with pytest.raises(HttpStatusError) as exc:
            asyncio.run(make_accessory().get_power_state())

        assert str(exc.value) == 'Received HTTP error code 404: "Dummy error"'
        assert exc.value.status_code == 404
        assert caplog.messages[0] == 'get_power_state() returned HTTP error code: 404: "Dummy error"'

    def test_transport_failure(self, make_accessory, http_client):
        error = requests.exceptions.ConnectionError('Connection refused')
        http_client.request.return_value = TransportFailure(error)

        with pytest.raises(TransportError) as exc:
            asyncio.run(make_accessory().get_power_state())

        assert exc.value.__cause__ is error
        assert not isinstance(exc.value, HttpStatusError)

    def test_missing_status_url(self, make_accessory, http_client, test_config):
        test_config['switch']['status'] = {'bodyRegEx': '"switch": "on"'}

        with pytest.raises(ConfigurationError, match='switch.status'):
            asyncio.run(make_accessory(test_config).get_power_state())

        http_client.request.assert_not_called()


class TestSetPowerState:
    """Test set_power_state()."""

    def test_power_on(self, make_accessory, http_client):
        asyncio.run(make_accessory().set_power_state(True))

        http_client.request.assert_called_once_with('http://localhost:8080/power/set/on')

    def test_power_off(self, make_accessory, http_client, caplog):
        asyncio.run(make_accessory().set_power_state(False))

        http_client.request.assert_called_once_with('http://localhost:8080/power/set/off')
        assert caplog.messages[-1] == 'set_power_state() successfully set to OFF'

    def test_http_error(self, make_accessory, http_client):
        http_client.request.return_value = Failure(500, 'Dummy error')

        with pytest.raises(HttpStatusError, match='Received HTTP error code 500: "Dummy error"'):
            asyncio.run(make_accessory().set_power_state(True))


class TestSetBrightness:
    """Test set_brightness() on both the dedicated and the RGB path."""

    def test_dedicated_endpoint(self, make_accessory, http_client, caplog):
        http_client.request.return_value = Success('100')
        accessory = make_accessory()

        assert asyncio.run(accessory.set_brightness(100)) is None

        http_client.request.assert_called_once_with('http://localhost:8080/brightness/set/100')
        assert caplog.messages == [
            'Caching Brightness as 100 ...',
            'set_brightness() successfully set to 100%',
        ]
        assert accessory.state.brightness == 100

    def test_via_rgb(self, make_accessory, http_client, test_config, caplog):
        test_config['color']['brightness'] = True
        accessory = make_accessory(test_config)
        accessory.state.hue = 120
        accessory.state.saturation = 50

        asyncio.run(accessory.set_brightness(100))

        http_client.request.assert_called_once_with('http://localhost:8080/color/set/80ff80')
        assert caplog.messages == [
            'Caching Brightness as 100 ...',
            'Setting brightness via RGB.',
            '_build_rgb_request converting H:120 S:50 B:100 to RGB:80ff80 ...',
            '... _set_rgb() successfully set',
        ]
        assert accessory.state == CachedColorState(hue=120, saturation=50, brightness=100)

    def test_via_rgb_from_default_cache(self, make_accessory, http_client, test_config):
        test_config['color']['brightness'] = True

        asyncio.run(make_accessory(test_config).set_brightness(50))

        http_client.request.assert_called_once_with('http://localhost:8080/color/set/808080')

    def test_http_error_keeps_cached_value(self, make_accessory, http_client, caplog):
        http_client.request.return_value = Failure(500, 'Dummy error')
        accessory = make_accessory()

        with pytest.raises(HttpStatusError) as exc:
            asyncio.run(accessory.set_brightness(100))

        assert str(exc.value) == 'Received HTTP error code 500: "Dummy error"'
        assert caplog.messages == [
            'Caching Brightness as 100 ...',
            'set_brightness() returned HTTP error code: 500: "Dummy error"',
        ]
        assert accessory.state.brightness == 100

    def test_missing_brightness_url(self, make_accessory, http_client, test_config):
        del test_config['brightness']

        with pytest.raises(ConfigurationError, match='brightness.url'):
            asyncio.run(make_accessory(test_config).set_brightness(40))

        http_client.request.assert_not_called()


class TestGetColour:
    """Test get_hue(), get_saturation() and get_brightness()."""

    def test_hue_requests_colour_status(self, make_accessory, http_client):
        http_client.request.return_value = Success('ffffff')

        asyncio.run(make_accessory().get_hue())

        http_client.request.assert_called_once_with('http://localhost:8080/color/status')

    def test_hue_of_white(self, make_accessory, http_client, caplog):
        http_client.request.return_value = Success('ffffff')
        accessory = make_accessory()

        assert asyncio.run(accessory.get_hue()) == 0
        assert caplog.messages[0] == '... hue is currently 0. RGB: ffffff'
        assert accessory.state == CachedColorState(hue=0, saturation=0, brightness=100)

    def test_saturation_of_white(self, make_accessory, http_client, caplog):
        http_client.request.return_value = Success('ffffff')

        assert asyncio.run(make_accessory().get_saturation()) == 0
        assert caplog.messages[0] == '... saturation is currently 0. RGB: ffffff'

    def test_one_read_caches_all_components(self, make_accessory, http_client):
        http_client.request.return_value = Success('00ff00\n')
        accessory = make_accessory()

        assert asyncio.run(accessory.get_hue()) == 120
        assert accessory.state == CachedColorState(hue=120, saturation=100, brightness=100)

    def test_malformed_colour(self, make_accessory, http_client):
        http_client.request.return_value = Success('not-a-colour')
        accessory = make_accessory()

        with pytest.raises(InvalidColorFormat):
            asyncio.run(accessory.get_hue())

        assert accessory.state == CachedColorState()

    def test_colour_http_error(self, make_accessory, http_client):
        http_client.request.return_value = Failure(404, 'Dummy error')

        with pytest.raises(HttpStatusError):
            asyncio.run(make_accessory().get_saturation())

    def test_legacy_url_used_for_reads(self, make_accessory, http_client, test_config):
        del test_config['color']['status']
        http_client.request.return_value = Success('ff0000')

        asyncio.run(make_accessory(test_config).get_hue())

        http_client.request.assert_called_once_with('http://localhost:8080/color/set/')

    def test_missing_colour_status(self, make_accessory, http_client, test_config):
        del test_config['color']['status']
        test_config['color']['url'] = {'url': 'http://localhost:8080/color/set/%s'}

        with pytest.raises(ConfigurationError, match='color.status'):
            asyncio.run(make_accessory(test_config).get_hue())

    def test_brightness_from_dedicated_endpoint(self, make_accessory, http_client):
        http_client.request.return_value = Success('75')
        accessory = make_accessory()

        assert asyncio.run(accessory.get_brightness()) == 75

        http_client.request.assert_called_once_with('http://localhost:8080/brightness/status')
        assert accessory.state.brightness == 75

    def test_malformed_brightness(self, make_accessory, http_client):
        http_client.request.return_value = Success('bright')

        with pytest.raises(InvalidColorFormat):
            asyncio.run(make_accessory().get_brightness())

    @pytest.mark.parametrize('body', ['inf', '-inf', 'nan'])
    def test_non_finite_brightness(self, make_accessory, http_client, body):
        http_client.request.return_value = Success(body)

        with pytest.raises(InvalidColorFormat):
            asyncio.run(make_accessory().get_brightness())

    def test_brightness_from_colour_when_carried_by_rgb(self, make_accessory, http_client, test_config):
        test_config['color']['brightness'] = True
        http_client.request.return_value = Success('808080')

        assert asyncio.run(make_accessory(test_config).get_brightness()) == 50

        http_client.request.assert_called_once_with('http://localhost:8080/color/status')

    def test_brightness_from_colour_without_brightness_section(self, make_accessory, http_client, test_config):
        del test_config['brightness']
        http_client.request.return_value = Success('ff0000')

        assert asyncio.run(make_accessory(test_config).get_brightness()) == 100


class TestSetColour:
    """Test set_hue() and set_saturation()."""

    def test_set_hue_uses_cached_triple(self, make_accessory, http_client, caplog):
        accessory = make_accessory()
        accessory.state = CachedColorState(hue=0, saturation=100, brightness=100)

        asyncio.run(accessory.set_hue(240))

        http_client.request.assert_called_once_with('http://localhost:8080/color/set/0000ff')
        assert caplog.messages[0] == 'Caching Hue as 240 ...'
        assert accessory.state.hue == 240

    def test_set_saturation_uses_cached_triple(self, make_accessory, http_client):
        accessory = make_accessory()
        accessory.state = CachedColorState(hue=240, saturation=100, brightness=100)

        asyncio.run(accessory.set_saturation(0))

        http_client.request.assert_called_once_with('http://localhost:8080/color/set/ffffff')
        assert accessory.state == CachedColorState(hue=240, saturation=0, brightness=100)

    def test_set_hue_http_error(self, make_accessory, http_client):
        http_client.request.return_value = Failure(500, 'Dummy error')

        with pytest.raises(HttpStatusError):
            asyncio.run(make_accessory().set_hue(10))


class TestSerialization:
    """Operations on one accessory never overlap."""

    def test_concurrent_setters_run_one_at_a_time(self, make_accessory, http_client):
        events = []
        guard = threading.Lock()

        def slow_request(url):
            with guard:
                events.append(('start', url))
            time.sleep(0.05)
            with guard:
                events.append(('end', url))
            return Success('')

        http_client.request.side_effect = slow_request
        accessory = make_accessory()

        async def run_both():
            await asyncio.gather(accessory.set_hue(120), accessory.set_saturation(50))

        asyncio.run(run_both())

        assert [kind for kind, _ in events] == ['start', 'end', 'start', 'end']

    def test_contended_accessory_reused_in_new_event_loop(self, make_accessory, http_client):
        def slow_request(url):
            time.sleep(0.01)
            return Success('')

        http_client.request.side_effect = slow_request
        accessory = make_accessory()

        async def run_both():
            await asyncio.gather(accessory.set_hue(120), accessory.set_saturation(50))

        asyncio.run(run_both())
        asyncio.run(run_both())

        assert http_client.request.call_count == 4


class TestNotifications:
    """Push-notification registration and handling."""

    def test_registers_on_finish_launching(self, make_accessory):
        registration = MagicMock()
        accessory = make_accessory(notification_registration=registration)

        accessory.did_finish_launching()

        registration.assert_called_once()
        args = registration.call_args[0]
        assert args[0] == 'notification-id-light-a'
        assert args[-1] == 'notification-password'
        assert args[1] == accessory.handle_notification

    def test_no_registration_available(self, make_accessory):
        make_accessory().did_finish_launching()

    def test_colour_notification_updates_cache(self, make_accessory):
        on_update = MagicMock()
        accessory = make_accessory(on_characteristic_update=on_update)

        accessory.handle_notification({'characteristic': 'Hue', 'value': 200})

        assert accessory.state.hue == 200
        on_update.assert_called_once_with('Hue', 200)

    def test_power_notification_is_forwarded(self, make_accessory):
        on_update = MagicMock()
        accessory = make_accessory(on_characteristic_update=on_update)

        accessory.handle_notification({'characteristic': 'On', 'value': True})

        assert accessory.state == CachedColorState()
        on_update.assert_called_once_with('On', True)

    def test_unknown_notification_is_ignored(self, make_accessory, caplog):
        on_update = MagicMock()
        accessory = make_accessory(on_characteristic_update=on_update)

        accessory.handle_notification({'characteristic': 'ColorTemperature', 'value': 300})

        on_update.assert_not_called()
        assert 'unknown characteristic: ColorTemperature' in caplog.text

    @pytest.mark.parametrize('characteristic, value', [
        ('Hue', None),
        ('Hue', 'red'),
        ('Hue', 361),
        ('Saturation', True),
        ('Saturation', -1),
        ('Brightness', 150),
        ('Brightness', float('nan')),
    ])
    def test_invalid_colour_value_is_ignored(self, make_accessory, http_client, caplog,
                                              characteristic, value):
        on_update = MagicMock()
        accessory = make_accessory(on_characteristic_update=on_update)

        accessory.handle_notification({'characteristic': characteristic, 'value': value})

        assert accessory.state == CachedColorState()
        on_update.assert_not_called()
        assert f'Ignoring notification for {characteristic} with invalid value' in caplog.text

        asyncio.run(accessory.set_saturation(50))
        http_client.request.assert_called_once_with('http://localhost:8080/color/set/ff8080')
