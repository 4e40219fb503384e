"""
Control commands for direct manipulation of a configured RGB light.

Includes status, power, brightness and colour control.
"""

import asyncio

import click
from core.errors import RgbPushError
from models.utils import get_light


def _run(operation):
    """Run an accessory coroutine, reporting classified errors."""
    try:
        return asyncio.run(operation)
    except RgbPushError as e:
        click.secho(f"✗ {e}", fg='red')
        raise SystemExit(1)


@click.command()
@click.argument('light_name')
@click.pass_obj
def status_command(obj, light_name: str):
    """Show power, hue, saturation and brightness of a light.

    \b
    Examples:
      rgb-push status "Desk"
    """
    light = get_light(light_name, obj['config_path'])
    if not light:
        raise SystemExit(1)

    async def read_all():
        on = await light.get_power_state()
        hue = await light.get_hue()
        brightness = await light.get_brightness()
        return on, hue, light.state.saturation, brightness

    on, hue, saturation, brightness = _run(read_all())

    power = click.style('ON', fg='green') if on else click.style('OFF', fg='red')
    click.echo(f"{light.name}")
    click.echo(f"  Power:       {power}")
    click.echo(f"  Hue:         {hue}°")
    click.echo(f"  Saturation:  {saturation}%")
    click.echo(f"  Brightness:  {brightness}%")


@click.command()
@click.argument('light_name')
@click.option('--on/--off', default=True, help='Turn light on or off')
@click.pass_obj
def power_command(obj, light_name: str, on: bool):
    """Turn a light ON or OFF.

    \b
    Examples:
      rgb-push power "Desk" --on
      rgb-push power "Desk" --off
    """
    light = get_light(light_name, obj['config_path'])
    if not light:
        raise SystemExit(1)

    _run(light.set_power_state(on))
    status = "ON" if on else "OFF"
    click.echo(f"✓ {light.name} turned {status}")


@click.command()
@click.argument('light_name')
@click.argument('brightness', type=click.IntRange(0, 100))
@click.pass_obj
def brightness_command(obj, light_name: str, brightness: int):
    """Set brightness of a light (0-100).

    When the light carries brightness in its colour value and has a colour
    status endpoint, the current colour is read first so hue and saturation
    are kept.

    \b
    Examples:
      rgb-push brightness "Desk" 80
    """
    light = get_light(light_name, obj['config_path'])
    if not light:
        raise SystemExit(1)

    async def apply():
        if light.config.color.brightness and light.config.color.get_url:
            await light.get_hue()
        await light.set_brightness(brightness)

    _run(apply())
    click.echo(f"✓ {light.name} brightness set to {brightness}%")


@click.command()
@click.argument('light_name')
@click.option('--hue', '-u', type=click.IntRange(0, 360), help='Hue in degrees (0-360)')
@click.option('--sat', '-s', type=click.IntRange(0, 100), help='Saturation (0-100)')
@click.pass_obj
def colour_command(obj, light_name: str, hue: int | None, sat: int | None):
    """Set hue and/or saturation of a light.

    The current colour is read first so unspecified components are kept.

    \b
    Examples:
      rgb-push colour "Desk" -u 240 -s 100
      rgb-push colour "Desk" --sat 40
    """
    if hue is None and sat is None:
        click.echo("Error: Please specify --hue/-u and/or --sat/-s")
        raise SystemExit(1)

    light = get_light(light_name, obj['config_path'])
    if not light:
        raise SystemExit(1)

    async def apply():
        await light.get_hue()
        if hue is not None:
            await light.set_hue(hue)
        if sat is not None:
            await light.set_saturation(sat)

    _run(apply())
    click.echo(f"✓ {light.name} colour set to "
               f"H:{light.state.hue} S:{light.state.saturation} B:{light.state.brightness}")
