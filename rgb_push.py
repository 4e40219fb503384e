#!/usr/bin/env python3
"""
RGB Push Control CLI
Control HTTP-driven RGB lights: power, hue, saturation and brightness.
"""

import logging
from pathlib import Path

import click

from core.config import CONFIG_FILE
from commands.setup import ColouredGroup, help_command, configure_command, check_command
from commands.control import (
    status_command,
    power_command,
    brightness_command,
    colour_command,
)


@click.group(
    cls=ColouredGroup,
    context_settings={
        'help_option_names': ['-h', '--help'],
        'max_content_width': 999
    }
)
@click.version_option(version='0.1.0', prog_name='RGB Push Control')
@click.option('--config', '-c', 'config_path', type=click.Path(dir_okay=False, path_type=Path),
              default=CONFIG_FILE, show_default=True, help='Accessory configuration file')
@click.option('--verbose', '-v', is_flag=True, help='Log device requests')
@click.pass_context
def cli(ctx, config_path: Path, verbose: bool):
    """RGB Push Control CLI - Drive HTTP-controlled RGB lights.

Lights are described in a JSON config file (~/.rgb_push/config.json by default).
Run 'configure' to add a light and 'check' to validate the file.

Use 'help' for a quick reference of all commands.
Use 'COMMAND -h' or 'COMMAND --help' for detailed help on a specific command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    ctx.obj = {'config_path': config_path}


# Register setup and help commands
cli.add_command(help_command)
cli.add_command(configure_command, name='configure')
cli.add_command(check_command, name='check')

# Register control commands
cli.add_command(status_command, name='status')
cli.add_command(power_command, name='power')
cli.add_command(brightness_command, name='brightness')
cli.add_command(colour_command, name='colour')


if __name__ == '__main__':
    cli()
