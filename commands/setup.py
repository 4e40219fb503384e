"""
Setup and help commands for the RGB Push CLI.

Contains custom Click group class for coloured help output and typo suggestions,
plus commands for writing and checking the accessory configuration file.
"""

from dataclasses import dataclass

import click
from core.config import (
    find_accessory_config,
    load_config,
    normalize_config,
    save_config,
)
from core.errors import ConfigurationError
from models.utils import similarity_score


@dataclass(frozen=True)
class CommandSection:
    """Represents a section in the help command."""
    name: str
    icon: str
    commands: list[tuple[str, str]]


class ColouredGroup(click.Group):
    """Custom Group class that adds colour to help output and suggests similar commands."""

    def resolve_command(self, ctx, args):
        """Resolve command with suggestions for typos."""
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as e:
            if 'No such command' in str(e):
                cmd_name = args[0] if args else ''
                suggestions = self._get_suggestions(ctx, cmd_name)

                if suggestions:
                    error_msg = f"Error: No such command '{cmd_name}'.\n\n"
                    error_msg += click.style("Did you mean one of these?\n", fg='yellow')
                    for suggestion in suggestions:
                        error_msg += click.style(f"  • {suggestion}\n", fg='green')
                    raise click.UsageError(error_msg)
            raise

    def _get_suggestions(self, ctx, cmd_name, max_suggestions=3):
        """Get command suggestions based on similarity."""
        if not cmd_name:
            return []

        suggestions = []
        for command in self.list_commands(ctx):
            cmd_obj = self.get_command(ctx, command)
            if cmd_obj and not cmd_obj.hidden:
                score = similarity_score(cmd_name.lower(), command.lower())
                if score > 0:
                    suggestions.append((score, command))

        suggestions.sort(reverse=True, key=lambda x: x[0])
        return [cmd for score, cmd in suggestions[:max_suggestions]]

    def format_usage(self, ctx, formatter):
        """Format the usage line with colour."""
        formatter.write_paragraph()
        formatter.write_text(
            click.style('Usage: ', fg='cyan', bold=True) +
            click.style(f'{ctx.command_path} [OPTIONS] COMMAND [ARGS]...', fg='white')
        )

    def format_commands(self, ctx, formatter):
        """Format commands with colour."""
        commands = []
        for subcommand in self.list_commands(ctx):
            cmd = self.get_command(ctx, subcommand)
            if cmd is None or cmd.hidden:
                continue
            commands.append((subcommand, cmd.get_short_help_str(limit=500)))

        if commands:
            formatter.write_paragraph()
            formatter.write_text(click.style('Commands:', fg='yellow', bold=True))

            max_len = max(max(len(cmd[0]) for cmd in commands), 12)

            with formatter.indentation():
                for subcommand, help_text in commands:
                    formatter.write_text(
                        click.style(subcommand.ljust(max_len), fg='green') + '  ' +
                        click.style(help_text, fg='white', dim=True)
                    )


@click.command(name='help')
def help_command():
    """Display help and common commands."""
    click.secho("\nRGB Push Control - Quick Reference", fg='cyan', bold=True)
    click.echo()

    COMMAND_SECTIONS = [
        CommandSection(
            name="CONFIGURATION",
            icon="📋",
            commands=[
                ("configure <name> --color-url <url>", "Add or replace a light in the config file"),
                ("check", "Validate every configured light"),
                ("check <light>", "Validate one light"),
            ]
        ),
        CommandSection(
            name="CONTROL",
            icon="💡",
            commands=[
                ("status <light>", "Show power, hue, saturation and brightness"),
                ("power <light> [--on/--off]", "Turn light on/off"),
                ("brightness <light> <0-100>", "Set brightness"),
                ("colour <light> [-u HUE] [-s SAT]", "Set hue and/or saturation"),
            ]
        ),
    ]

    for section in COMMAND_SECTIONS:
        click.secho(f"{section.icon} {section.name}", fg='yellow', bold=True)
        for cmd, desc in section.commands:
            click.echo("  ", nl=False)
            click.secho(cmd, fg='green', nl=False)
            click.echo(" " * max(1, 40 - len(cmd)) + "  " + desc)
        click.echo()

    click.secho("📖 For detailed help on any command:", fg='cyan')
    click.echo(f"  rgb-push {click.style('<command> -h', fg='white', bold=True)}")
    click.echo()


@click.command()
@click.argument('name')
@click.option('--color-url', required=True, help="Colour set URL containing '%s' for the hex payload")
@click.option('--color-status', help='Colour status URL')
@click.option('--status', 'switch_status', help='Power status URL')
@click.option('--power-on', help='Power on URL')
@click.option('--power-off', help='Power off URL')
@click.option('--brightness-url', help="Brightness set URL containing '%s'")
@click.option('--brightness-status', help='Brightness status URL')
@click.option('--brightness-via-rgb', is_flag=True, help='Set brightness through the colour URL')
@click.pass_obj
def configure_command(obj, name, color_url, color_status, switch_status, power_on, power_off,
                      brightness_url, brightness_status, brightness_via_rgb):
    """Add a light to the configuration file, replacing one with the same name.

    \b
    Examples:
      rgb-push configure "Desk" --color-url "http://10.0.0.5/color/set/%s" \\
          --color-status http://10.0.0.5/color/status \\
          --status http://10.0.0.5/power/status \\
          --power-on http://10.0.0.5/power/on --power-off http://10.0.0.5/power/off
    """
    entry = {
        'service': 'Light',
        'name': name,
        'switch': {k: v for k, v in {
            'status': switch_status,
            'powerOn': power_on,
            'powerOff': power_off,
        }.items() if v},
        'color': {'url': color_url, 'brightness': brightness_via_rgb},
    }
    if color_status:
        entry['color']['status'] = color_status
    if brightness_url or brightness_status:
        entry['brightness'] = {k: v for k, v in {
            'status': brightness_status,
            'url': brightness_url,
        }.items() if v}

    try:
        normalize_config(entry)
    except ConfigurationError as e:
        click.secho(f"✗ {e}", fg='red')
        raise SystemExit(1)

    config_path = obj['config_path']
    config = load_config(config_path)
    accessories = [a for a in config['accessories']
                   if not (isinstance(a, dict) and a.get('name', '').lower() == name.lower())]
    accessories.append(entry)
    config['accessories'] = accessories
    save_config(config, config_path)

    click.secho(f"✓ Saved '{name}' to {config_path}", fg='green')


@click.command()
@click.argument('light_name', required=False)
@click.pass_obj
def check_command(obj, light_name):
    """Validate the configuration of one or all lights."""
    config_path = obj['config_path']
    config = load_config(config_path)

    if light_name:
        raw = find_accessory_config(config, light_name)
        if raw is None:
            click.echo(f"Error: Light '{light_name}' not found in {config_path}.")
            raise SystemExit(1)
        entries = [raw]
    else:
        entries = config['accessories']

    if not entries:
        click.echo(f"No lights configured in {config_path}.")
        click.echo("Run 'configure' to add one.")
        return

    failures = 0
    for raw in entries:
        name = raw.get('name', 'Unnamed') if isinstance(raw, dict) else 'Unnamed'
        try:
            accessory = normalize_config(raw)
        except ConfigurationError as e:
            failures += 1
            click.secho(f"✗ {name}: {e}", fg='red')
            continue

        mode = 'via RGB' if accessory.color.brightness else 'dedicated endpoint'
        click.secho(f"✓ {name}", fg='green', nl=False)
        click.echo(f"  (brightness {mode})")

    if failures:
        raise SystemExit(1)
