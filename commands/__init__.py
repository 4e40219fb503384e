"""CLI command modules.

This package contains:
- control: Direct control commands (status, power, brightness, colour)
- setup: Setup and help commands (configure, check, help)
"""
