"""Utility functions for RGB Push control.

This module contains helper functions used across the application:
- get_light: Build a LightAccessory for a configured light name
- similarity_score: Canonical fuzzy string matching algorithm
- find_similar_strings: Find similar strings using fuzzy matching
"""

from pathlib import Path

import click


def get_light(light_name: str, config_path: Path):
    """Build a LightAccessory for the named light.

    Prints an error (with suggestions for close names) and returns None when
    the light is not configured or its configuration is unusable.
    """
    # Import here to avoid circular dependency
    from core.accessory import LightAccessory
    from core.config import accessory_names, find_accessory_config, load_config
    from core.errors import ConfigurationError

    config = load_config(config_path)
    raw = find_accessory_config(config, light_name)
    if raw is None:
        click.echo(f"Error: Light '{light_name}' not found in {config_path}.")
        suggestions = find_similar_strings(light_name, accessory_names(config))
        if suggestions:
            click.echo(click.style("Did you mean one of these?", fg='yellow'))
            for suggestion in suggestions:
                click.echo(click.style(f"  • {suggestion}", fg='green'))
        return None

    try:
        return LightAccessory(raw)
    except ConfigurationError as e:
        click.echo(f"Error: Light '{light_name}' has an invalid configuration: {e}")
        return None


def similarity_score(s1: str, s2: str) -> int:
    """Calculate similarity score between two strings.

    This is the canonical implementation used throughout the application
    for fuzzy matching (command typo suggestions, light name matching).

    Args:
        s1: First string to compare
        s2: Second string to compare

    Returns:
        Similarity score:
        - 100: Exact match (case-insensitive)
        - 80: Prefix match
        - 60: Substring match
        - 0-50: Character sequence match (proportional to matching characters)
        - 0: No match
    """
    s1_lower = s1.lower()
    s2_lower = s2.lower()

    if s1_lower == s2_lower:
        return 100

    if s2_lower.startswith(s1_lower) or s1_lower.startswith(s2_lower):
        return 80

    if s1_lower in s2_lower or s2_lower in s1_lower:
        return 60

    # Character sequence matching
    matches = 0
    j = 0
    for char in s1_lower:
        while j < len(s2_lower):
            if s2_lower[j] == char:
                matches += 1
                j += 1
                break
            j += 1

    if matches > 0:
        score = int((matches / max(len(s1_lower), len(s2_lower))) * 50)
        return score if score > 20 else 0

    return 0


def find_similar_strings(target: str, candidates: list[str], limit: int = 5) -> list[str]:
    """Find similar strings, most similar first.

    Args:
        target: The string to match against
        candidates: List of candidate strings to search
        limit: Maximum number of results to return
    """
    scored = [(candidate, similarity_score(target, candidate)) for candidate in candidates]
    filtered = [(c, s) for c, s in scored if s > 0]
    sorted_matches = sorted(filtered, key=lambda x: x[1], reverse=True)

    return [c for c, s in sorted_matches[:limit]]
