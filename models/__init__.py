"""Data models and utility functions.

This package contains:
- color: HSB/RGB/hex conversion
- types: Endpoint descriptors, cached colour state and HTTP outcomes
- utils: Utility functions (get_light, similarity matching)
"""
