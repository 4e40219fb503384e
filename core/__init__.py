"""Core functionality for RGB light control.

This package contains:
- accessory: LightAccessory characteristic operations and HSB cache
- config: Configuration file handling and normalization
- errors: Classified error types
- host: Host callback adapter
- http_client: GET-only device HTTP client
"""
