"""
Utilities package for the Realms lookup service.

Exports shared helpers for logging and other cross-cutting concerns.
Keep this package lightweight and free of domain-specific logic.
"""

from realmsapi.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
]
