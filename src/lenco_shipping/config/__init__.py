"""Configuration module - Settings and shared constants."""

from lenco_shipping.config.settings import Settings, settings

__all__ = ["Settings", "settings"]
