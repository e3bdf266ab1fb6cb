"""Configuration module: settings."""

from webservice_commons.config.settings import CommonsSettings

__all__ = ["CommonsSettings"]
