"""Employer social-insurance and housing-fund contribution calculator."""

from .core import get_logger, get_settings

__version__ = "0.1.0"

__all__ = ["get_logger", "get_settings", "__version__"]
