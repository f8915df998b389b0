"""Startup checks run before the search service is built."""

from .config_validator import ConfigValidator, ConfigValidationError

__all__ = ['ConfigValidator', 'ConfigValidationError']
