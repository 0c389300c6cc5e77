"""
Configuration management for CardGuard.

Uses Pydantic BaseSettings for type-safe, validated configuration
with support for environment variables and .env files.
"""

from cardguard.config.settings import CardGuardSettings, get_settings

__all__ = [
    "CardGuardSettings",
    "get_settings",
]
