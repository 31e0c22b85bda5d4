"""Environment-backed settings."""

from .default import DEFAULT_PREFIX, EnvSettingsLoader, default_env_prefix

__all__ = ["DEFAULT_PREFIX", "EnvSettingsLoader", "default_env_prefix"]
