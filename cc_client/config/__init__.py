"""Configuration module for the Cloud Controller client."""
from .settings import AppConfig, build_client, derive_token_url, load_settings

__all__ = ["AppConfig", "build_client", "derive_token_url", "load_settings"]
