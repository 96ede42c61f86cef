"""Configuration loading and schema."""

from book_store.config.loader import load_config
from book_store.config.schema import AppConfig, AppConfigRoot, StorageConfig

__all__ = ["AppConfig", "AppConfigRoot", "StorageConfig", "load_config"]
