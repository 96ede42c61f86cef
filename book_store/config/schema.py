from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator

MAX_MEMORY_ID = 254
DEFAULT_DB_NAME = "books.db"


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    data_dir: Path = Field(default=Path("./data"))
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return level


class StorageConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # Defaults to <app.data_dir>/books.db once paths are resolved.
    sqlite_path: Path | None = None
    max_record_size: int = 1024
    validate_payload_size: bool = False
    counter_memory_id: int = 0
    books_memory_id: int = 1

    @field_validator("max_record_size")
    @classmethod
    def _positive_size(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("max_record_size must be positive")
        return value

    @field_validator("counter_memory_id", "books_memory_id")
    @classmethod
    def _memory_id_range(cls, value: int) -> int:
        if not 0 <= value <= MAX_MEMORY_ID:
            raise ValueError(f"memory ids must be in range 0..{MAX_MEMORY_ID}")
        return value

    @model_validator(mode="after")
    def _distinct_regions(self) -> "StorageConfig":
        if self.counter_memory_id == self.books_memory_id:
            raise ValueError("counter_memory_id and books_memory_id must differ")
        return self


class AppConfigRoot(BaseModel):
    model_config = ConfigDict(extra="forbid")

    app: AppConfig = AppConfig()
    storage: StorageConfig = StorageConfig()


def resolve_paths(config: AppConfigRoot, base_dir: Path) -> AppConfigRoot:
    def _resolve(path_value: Path) -> Path:
        return path_value if path_value.is_absolute() else (base_dir / path_value).resolve()

    config.app.data_dir = _resolve(config.app.data_dir)
    if config.storage.sqlite_path is None:
        config.storage.sqlite_path = config.app.data_dir / DEFAULT_DB_NAME
    else:
        config.storage.sqlite_path = _resolve(config.storage.sqlite_path)
    return config
