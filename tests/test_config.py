from __future__ import annotations

from pathlib import Path
import textwrap

import pytest
from pydantic import ValidationError

from book_store.config.loader import load_config, masked_env_snapshot
from book_store.config.schema import AppConfig, AppConfigRoot, StorageConfig, resolve_paths


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # setenv first so teardown also drops values written by _load_dotenv.
    for name in ("BOOK_STORE_DATA_DIR", "BOOK_STORE_LOG_LEVEL", "BOOK_STORE_SQLITE_PATH"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_defaults() -> None:
    config = AppConfigRoot()

    assert config.app.log_level == "INFO"
    assert config.storage.max_record_size == 1024
    assert config.storage.validate_payload_size is False
    assert config.storage.counter_memory_id == 0
    assert config.storage.books_memory_id == 1
    assert config.storage.sqlite_path is None


def test_resolve_paths_makes_absolute(tmp_path: Path) -> None:
    config = AppConfigRoot()
    config.app.data_dir = Path("data")
    config.storage.sqlite_path = Path("data/books.db")

    resolved = resolve_paths(config, tmp_path)

    assert resolved.app.data_dir == (tmp_path / "data").resolve()
    assert resolved.storage.sqlite_path == (tmp_path / "data/books.db").resolve()


def test_storage_config_validates_memory_ids() -> None:
    with pytest.raises(ValidationError):
        StorageConfig(counter_memory_id=1, books_memory_id=1)

    with pytest.raises(ValidationError):
        StorageConfig(books_memory_id=255)

    with pytest.raises(ValidationError):
        StorageConfig(max_record_size=0)


def test_log_level_is_normalized() -> None:
    assert AppConfig(log_level="debug").log_level == "DEBUG"

    with pytest.raises(ValidationError):
        AppConfig(log_level="loud")


def test_unknown_keys_are_rejected() -> None:
    with pytest.raises(ValidationError):
        AppConfigRoot.model_validate({"storage": {"page_size": 10}})


def test_load_config_merge_order(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    configs_dir = tmp_path / "configs"
    profiles_dir = configs_dir / "profiles"
    profiles_dir.mkdir(parents=True)

    (configs_dir / "default.yaml").write_text(
        textwrap.dedent(
            """
            app:
              data_dir: "./data-default"
              log_level: "INFO"
            storage:
              sqlite_path: "./data-default/books.db"
            """
        ),
        encoding="utf-8",
    )
    (profiles_dir / "dev.yaml").write_text(
        textwrap.dedent(
            """
            app:
              log_level: "DEBUG"
            storage:
              validate_payload_size: true
            """
        ),
        encoding="utf-8",
    )
    custom = tmp_path / "custom.yaml"
    custom.write_text('storage:\n  sqlite_path: "./custom/books.db"\n', encoding="utf-8")

    monkeypatch.chdir(tmp_path)
    config = load_config(config_path=custom, profile="dev", overrides={"app": {"data_dir": "./override"}})

    assert config.app.log_level == "DEBUG"
    assert config.app.data_dir == (tmp_path / "override").resolve()
    assert config.storage.validate_payload_size is True
    assert config.storage.sqlite_path == (tmp_path / "custom/books.db").resolve()


def test_env_overrides_win(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("BOOK_STORE_SQLITE_PATH", "./env/books.db")
    monkeypatch.setenv("BOOK_STORE_LOG_LEVEL", "warning")

    config = load_config(overrides={"storage": {"sqlite_path": "./ignored.db"}})

    assert config.storage.sqlite_path == (tmp_path / "env/books.db").resolve()
    assert config.app.log_level == "WARNING"
    assert masked_env_snapshot()["BOOK_STORE_SQLITE_PATH"] == "./env/books.db"


def test_dotenv_is_loaded_without_overriding_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / ".env").write_text(
        '# local settings\nBOOK_STORE_DATA_DIR="./from-dotenv"\nBOOK_STORE_LOG_LEVEL=ERROR\n',
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("BOOK_STORE_LOG_LEVEL", "DEBUG")

    config = load_config()

    assert config.app.data_dir == (tmp_path / "from-dotenv").resolve()
    assert config.storage.sqlite_path == (tmp_path / "from-dotenv" / "books.db").resolve()
    assert config.app.log_level == "DEBUG"


def test_sqlite_path_defaults_to_data_dir(tmp_path: Path) -> None:
    config = resolve_paths(AppConfigRoot.model_validate({"app": {"data_dir": "store"}}), tmp_path)

    assert config.storage.sqlite_path == (tmp_path / "store" / "books.db").resolve()
