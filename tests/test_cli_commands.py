from __future__ import annotations

from pathlib import Path
from typing import Iterator

from loguru import logger
import orjson
import pytest

from book_store.cli import main


@pytest.fixture()
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    monkeypatch.chdir(tmp_path)
    for name in ("BOOK_STORE_DATA_DIR", "BOOK_STORE_LOG_LEVEL", "BOOK_STORE_SQLITE_PATH"):
        monkeypatch.delenv(name, raising=False)
    yield tmp_path
    # setup_logging bound a sink to the captured stderr of this test.
    logger.remove()


def _run_json(capsys: pytest.CaptureFixture[str], *argv: str) -> dict:
    assert main(["--json", "--db", "books.db", *argv]) == 0
    return orjson.loads(capsys.readouterr().out)


def test_cli_crud_round_trip(workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    created = _run_json(
        capsys, "add", "--title", "Dune", "--author", "Herbert", "--summary", "...", "--store-name", "S1"
    )
    assert created["id"] == 1
    assert created["updated_at"] is None
    assert (workdir / "books.db").exists()

    fetched = _run_json(capsys, "get", "--id", "1")
    assert fetched == created

    updated = _run_json(
        capsys, "update", "--id", "1", "--title", "Dune (rev)", "--author", "Herbert", "--store-name", "S1"
    )
    assert updated["title"] == "Dune (rev)"
    assert updated["created_at"] == created["created_at"]
    assert updated["updated_at"] is not None

    deleted = _run_json(capsys, "delete", "--id", "1")
    assert deleted == updated

    assert main(["--db", "books.db", "get", "--id", "1"]) == 1
    assert "a book with id=1 not found" in capsys.readouterr().out


def test_cli_table_output(workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--db", "books.db", "add", "--title", "Emma", "--author", "Austen", "--store-name", "S2"]) == 0

    out = capsys.readouterr().out
    assert "Book Created" in out
    assert "Emma" in out


def test_cli_config_command_does_not_open_storage(workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--db", "books.db", "config"]) == 0

    assert "Effective Config" in capsys.readouterr().out
    assert not (workdir / "books.db").exists()
