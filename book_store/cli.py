from __future__ import annotations

import argparse
import asyncio
from pathlib import Path
from typing import Any

import orjson
from rich.console import Console
from rich.panel import Panel
from rich.pretty import Pretty
from rich.table import Table
from loguru import logger

from book_store.books import service as books_service
from book_store.config import load_config
from book_store.config.loader import masked_env_snapshot
from book_store.domain.book import Book, BookPayload
from book_store.domain.errors import NotFoundError, PayloadTooLargeError
from book_store.storage.service import init_storage_service, shutdown_storage_service
from book_store.storage.types import U64_MAX
from book_store.utils.logging import setup_logging

console = Console()


def _book_id(value: str) -> int:
    try:
        book_id = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid book id: {value!r}") from exc
    if not 0 <= book_id <= U64_MAX:
        raise argparse.ArgumentTypeError(f"book id must be an unsigned 64-bit integer: {value}")
    return book_id


def _add_payload_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--title", type=str, required=True, help="Book title")
    parser.add_argument("--author", type=str, required=True, help="Book author")
    parser.add_argument("--summary", type=str, default="", help="Short summary")
    parser.add_argument("--store-name", type=str, required=True, help="Store the book is listed in")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="book-store")
    parser.add_argument("--config", type=Path, default=None, help="Path to custom config YAML")
    parser.add_argument("--profile", type=str, default=None, help="Config profile name")
    parser.add_argument("--data-dir", type=Path, default=None, help="Override data directory")
    parser.add_argument("--db", type=Path, default=None, help="Override SQLite database path")
    parser.add_argument("--json", action="store_true", help="Print books as JSON instead of a table")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("config", help="Validate and print effective config")

    get_parser = subparsers.add_parser("get", help="Read one book")
    get_parser.add_argument("--id", dest="book_id", type=_book_id, required=True, help="Book id")

    add_parser = subparsers.add_parser("add", help="Create a book")
    _add_payload_args(add_parser)

    update_parser = subparsers.add_parser("update", help="Overwrite the fields of a book")
    update_parser.add_argument("--id", dest="book_id", type=_book_id, required=True, help="Book id")
    _add_payload_args(update_parser)

    delete_parser = subparsers.add_parser("delete", help="Delete a book")
    delete_parser.add_argument("--id", dest="book_id", type=_book_id, required=True, help="Book id")

    return parser


def _build_overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.data_dir:
        overrides["app"] = {"data_dir": str(args.data_dir)}
    if args.db:
        overrides["storage"] = {"sqlite_path": str(args.db)}
    return overrides


def _payload_from_args(args: argparse.Namespace) -> BookPayload:
    return BookPayload(
        title=args.title,
        author=args.author,
        summary=args.summary,
        store_name=args.store_name,
    )


def _print_config(config) -> None:
    console.print(Panel(Pretty(config.model_dump(mode="json")), title="Effective Config"))
    console.print(Panel(Pretty(masked_env_snapshot()), title="Env Snapshot"))


def _print_book(book: Book, title: str, as_json: bool) -> None:
    if as_json:
        console.out(orjson.dumps(book, option=orjson.OPT_INDENT_2).decode("utf-8"), highlight=False)
        return
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("ID", str(book.id))
    table.add_row("Title", book.title)
    table.add_row("Author", book.author)
    table.add_row("Summary", book.summary)
    table.add_row("Store", book.store_name)
    table.add_row("Created at (ns)", str(book.created_at))
    table.add_row("Updated at (ns)", "-" if book.updated_at is None else str(book.updated_at))
    console.print(table)


async def _run_command(args: argparse.Namespace) -> int:
    overrides = _build_overrides(args)
    config = load_config(
        config_path=args.config,
        profile=args.profile,
        overrides=overrides,
    )

    setup_logging(config.app.log_level)
    logger.info("Loaded configuration")

    if args.command == "config":
        _print_config(config)
        return 0

    storage = await init_storage_service(config.storage)
    try:
        if args.command == "get":
            book = await books_service.get_book(storage, args.book_id)
            _print_book(book, "Book", args.json)
        elif args.command == "add":
            book = await books_service.add_book(storage, _payload_from_args(args))
            _print_book(book, "Book Created", args.json)
        elif args.command == "update":
            book = await books_service.update_book(storage, args.book_id, _payload_from_args(args))
            _print_book(book, "Book Updated", args.json)
        elif args.command == "delete":
            book = await books_service.delete_book(storage, args.book_id)
            _print_book(book, "Book Deleted", args.json)
        else:
            raise ValueError(f"Unsupported command: {args.command}")
    except NotFoundError as exc:
        console.print(Panel(exc.msg, title="Not Found", style="red"))
        return 1
    except PayloadTooLargeError as exc:
        console.print(Panel(str(exc), title="Rejected", style="red"))
        return 1
    finally:
        await shutdown_storage_service()
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    return asyncio.run(_run_command(args))


if __name__ == "__main__":
    raise SystemExit(main())
