"""Application entry point for the threadlink webhook relay."""

from __future__ import annotations

import argparse
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

import uvicorn
from art import tprint
from dotenv import load_dotenv

import settings
from adapters.accounts import AccountResolver
from adapters.sqlite_storage import SQLiteStorage
from client import build_clients, fixed_account_id
from core.config import TenantContext
from core.dispatcher import ActionDispatcher
from core.relay import ChatEventRelay, TrackerEventRelay
from server import create_app

NAME = "THREADLINK"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", False):
        return []
    values = []
    for name in redact_cfg.get("patterns", []):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    load_dotenv()
    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    # Trello credentials travel in query strings, so they can end up in
    # exception messages.
    formatter = _RedactingFormatter(_collect_redaction_values(config), fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/threadlink.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        file_handler = RotatingFileHandler(
            path,
            maxBytes=int(file_cfg.get("max_bytes", 5 * 1024 * 1024)),
            backupCount=int(file_cfg.get("backup_count", 5)),
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _open_storage() -> SQLiteStorage:
    storage = SQLiteStorage(settings.DB_PATH)
    storage.init_db()
    return storage


def _run() -> None:
    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)

    logger.info("Starting threadlink")

    storage = _open_storage()
    logger.info("%s links are stored in %s", storage.count_links(), settings.DB_PATH)

    slack, trello = build_clients()
    account_id = fixed_account_id()
    if account_id and not settings.DEFAULT_CHANNEL:
        raise RuntimeError("slack.default_channel is required when ACCOUNT_ID is set")
    resolver = AccountResolver(storage, account_id, settings.DEFAULT_CHANNEL)
    logger.info("Account mode - %s", "single" if account_id else "database")

    # Both relays share one dispatcher so link writes go through one place.
    dispatcher = ActionDispatcher(links=storage, chat=slack, tracker=trello)
    app = create_app(
        resolver,
        ChatEventRelay(links=storage, profiles=slack, dispatcher=dispatcher),
        TrackerEventRelay(links=storage, dispatcher=dispatcher),
    )

    # log_config=None keeps the handlers configured above.
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)


def _init_db() -> None:
    _configure_logging()
    storage = _open_storage()
    print(f"Database ready at {settings.DB_PATH} ({storage.count_links()} links)")


def _add_account(account_id: str, name: str, channel: str) -> None:
    _configure_logging()
    storage = _open_storage()
    storage.save_account(TenantContext(account_id=account_id, name=name, chat_channel=channel))
    print(f"Account {account_id} saved. Webhook paths:")
    print(f"  /slack-webhook/{account_id}")
    print(f"  /trello-webhook/{account_id}")


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="threadlink")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start the webhook server")
    subparsers.add_parser("init-db", help="Create the SQLite tables")
    add_account = subparsers.add_parser("add-account", help="Register an account")
    add_account.add_argument("account_id")
    add_account.add_argument("name")
    add_account.add_argument("channel", help="Slack channel id new threads are posted to")

    args = parser.parse_args(argv)
    if args.command == "init-db":
        _init_db()
        return
    if args.command == "add-account":
        _add_account(args.account_id, args.name, args.channel)
        return
    _run()


if __name__ == "__main__":
    main()
