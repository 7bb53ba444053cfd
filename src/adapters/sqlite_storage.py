"""SQLite storage adapter.

Implements the core LinkStorePort and the account table using a simple
SQLite database.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from typing import Optional

from core.config import TenantContext
from core.errors import LinkConflictError, LinkWriteError, LookupFailedError
from core.models import CorrelationLink


class SQLiteStorage:
    """Thin SQLite wrapper that satisfies the LinkStorePort contract."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Create tables if they do not exist.

        Tables:
        - links: one row per Slack thread / Trello card pair
        - accounts: tenants addressed by the webhook path id
        """

        with self._connect() as conn:
            # links is the correlation record. Both columns are UNIQUE so the
            # database enforces the 1:1 mapping and a racing second insert
            # fails instead of overwriting.
            # Fields:
            # - id: auto-increment primary key
            # - slack_thread: ts of the thread's parent message
            # - trello_card: Trello card id
            # - created_at: when the link was written
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS links (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    slack_thread TEXT NOT NULL UNIQUE,
                    trello_card TEXT NOT NULL UNIQUE,
                    created_at TIMESTAMP NOT NULL
                )
                """
            )
            # accounts maps the id in /slack-webhook/<id> and
            # /trello-webhook/<id> to a tenant.
            # Fields:
            # - id: opaque account id (PRIMARY KEY)
            # - name: display name for logs
            # - slack_channel: channel new threads are posted to
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS accounts (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    slack_channel TEXT NOT NULL
                )
                """
            )

    def _find(self, query: str, key: str, column: str) -> Optional[str]:
        try:
            with self._connect() as conn:
                row = conn.execute(query, (key,)).fetchone()
        except sqlite3.Error as e:
            raise LookupFailedError(f"Link lookup failed: {e}") from e
        return str(row[column]) if row else None

    def find_by_chat_thread(self, thread_id: str) -> Optional[str]:
        """Return the Trello card linked to a Slack thread, if any."""

        return self._find("SELECT trello_card FROM links WHERE slack_thread = ?", thread_id, "trello_card")

    def find_by_tracker_card(self, card_id: str) -> Optional[str]:
        """Return the Slack thread linked to a Trello card, if any."""

        return self._find("SELECT slack_thread FROM links WHERE trello_card = ?", card_id, "slack_thread")

    def create(self, link: CorrelationLink) -> None:
        """Insert a link; never overwrites an existing one."""

        created_at = datetime.now(timezone.utc)
        try:
            with self._connect() as conn:
                conn.execute(
                    "INSERT INTO links (slack_thread, trello_card, created_at) VALUES (?, ?, ?)",
                    (link.chat_thread_id, link.tracker_card_id, created_at.isoformat()),
                )
        except sqlite3.IntegrityError as e:
            raise LinkConflictError(
                f"Link exists for thread {link.chat_thread_id} or card {link.tracker_card_id}"
            ) from e
        except sqlite3.Error as e:
            raise LinkWriteError(f"Link insert failed: {e}") from e

    def get_account(self, account_id: str) -> Optional[TenantContext]:
        """Return the tenant for an account id, if any."""

        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT id, name, slack_channel FROM accounts WHERE id = ?",
                    (account_id,),
                ).fetchone()
        except sqlite3.Error as e:
            raise LookupFailedError(f"Account lookup failed: {e}") from e
        if row is None:
            return None
        return TenantContext(account_id=row["id"], name=row["name"], chat_channel=row["slack_channel"])

    def save_account(self, tenant: TenantContext) -> None:
        """Upsert an account."""

        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO accounts (id, name, slack_channel)
                VALUES (?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name = excluded.name,
                    slack_channel = excluded.slack_channel
                """,
                (tenant.account_id, tenant.name, tenant.chat_channel),
            )

    def count_links(self) -> int:
        with self._connect() as conn:
            row = conn.execute("SELECT COUNT(*) AS total FROM links").fetchone()
        return int(row["total"])
