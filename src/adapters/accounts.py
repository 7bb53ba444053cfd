"""Account resolution adapter.

Maps the id in a webhook path to the tenant the delivery belongs to.
"""

from __future__ import annotations

import logging
from typing import Optional

from adapters.sqlite_storage import SQLiteStorage
from core.config import TenantContext
from core.errors import UnknownTenantError

LOGGER = logging.getLogger(__name__)


class AccountResolver:
    """Resolve accounts from a fixed single-tenant id or the accounts table."""

    def __init__(
        self,
        storage: SQLiteStorage,
        fixed_account_id: Optional[str] = None,
        default_channel: str = "",
    ) -> None:
        self._storage = storage
        self._fixed_account_id = fixed_account_id
        self._default_channel = default_channel

    def resolve(self, account_id: str) -> TenantContext:
        if self._fixed_account_id:
            if account_id == self._fixed_account_id:
                return TenantContext(
                    account_id=account_id,
                    name="default",
                    chat_channel=self._default_channel,
                )
            raise UnknownTenantError(f"Unknown account {account_id}")

        tenant = self._storage.get_account(account_id)
        if tenant is None:
            LOGGER.info("Rejected webhook for unknown account %s", account_id)
            raise UnknownTenantError(f"Unknown account {account_id}")
        return tenant
