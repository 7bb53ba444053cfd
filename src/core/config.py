"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TenantContext:
    """A resolved account: who the webhook belongs to and where Slack posts go."""

    account_id: str
    name: str
    chat_channel: str
