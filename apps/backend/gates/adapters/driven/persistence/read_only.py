"""
Read-only Gate Repository (demo mode)

Decorates another GateRepository for open demo deployments:
- insert and delete are refused without touching the wrapped repository
- comment messages are replaced by canned phrases so visitors cannot publish
  arbitrary text; comment id and created time pass through
- everything else is delegated unchanged
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Optional

from apps.backend.gates.application.ports import GateRepository, QuotesProviderPort
from apps.backend.gates.domain.errors import OperationNotPermittedError
from apps.backend.gates.domain.gate import Comment, Gate, GateKey, GateState


logger = logging.getLogger(__name__)

NOT_ALLOWED_IN_DEMO_MODE = "not allowed in demo mode"


class ReadOnlyGateRepository:
    """
    GateRepository decorator that disables gate creation and deletion.

    Args:
        repository: The wrapped repository
        quotes: Supplies the replacement comment messages
    """

    def __init__(self, repository: GateRepository, quotes: QuotesProviderPort):
        self._repository = repository
        self._quotes = quotes

    async def insert(self, gate: Gate) -> Gate:
        logger.warning(f"Refused to insert gate {gate.key}: {NOT_ALLOWED_IN_DEMO_MODE}")
        raise OperationNotPermittedError(f"insert {NOT_ALLOWED_IN_DEMO_MODE}")

    async def find_one(self, key: GateKey) -> Optional[Gate]:
        return await self._repository.find_one(key)

    async def find_all(self) -> list[Gate]:
        return await self._repository.find_all()

    async def delete(self, key: GateKey) -> None:
        logger.warning(f"Refused to delete gate {key}: {NOT_ALLOWED_IN_DEMO_MODE}")
        raise OperationNotPermittedError(f"delete {NOT_ALLOWED_IN_DEMO_MODE}")

    async def update_state(self, key: GateKey, state: GateState, now: datetime) -> Gate:
        return await self._repository.update_state(key, state, now)

    async def update_display_order(self, key: GateKey, display_order: int, now: datetime) -> Gate:
        return await self._repository.update_display_order(key, display_order, now)

    async def upsert_comment(self, key: GateKey, comment: Comment, now: datetime) -> Gate:
        sanitized = replace(comment, message=self._quotes.quote_for(comment.id))
        return await self._repository.upsert_comment(key, sanitized, now)

    async def delete_comment_by_id(self, key: GateKey, comment_id: str, now: datetime) -> Gate:
        return await self._repository.delete_comment_by_id(key, comment_id, now)
