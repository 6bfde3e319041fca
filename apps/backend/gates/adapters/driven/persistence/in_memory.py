"""
In-Memory Gate Repository

This adapter is for local development and testing only.

Characteristics:
- No persistence (gates lost when the process exits)
- Every operation checks its precondition and writes without awaiting in
  between, so on a single event loop each call is atomic per key
- Same typed errors as the DynamoDB adapter

Usage:
    repo = InMemoryGateRepository()
    await repo.insert(Gate.create(key, now))
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from apps.backend.gates.domain.gate import Comment, Gate, GateKey, GateState
from apps.backend.gates.domain.errors import GateAlreadyExistsError, GateNotFoundError


logger = logging.getLogger(__name__)


class InMemoryGateRepository:
    """
    In-memory gate repository.

    Implements GateRepository.
    """

    def __init__(self, gates: Optional[list[Gate]] = None):
        self._gates: dict[GateKey, Gate] = {gate.key: gate for gate in gates or []}
        logger.info("InMemoryGateRepository initialized")

    async def insert(self, gate: Gate) -> Gate:
        if gate.key in self._gates:
            logger.info(f"Gate {gate.key} already exists")
            raise GateAlreadyExistsError(f"gate {gate.key} already exists")
        self._gates[gate.key] = gate
        return gate

    async def find_one(self, key: GateKey) -> Optional[Gate]:
        return self._gates.get(key)

    async def find_all(self) -> list[Gate]:
        return list(self._gates.values())

    async def delete(self, key: GateKey) -> None:
        if self._gates.pop(key, None) is None:
            raise GateNotFoundError(f"gate {key} not found")

    async def update_state(self, key: GateKey, state: GateState, now: datetime) -> Gate:
        return self._store(self._existing(key).with_state(state, now))

    async def update_display_order(self, key: GateKey, display_order: int, now: datetime) -> Gate:
        return self._store(self._existing(key).with_display_order(display_order, now))

    async def upsert_comment(self, key: GateKey, comment: Comment, now: datetime) -> Gate:
        return self._store(self._existing(key).with_comment(comment, now))

    async def delete_comment_by_id(self, key: GateKey, comment_id: str, now: datetime) -> Gate:
        gate = self._existing(key)
        if not gate.has_comment(comment_id):
            raise GateNotFoundError(f"comment {comment_id} not found on gate {key}")
        return self._store(gate.without_comment(comment_id, now))

    def _existing(self, key: GateKey) -> Gate:
        gate = self._gates.get(key)
        if gate is None:
            raise GateNotFoundError(f"gate {key} not found")
        return gate

    def _store(self, gate: Gate) -> Gate:
        self._gates[gate.key] = gate
        return gate

    def clear(self) -> None:
        """Remove all gates (test cleanup)."""
        self._gates.clear()
