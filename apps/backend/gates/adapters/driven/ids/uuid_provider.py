from __future__ import annotations
import uuid
from apps.backend.gates.application.ports import IdProviderPort


class UuidIdProvider(IdProviderPort):
    """Random comment ids (uuid4, hex form)."""

    def new_id(self) -> str:
        return uuid.uuid4().hex
