"""
GateRepository contract tests

Every backend runs the same suite: the in-memory adapter and the DynamoDB
adapter (against moto).

Run with: pytest apps/backend/gates/tests/test_gate_repository_contract.py -v
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from apps.backend.gates.adapters.driven.persistence.in_memory import InMemoryGateRepository
from apps.backend.gates.domain.errors import GateAlreadyExistsError, GateNotFoundError
from apps.backend.gates.domain.gate import Comment, Gate, GateKey, GateState


NOW = datetime(2023, 6, 5, 12, 0, 0, tzinfo=timezone.utc)
LATER = NOW + timedelta(minutes=1)


@pytest.fixture
def gate(key):
    return Gate.create(key, NOW)


@pytest.fixture
def other_key():
    return GateKey(group="payments", service="checkout", environment="staging")


def comment(comment_id: str, message: str = "deploy approved", created: datetime = NOW) -> Comment:
    return Comment(id=comment_id, message=message, created=created)


class TestInsertAndFind:
    """Tests for insert / find_one / find_all."""

    @pytest.mark.asyncio
    async def test_insert_then_find(self, repository, gate):
        returned = await repository.insert(gate)

        assert returned == gate
        assert await repository.find_one(gate.key) == gate

    @pytest.mark.asyncio
    async def test_insert_keeps_display_order(self, repository, key):
        gate = Gate.create(key, NOW, display_order=5)
        await repository.insert(gate)

        assert (await repository.find_one(key)).display_order == 5

    @pytest.mark.asyncio
    async def test_double_insert_rejected(self, repository, gate):
        await repository.insert(gate)

        with pytest.raises(GateAlreadyExistsError):
            await repository.insert(gate.with_state(GateState.OPEN, LATER))

        # First write wins
        assert await repository.find_one(gate.key) == gate

    @pytest.mark.asyncio
    async def test_find_one_absent(self, repository, key):
        assert await repository.find_one(key) is None

    @pytest.mark.asyncio
    async def test_find_all(self, repository, gate, other_key):
        other = Gate.create(other_key, NOW, display_order=1)
        await repository.insert(gate)
        await repository.insert(other)

        gates = await repository.find_all()

        assert sorted(gates, key=lambda g: g.key.environment) == [gate, other]

    @pytest.mark.asyncio
    async def test_find_all_empty(self, repository):
        assert await repository.find_all() == []


class TestDelete:
    """Tests for delete."""

    @pytest.mark.asyncio
    async def test_insert_delete_find(self, repository, gate):
        await repository.insert(gate)
        await repository.delete(gate.key)

        assert await repository.find_one(gate.key) is None

    @pytest.mark.asyncio
    async def test_delete_absent(self, repository, key):
        with pytest.raises(GateNotFoundError):
            await repository.delete(key)

    @pytest.mark.asyncio
    async def test_delete_only_touches_its_key(self, repository, gate, other_key):
        other = Gate.create(other_key, NOW)
        await repository.insert(gate)
        await repository.insert(other)

        await repository.delete(gate.key)

        assert await repository.find_all() == [other]

    @pytest.mark.asyncio
    async def test_gate_can_be_recreated_after_delete(self, repository, gate):
        await repository.insert(gate)
        await repository.delete(gate.key)

        assert await repository.insert(gate) == gate


class TestUpdates:
    """Tests for update_state and update_display_order."""

    @pytest.mark.asyncio
    async def test_update_state_returns_post_mutation_gate(self, repository, gate):
        await repository.insert(gate)

        updated = await repository.update_state(gate.key, GateState.OPEN, LATER)

        assert updated.state == GateState.OPEN
        assert updated.last_updated == LATER
        assert await repository.find_one(gate.key) == updated

    @pytest.mark.asyncio
    async def test_update_state_keeps_comments(self, repository, gate):
        await repository.insert(gate.with_comment(comment("c1"), NOW))

        updated = await repository.update_state(gate.key, GateState.OPEN, LATER)

        assert updated.has_comment("c1")

    @pytest.mark.asyncio
    async def test_update_display_order(self, repository, gate):
        await repository.insert(gate)

        updated = await repository.update_display_order(gate.key, 7, LATER)

        assert updated.display_order == 7
        assert updated.state == GateState.CLOSED
        assert updated.last_updated == LATER

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation, argument", [
        ("update_state", GateState.OPEN),
        ("update_display_order", 1),
    ])
    async def test_update_absent_gate(self, repository, key, operation, argument):
        with pytest.raises(GateNotFoundError):
            await getattr(repository, operation)(key, argument, LATER)

        # No record is created as a side effect
        assert await repository.find_one(key) is None


class TestComments:
    """Tests for upsert_comment and delete_comment_by_id."""

    @pytest.mark.asyncio
    async def test_upsert_comment(self, repository, gate):
        await repository.insert(gate)

        updated = await repository.upsert_comment(gate.key, comment("c1"), LATER)

        assert updated.comment("c1") == comment("c1")
        assert updated.last_updated == LATER
        assert await repository.find_one(gate.key) == updated

    @pytest.mark.asyncio
    async def test_upsert_same_id_overwrites(self, repository, gate):
        await repository.insert(gate)

        await repository.upsert_comment(gate.key, comment("c1", "first"), NOW)
        updated = await repository.upsert_comment(gate.key, comment("c1", "second"), LATER)

        assert len(updated.comments) == 1
        assert updated.comment("c1").message == "second"

    @pytest.mark.asyncio
    async def test_upsert_is_idempotent(self, repository, gate):
        await repository.insert(gate)

        first = await repository.upsert_comment(gate.key, comment("c1"), LATER)
        second = await repository.upsert_comment(gate.key, comment("c1"), LATER)

        assert first == second

    @pytest.mark.asyncio
    async def test_upserts_with_different_ids_both_survive(self, repository, gate):
        await repository.insert(gate)

        await repository.upsert_comment(gate.key, comment("c1"), NOW)
        updated = await repository.upsert_comment(gate.key, comment("c2"), LATER)

        assert {c.id for c in updated.comments} == {"c1", "c2"}

    @pytest.mark.asyncio
    async def test_upsert_on_absent_gate(self, repository, key):
        with pytest.raises(GateNotFoundError):
            await repository.upsert_comment(key, comment("c1"), LATER)

        assert await repository.find_one(key) is None

    @pytest.mark.asyncio
    async def test_delete_comment(self, repository, gate):
        await repository.insert(gate.with_comment(comment("c1"), NOW).with_comment(comment("c2"), NOW))

        updated = await repository.delete_comment_by_id(gate.key, "c1", LATER)

        assert {c.id for c in updated.comments} == {"c2"}
        assert updated.last_updated == LATER

    @pytest.mark.asyncio
    async def test_delete_missing_comment_leaves_gate_unchanged(self, repository, gate):
        stored = gate.with_comment(comment("c1"), NOW)
        await repository.insert(stored)

        with pytest.raises(GateNotFoundError):
            await repository.delete_comment_by_id(gate.key, "missing", LATER)

        assert await repository.find_one(gate.key) == stored

    @pytest.mark.asyncio
    async def test_delete_comment_on_absent_gate(self, repository, key):
        with pytest.raises(GateNotFoundError):
            await repository.delete_comment_by_id(key, "c1", LATER)


class TestTimestamps:
    """Stored and returned gates agree on timestamps."""

    @pytest.mark.asyncio
    async def test_naive_timestamps_come_back_as_utc(self, repository, key):
        naive = datetime(2023, 6, 5, 12, 0, 0)
        gate = Gate.create(key, naive).with_comment(comment("c1", created=naive), naive)

        inserted = await repository.insert(gate)
        found = await repository.find_one(key)

        assert inserted == found
        assert found.last_updated == NOW
        assert found.last_updated.tzinfo == timezone.utc
        assert found.comment("c1").created.tzinfo == timezone.utc


class TestConcurrentWrites:
    """Writers racing on one key; each backend relies on single-request atomicity."""

    @pytest.mark.asyncio
    async def test_racing_inserts_exactly_one_wins(self, repository, gate):
        contenders = [gate.with_display_order(i, LATER) for i in range(10)]

        results = await asyncio.gather(
            *(repository.insert(contender) for contender in contenders),
            return_exceptions=True,
        )

        errors = [r for r in results if isinstance(r, GateAlreadyExistsError)]
        winners = [r for r in results if isinstance(r, Gate)]
        assert len(errors) == 9
        assert len(winners) == 1
        assert await repository.find_one(gate.key) == winners[0]

    @pytest.mark.asyncio
    async def test_racing_comment_upserts_all_survive(self, repository, gate):
        await repository.insert(gate)

        await asyncio.gather(*(
            repository.upsert_comment(gate.key, comment(f"c{i}"), LATER)
            for i in range(20)
        ))

        stored = await repository.find_one(gate.key)
        assert {c.id for c in stored.comments} == {f"c{i}" for i in range(20)}

    @pytest.mark.asyncio
    async def test_racing_delete_and_update(self, repository, gate):
        await repository.insert(gate)

        results = await asyncio.gather(
            repository.delete(gate.key),
            repository.update_state(gate.key, GateState.OPEN, LATER),
            return_exceptions=True,
        )

        # The update either ran before the delete or failed; it never resurrects the gate
        assert results[0] is None
        assert isinstance(results[1], (Gate, GateNotFoundError))
        assert await repository.find_one(gate.key) is None


class TestInMemoryGateRepository:
    """In-memory specifics: seeding and reset."""

    @pytest.mark.asyncio
    async def test_seeded_gates_are_found(self, gate):
        repository = InMemoryGateRepository([gate])

        assert await repository.find_one(gate.key) == gate

    @pytest.mark.asyncio
    async def test_clear_removes_everything(self, memory_repository, gate, other_key):
        await memory_repository.insert(gate)
        await memory_repository.insert(Gate.create(other_key, NOW))

        memory_repository.clear()

        assert await memory_repository.find_all() == []
        assert await memory_repository.insert(gate) == gate
