"""Composition root for dependency injection.

build_container() assembles use cases with concrete adapters from settings.
Everything is constructed explicitly on each call; nothing is cached at module
level, so tests and processes can hold independent containers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from apps.backend.gates.adapters.driven.demo.quotes import CannedQuotesProvider
from apps.backend.gates.adapters.driven.ids.uuid_provider import UuidIdProvider
from apps.backend.gates.adapters.driven.persistence.dynamodb import (
    DynamoDbGateRepository,
    create_dynamodb_client,
    create_gates_table,
)
from apps.backend.gates.adapters.driven.persistence.in_memory import InMemoryGateRepository
from apps.backend.gates.adapters.driven.persistence.read_only import ReadOnlyGateRepository
from apps.backend.gates.adapters.driven.time.clock import RealClock
from apps.backend.gates.application.ports import (
    BusinessHoursPort,
    ClockPort,
    GateRepository,
    IdProviderPort,
)
from apps.backend.gates.application.use_cases import (
    AddCommentUseCase,
    CreateGateUseCase,
    DeleteCommentUseCase,
    DeleteGateUseCase,
    GetConfigUseCase,
    GetGateUseCase,
    ListGatesUseCase,
    UpdateDisplayOrderUseCase,
    UpdateGateStateUseCase,
)
from apps.backend.gates.domain.business_hours import BusinessHoursSwitch
from apps.backend.gates.settings import STORAGE_MEMORY, GatesSettings


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GatesContainer:
    repository: GateRepository
    clock: ClockPort
    id_provider: IdProviderPort
    business_hours: BusinessHoursPort

    create_gate: CreateGateUseCase
    get_gate: GetGateUseCase
    list_gates: ListGatesUseCase
    delete_gate: DeleteGateUseCase
    update_gate_state: UpdateGateStateUseCase
    update_display_order: UpdateDisplayOrderUseCase
    add_comment: AddCommentUseCase
    delete_comment: DeleteCommentUseCase
    get_config: GetConfigUseCase


def build_repository(settings: GatesSettings, dynamodb_client=None) -> GateRepository:
    """Storage backend chosen by settings, wrapped read-only in demo mode."""
    if settings.storage == STORAGE_MEMORY:
        repository: GateRepository = InMemoryGateRepository()
    else:
        client = dynamodb_client or create_dynamodb_client(
            settings.aws_region, settings.dynamo_db_endpoint_url
        )
        if settings.is_local_dynamo_db:
            create_gates_table(client, settings.dynamo_db_table_name)
        repository = DynamoDbGateRepository(client, settings.dynamo_db_table_name)

    if settings.demo_mode:
        logger.info("Demo mode: gate repository is read-only")
        repository = ReadOnlyGateRepository(repository, CannedQuotesProvider())
    return repository


def build_container(
    settings: GatesSettings,
    repository: GateRepository | None = None,
    clock: ClockPort | None = None,
    id_provider: IdProviderPort | None = None,
) -> GatesContainer:
    """
    Wire every use case.

    repository, clock and id_provider may be passed in to replace the adapters
    the settings would select (tests, local tooling).
    """
    if repository is None:
        repository = build_repository(settings)
    if clock is None:
        clock = RealClock()
    if id_provider is None:
        id_provider = UuidIdProvider()
    business_hours = BusinessHoursSwitch(
        settings.business_week, enabled=settings.business_hours_enabled
    )

    return GatesContainer(
        repository=repository,
        clock=clock,
        id_provider=id_provider,
        business_hours=business_hours,
        create_gate=CreateGateUseCase(repository, clock),
        get_gate=GetGateUseCase(repository, clock, business_hours),
        list_gates=ListGatesUseCase(repository, clock, business_hours),
        delete_gate=DeleteGateUseCase(repository),
        update_gate_state=UpdateGateStateUseCase(repository, clock, business_hours),
        update_display_order=UpdateDisplayOrderUseCase(repository, clock),
        add_comment=AddCommentUseCase(repository, clock, id_provider),
        delete_comment=DeleteCommentUseCase(repository, clock),
        get_config=GetConfigUseCase(clock, business_hours),
    )
