"""
Shared fixtures for gate tests.

DynamoDB is served in-process by moto; nothing leaves the test run.
"""

from datetime import datetime, timezone
from typing import Optional

import pytest
from moto import mock_aws

from apps.backend.gates.adapters.driven.persistence.dynamodb import (
    DynamoDbGateRepository,
    create_dynamodb_client,
    create_gates_table,
)
from apps.backend.gates.adapters.driven.persistence.in_memory import InMemoryGateRepository
from apps.backend.gates.domain.gate import GateKey

TABLE_NAME = "GatesTest"
REGION = "eu-central-1"

# Monday, inside the default business hours
MONDAY_NOON = datetime(2023, 6, 5, 12, 0, 0, tzinfo=timezone.utc)


# ============================================================================
# Test Doubles
# ============================================================================

class FakeClock:
    """Fake clock for testing."""

    def __init__(self, fixed_time: Optional[datetime] = None):
        self.fixed_time = fixed_time or MONDAY_NOON

    def now(self) -> datetime:
        return self.fixed_time


class SequentialIdProvider:
    """Predictable comment ids: comment-1, comment-2, ..."""

    def __init__(self, prefix: str = "comment"):
        self.prefix = prefix
        self.issued = 0

    def new_id(self) -> str:
        self.issued += 1
        return f"{self.prefix}-{self.issued}"


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def aws_credentials(monkeypatch):
    """Fake credentials so boto3 never picks up a real profile."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)


@pytest.fixture
def dynamodb_client(aws_credentials):
    with mock_aws():
        client = create_dynamodb_client(REGION)
        create_gates_table(client, TABLE_NAME)
        yield client


@pytest.fixture
def dynamodb_repository(dynamodb_client):
    return DynamoDbGateRepository(dynamodb_client, TABLE_NAME)


@pytest.fixture
def memory_repository():
    return InMemoryGateRepository()


@pytest.fixture(params=["memory", "dynamodb"])
def repository(request):
    """Every GateRepository backend; contract tests run against each."""
    if request.param == "memory":
        return request.getfixturevalue("memory_repository")
    return request.getfixturevalue("dynamodb_repository")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def id_provider():
    return SequentialIdProvider()


@pytest.fixture
def key():
    return GateKey(group="payments", service="checkout", environment="production")
