"""
Views - JSON-ready representations of gates.

The repository returns gates in no particular order; ordering is a
presentation concern and happens here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from itertools import groupby
from typing import Any, Iterable

from apps.backend.gates.domain.business_hours import BusinessWeek
from apps.backend.gates.domain.codec import encode_timestamp
from apps.backend.gates.domain.gate import Comment, Gate


def comment_to_dict(comment: Comment) -> dict[str, Any]:
    return {
        "id": comment.id,
        "message": comment.message,
        "created": encode_timestamp(comment.created),
    }


def gate_to_dict(gate: Gate) -> dict[str, Any]:
    """Gate representation; comments oldest first, display_order omitted when unset."""
    data = {
        "group": gate.key.group,
        "service": gate.key.service,
        "environment": gate.key.environment,
        "state": gate.state.value,
        "comments": [comment_to_dict(comment) for comment in gate.sorted_comments()],
        "last_updated": encode_timestamp(gate.last_updated),
    }
    if gate.display_order is not None:
        data["display_order"] = gate.display_order
    return data


@dataclass
class EnvironmentView:
    name: str
    gate: Gate

    def to_dict(self) -> dict:
        return {"name": self.name, "gate": gate_to_dict(self.gate)}


@dataclass
class ServiceView:
    name: str
    environments: list[EnvironmentView] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "environments": [environment.to_dict() for environment in self.environments],
        }


@dataclass
class GroupView:
    name: str
    services: list[ServiceView] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "services": [service.to_dict() for service in self.services],
        }


def _environment_order(gate: Gate) -> tuple:
    # Gates without a display order come first, then ascending order, then name
    has_order = gate.display_order is not None
    return (has_order, gate.display_order if has_order else 0, gate.key.environment)


def group_gates(gates: Iterable[Gate]) -> list[GroupView]:
    """
    Arrange gates as group -> service -> environment.

    Groups and services are sorted by name; environments by display order.
    """
    ordered = sorted(gates, key=lambda gate: (gate.key.group, gate.key.service))
    groups = []
    for group_name, gates_in_group in groupby(ordered, key=lambda gate: gate.key.group):
        services = []
        for service_name, service_gates in groupby(gates_in_group, key=lambda gate: gate.key.service):
            environments = [
                EnvironmentView(name=gate.key.environment, gate=gate)
                for gate in sorted(service_gates, key=_environment_order)
            ]
            services.append(ServiceView(name=service_name, environments=environments))
        groups.append(GroupView(name=group_name, services=services))
    return groups


@dataclass(frozen=True)
class ConfigView:
    """Server-side configuration exposed to clients."""
    system_time: datetime
    business_week: BusinessWeek
    business_hours_enabled: bool

    def to_dict(self) -> dict:
        return {
            "system_time": encode_timestamp(self.system_time),
            "business_week": self.business_week.to_record(),
            "business_hours_enabled": self.business_hours_enabled,
        }
