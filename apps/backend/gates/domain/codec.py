"""
Mapping between Gate entities and the flat key-value record the backends store.

Record layout:
    group                 partition key
    service_environment   sort key, "{service}#{environment}"
    service, environment  stored separately for read convenience
    state                 "open" | "closed"
    last_updated          RFC 3339 timestamp
    display_order         optional non-negative integer (absent when unset)
    comments              map of comment id -> {id, message, created}

Encoding only produces plain Python values (str, int, dict) so any document
store client can serialize it. Decoding raises GateDecodeError on anything it
does not recognise.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Mapping, Optional

from .errors import GateDecodeError
from .gate import Comment, Gate, GateKey, GateState

GROUP = "group"
SERVICE_ENVIRONMENT = "service_environment"
SERVICE = "service"
ENVIRONMENT = "environment"
STATE = "state"
LAST_UPDATED = "last_updated"
DISPLAY_ORDER = "display_order"
COMMENTS = "comments"
ID = "id"
MESSAGE = "message"
CREATED = "created"


# ============================================================================
# Timestamps
# ============================================================================

def encode_timestamp(value: datetime) -> str:
    """RFC 3339 in UTC. Naive datetimes are taken to be UTC already."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def decode_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


# ============================================================================
# Encode
# ============================================================================

def encode_key(key: GateKey) -> dict[str, str]:
    """Primary key attributes addressing a single record."""
    return {GROUP: key.group, SERVICE_ENVIRONMENT: key.sort_key}


def encode_comment(comment: Comment) -> dict[str, str]:
    return {
        ID: comment.id,
        MESSAGE: comment.message,
        CREATED: encode_timestamp(comment.created),
    }


def encode_gate(gate: Gate) -> dict[str, Any]:
    record: dict[str, Any] = {
        **encode_key(gate.key),
        SERVICE: gate.key.service,
        ENVIRONMENT: gate.key.environment,
        STATE: gate.state.value,
        LAST_UPDATED: encode_timestamp(gate.last_updated),
        COMMENTS: {comment.id: encode_comment(comment) for comment in gate.comments},
    }
    if gate.display_order is not None:
        record[DISPLAY_ORDER] = gate.display_order
    return record


# ============================================================================
# Decode
# ============================================================================

def _decode_string(field: str, record: Mapping[str, Any]) -> str:
    if field not in record:
        raise GateDecodeError(f"field {field} could not be found")
    value = record[field]
    if not isinstance(value, str):
        raise GateDecodeError(f"field {field} could not be parsed as string")
    return value


def _decode_datetime(field: str, record: Mapping[str, Any]) -> datetime:
    raw = _decode_string(field, record)
    try:
        return decode_timestamp(raw)
    except ValueError:
        raise GateDecodeError(f"field {field} could not be parsed as datetime: {raw!r}") from None


def _decode_optional_unsigned(field: str, record: Mapping[str, Any]) -> Optional[int]:
    if field not in record or record[field] is None:
        return None
    value = record[field]
    # Document stores such as DynamoDB hand numbers back as Decimal
    if isinstance(value, bool) or not isinstance(value, (int, Decimal)):
        raise GateDecodeError(f"field {field} could not be parsed as number")
    if value != int(value) or value < 0:
        raise GateDecodeError(f"field {field} could not be parsed as unsigned integer: {value}")
    return int(value)


def _decode_map(field: str, record: Mapping[str, Any]) -> Mapping[str, Any]:
    if field not in record:
        raise GateDecodeError(f"field {field} could not be found")
    value = record[field]
    if not isinstance(value, Mapping):
        raise GateDecodeError(f"field {field} could not be parsed as map")
    return value


def decode_comment(record: Mapping[str, Any]) -> Comment:
    try:
        return Comment(
            id=_decode_string(ID, record),
            message=_decode_string(MESSAGE, record),
            created=_decode_datetime(CREATED, record),
        )
    except ValueError as error:
        raise GateDecodeError(f"could not decode comment: {error}") from error


def decode_gate(record: Mapping[str, Any]) -> Gate:
    """
    Decode a stored record into a Gate.

    Raises:
        GateDecodeError: If a field is missing, mistyped or violates a Gate
            invariant.
    """
    raw_state = _decode_string(STATE, record)
    try:
        state = GateState(raw_state)
    except ValueError:
        raise GateDecodeError(f"cannot convert {raw_state!r} to GateState") from None

    comments = []
    for comment_id, value in _decode_map(COMMENTS, record).items():
        if not isinstance(value, Mapping):
            raise GateDecodeError(f"comment {comment_id} could not be parsed")
        comments.append(decode_comment(value))

    try:
        return Gate(
            key=GateKey(
                group=_decode_string(GROUP, record),
                service=_decode_string(SERVICE, record),
                environment=_decode_string(ENVIRONMENT, record),
            ),
            state=state,
            last_updated=_decode_datetime(LAST_UPDATED, record),
            comments=frozenset(comments),
            display_order=_decode_optional_unsigned(DISPLAY_ORDER, record),
        )
    except GateDecodeError:
        raise
    except ValueError as error:
        raise GateDecodeError(f"could not decode gate: {error}") from error
