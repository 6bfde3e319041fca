"""
DynamoDB Gate Repository

Stores one item per gate: partition key ``group``, sort key
``"{service}#{environment}"``. Every mutation is a single conditional request,
so per-key consistency comes from DynamoDB's single-item atomicity:

    insert                PutItem     attribute_not_exists(#g)
    delete                DeleteItem  attribute_exists(#g)
    update_state          UpdateItem  attribute_exists(#g)
    update_display_order  UpdateItem  attribute_exists(#g)
    upsert_comment        UpdateItem  attribute_exists(#g)            SET #c.#i
    delete_comment_by_id  UpdateItem  attribute_exists(#g) AND
                                      attribute_exists(#c.#i)         REMOVE #c.#i

Comments are addressed as nested map entries, so two writers adding different
comment ids to the same gate never overwrite each other.

boto3 is blocking; calls run in a worker thread via asyncio.to_thread. The
low-level client is used because it is safe to share across threads.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Callable, Mapping, Optional

import boto3
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.exceptions import BotoCoreError, ClientError

from apps.backend.gates.domain.codec import (
    COMMENTS,
    DISPLAY_ORDER,
    GROUP,
    LAST_UPDATED,
    SERVICE_ENVIRONMENT,
    STATE,
    decode_gate,
    encode_comment,
    encode_gate,
    encode_key,
    encode_timestamp,
)
from apps.backend.gates.domain.errors import (
    GateAlreadyExistsError,
    GateNotFoundError,
    GateStorageError,
)
from apps.backend.gates.domain.gate import Comment, Gate, GateKey, GateState


logger = logging.getLogger(__name__)

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"
RESOURCE_IN_USE = "ResourceInUseException"

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


# ============================================================================
# Client / Table Factories
# ============================================================================

def create_dynamodb_client(region_name: str, endpoint_url: Optional[str] = None):
    """Create a low-level DynamoDB client (a local endpoint when endpoint_url is set)."""
    return boto3.client("dynamodb", region_name=region_name, endpoint_url=endpoint_url or None)


def create_gates_table(client, table_name: str) -> None:
    """
    Create the gates table if it does not exist yet.

    Used for local endpoints and tests; production tables are provisioned
    outside of the service.
    """
    try:
        client.create_table(
            TableName=table_name,
            AttributeDefinitions=[
                {"AttributeName": GROUP, "AttributeType": "S"},
                {"AttributeName": SERVICE_ENVIRONMENT, "AttributeType": "S"},
            ],
            KeySchema=[
                {"AttributeName": GROUP, "KeyType": "HASH"},
                {"AttributeName": SERVICE_ENVIRONMENT, "KeyType": "RANGE"},
            ],
            BillingMode="PAY_PER_REQUEST",
        )
    except ClientError as error:
        if _error_code(error) != RESOURCE_IN_USE:
            raise
        logger.info(f"Table {table_name} already exists")
        return

    client.get_waiter("table_exists").wait(TableName=table_name)
    logger.info(f"Created table {table_name}")


# ============================================================================
# Attribute Value (de)serialization
# ============================================================================

def serialize_item(record: Mapping[str, Any]) -> dict[str, Any]:
    return {name: _serializer.serialize(value) for name, value in record.items()}


def deserialize_item(item: Mapping[str, Any]) -> dict[str, Any]:
    return {name: _deserializer.deserialize(value) for name, value in item.items()}


def _error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "")


# ============================================================================
# Repository
# ============================================================================

class DynamoDbGateRepository:
    """
    DynamoDB implementation of GateRepository.

    Args:
        client: boto3 DynamoDB client
        table_name: Table holding one item per gate
    """

    def __init__(self, client, table_name: str):
        self._client = client
        self._table_name = table_name

    @property
    def table_name(self) -> str:
        return self._table_name

    async def insert(self, gate: Gate) -> Gate:
        await self._call(
            self._client.put_item,
            on_condition_failed=lambda: GateAlreadyExistsError(f"gate {gate.key} already exists"),
            TableName=self._table_name,
            Item=serialize_item(encode_gate(gate)),
            ConditionExpression="attribute_not_exists(#g)",
            ExpressionAttributeNames={"#g": GROUP},
        )
        return gate

    async def find_one(self, key: GateKey) -> Optional[Gate]:
        response = await self._call(
            self._client.get_item,
            TableName=self._table_name,
            Key=serialize_item(encode_key(key)),
            ConsistentRead=True,
        )
        item = response.get("Item")
        if item is None:
            return None
        return decode_gate(deserialize_item(item))

    async def find_all(self) -> list[Gate]:
        items = await self._call(self._scan_all)
        # A single undecodable record fails the whole scan
        return [decode_gate(deserialize_item(item)) for item in items]

    async def delete(self, key: GateKey) -> None:
        await self._call(
            self._client.delete_item,
            on_condition_failed=lambda: GateNotFoundError(f"gate {key} not found"),
            TableName=self._table_name,
            Key=serialize_item(encode_key(key)),
            ConditionExpression="attribute_exists(#g)",
            ExpressionAttributeNames={"#g": GROUP},
        )

    async def update_state(self, key: GateKey, state: GateState, now: datetime) -> Gate:
        return await self._update(
            key,
            update_expression="SET #s = :state, #lu = :last_updated",
            condition_expression="attribute_exists(#g)",
            names={"#s": STATE},
            values={":state": GateState(state).value},
            now=now,
        )

    async def update_display_order(self, key: GateKey, display_order: int, now: datetime) -> Gate:
        return await self._update(
            key,
            update_expression="SET #dp = :display_order, #lu = :last_updated",
            condition_expression="attribute_exists(#g)",
            names={"#dp": DISPLAY_ORDER},
            values={":display_order": display_order},
            now=now,
        )

    async def upsert_comment(self, key: GateKey, comment: Comment, now: datetime) -> Gate:
        return await self._update(
            key,
            update_expression="SET #c.#i = :comment, #lu = :last_updated",
            condition_expression="attribute_exists(#g)",
            names={"#c": COMMENTS, "#i": comment.id},
            values={":comment": encode_comment(comment)},
            now=now,
        )

    async def delete_comment_by_id(self, key: GateKey, comment_id: str, now: datetime) -> Gate:
        return await self._update(
            key,
            update_expression="REMOVE #c.#i SET #lu = :last_updated",
            condition_expression="attribute_exists(#g) AND attribute_exists(#c.#i)",
            names={"#c": COMMENTS, "#i": comment_id},
            values={},
            now=now,
            not_found_message=f"gate {key} or comment {comment_id} not found",
        )

    # ------------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------------

    async def _update(
        self,
        key: GateKey,
        update_expression: str,
        condition_expression: str,
        names: dict[str, str],
        values: dict[str, Any],
        now: datetime,
        not_found_message: Optional[str] = None,
    ) -> Gate:
        message = not_found_message or f"gate {key} not found"
        response = await self._call(
            self._client.update_item,
            on_condition_failed=lambda: GateNotFoundError(message),
            TableName=self._table_name,
            Key=serialize_item(encode_key(key)),
            UpdateExpression=update_expression,
            ConditionExpression=condition_expression,
            ExpressionAttributeNames={"#g": GROUP, "#lu": LAST_UPDATED, **names},
            ExpressionAttributeValues=serialize_item(
                {":last_updated": encode_timestamp(now), **values}
            ),
            ReturnValues="ALL_NEW",
        )
        attributes = response.get("Attributes")
        if not attributes:
            raise GateStorageError(f"missing updated gate {key}")
        return decode_gate(deserialize_item(attributes))

    def _scan_all(self) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        paginator = self._client.get_paginator("scan")
        for page in paginator.paginate(TableName=self._table_name, ConsistentRead=True):
            items.extend(page.get("Items", []))
        return items

    async def _call(
        self,
        operation: Callable[..., Any],
        on_condition_failed: Optional[Callable[[], Exception]] = None,
        **kwargs,
    ) -> Any:
        """
        Run a blocking boto3 call off the event loop and translate its errors.

        A failed condition becomes the operation's typed error; every other
        backend failure becomes GateStorageError.
        """
        try:
            return await asyncio.to_thread(operation, **kwargs)
        except ClientError as error:
            code = _error_code(error)
            if code == CONDITIONAL_CHECK_FAILED and on_condition_failed is not None:
                typed = on_condition_failed()
                logger.info(f"Conditional check failed on {self._table_name}: {typed}")
                raise typed from error
            logger.error(f"DynamoDB request failed on {self._table_name} ({code}): {error}")
            raise GateStorageError(f"dynamodb request failed ({code}): {error}") from error
        except BotoCoreError as error:
            logger.error(f"DynamoDB transport failure on {self._table_name}: {error}")
            raise GateStorageError(f"dynamodb transport failure: {error}") from error
