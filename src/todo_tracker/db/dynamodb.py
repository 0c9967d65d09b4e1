"""DynamoDB table store using the boto3 resource API."""

from __future__ import annotations

from collections.abc import Mapping
from functools import reduce
from typing import Any

import boto3
import structlog
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import BotoCoreError, ClientError

from todo_tracker.config import DynamoSettings
from todo_tracker.db.store import ItemNotFound, StoreError, Table

logger = structlog.get_logger()


class DynamoTableStore:
    """TableStore backed by DynamoDB tables keyed (HASH, RANGE)."""

    def __init__(self, resource: Any | None = None, settings: DynamoSettings | None = None):
        if resource is None:
            settings = settings or DynamoSettings()
            resource = boto3.resource("dynamodb", **settings.client_kwargs())
            logger.info(
                "dynamodb_store_initialized",
                region=settings.region,
                endpoint_url=settings.endpoint_url or None,
            )
        self._resource = resource

    def _table(self, table: Table) -> Any:
        return self._resource.Table(table.name)

    def put(self, table: Table, item: Mapping[str, Any]) -> None:
        try:
            self._table(table).put_item(Item=dict(item))
        except (BotoCoreError, ClientError) as e:
            raise StoreError(f"put_item on {table.name} failed: {e}") from e

    def query(
        self,
        table: Table,
        owner_id: str,
        filters: Mapping[str, Any] | None = None,
    ) -> list[dict]:
        kwargs: dict[str, Any] = {
            "KeyConditionExpression": Key(table.partition_key).eq(owner_id),
        }
        if filters:
            conditions = [Attr(name).eq(value) for name, value in filters.items()]
            kwargs["FilterExpression"] = reduce(lambda a, b: a & b, conditions)

        items: list[dict] = []
        try:
            while True:
                resp = self._table(table).query(**kwargs)
                items.extend(resp.get("Items", []))
                start_key = resp.get("LastEvaluatedKey")
                if not start_key:
                    break
                kwargs["ExclusiveStartKey"] = start_key
        except (BotoCoreError, ClientError) as e:
            raise StoreError(f"query on {table.name} failed: {e}") from e
        return items

    def update(
        self,
        table: Table,
        key: Mapping[str, Any],
        attributes: Mapping[str, Any],
    ) -> dict:
        if not attributes:
            return self._get(table, key)

        # Placeholders for every name so reserved words like "name" are safe.
        names = {"#pk": table.partition_key}
        values: dict[str, Any] = {}
        assignments = []
        for i, (name, value) in enumerate(attributes.items()):
            names[f"#a{i}"] = name
            values[f":v{i}"] = value
            assignments.append(f"#a{i} = :v{i}")

        try:
            resp = self._table(table).update_item(
                Key=dict(key),
                UpdateExpression="SET " + ", ".join(assignments),
                ConditionExpression="attribute_exists(#pk)",
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
                ReturnValues="ALL_NEW",
            )
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                raise ItemNotFound(f"{table.name}: no item for key {dict(key)}") from e
            raise StoreError(f"update_item on {table.name} failed: {e}") from e
        except BotoCoreError as e:
            raise StoreError(f"update_item on {table.name} failed: {e}") from e
        return resp["Attributes"]

    def _get(self, table: Table, key: Mapping[str, Any]) -> dict:
        try:
            resp = self._table(table).get_item(Key=dict(key))
        except (BotoCoreError, ClientError) as e:
            raise StoreError(f"get_item on {table.name} failed: {e}") from e
        if "Item" not in resp:
            raise ItemNotFound(f"{table.name}: no item for key {dict(key)}")
        return resp["Item"]

    def delete(self, table: Table, key: Mapping[str, Any]) -> None:
        try:
            self._table(table).delete_item(Key=dict(key))
        except (BotoCoreError, ClientError) as e:
            raise StoreError(f"delete_item on {table.name} failed: {e}") from e

    def health_check(self) -> bool:
        try:
            self._resource.meta.client.list_tables(Limit=1)
            return True
        except (BotoCoreError, ClientError) as e:
            logger.error("dynamodb_health_check_failed", error=str(e))
            return False
