"""Idempotent DynamoDB table provisioner."""

from __future__ import annotations

from typing import Any

import boto3
import structlog
from botocore.exceptions import ClientError

from todo_tracker.config import DynamoSettings
from todo_tracker.db.store import Table, Tables

logger = structlog.get_logger()


class DynamoTableProvisioner:
    """Creates the (HASH, RANGE) string-keyed tables the store expects."""

    def __init__(self, client: Any | None = None, settings: DynamoSettings | None = None):
        if client is None:
            settings = settings or DynamoSettings()
            client = boto3.client("dynamodb", **settings.client_kwargs())
        self._client = client

    def table_exists(self, name: str) -> bool:
        try:
            self._client.describe_table(TableName=name)
            return True
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") != "ResourceNotFoundException":
                raise
            return False

    def ensure_table(self, table: Table, *, wait: bool = True) -> bool:
        """Create ``table`` if missing. Returns True when it was created."""
        if self.table_exists(table.name):
            logger.info("table_exists", table=table.name)
            return False

        logger.info("creating_table", table=table.name)
        try:
            self._client.create_table(
                TableName=table.name,
                KeySchema=[
                    {"AttributeName": table.partition_key, "KeyType": "HASH"},
                    {"AttributeName": table.sort_key, "KeyType": "RANGE"},
                ],
                AttributeDefinitions=[
                    {"AttributeName": table.partition_key, "AttributeType": "S"},
                    {"AttributeName": table.sort_key, "AttributeType": "S"},
                ],
                BillingMode="PAY_PER_REQUEST",
            )
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") != "ResourceInUseException":
                raise
            logger.info("table_created_concurrently", table=table.name)
            return False

        if wait:
            self._client.get_waiter("table_exists").wait(TableName=table.name)
        logger.info("table_created", table=table.name)
        return True

    def ensure_all(self, tables: Tables, *, wait: bool = True) -> list[str]:
        """Provision both tables; returns the names that were newly created."""
        created = []
        for table in (tables.todos, tables.categories):
            if self.ensure_table(table, wait=wait):
                created.append(table.name)
        return created
