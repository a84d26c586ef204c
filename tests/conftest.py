"""
Pytest configuration and shared fixtures for the Noloco engine tests.
"""
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from noloco_engine.core.config import reset_settings
from noloco_engine.core.context import NodeExecutionContext
from noloco_engine.models.workflow import Node
from noloco_engine.sdks.noloco_sdk.auth import NolocoCredentials
from noloco_engine.sdks.noloco_sdk.client import NolocoClient
from noloco_engine.sdks.noloco_sdk.models import RecordsPage, TableSchema


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch):
    """Set up test environment variables."""
    for name in (
        "NOLOCO_BASE_URL",
        "NOLOCO_PAGE_SIZE_CAP",
        "NOLOCO_DEFAULT_LIMIT",
        "NOLOCO_DROPDOWN_PAGE_SIZE",
        "NOLOCO_MANUAL_SAMPLE_SIZE",
        "LOG_LEVEL",
        "LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def schema_payload() -> Dict[str, Any]:
    """Schema response of a `project` table, as returned with format=input."""
    return {
        "id": 7,
        "name": "project",
        "apiName": "project",
        "display": "Project",
        "enabled": True,
        "fields": [
            {"id": 1, "apiName": "id", "display": "ID", "type": "INTEGER", "unique": True},
            {"id": 2, "apiName": "uuid", "display": "UUID", "type": "TEXT", "unique": True},
            {"id": 3, "apiName": "createdAt", "display": "Created At", "type": "DATE"},
            {"id": 4, "apiName": "updatedAt", "display": "Updated At", "type": "DATE"},
            {"id": 5, "apiName": "name", "display": "Name", "type": "TEXT"},
            {
                "id": 6,
                "apiName": "status",
                "display": "Status",
                "type": "SINGLE_OPTION",
                "options": [
                    {"id": 1, "name": "IN_PROGRESS", "display": "In progress", "color": "BLUE", "order": 0},
                    {"id": 2, "name": "DONE", "display": "Done", "order": 1},
                ],
            },
            {
                "id": 8,
                "apiName": "owner",
                "display": "Owner",
                "type": "user",
                "relationship": "MANY_TO_ONE",
                "relationshipDataType": {"id": 1, "name": "user", "apiName": "user", "display": "User"},
            },
            {"id": 9, "apiName": "budget", "display": "Budget", "type": "DECIMAL", "unique": True},
            {"id": 10, "apiName": "notes", "display": "Notes", "type": "RICH_TEXT"},
            {
                "id": 11,
                "apiName": "address",
                "display": "Address",
                "type": "OBJECT",
                "typeOptions": {
                    "format": "address",
                    "subFields": {
                        "street": {"type": "TEXT"},
                        "city": {"type": "TEXT"},
                        "postalCode": {"type": "TEXT"},
                    },
                },
            },
            {
                "id": 12,
                "apiName": "location",
                "display": "Location",
                "type": "OBJECT",
                "typeOptions": {"format": "geoShape", "subFields": {"shape": {"type": "TEXT"}}},
            },
            {"id": 13, "apiName": "score", "display": "Score", "type": "FORMULA"},
        ],
    }


@pytest.fixture
def table_schema(schema_payload) -> TableSchema:
    return TableSchema.from_dict(schema_payload)


def make_page(
    records: List[Dict[str, Any]],
    has_next_page: bool = False,
    end_cursor: Optional[str] = None,
) -> RecordsPage:
    """Build a RecordsPage from plain records and page info."""
    return RecordsPage.from_dict(
        {
            "records": records,
            "pageInfo": {"hasNextPage": has_next_page, "endCursor": end_cursor},
            "totalCount": len(records),
        }
    )


@pytest.fixture
def records_page():
    """RecordsPage factory for tests that script list_records responses."""
    return make_page


@pytest.fixture
def mock_noloco_client():
    """Mock NolocoClient for testing."""
    client = MagicMock(spec=NolocoClient)

    client.get_me = AsyncMock(return_value={"id": 1, "email": "ops@example.com"})
    client.list_apps = AsyncMock(return_value=[])
    client.list_tables = AsyncMock(return_value=[])
    client.get_table_schema = AsyncMock()
    client.list_records = AsyncMock(return_value=make_page([]))
    client.get_record = AsyncMock(return_value=None)
    client.create_record = AsyncMock(return_value=None)
    client.update_record = AsyncMock(return_value=None)
    client.delete_record = AsyncMock(return_value=None)
    client.close = AsyncMock()

    return client


@pytest.fixture
def credentials() -> NolocoCredentials:
    return NolocoCredentials(account_key="acct-key", app_key="app-key")


@pytest.fixture
def make_context(credentials):
    """Factory for a NodeExecutionContext around a Noloco node."""

    def _make(
        configurations: Optional[Dict[str, Any]] = None,
        items: Optional[List[Dict[str, Any]]] = None,
        item_parameters: Optional[List[Dict[str, Any]]] = None,
        continue_on_fail: bool = False,
        manual: bool = False,
    ) -> NodeExecutionContext:
        node = Node(
            id="noloco_node_1",
            name="Noloco",
            configurations={"app": "acme", "dataType": "project", **(configurations or {})},
            continue_on_fail=continue_on_fail,
        )
        return NodeExecutionContext(
            node=node,
            items=items,
            item_parameters=item_parameters,
            metadata={"credentials": credentials},
            manual=manual,
        )

    return _make
