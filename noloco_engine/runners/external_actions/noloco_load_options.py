"""
Option loaders for the Noloco node configuration UI.

Every loader degrades to an empty result when the API or the schema is not
available, so an unreachable workspace never blocks node configuration.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from noloco_engine.core.config import get_settings
from noloco_engine.core.context import NodeExecutionContext
from noloco_engine.data_mapping.field_mapping import (
    RELATIONSHIP_ID_SUFFIX,
    build_field_options,
    build_mapping_columns,
    build_searchable_field_options,
)
from noloco_engine.models.mapping import (
    ListSearchItem,
    ListSearchResult,
    NodePropertyOption,
    ResourceMapperFields,
)
from noloco_engine.sdks.noloco_sdk.client import NolocoClient
from noloco_engine.sdks.noloco_sdk.models import Field, RecordsQueryParams, TableSchema

logger = logging.getLogger(__name__)

DISPLAY_NAME_KEYS = ("name", "title", "email", "display")


def record_display_name(record: Dict[str, Any]) -> str:
    """Best human label for a record in a dropdown."""
    for key in DISPLAY_NAME_KEYS:
        value = record.get(key)
        if value:
            return str(value)
    return f"Record #{record.get('id')}"


class NolocoLoadOptions:
    """Loads dropdown, list-search and resource-mapper values for one node."""

    def __init__(self, client: NolocoClient, context: NodeExecutionContext):
        self.client = client
        self.context = context
        self.settings = get_settings()

    def _parameter(self, name: str) -> str:
        value = self.context.get_node_parameter(name, 0, "", extract_value=True)
        return str(value) if value else ""

    async def _load_schema(self) -> Optional[TableSchema]:
        project, table = self._parameter("app"), self._parameter("dataType")
        if not project or not table:
            return None
        return await self.client.get_table_schema(project, table)

    def _find_field(self, schema: TableSchema, field_name: str) -> Optional[Field]:
        if field_name.endswith(RELATIONSHIP_ID_SUFFIX):
            stripped = schema.get_field(field_name[: -len(RELATIONSHIP_ID_SUFFIX)])
            if stripped is not None:
                return stripped
        return schema.get_field(field_name)

    async def get_apps(self) -> ListSearchResult:
        try:
            apps = await self.client.list_apps()
        except Exception as e:
            logger.warning(f"Could not load Noloco apps: {e}")
            return ListSearchResult()
        return ListSearchResult(results=[ListSearchItem(name=app.name, value=app.name) for app in apps])

    async def get_tables(self, filter: Optional[str] = None) -> ListSearchResult:
        """
        List enabled tables of the selected app.

        Args:
            filter: Case-insensitive substring matched against display name and API name
        """
        project = self._parameter("app")
        if not project:
            return ListSearchResult()

        try:
            tables = await self.client.list_tables(project)
        except Exception as e:
            logger.warning(f"Could not load tables of app '{project}': {e}")
            return ListSearchResult()

        tables = [table for table in tables if table.enabled]
        if filter:
            needle = filter.lower()
            tables = [
                table
                for table in tables
                if needle in table.display.lower() or needle in table.api_name.lower()
            ]
        return ListSearchResult(
            results=[ListSearchItem(name=table.display, value=table.api_name) for table in tables]
        )

    async def get_records(
        self, filter: Optional[str] = None, pagination_token: Optional[str] = None
    ) -> ListSearchResult:
        """
        List one page of records of the selected table, newest first.

        The name filter only applies to the fetched page.
        """
        project, table = self._parameter("app"), self._parameter("dataType")
        if not project or not table:
            return ListSearchResult()

        try:
            page = await self.client.list_records(
                project,
                table,
                RecordsQueryParams(
                    sort_by="createdAt",
                    order_by="DESC",
                    first=self.settings.noloco_dropdown_page_size,
                    after=pagination_token or None,
                ),
            )
        except Exception as e:
            logger.warning(f"Could not load records of '{project}/{table}': {e}")
            return ListSearchResult()

        results = [
            ListSearchItem(name=record_display_name(record), value=str(record.get("id")))
            for record in page.records
        ]
        if filter:
            needle = filter.lower()
            results = [item for item in results if needle in item.name.lower()]

        return ListSearchResult(results=results, pagination_token=page.next_cursor)

    async def get_fields(self) -> List[NodePropertyOption]:
        try:
            schema = await self._load_schema()
        except Exception as e:
            logger.warning(f"Could not load fields: {e}")
            return []
        return build_field_options(schema) if schema else []

    async def get_searchable_fields(self) -> List[NodePropertyOption]:
        try:
            schema = await self._load_schema()
        except Exception as e:
            logger.warning(f"Could not load searchable fields: {e}")
            return []
        return build_searchable_field_options(schema) if schema else []

    async def get_field_options(self) -> List[NodePropertyOption]:
        """Choices of the option field named by the ``fieldName`` parameter."""
        field_name = self._parameter("fieldName")
        if not field_name:
            return []

        try:
            schema = await self._load_schema()
        except Exception as e:
            logger.warning(f"Could not load options of field '{field_name}': {e}")
            return []
        field = self._find_field(schema, field_name) if schema else None
        if field is None or not field.options:
            return []

        return [
            NodePropertyOption(
                name=option.display,
                value=option.name,
                description=f"Color: {option.color}" if option.color else None,
            )
            for option in field.options
        ]

    async def get_related_records(self) -> List[NodePropertyOption]:
        """First page of records of the table a relationship field points to."""
        field_name = self._parameter("fieldName")
        if not field_name:
            return []

        try:
            schema = await self._load_schema()
            field = self._find_field(schema, field_name) if schema else None
            if field is None or not field.is_relationship:
                return []

            target = field.relationship_data_type
            if target is None or not target.api_name:
                logger.warning(
                    f"Relationship field '{field.api_name}' has no available target table"
                )
                return []

            page = await self.client.list_records(
                self._parameter("app"),
                target.api_name,
                RecordsQueryParams(first=self.settings.noloco_dropdown_page_size),
            )
        except Exception as e:
            logger.warning(f"Could not load related records for '{field_name}': {e}")
            return []

        return [
            NodePropertyOption(name=record_display_name(record), value=str(record.get("id")))
            for record in page.records
        ]

    async def get_mapping_columns(self) -> ResourceMapperFields:
        try:
            schema = await self._load_schema()
        except Exception as e:
            logger.warning(f"Could not load mapping columns: {e}")
            return ResourceMapperFields()
        if schema is None:
            return ResourceMapperFields()
        return ResourceMapperFields(fields=build_mapping_columns(schema))


__all__ = ["NolocoLoadOptions", "record_display_name"]
