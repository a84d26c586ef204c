"""
Noloco external action.

Runs record operations (create, get, getMany, search, update, delete) against
one Noloco table for every input item of a node.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from noloco_engine.core.context import NodeExecutionContext, split_include
from noloco_engine.core.exceptions import NodeOperationError
from noloco_engine.data_mapping.field_mapping import searchable_field_ids
from noloco_engine.data_mapping.filters import (
    FILTER_MODE_BUILDER,
    build_filter,
    parse_raw_filter,
    validate_filter_fields,
)
from noloco_engine.data_mapping.payload import ensure_update_payload, transform_values_to_payload
from noloco_engine.models.execution import LogLevel, NodeExecutionResult
from noloco_engine.runners.pagination import RecordQuery, fetch_all_records
from noloco_engine.sdks.noloco_sdk.client import NolocoClient

from .base_external_action import BaseExternalAction

AUTO_MAP_INPUT_DATA = "autoMapInputData"

Operation = Callable[[NolocoClient, NodeExecutionContext, int], Awaitable[List[Dict[str, Any]]]]


class NolocoExternalAction(BaseExternalAction):
    """
    Noloco external action handler.

    A client passed to the constructor is reused and left open; otherwise one
    client is built per execution from the node's credentials and closed when
    the batch ends.
    """

    def __init__(self, client: Optional[NolocoClient] = None):
        super().__init__("noloco")
        self._client = client
        self._operations: Dict[str, Operation] = {
            "create": self._create,
            "get": self._get,
            "getMany": self._get_many,
            "search": self._search,
            "update": self._update,
            "delete": self._delete,
        }

    @property
    def supported_operations(self) -> List[str]:
        return list(self._operations)

    async def handle_operation(
        self, context: NodeExecutionContext, operation: str
    ) -> NodeExecutionResult:
        """Handle Noloco-specific operations."""
        handler = self._operations.get(operation)
        if handler is None:
            raise NodeOperationError(
                f"Unsupported Noloco operation '{operation}'. "
                f"Supported: {', '.join(self.supported_operations)}"
            )

        client = self._client or NolocoClient(auth_headers=self.get_auth_headers(context))
        try:
            items = await self.process_items(
                context, operation, lambda index: handler(client, context, index)
            )
        finally:
            if client is not self._client:
                await client.close()

        self.log_execution(context, f"{operation} produced {len(items)} item(s)")
        return self.create_success_result(operation, items)

    # Parameter helpers

    def _get_target(self, context: NodeExecutionContext, item_index: int) -> Tuple[str, str]:
        project = context.get_node_parameter("app", item_index, "", extract_value=True)
        table = context.get_node_parameter("dataType", item_index, "", extract_value=True)
        if not project or not table:
            raise NodeOperationError("Both an app and a table must be selected", item_index)
        return str(project), str(table)

    def _get_record_id(self, context: NodeExecutionContext, item_index: int) -> str:
        record_id = context.get_node_parameter("recordId", item_index, "", extract_value=True)
        if record_id is None or str(record_id).strip() == "":
            raise NodeOperationError("Record ID is required", item_index)
        return str(record_id).strip()

    def _collect_payload(self, context: NodeExecutionContext, item_index: int) -> Dict[str, Any]:
        fields = context.get_node_parameter("fields", item_index, {}) or {}
        if fields.get("mappingMode") == AUTO_MAP_INPUT_DATA:
            values = context.get_item_json(item_index)
        else:
            values = fields.get("value") or {}
        return transform_values_to_payload(values)

    def _build_query(
        self,
        context: NodeExecutionContext,
        item_index: int,
        filter_expression: Optional[Dict[str, Any]],
        sort_by: Optional[str],
        order_by: Optional[str],
    ) -> RecordQuery:
        project, table = self._get_target(context, item_index)
        return_all = bool(context.get_node_parameter("returnAll", item_index, False))
        limit = context.get_node_parameter("limit", item_index, None)
        return RecordQuery(
            project=project,
            table=table,
            filter=filter_expression,
            sort_by=sort_by,
            order_by=order_by or "DESC",
            limit=int(limit) if limit is not None else None,
            return_all=return_all,
        )

    # Operations

    async def _create(
        self, client: NolocoClient, context: NodeExecutionContext, item_index: int
    ) -> List[Dict[str, Any]]:
        project, table = self._get_target(context, item_index)
        payload = self._collect_payload(context, item_index)
        result = await client.create_record(project, table, payload)
        return [result or {"success": True}]

    async def _get(
        self, client: NolocoClient, context: NodeExecutionContext, item_index: int
    ) -> List[Dict[str, Any]]:
        project, table = self._get_target(context, item_index)
        record_id = self._get_record_id(context, item_index)
        options = context.get_node_parameter("options", item_index, {}) or {}
        result = await client.get_record(
            project, table, record_id, include=split_include(options.get("include"))
        )
        return [result or {}]

    async def _get_many(
        self, client: NolocoClient, context: NodeExecutionContext, item_index: int
    ) -> List[Dict[str, Any]]:
        additional = context.get_node_parameter("additionalOptions", item_index, {}) or {}
        query = self._build_query(
            context,
            item_index,
            filter_expression=parse_raw_filter(additional.get("filter")),
            sort_by=additional.get("sortBy", "createdAt"),
            order_by=additional.get("orderBy", "DESC"),
        )
        return await fetch_all_records(client, query)

    async def _search(
        self, client: NolocoClient, context: NodeExecutionContext, item_index: int
    ) -> List[Dict[str, Any]]:
        mode = context.get_node_parameter("filterMode", item_index, FILTER_MODE_BUILDER)
        where = context.get_node_parameter("where", item_index, {}) or {}
        filter_expression = build_filter(
            mode,
            conditions=where.get("conditions") or [],
            raw=context.get_node_parameter("customQuery", item_index, None),
        )

        if filter_expression and context.get_node_parameter("validateFields", item_index, False):
            project, table = self._get_target(context, item_index)
            schema = await client.get_table_schema(project, table)
            validate_filter_fields(filter_expression, searchable_field_ids(schema))

        # only the first sort rule is honoured
        rules = (context.get_node_parameter("sort", item_index, {}) or {}).get("rules") or []
        sort_by, order_by = None, "DESC"
        if rules:
            sort_by = rules[0].get("field")
            order_by = rules[0].get("direction") or "DESC"

        query = self._build_query(context, item_index, filter_expression, sort_by, order_by)
        records = await fetch_all_records(client, query)
        self.log_execution(
            context,
            f"Search on {query.project}/{query.table} returned {len(records)} record(s)",
            LogLevel.DEBUG.value,
        )
        return records

    async def _update(
        self, client: NolocoClient, context: NodeExecutionContext, item_index: int
    ) -> List[Dict[str, Any]]:
        project, table = self._get_target(context, item_index)
        record_id = self._get_record_id(context, item_index)
        payload = self._collect_payload(context, item_index)
        ensure_update_payload(payload)
        result = await client.update_record(project, table, record_id, payload)
        return [result or {"success": True, "id": record_id}]

    async def _delete(
        self, client: NolocoClient, context: NodeExecutionContext, item_index: int
    ) -> List[Dict[str, Any]]:
        project, table = self._get_target(context, item_index)
        record_id = self._get_record_id(context, item_index)
        result = await client.delete_record(project, table, record_id)
        return [result or {"success": True, "id": record_id}]


__all__ = ["NolocoExternalAction"]
