"""
Base external action class for the Noloco nodes.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List

from noloco_engine.core.context import NodeExecutionContext
from noloco_engine.core.exceptions import NodeOperationError
from noloco_engine.models.execution import ExecutionStatus, LogLevel, NodeExecutionResult
from noloco_engine.sdks.noloco_sdk.auth import NolocoCredentials

# Processes one input item and returns the output records for it
ItemHandler = Callable[[int], Awaitable[List[Dict[str, Any]]]]


class BaseExternalAction(ABC):
    """Base class for all external actions."""

    def __init__(self, integration_name: str):
        self.integration_name = integration_name
        self.logger = logging.getLogger(__name__)

    async def execute(self, context: NodeExecutionContext) -> NodeExecutionResult:
        """
        Execute the external action based on node configuration.

        Raises:
            NodeOperationError: When an item fails and the node does not continue on failure
        """
        operation = context.get_node_parameter("operation", 0, default="default")
        start_time = time.time()
        self.log_execution(
            context, f"Executing {operation} for {len(context.items)} item(s)", LogLevel.DEBUG.value
        )
        try:
            result = await self.handle_operation(context, operation)
        except NodeOperationError as e:
            location = f" (item {e.item_index})" if e.item_index is not None else ""
            self.log_execution(
                context, f"External action execution failed{location}: {e.message}", LogLevel.ERROR.value
            )
            raise

        result.execution_time_ms = (time.time() - start_time) * 1000
        return result

    @abstractmethod
    async def handle_operation(
        self, context: NodeExecutionContext, operation: str
    ) -> NodeExecutionResult:
        """Handle the specific integration operation."""
        pass

    def get_auth_headers(self, context: NodeExecutionContext) -> Dict[str, str]:
        """
        Get authentication headers handed over by the credential layer.

        The host places either ``NolocoCredentials`` or a ready header mapping
        under the ``credentials`` metadata key.
        """
        credentials = context.get_metadata("credentials")
        if isinstance(credentials, NolocoCredentials):
            return credentials.auth_headers()
        if isinstance(credentials, dict) and credentials:
            return dict(credentials)
        raise NodeOperationError(
            f"No {self.integration_name} credentials available for node {context.node_id}"
        )

    async def process_items(
        self,
        context: NodeExecutionContext,
        operation: str,
        handler: ItemHandler,
    ) -> List[Dict[str, Any]]:
        """
        Run ``handler`` for every input item, one after the other.

        A failing item aborts the batch, unless the node continues on failure:
        then the item yields ``{"error": message}`` and the batch goes on.

        Returns:
            Output items ``{"json": ..., "paired_item": index}``
        """
        output: List[Dict[str, Any]] = []

        for index in range(len(context.items)):
            try:
                results = await handler(index)
            except Exception as e:
                if context.continue_on_fail():
                    self.log_execution(
                        context,
                        f"{operation} failed for item {index}, continuing: {str(e)}",
                        LogLevel.WARNING.value,
                    )
                    output.append({"json": {"error": str(e)}, "paired_item": index})
                    continue
                if isinstance(e, NodeOperationError):
                    if e.item_index is None:
                        e.item_index = index
                    raise
                raise NodeOperationError(str(e), item_index=index) from e

            output.extend({"json": record, "paired_item": index} for record in results)

        return output

    def log_execution(self, context: NodeExecutionContext, message: str, level: str = "INFO"):
        """Log execution message with context."""
        log_message = f"[{self.integration_name.upper()}] {message}"
        extra = {"node_id": context.node_id}

        if level == LogLevel.ERROR.value:
            self.logger.error(log_message, extra=extra)
        elif level == LogLevel.WARNING.value:
            self.logger.warning(log_message, extra=extra)
        elif level == LogLevel.DEBUG.value:
            self.logger.debug(log_message, extra=extra)
        else:
            self.logger.info(log_message, extra=extra)

    def create_success_result(
        self, operation: str, items: List[Dict[str, Any]]
    ) -> NodeExecutionResult:
        """Create a standardized success result."""
        return NodeExecutionResult(
            status=ExecutionStatus.SUCCESS,
            output_data={"main": items},
            metadata={
                "node_type": "external_action",
                "integration": self.integration_name,
                "operation": operation,
                "item_count": len(items),
                "timestamp": datetime.now().isoformat(),
            },
        )


__all__ = ["BaseExternalAction", "ItemHandler"]
