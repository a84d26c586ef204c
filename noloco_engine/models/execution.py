"""
Execution models shared by the Noloco runners and trigger.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ExecutionStatus(str, Enum):
    """Status of a node execution."""

    SUCCESS = "SUCCESS"
    ERROR = "ERROR"
    SKIPPED = "SKIPPED"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class NodeExecutionResult(BaseModel):
    """Result of node execution."""

    status: ExecutionStatus = Field(..., description="Execution status")
    output_data: Dict[str, Any] = Field(
        default_factory=dict, description="Output data from node execution"
    )
    error_message: Optional[str] = Field(
        default=None, description="Error message if execution failed"
    )
    error_details: Optional[Dict[str, Any]] = Field(
        default=None, description="Detailed error information"
    )
    execution_time_ms: Optional[float] = Field(
        default=None, description="Execution time in milliseconds"
    )
    logs: Optional[List[str]] = Field(default=None, description="Execution logs")
    metadata: Optional[Dict[str, Any]] = Field(default=None, description="Additional metadata")

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary."""
        return {
            "status": self.status.value,
            "output_data": self.output_data,
            "error_message": self.error_message,
            "error_details": self.error_details,
            "execution_time_ms": self.execution_time_ms,
            "logs": self.logs or [],
            "metadata": self.metadata or {},
        }
