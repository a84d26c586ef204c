"""
Noloco SDK for workflow automation.

This SDK provides the Noloco integration pieces the workflow nodes build on:
- Account metadata (current user, apps)
- Schema discovery (tables, fields, composite sub-field layouts)
- Record management (list with cursor pagination, get, create, update, delete)
"""

from .auth import NolocoCredentials
from .client import NolocoClient
from .exceptions import (
    NolocoAPIError,
    NolocoAuthError,
    NolocoConflictError,
    NolocoConnectionError,
    NolocoError,
    NolocoNotFoundError,
    NolocoPermissionError,
    NolocoRateLimitError,
    NolocoServerError,
    NolocoValidationError,
)
from .models import (
    App,
    Field,
    FieldKind,
    FieldOption,
    PageInfo,
    RecordsPage,
    RecordsQueryParams,
    RelationshipType,
    Table,
    TableSchema,
    get_sub_fields,
)

__version__ = "1.0.0"
__all__ = [
    "NolocoClient",
    "NolocoCredentials",
    "NolocoError",
    "NolocoAPIError",
    "NolocoAuthError",
    "NolocoPermissionError",
    "NolocoNotFoundError",
    "NolocoValidationError",
    "NolocoRateLimitError",
    "NolocoConflictError",
    "NolocoServerError",
    "NolocoConnectionError",
    "App",
    "Field",
    "FieldKind",
    "FieldOption",
    "PageInfo",
    "RecordsPage",
    "RecordsQueryParams",
    "RelationshipType",
    "Table",
    "TableSchema",
    "get_sub_fields",
]
