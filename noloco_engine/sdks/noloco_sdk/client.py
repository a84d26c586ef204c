"""
Noloco API client implementation.

Provides an async client for the Noloco REST API: account metadata, table
schemas, and record reads/writes with cursor pagination.
"""

import json
import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from noloco_engine.core.config import get_settings

from .exceptions import (
    NolocoAPIError,
    NolocoAuthError,
    NolocoConflictError,
    NolocoConnectionError,
    NolocoNotFoundError,
    NolocoPermissionError,
    NolocoRateLimitError,
    NolocoServerError,
    NolocoValidationError,
)
from .models import App, RecordsPage, RecordsQueryParams, Table, TableSchema

logger = logging.getLogger(__name__)


class NolocoClient:
    """
    Noloco API client for interacting with apps, table schemas and records.

    The client never builds credentials itself: ``auth_headers`` come from the
    credential collaborator (see ``NolocoCredentials.auth_headers``). Requests
    are issued once; failures surface as ``NolocoError`` subclasses.
    """

    def __init__(
        self,
        auth_headers: Optional[Dict[str, str]] = None,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize Noloco API client.

        Args:
            auth_headers: Authentication headers supplied by the credential layer
            base_url: API host, defaults to the configured Noloco host
            http_client: Pre-built httpx client (tests inject a MockTransport here)
        """
        self.settings = get_settings()
        self.base_url = (base_url or self.settings.noloco_base_url).rstrip("/")
        self.prefix = self.settings.noloco_api_version_prefix

        if http_client is not None:
            self.client = http_client
            self.client.headers.update(auth_headers or {})
        else:
            self.client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(
                    self.settings.api_timeout_read, connect=self.settings.api_timeout_connect
                ),
                headers={
                    "Accept": "application/json",
                    "Content-Type": "application/json",
                    **(auth_headers or {}),
                },
            )

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Make a single request to the Noloco API.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            endpoint: API path below the version prefix, e.g. ``/schema/my-app``
            data: JSON body for POST/PUT
            params: Query parameters

        Returns:
            Decoded JSON body, or None for an empty body

        Raises:
            NolocoConnectionError: When no response was received
            NolocoError: Subclass matching the HTTP status for non-2xx responses
        """
        path = f"{self.prefix}{endpoint}"
        start_time = time.time()

        try:
            response = await self.client.request(method, path, json=data, params=params)
        except httpx.TimeoutException as e:
            raise NolocoConnectionError(f"Request to {path} timed out: {e}") from e
        except httpx.RequestError as e:
            raise NolocoConnectionError(f"Request to {path} failed: {e}") from e

        logger.debug(
            f"{method} {path} - {response.status_code} "
            f"({int((time.time() - start_time) * 1000)}ms)"
        )

        if not response.is_success:
            self._handle_http_error(response)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            raise NolocoAPIError(
                f"Noloco returned a non-JSON body for {method} {path}",
                status_code=response.status_code,
            )

    def _handle_http_error(self, response: httpx.Response) -> None:
        """Handle HTTP error responses."""
        code = "unknown_error"
        try:
            error_data = response.json()
            message = error_data.get("message") or error_data.get("error") or f"HTTP {response.status_code}"
            code = error_data.get("code", code)
        except (ValueError, AttributeError):
            message = response.text or f"HTTP {response.status_code}"

        status = response.status_code
        if status in (400, 422):
            raise NolocoValidationError(message, error_code=code, status_code=status)
        elif status == 401:
            raise NolocoAuthError(message, error_code=code, status_code=status)
        elif status == 403:
            raise NolocoPermissionError(message, error_code=code, status_code=status)
        elif status == 404:
            raise NolocoNotFoundError(message, error_code=code, status_code=status)
        elif status == 409:
            raise NolocoConflictError(message, error_code=code, status_code=status)
        elif status == 429:
            retry_after = response.headers.get("Retry-After")
            raise NolocoRateLimitError(
                message,
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
                error_code=code,
                status_code=status,
            )
        elif status >= 500:
            raise NolocoServerError(message, error_code=code, status_code=status)
        else:
            raise NolocoAPIError(message, error_code=code, status_code=status)

    def _data_params(self, include: Optional[List[str]] = None) -> Dict[str, Any]:
        params: Dict[str, Any] = {"response_format": self.settings.noloco_response_format}
        if include:
            params["include"] = ",".join(include)
        return params

    # Meta operations
    async def get_me(self) -> Dict[str, Any]:
        """
        Get the account the keys belong to. Used as the connection test.
        """
        return await self._make_request("GET", "/meta/me")

    async def list_apps(self) -> List[App]:
        """
        List all apps the account has access to.

        Returns:
            List of App objects
        """
        response = await self._make_request("GET", "/meta/apps") or {}
        return [App.from_dict(app) for app in response.get("apps", [])]

    # Schema operations
    async def list_tables(self, project_name: str) -> List[Table]:
        """
        List all tables in a project.

        Args:
            project_name: App (project) name

        Returns:
            List of Table objects, disabled tables included
        """
        response = await self._make_request("GET", f"/schema/{project_name}") or {}
        return [Table.from_dict(table) for table in response.get("tables", [])]

    async def get_table_schema(self, project_name: str, data_type_name: str) -> TableSchema:
        """
        Fetch a table with its fields and relationship data types.

        Uses ``format=input`` so OBJECT fields carry their sub-field declarations.

        Args:
            project_name: App (project) name
            data_type_name: Table API name

        Returns:
            TableSchema with ordered fields
        """
        response = await self._make_request(
            "GET",
            f"/schema/{project_name}/{data_type_name}",
            params={"include": "", "format": "input"},
        )
        return TableSchema.from_dict(response or {})

    # Record operations
    async def list_records(
        self,
        project_name: str,
        data_type_name: str,
        params: Optional[RecordsQueryParams] = None,
    ) -> RecordsPage:
        """
        Fetch one page of records.

        Args:
            project_name: App (project) name
            data_type_name: Table API name
            params: Sorting, page size, cursor, filter and include options

        Returns:
            RecordsPage with records and cursor metadata
        """
        params = params or RecordsQueryParams()
        qs = self._data_params(params.include)
        qs.update(
            {
                "sortBy": params.sort_by or "createdAt",
                "orderBy": params.order_by or "DESC",
                "first": str(params.first or self.settings.noloco_default_page_size),
            }
        )

        if params.after:
            qs["after"] = params.after
        if params.before:
            qs["before"] = params.before
        if params.filter:
            qs["filter"] = json.dumps(params.filter, separators=(",", ":"))

        response = await self._make_request(
            "GET", f"/data/{project_name}/{data_type_name}", params=qs
        )
        return RecordsPage.from_dict(response or {})

    async def get_record(
        self,
        project_name: str,
        data_type_name: str,
        record_id: Any,
        include: Optional[List[str]] = None,
    ) -> Optional[Dict[str, Any]]:
        """Fetch a single record by ID."""
        return await self._make_request(
            "GET",
            f"/data/{project_name}/{data_type_name}/{record_id}",
            params=self._data_params(include),
        )

    async def create_record(
        self,
        project_name: str,
        data_type_name: str,
        payload: Dict[str, Any],
        include: Optional[List[str]] = None,
    ) -> Optional[Dict[str, Any]]:
        """Create a new record."""
        return await self._make_request(
            "POST",
            f"/data/{project_name}/{data_type_name}",
            data=payload,
            params=self._data_params(include),
        )

    async def update_record(
        self,
        project_name: str,
        data_type_name: str,
        record_id: Any,
        payload: Dict[str, Any],
    ) -> Optional[Dict[str, Any]]:
        """Update an existing record."""
        return await self._make_request(
            "PUT",
            f"/data/{project_name}/{data_type_name}/{record_id}",
            data=payload,
            params=self._data_params(),
        )

    async def delete_record(
        self,
        project_name: str,
        data_type_name: str,
        record_id: Any,
        include: Optional[List[str]] = None,
    ) -> Optional[Dict[str, Any]]:
        """Delete a record."""
        return await self._make_request(
            "DELETE",
            f"/data/{project_name}/{data_type_name}/{record_id}",
            params=self._data_params(include),
        )

    async def search_records(
        self,
        project_name: str,
        data_type_name: str,
        filter_expression: Dict[str, Any],
        limit: int = 1,
    ) -> RecordsPage:
        """Fetch the first ``limit`` records matching a filter."""
        return await self.list_records(
            project_name,
            data_type_name,
            RecordsQueryParams(first=limit, filter=filter_expression),
        )

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()
