"""PostgREST client for the hosted song request table."""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime

import httpx
from pydantic import ValidationError

from core.exceptions import SongStoreError
from core.sentry import add_breadcrumb
from core.telemetry import record_store_call
from songs.models import SongRequest

logger = logging.getLogger(__name__)

SELECT_COLUMNS = "id,name,url,date"


def format_timestamp(value: datetime) -> str:
    """Render a datetime as an ISO 8601 UTC timestamp for PostgREST filters."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class SongStore:
    """Read/delete access to the song request table of a Supabase project.

    Queries go through the project's PostgREST endpoint. Every failure is
    raised as SongStoreError; callers decide how to degrade.
    """

    def __init__(
        self,
        url: str,
        key: str,
        table: str = "items",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the store.

        Args:
            url: Supabase project URL (e.g. https://xyz.supabase.co)
            key: Publishable (anon) API key
            table: Name of the song request table
            timeout: Timeout in seconds for every request
            transport: Optional httpx transport, used to substitute the backend
        """
        self.url = url.rstrip("/")
        self.key = key
        self.table = table
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=f"{self.url}/rest/v1",
                headers={
                    "apikey": self.key,
                    "Authorization": f"Bearer {self.key}",
                    "Accept": "application/json",
                },
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def check_api(self) -> bool:
        """Check that the table is reachable with the configured key."""
        try:
            client = await self._get_client()
            resp = await client.get(f"/{self.table}", params={"select": "id", "limit": "1"})
            return bool(resp.status_code == 200)
        except Exception:
            return False

    async def _request(
        self,
        operation: str,
        method: str,
        params: list[tuple[str, str]],
        headers: dict[str, str] | None = None,
    ) -> list[dict]:
        """Issue one request against the table and return the decoded rows.

        Raises:
            SongStoreError: On transport errors, non-2xx responses or a body
                that is not a list of rows
        """
        add_breadcrumb("song_store", operation, {"params": params})
        client = await self._get_client()
        start = time.perf_counter()
        try:
            response = await client.request(
                method, f"/{self.table}", params=params, headers=headers
            )
        except httpx.HTTPError as e:
            raise SongStoreError(
                f"Song store {operation} failed: {e}", details={"operation": operation}
            ) from e
        finally:
            record_store_call((time.perf_counter() - start) * 1000)

        if response.status_code >= 400:
            raise SongStoreError(
                f"Song store {operation} returned HTTP {response.status_code}",
                details={
                    "operation": operation,
                    "status_code": response.status_code,
                    "body": response.text[:500],
                },
            )

        if response.status_code == 204 or not response.content:
            return []

        try:
            rows = response.json()
        except ValueError as e:
            raise SongStoreError(
                f"Song store {operation} returned invalid JSON",
                details={"operation": operation},
            ) from e

        if not isinstance(rows, list):
            raise SongStoreError(
                f"Song store {operation} returned unexpected payload",
                details={"operation": operation, "type": type(rows).__name__},
            )
        return rows

    def _parse_rows(self, operation: str, rows: list[dict]) -> list[SongRequest]:
        try:
            return [SongRequest.model_validate(row) for row in rows]
        except ValidationError as e:
            raise SongStoreError(
                f"Song store {operation} returned malformed rows",
                details={"operation": operation, "errors": e.error_count()},
            ) from e

    async def fetch_scheduled(
        self, start: datetime, end: datetime, limit: int = 2
    ) -> list[SongRequest]:
        """Fetch rows whose date falls in [start, end), earliest first.

        Args:
            start: Inclusive lower bound
            end: Exclusive upper bound
            limit: Maximum number of rows

        Returns:
            Rows ordered by date ascending
        """
        params = [
            ("select", SELECT_COLUMNS),
            ("date", f"gte.{format_timestamp(start)}"),
            ("date", f"lt.{format_timestamp(end)}"),
            ("order", "date.asc"),
            ("limit", str(limit)),
        ]
        rows = await self._request("fetch_scheduled", "GET", params)
        songs = self._parse_rows("fetch_scheduled", rows)
        logger.debug(f"Fetched {len(songs)} scheduled songs between {start} and {end}")
        return songs

    async def fetch_by_requester(self, name: str) -> list[SongRequest]:
        """Fetch every row submitted under a requester name, highest id first.

        Ordering is by id rather than date; ids are assigned sequentially so
        the newest submission comes first.
        """
        params = [
            ("select", SELECT_COLUMNS),
            ("name", f"eq.{name}"),
            ("order", "id.desc"),
        ]
        rows = await self._request("fetch_by_requester", "GET", params)
        songs = self._parse_rows("fetch_by_requester", rows)
        logger.debug(f"Fetched {len(songs)} songs requested by '{name}'")
        return songs

    async def delete(self, song_id: int | str, requester: str | None = None) -> int:
        """Delete a row by id.

        Args:
            song_id: Identifier of the row to delete
            requester: When given, only a row submitted by this requester is deleted

        Returns:
            Number of rows the backend reports as deleted
        """
        params = [("id", f"eq.{song_id}")]
        if requester is not None:
            params.append(("name", f"eq.{requester}"))
        rows = await self._request(
            "delete", "DELETE", params, headers={"Prefer": "return=representation"}
        )
        logger.info(f"Deleted {len(rows)} row(s) for song id {song_id}")
        return len(rows)
