"""
REST Record Store

DESIGN DECISION: Records live in a hosted Postgres behind a
PostgREST-style HTTP API (one table per record kind). We only ever
read whole tables for the signed-in user; row level security on the
backend decides which rows that is, so no user filter is sent.

TRADEOFFS:
- Whole tables are fetched on every dashboard load (fine for personal
  volumes, and the engine needs full lists for the cash flow window)
- Filtering by period happens in Python, not in the query

Transport failures are retried a few times with exponential backoff.
HTTP error statuses are not retried; they are reported as StorageError.
"""

from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from pocketbook.audit import get_logger, log_skipped_record
from pocketbook.config import RecordStoreSettings, get_settings
from pocketbook.errors import MalformedRecordError
from pocketbook.models.records import (
    Budget,
    Debt,
    ExpenseRecord,
    IncomeRecord,
    SavingsGoal,
)
from pocketbook.services.storage.interface import (
    ConnectionError,
    NotFoundError,
    RecordStoreInterface,
    StorageError,
)


logger = get_logger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)

# Table names on the backend
INCOMES_TABLE = "incomes"
EXPENSES_TABLE = "expenses"
DEBTS_TABLE = "debts"
SAVINGS_GOALS_TABLE = "savings_goals"
BUDGETS_TABLE = "budgets"


class RestRecordStore(RecordStoreInterface):
    """
    Record store backed by a PostgREST-style REST API.
    
    Pass an `httpx.AsyncClient` to reuse connections (or to inject a
    mock transport in tests). Without one, a short-lived client is
    opened per request.
    """
    
    def __init__(
        self,
        settings: Optional[RecordStoreSettings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._settings = settings or get_settings().record_store
        self._client = client
    
    def _headers(self) -> dict[str, str]:
        token = self._settings.access_token or self._settings.anon_key
        return {
            "apikey": self._settings.anon_key,
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
        }
    
    def _table_url(self, table: str) -> str:
        return f"{self._settings.url}/rest/v1/{table}"
    
    @retry(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        reraise=True,
    )
    async def _get(self, client: httpx.AsyncClient, table: str) -> httpx.Response:
        return await client.get(
            self._table_url(table),
            params={"select": "*"},
            headers=self._headers(),
            timeout=self._settings.timeout_seconds,
        )
    
    async def _fetch_rows(self, table: str) -> list[dict[str, Any]]:
        """
        Fetch every row of a table.
        
        Raises:
            ConnectionError: Backend unreachable after retries
            NotFoundError: Table does not exist
            StorageError: Any other HTTP or payload problem
        """
        try:
            if self._client is not None:
                response = await self._get(self._client, table)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._get(client, table)
        except httpx.TransportError as e:
            logger.error("store_fetch_failed", table=table, error=str(e))
            raise ConnectionError(f"Could not reach record store for '{table}': {e}") from e
        
        if response.status_code == 404:
            logger.error("store_fetch_failed", table=table, status=404)
            raise NotFoundError(f"Table not found: {table}")
        if response.status_code != 200:
            logger.error(
                "store_fetch_failed",
                table=table,
                status=response.status_code,
            )
            raise StorageError(
                f"Record store returned status {response.status_code} "
                f"for '{table}': {response.text}"
            )
        
        try:
            rows = response.json()
        except ValueError as e:
            raise StorageError(f"Invalid JSON from record store for '{table}': {e}") from e
        
        if not isinstance(rows, list):
            raise StorageError(f"Expected a list of rows for '{table}'")
        return rows
    
    def _parse_rows(
        self,
        rows: list[Any],
        model: type[RecordT],
        table: str,
    ) -> list[RecordT]:
        """Validate rows into models, skipping (and logging) bad ones."""
        records = []
        for row in rows:
            try:
                records.append(model.model_validate(row))
            except ValidationError as e:
                record_id = row.get("id") if isinstance(row, dict) else None
                log_skipped_record(
                    logger,
                    MalformedRecordError(
                        f"Invalid {table} row: {e.error_count()} validation error(s)",
                        record_id=None if record_id is None else str(record_id),
                        raw_value=None,
                    ),
                    table,
                )
        return records
    
    async def _list(self, table: str, model: type[RecordT]) -> list[RecordT]:
        rows = await self._fetch_rows(table)
        return self._parse_rows(rows, model, table)
    
    async def list_incomes(self) -> list[IncomeRecord]:
        return await self._list(INCOMES_TABLE, IncomeRecord)
    
    async def list_expenses(self) -> list[ExpenseRecord]:
        return await self._list(EXPENSES_TABLE, ExpenseRecord)
    
    async def list_debts(self) -> list[Debt]:
        return await self._list(DEBTS_TABLE, Debt)
    
    async def list_savings_goals(self) -> list[SavingsGoal]:
        return await self._list(SAVINGS_GOALS_TABLE, SavingsGoal)
    
    async def list_budgets(self) -> list[Budget]:
        return await self._list(BUDGETS_TABLE, Budget)
