"""Append-only access to the Supabase `cases` table."""

import logging
from typing import Any

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient, AsyncSupabaseException, acreate_client

from medimind.config import Settings
from medimind.errors import StoreError
from medimind.models import CaseRecord

logger = logging.getLogger(__name__)


def _api_error_detail(exc: APIError) -> str:
    parts = [getattr(exc, "message", None), getattr(exc, "details", None), getattr(exc, "hint", None)]
    detail = " | ".join(str(p) for p in parts if p)
    return detail or str(exc)


class CaseStore:
    def __init__(self, settings: Settings, client: AsyncClient | None = None) -> None:
        self.settings = settings
        self._client = client

    async def get_client(self) -> AsyncClient:
        if self._client is None:
            if not self.settings.supabase_url or not self.settings.supabase_service_role_key:
                raise StoreError(
                    "Supabase is not configured. "
                    "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY."
                )
            try:
                self._client = await acreate_client(
                    self.settings.supabase_url,
                    self.settings.supabase_service_role_key,
                )
            except AsyncSupabaseException as exc:
                raise StoreError("Supabase client could not be created", detail=str(exc)) from exc
        return self._client

    async def insert_case(self, record: CaseRecord) -> Any:
        """Insert one case row and return its generated id (or None)."""
        client = await self.get_client()
        try:
            response = await client.table(self.settings.cases_table).insert(record.to_row()).execute()
        except APIError as exc:
            logger.error("Supabase insert rejected: %s", _api_error_detail(exc))
            raise StoreError("Failed to save case to database", detail=_api_error_detail(exc)) from exc
        except httpx.HTTPError as exc:
            logger.error("Supabase insert failed: %s", exc)
            raise StoreError("Failed to save case to database", detail=str(exc)) from exc

        rows = response.data or []
        if not rows:
            return None
        return rows[0].get("id")

    async def ping(self) -> None:
        """Minimal existence read used by the health check."""
        client = await self.get_client()
        try:
            await client.table(self.settings.cases_table).select("id").limit(1).execute()
        except APIError as exc:
            raise StoreError("Case table read failed", detail=_api_error_detail(exc)) from exc
        except httpx.HTTPError as exc:
            raise StoreError("Case table unreachable", detail=str(exc)) from exc
