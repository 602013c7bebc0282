from collections.abc import Sequence
from typing import Any

import httpx
from loguru import logger

from carebook.domain.exceptions import RecordCreationError, StoreUnavailableError
from carebook.store.adapters.query_helpers import error_message, order_param
from carebook.store.ports import Order


class PostgRESTClient:
    """Table client for a hosted PostgREST API (e.g. Supabase ``/rest/v1``)."""

    def __init__(
        self,
        url: str,
        anon_key: str,
        *,
        access_token: str = "",
        timeout: float = 30,
    ) -> None:
        self._rest_url = f"{url.rstrip('/')}/rest/v1"
        self._anon_key = anon_key
        self._access_token = access_token or anon_key
        self._client = httpx.AsyncClient(timeout=timeout)

    def _headers(self, **extra: str) -> dict[str, str]:
        return {
            "apikey": self._anon_key,
            "Authorization": f"Bearer {self._access_token}",
            "Content-Type": "application/json",
            **extra,
        }

    async def select(
        self, table: str, columns: str = "*", order: Sequence[Order] = ()
    ) -> list[dict[str, Any]]:
        params = {"select": columns}
        if order:
            params["order"] = order_param(order)

        try:
            resp = await self._client.get(
                f"{self._rest_url}/{table}", headers=self._headers(), params=params
            )
        except httpx.HTTPError as exc:
            raise StoreUnavailableError(f"Select on '{table}' failed: {exc}") from exc

        if resp.is_error:
            raise StoreUnavailableError(
                f"Select on '{table}' failed with status {resp.status_code}: "
                f"{error_message(_json_or_text(resp))}"
            )

        data = resp.json()
        if not isinstance(data, list):
            raise StoreUnavailableError(f"Select on '{table}' returned an unexpected payload")
        return data

    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        try:
            resp = await self._client.post(
                f"{self._rest_url}/{table}",
                headers=self._headers(Prefer="return=representation"),
                json=[row],
            )
        except httpx.HTTPError as exc:
            raise StoreUnavailableError(f"Insert into '{table}' failed: {exc}") from exc

        if resp.status_code >= 500:
            raise StoreUnavailableError(
                f"Insert into '{table}' failed with status {resp.status_code}"
            )
        if resp.is_error:
            raise RecordCreationError(reason=error_message(_json_or_text(resp)), table=table)

        data = resp.json()
        if not isinstance(data, list) or not data:
            raise RecordCreationError(reason="store returned no inserted row", table=table)
        return data[0]

    async def health_check(self) -> bool:
        try:
            resp = await self._client.get(f"{self._rest_url}/", headers=self._headers())
            resp.raise_for_status()
            return True
        except Exception as exc:
            logger.warning("Record store health check failed: {}", exc)
            return False

    async def close(self) -> None:
        await self._client.aclose()
        logger.info("Record store client closed")


def _json_or_text(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text
