import logging
from typing import Any, Dict, List, Optional

import httpx

from guidari.remote.base import RemoteStore, RemoteStoreError, Row

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> RemoteStoreError:
    """Convierte una respuesta de error {message, code, details, hint} en excepción."""
    message = response.text or response.reason_phrase
    code = None
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        nested = body.get("error") if isinstance(body.get("error"), dict) else body
        message = nested.get("message") or nested.get("msg") or message
        code = nested.get("code")
        if nested.get("details"):
            message = f"{message} ({nested['details']})"
    return RemoteStoreError(str(message), code=None if code is None else str(code), status=response.status_code)


class RestRemoteStore(RemoteStore):
    """Cliente PostgREST (Supabase) autenticado con la clave pública del proyecto."""

    def __init__(
        self,
        url: str,
        key: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url.rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=f"{self.url}/rest/v1",
            headers={
                "apikey": key,
                "Authorization": f"Bearer {key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("Remote %s %s failed: %s", method, path, exc)
            raise RemoteStoreError(str(exc) or exc.__class__.__name__, code="network") from exc
        if response.is_error:
            raise _error_message(response)
        return response

    async def select_all(self, table: str) -> List[Row]:
        response = await self._request("GET", f"/{table}", params={"select": "*"})
        data = response.json()
        if not isinstance(data, list):
            raise RemoteStoreError(f"Respuesta inesperada al leer {table}", code="unexpected")
        return data

    async def upsert(self, table: str, rows: List[Row]) -> None:
        if not rows:
            return
        await self._request(
            "POST",
            f"/{table}",
            params={"on_conflict": "id"},
            json=rows,
            headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
        )

    async def delete(self, table: str, row_id: str) -> None:
        params: Dict[str, str] = {"id": f"eq.{row_id}"}
        await self._request("DELETE", f"/{table}", params=params)

    async def close(self) -> None:
        await self.client.aclose()
