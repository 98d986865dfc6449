from typing import Any

import httpx

FALLBACK_ERROR_MESSAGE = "Unable to reach the server right now."


class ApiError(Exception):
    """The server answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


class RivalryClient:
    """Async HTTP access to the daily quiz server.

    Transport failures surface as ``httpx.HTTPError``; error statuses as ``ApiError``.
    """

    def __init__(
        self,
        base_url: str,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ):
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self) -> "RivalryClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, json: Any = None) -> dict[str, Any]:
        response = await self._http.request(method, path, json=json)
        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            data = {}
        if response.is_error:
            raise ApiError(response.status_code, data.get("message") or FALLBACK_ERROR_MESSAGE)
        return data

    async def fetch_quiz(self) -> dict[str, Any]:
        return await self._request("GET", "/quiz-today")

    async def fetch_leaderboard(self) -> dict[str, Any]:
        return await self._request("GET", "/leaderboard-today")

    async def submit(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/submit", json=payload)

    async def fifty_fifty(self, question_id: str) -> dict[str, Any]:
        return await self._request("POST", "/lifelines/fifty-fifty", json={"questionId": question_id})
