"""
Session Client

httpx client for the auth service that keeps the cookie session alive:
a request answered with 401 triggers one refresh and one retry.
"""

import asyncio
import hashlib
import logging
from typing import Awaitable, Callable, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

REFRESH_PATH = "/auth/refresh"
LOGOUT_PATH = "/auth/logout"
REFRESH_COOKIE = "refreshToken"


class RefreshCoalescer:
    """
    Keyed in-flight map: concurrent callers asking for the same key share
    one refresh call instead of racing each other (which would rotate the
    token out from under all but the last caller).
    """

    def __init__(self):
        self._in_flight: Dict[str, asyncio.Future] = {}

    async def run(
        self, key: str, refresh: Callable[[], Awaitable[httpx.Response]]
    ) -> httpx.Response:
        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(refresh())
            self._in_flight[key] = task
            task.add_done_callback(lambda done: self._forget(key, done))
        return await asyncio.shield(task)

    def _forget(self, key: str, task: asyncio.Future) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]


# Process-wide; keys keep unrelated sessions apart
default_coalescer = RefreshCoalescer()


class SessionClient:
    """
    Cookie-session client with a stateless retry-once policy.

    Each request carries its own retry budget of one; nothing is shared
    between requests except the coalescer, which is keyed by server and
    refresh token.
    """

    def __init__(
        self,
        base_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        coalescer: Optional[RefreshCoalescer] = None,
        **client_kwargs,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url, transport=transport, **client_kwargs
        )
        self._coalescer = coalescer or default_coalescer

    async def __aenter__(self) -> "SessionClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def cookies(self) -> httpx.Cookies:
        return self._client.cookies

    async def register(self, email: str, username: str, password: str) -> httpx.Response:
        return await self._client.post(
            "/auth/register",
            json={"email": email, "username": username, "password": password},
        )

    async def login(self, email: str, password: str) -> httpx.Response:
        return await self._client.post(
            "/auth/login", json={"email": email, "password": password}
        )

    async def logout(self) -> httpx.Response:
        return await self._client.post(LOGOUT_PATH)

    async def refresh(self) -> httpx.Response:
        """Refresh the cookie session, sharing any refresh already in flight"""
        return await self._coalescer.run(
            self._refresh_key(), lambda: self._client.post(REFRESH_PATH)
        )

    async def get(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def request(self, method: str, url: str, **kwargs) -> httpx.Response:
        response = await self._client.request(method, url, **kwargs)

        if response.status_code != 401 or not self._may_retry(url):
            return response

        refreshed = await self.refresh()
        if not refreshed.is_success:
            logger.info(f"Session refresh failed with {refreshed.status_code}")
            return response

        return await self._client.request(method, url, **kwargs)

    def _may_retry(self, url: str) -> bool:
        path = httpx.URL(url).path
        return not path.endswith(REFRESH_PATH) and not path.endswith(LOGOUT_PATH)

    def _refresh_key(self) -> str:
        token = self._client.cookies.get(REFRESH_COOKIE) or ""
        digest = hashlib.sha256(token.encode()).hexdigest()
        return f"{self._client.base_url}|{digest}"
