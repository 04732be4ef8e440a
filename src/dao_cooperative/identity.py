"""
Identity providers: where the acting account comes from.

A provider lists the currently available accounts and notifies registered
handlers whenever that list changes, the way a browser wallet emits
``accountsChanged``.
"""
import asyncio
import itertools
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, List, Optional, Sequence

import httpx

from src.utils.logger import logger

from .exceptions import IdentityProviderError

AccountsChangedHandler = Callable[[List[str]], Awaitable[None]]


class IdentityProvider(ABC):
    """Source of the acting identity."""

    def __init__(self):
        self._handlers: List[AccountsChangedHandler] = []

    @abstractmethod
    async def get_accounts(self) -> List[str]:
        ...

    def on_accounts_changed(self, handler: AccountsChangedHandler) -> None:
        """Register a handler for the lifetime of the provider."""
        self._handlers.append(handler)

    async def _emit(self, accounts: List[str]) -> None:
        for handler in list(self._handlers):
            await handler(list(accounts))

    async def close(self) -> None:
        """Stop producing notifications."""


class InMemoryIdentityProvider(IdentityProvider):
    """Provider backed by a list held in memory; accounts are switched by hand."""

    def __init__(self, accounts: Optional[Sequence[str]] = None):
        super().__init__()
        self._accounts = list(accounts or [])

    async def get_accounts(self) -> List[str]:
        return list(self._accounts)

    async def set_accounts(self, accounts: Sequence[str]) -> None:
        """Replace the account list and notify every handler, even if unchanged."""
        self._accounts = list(accounts)
        logger.info(f"[IdentityProvider] accounts changed: {self._accounts}")
        await self._emit(self._accounts)


class JsonRpcIdentityProvider(IdentityProvider):
    """
    Provider that reads ``eth_accounts`` from an Ethereum JSON-RPC node.

    Nodes have no push channel for account switches over plain HTTP, so
    ``watch()`` polls and notifies when the returned list differs from the
    last one observed.
    """

    def __init__(
        self,
        rpc_url: str,
        poll_interval: float = 2.0,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__()
        self.rpc_url = rpc_url
        self.poll_interval = poll_interval
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._request_ids = itertools.count(1)
        self._last_seen: Optional[List[str]] = None
        self._watch_task: Optional[asyncio.Task] = None

    async def get_accounts(self) -> List[str]:
        accounts = await self._fetch_accounts()
        if self._last_seen is None:
            self._last_seen = accounts
        return list(accounts)

    async def _fetch_accounts(self) -> List[str]:
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._request_ids),
            "method": "eth_accounts",
            "params": [],
        }
        try:
            response = await self.client.post(self.rpc_url, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as e:
            raise IdentityProviderError(f"eth_accounts request failed: {e}")
        except ValueError:
            raise IdentityProviderError("eth_accounts returned invalid JSON")

        if not isinstance(body, dict):
            raise IdentityProviderError("eth_accounts returned an unexpected payload")
        error = body.get("error")
        if error:
            if isinstance(error, dict):
                raise IdentityProviderError(error.get("message", "JSON-RPC error"), error.get("code"))
            raise IdentityProviderError(f"JSON-RPC error: {error}")

        result = body.get("result")
        if result is None:
            return []
        if not isinstance(result, list) or not all(isinstance(a, str) for a in result):
            raise IdentityProviderError("eth_accounts result is not a list of addresses")
        return list(result)

    async def poll_once(self) -> bool:
        """Fetch accounts and notify handlers if they changed. Returns True on change.

        The first observation only records a baseline.
        """
        accounts = await self._fetch_accounts()
        previous, self._last_seen = self._last_seen, accounts
        if previous is None or accounts == previous:
            return False
        logger.info(f"[IdentityProvider] accounts changed: {accounts}")
        await self._emit(accounts)
        return True

    async def watch(self) -> None:
        """Poll forever, notifying handlers on every change."""
        while True:
            try:
                await self.poll_once()
            except IdentityProviderError as e:
                logger.warning(f"[IdentityProvider] polling failed: {e.message}")
            except Exception as e:
                logger.error(f"[IdentityProvider] unexpected polling error: {e}", exc_info=True)
            await asyncio.sleep(self.poll_interval)

    def start(self) -> None:
        if self._watch_task is None:
            self._watch_task = asyncio.create_task(self.watch())

    async def close(self) -> None:
        if self._watch_task is not None:
            self._watch_task.cancel()
            try:
                await self._watch_task
            except asyncio.CancelledError:
                pass
            self._watch_task = None
        await self.client.aclose()
