"""Minimal client for the Aptos node REST API."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Tuple
from urllib.error import HTTPError, URLError
from urllib.parse import quote, urlencode
from urllib.request import Request, urlopen

from ..errors import ChainClientError, ConfigError
from ..logging import get_logger
from ..models import ModuleAbi, modules_from_payload
from ..typetags.tags import canonical_address

NETWORK_URLS: Dict[str, str] = {
    "mainnet": "https://api.mainnet.aptoslabs.com/v1",
    "testnet": "https://api.testnet.aptoslabs.com/v1",
    "devnet": "https://api.devnet.aptoslabs.com/v1",
    "local": "http://127.0.0.1:8080/v1",
}

PACKAGE_REGISTRY_TYPE = "0x1::code::PackageRegistry"
CURSOR_HEADER = "x-aptos-cursor"
PAGE_LIMIT = 100


class AptosClient:
    """Fetches module ABIs and published package metadata for an account."""

    def __init__(
        self,
        node_url: str | None = None,
        *,
        network: str = "devnet",
        timeout: float = 30.0,
    ) -> None:
        if node_url:
            self.node_url = node_url.rstrip("/")
        else:
            try:
                self.node_url = NETWORK_URLS[network.lower()]
            except KeyError:
                known = ", ".join(sorted(NETWORK_URLS))
                raise ConfigError(f"Unknown network {network!r}; expected one of {known}") from None
        self.timeout = timeout
        self.logger = get_logger("chain")

    def get_account_modules(self, address: str) -> List[ModuleAbi]:
        """Return every module ABI published at `address`, following pagination."""
        address = canonical_address(address)
        modules: List[ModuleAbi] = []
        cursor: Optional[str] = None
        while True:
            params: Dict[str, Any] = {"limit": PAGE_LIMIT}
            if cursor:
                params["start"] = cursor
            payload, cursor = self._get(f"/accounts/{address}/modules", params)
            modules.extend(modules_from_payload(payload))
            if not cursor:
                break
        self.logger.debug("Fetched %d module ABIs from %s", len(modules), address)
        return modules

    def get_package_registry(self, address: str) -> List[Dict[str, Any]]:
        """Return the `packages` list of the account's package registry.

        Accounts that never published a package have no registry; an empty
        list is returned for them.
        """
        address = canonical_address(address)
        resource = quote(PACKAGE_REGISTRY_TYPE, safe="")
        try:
            payload, _ = self._get(f"/accounts/{address}/resource/{resource}")
        except ChainClientError as exc:
            if exc.status == 404:
                self.logger.debug("No package registry at %s", address)
                return []
            raise
        data = payload.get("data") if isinstance(payload, dict) else None
        packages = data.get("packages") if isinstance(data, dict) else None
        if not isinstance(packages, list):
            raise ChainClientError(f"Malformed package registry at {address}")
        return [package for package in packages if isinstance(package, dict)]

    def _get(self, path: str, params: Dict[str, Any] | None = None) -> Tuple[Any, Optional[str]]:
        url = f"{self.node_url}{path}"
        if params:
            url = f"{url}?{urlencode(params)}"
        request = Request(url, headers={"Accept": "application/json"}, method="GET")
        try:
            with urlopen(request, timeout=self.timeout) as response:  # type: ignore[arg-type]
                raw = response.read()
                cursor = response.headers.get(CURSOR_HEADER)
        except HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore") if hasattr(exc, "read") else ""
            message = detail.strip() or exc.reason
            raise ChainClientError(
                f"GET {url} failed with status {exc.code}: {message}", status=exc.code
            ) from exc
        except URLError as exc:
            raise ChainClientError(f"GET {url} failed: {exc.reason}") from exc

        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ChainClientError(f"GET {url} returned invalid JSON") from exc
        return payload, cursor


__all__ = ["AptosClient", "NETWORK_URLS", "PACKAGE_REGISTRY_TYPE"]
