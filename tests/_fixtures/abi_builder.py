"""Helpers for building module ABI payloads and package registries in tests."""

from __future__ import annotations

import gzip
import textwrap
from typing import Any, Dict, List, Mapping, Sequence

from blueprint.errors import ChainClientError
from blueprint.models import ModuleAbi, modules_from_payload
from blueprint.typetags.tags import canonical_address

COIN_ADDRESS = "0xcafe"

COIN_SOURCE = textwrap.dedent(
    """
    module 0xcafe::coin {
        use std::string::String;
        use aptos_framework::object::Object;

        /// Moves `amount` coins; see fun transfer(fake: u8) for details.
        public entry fun transfer(sender: &signer, to: address, amount: u64) {}

        /* entry fun mint(also_fake: u8) */
        public entry fun mint(admin: &signer, metadata: vector<u8>) {}

        #[view]
        public fun get_balance(owner: address): u64 { 0 }

        public entry fun create<T: key>(creator: &signer, object: Object<T>) {}

        entry fun burn(owner: &signer, amount: u64) {}

        public entry fun foo(thing: &0xdead::m::T) {}

        public fun helper(value: u64): u64 { value }
    }
    """
)


def function_abi(
    name: str,
    params: Sequence[str],
    *,
    is_entry: bool = True,
    is_view: bool = False,
    visibility: str = "public",
    generic_constraints: Sequence[Sequence[str]] = (),
    returns: Sequence[str] = (),
) -> Dict[str, Any]:
    """Return a function entry shaped like the node's `exposed_functions` items."""
    return {
        "name": name,
        "visibility": visibility,
        "is_entry": is_entry,
        "is_view": is_view,
        "generic_type_params": [{"constraints": list(item)} for item in generic_constraints],
        "params": list(params),
        "return": list(returns),
    }


def module_abi(name: str, functions: Sequence[Mapping[str, Any]], *, address: str = COIN_ADDRESS) -> Dict[str, Any]:
    return {
        "address": address,
        "name": name,
        "friends": [],
        "exposed_functions": list(functions),
        "structs": [],
    }


def coin_module_payload() -> Dict[str, Any]:
    return module_abi(
        "coin",
        [
            function_abi("transfer", ["&signer", "address", "u64"]),
            function_abi("mint", ["&signer", "vector<u8>"]),
            function_abi("get_balance", ["address"], is_entry=False, is_view=True, returns=["u64"]),
            function_abi("create", ["&signer", "0x1::object::Object<T0>"], generic_constraints=[["key"]]),
            function_abi("burn", ["&signer", "u64"], visibility="private"),
            function_abi("foo", ["&0xdead::m::T"]),
            function_abi("helper", ["u64"], is_entry=False, returns=["u64"]),
        ],
    )


def gzip_hex(text: str) -> str:
    return "0x" + gzip.compress(text.encode("utf-8")).hex()


def package_registry(package: str, sources: Mapping[str, str]) -> List[Dict[str, Any]]:
    """Return a registry `packages` list holding gzip+hex encoded module sources."""
    return [
        {
            "name": package,
            "upgrade_policy": {"policy": 1},
            "modules": [{"name": name, "source": gzip_hex(source)} for name, source in sources.items()],
        }
    ]


class StaticChainClient:
    """Test double serving canned module ABIs and registries per address."""

    def __init__(
        self,
        modules: Mapping[str, Sequence[Mapping[str, Any]]],
        registries: Mapping[str, List[Dict[str, Any]]] | None = None,
        *,
        failing: Sequence[str] = (),
    ) -> None:
        self._modules = {canonical_address(address): list(items) for address, items in modules.items()}
        self._registries = {canonical_address(address): items for address, items in (registries or {}).items()}
        self._failing = {canonical_address(address) for address in failing}
        self.calls: List[str] = []

    def get_account_modules(self, address: str) -> List[ModuleAbi]:
        address = canonical_address(address)
        self.calls.append(address)
        if address in self._failing:
            raise ChainClientError(f"GET /accounts/{address}/modules failed with status 500", status=500)
        return modules_from_payload([{"bytecode": "0x", "abi": item} for item in self._modules.get(address, [])])

    def get_package_registry(self, address: str) -> List[Dict[str, Any]]:
        return self._registries.get(canonical_address(address), [])


__all__ = [
    "COIN_ADDRESS",
    "COIN_SOURCE",
    "StaticChainClient",
    "coin_module_payload",
    "function_abi",
    "gzip_hex",
    "module_abi",
    "package_registry",
]
