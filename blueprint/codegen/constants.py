"""Shared names used in generated TypeScript."""

from __future__ import annotations

DEFAULT_ARGUMENT_BASE = "arg_"

PRIMARY_SENDER_FIELD_NAME = "primarySender"
SECONDARY_SENDERS_FIELD_NAME = "secondarySenders"
FEE_PAYER_FIELD_NAME = "feePayer"
MODULE_ADDRESS_FIELD_NAME = "MODULE_ADDRESS"
TYPE_TAGS_FIELD_NAME = "typeTags"

DEFAULT_SDK_PATH = "@aptos-labs/ts-sdk"
PAYLOAD_BUILDERS_FILE_NAME = "payloadBuilders"
ABI_TYPES_FILE_NAME = "types"
INDEX_FILE_NAME = "index.ts"

GENERATED_HEADER = (
    "// This file was generated by blueprint from on-chain module ABIs.\n"
    "// Do not edit it by hand; re-run `blueprint generate` instead.\n"
)

__all__ = [
    "ABI_TYPES_FILE_NAME",
    "GENERATED_HEADER",
    "DEFAULT_ARGUMENT_BASE",
    "DEFAULT_SDK_PATH",
    "FEE_PAYER_FIELD_NAME",
    "INDEX_FILE_NAME",
    "MODULE_ADDRESS_FIELD_NAME",
    "PAYLOAD_BUILDERS_FILE_NAME",
    "PRIMARY_SENDER_FIELD_NAME",
    "SECONDARY_SENDERS_FIELD_NAME",
    "TYPE_TAGS_FIELD_NAME",
]
