"""Tests for recovering parameter names from Move source."""

from __future__ import annotations

import textwrap

import pytest

from blueprint.codegen.names import recover_names, remove_comments
from blueprint.errors import NameRecoveryError


def test_recover_names_reads_parameters_in_order(coin_source: str) -> None:
    signature = recover_names("transfer", coin_source)

    assert signature.argument_names == ["sender", "to", "amount"]
    assert [argument.type_text for argument in signature.arguments] == ["&signer", "address", "u64"]
    assert signature.generic_clause is None


def test_recover_names_ignores_comments(coin_source: str) -> None:
    assert recover_names("mint", coin_source).argument_names == ["admin", "metadata"]


def test_recover_names_reads_generic_clause(coin_source: str) -> None:
    signature = recover_names("create", coin_source)

    assert signature.generic_clause == "T: key"
    assert signature.argument_names == ["creator", "object"]


def test_recover_names_splits_only_top_level_commas() -> None:
    source = textwrap.dedent(
        """
        module 0x1::table_user {
            public entry fun put<K: copy + drop, V: store>(
                owner: &signer,
                table: Table<K, vector<V>>,
                pairs: vector<Pair<u64, address>>,
            ) {}
        }
        """
    )
    signature = recover_names("put", source)

    assert signature.generic_clause == "K: copy + drop, V: store"
    assert signature.argument_names == ["owner", "table", "pairs"]
    assert signature.arguments[1].type_text == "Table<K, vector<V>>"


def test_recover_names_skips_string_literals() -> None:
    source = textwrap.dedent(
        """
        module 0x1::m {
            const MSG: vector<u8> = b"fun greet(nope: u8) // (";
            public fun greet(name: String) {}
        }
        """
    )
    assert recover_names("greet", source).argument_names == ["name"]


def test_recover_names_first_declaration_wins() -> None:
    source = "module 0x1::a { public fun same(x: u8) {} }\nmodule 0x1::b { public fun same(y: u8, z: u8) {} }"
    assert recover_names("same", source).argument_names == ["x"]


def test_recover_names_does_not_match_prefixes() -> None:
    source = "module 0x1::m { public fun transfer_all(a: u8) {} public fun transfer(b: u8) {} }"
    assert recover_names("transfer", source).argument_names == ["b"]


def test_recover_names_handles_empty_parameter_list() -> None:
    source = "module 0x1::m { public entry fun ping() {} }"
    assert recover_names("ping", source).arguments == []


def test_recover_names_tolerates_unbalanced_delimiters_in_comments() -> None:
    source = "module 0x1::m {\n    // ((( <<\n    /* ) > */\n    public fun f(a: u8, b: bool) {}\n}"
    assert recover_names("f", source).argument_names == ["a", "b"]


def test_recover_names_raises_for_missing_function(coin_source: str) -> None:
    with pytest.raises(NameRecoveryError) as excinfo:
        recover_names("does_not_exist", coin_source)
    assert excinfo.value.function_name == "does_not_exist"


def test_unterminated_block_comment_hides_the_rest_of_the_source() -> None:
    with pytest.raises(NameRecoveryError):
        recover_names("f", "module 0x1::m { /* open\n public fun f(a: u8) {} }")


def test_remove_comments_preserves_offsets_and_newlines() -> None:
    source = "a // note\nb /* x\ny */ c"
    stripped = remove_comments(source)

    assert len(stripped) == len(source)
    assert stripped.count("\n") == source.count("\n")
    assert stripped.split() == ["a", "b", "c"]
