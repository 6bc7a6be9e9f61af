"""Tests for dictionary tokens and literal text."""

import pytest

from yulfuzz.tokens import (
    TokenSource,
    create_alnum,
    literal_value,
    strip_hex,
)

DICT = ("aa", "bb", "ccc")


def test_token_index_uses_input_size_squared():
    src = TokenSource(DICT, 2)
    # (2 * 2 + 0) % 3 == 1
    assert src.dictionary_token() == "0xbb"
    assert src.dictionary_token() == "0xccc"
    assert src.dictionary_token(prefix=False) == "aa"
    assert src.calls == 3


def test_for_cond_tokens_are_zero_and_free():
    src = TokenSource(DICT, 0)
    src.in_for_cond = True
    assert src.dictionary_token() == "0x0"
    assert src.calls == 0


def test_empty_dictionary_rejected():
    with pytest.raises(ValueError):
        TokenSource((), 0)


def test_oversized_token_rejected():
    src = TokenSource(("f" * 65,), 0)
    with pytest.raises(ValueError):
        src.dictionary_token()


def test_create_hex_filters_and_pads():
    src = TokenSource(DICT, 0)
    assert src.create_hex("0xg1f") == "001f"
    assert src.create_hex(b"ABC") == "0ABC"
    assert len(strip_hex("f" * 100)) == 64


def test_create_hex_empty_uses_dictionary():
    src = TokenSource(DICT, 0)
    assert src.create_hex("xyz") == "aa"
    assert src.create_hex("") == "bb"
    assert src.create_hex("") == "0ccc"


def test_create_alnum():
    assert create_alnum("a-b c_1!") == "abc1"
    assert create_alnum(b"\xffok\x00") == "ok"
    assert create_alnum("z" * 40) == "z" * 32


def test_int_literal_reduced_to_u256():
    src = TokenSource(DICT, 0)
    assert src.int_literal(-1) == str((1 << 256) - 1)


def test_literal_value():
    assert literal_value("10") == 10
    assert literal_value("0x0a") == 10
    assert literal_value('"a"') == 0x61 << (8 * 31)
    assert literal_value('""') == 0
