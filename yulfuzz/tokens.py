"""Literal text for the Yul emitter.

All "random-looking" constants come from a seed dictionary, indexed by
(input_size ** 2 + counter) modulo its length. The counter only ever moves
forward, so output is reproducible for a fixed input, input size and
dictionary.
"""

from __future__ import annotations

import string
from collections.abc import Sequence

MAX_HEX_DIGITS: int = 64
MAX_STRING_CHARS: int = 32
U256_MODULUS: int = 1 << 256

_HEX_CHARS: frozenset[str] = frozenset(string.hexdigits)
_ALNUM_CHARS: frozenset[str] = frozenset(string.ascii_letters + string.digits)


def _as_text(raw: str | bytes) -> str:
    if isinstance(raw, bytes):
        return raw.decode("latin-1")
    return raw


def create_alnum(raw: str | bytes) -> str:
    """Keep ASCII letters and digits, at most 32 of them."""
    text = _as_text(raw)
    kept = [c for c in text if c in _ALNUM_CHARS]
    return "".join(kept[:MAX_STRING_CHARS])


def strip_hex(raw: str | bytes) -> str:
    """Keep hex digits, at most 64 of them."""
    text = _as_text(raw)
    kept = [c for c in text if c in _HEX_CHARS]
    return "".join(kept[:MAX_HEX_DIGITS])


def literal_value(text: str) -> int:
    """u256 value of rendered literal text (decimal, 0x-hex or quoted string)."""
    if text.startswith('"'):
        # String literals are left-aligned in a 32-byte word.
        raw = text[1:-1].encode("ascii")
        return int.from_bytes(raw.ljust(32, b"\0"), "big")
    if text.startswith("0x"):
        return int(text[2:], 16) % U256_MODULUS
    return int(text) % U256_MODULUS


class TokenSource:
    """Dictionary-backed literal source for one translation."""

    def __init__(self, dictionary: Sequence[str], input_size: int) -> None:
        if len(dictionary) == 0:
            raise ValueError("dictionary must not be empty")
        self._dictionary = dictionary
        self._input_size = input_size
        self._counter: int = 0
        # While set, tokens are "0" and the counter does not advance.
        self.in_for_cond: bool = False

    @property
    def calls(self) -> int:
        return self._counter

    def counter(self) -> int:
        """Return the current counter and advance it."""
        value = self._counter
        self._counter += 1
        return value

    def dictionary_token(self, prefix: bool = True) -> str:
        if self.in_for_cond:
            token = "0"
        else:
            index = (self._input_size * self._input_size + self.counter()) % len(
                self._dictionary
            )
            token = self._dictionary[index]
            if len(token) > MAX_HEX_DIGITS:
                raise ValueError(f"dictionary token too large: {token}")
        if prefix:
            return "0x" + token
        return token

    def create_hex(self, raw: str | bytes) -> str:
        """Hex digits for a 0x literal: non-empty and of even length."""
        digits = strip_hex(raw)
        if digits == "":
            digits = self.dictionary_token(prefix=False)
        if len(digits) % 2 == 1:
            digits = "0" + digits
        return digits

    # ── Literal nodes ───────────────────────────────────────

    def int_literal(self, value: int) -> str:
        return str(value % U256_MODULUS)

    def hex_literal(self, raw: str | bytes) -> str:
        return "0x" + self.create_hex(raw)

    def string_literal(self, raw: str | bytes) -> str:
        return '"' + create_alnum(raw) + '"'
