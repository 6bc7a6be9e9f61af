"""Default seed dictionary: hex values (no 0x prefix) that tend to hit
edge cases in constant folding and code generation."""

from __future__ import annotations

HEX_DICTIONARY: tuple[str, ...] = (
    "0",
    "1",
    "2",
    "3",
    "4",
    "7",
    "8",
    "1f",
    "20",
    "40",
    "60",
    "80",
    "ff",
    "100",
    "101",
    "fe",
    "ffff",
    "10000",
    "ffffffff",
    "100000000",
    "ffffffffffffffff",
    "10000000000000000",
    "7fffffffffffffff",
    "8000000000000000",
    "ffffffffffffffffffffffffffffffff",
    "100000000000000000000000000000000",
    "7fffffffffffffffffffffffffffffff",
    "80000000000000000000000000000000",
    "ffffffffffffffffffffffffffffffffffffffff",
    "10000000000000000000000000000000000000000",
    "7fffffffffffffffffffffffffffffffffffffffffffffffffffffffffffffff",
    "8000000000000000000000000000000000000000000000000000000000000000",
    "fffffffffffffffffffffffffffffffffffffffffffffffffffffffffffffffe",
    "ffffffffffffffffffffffffffffffffffffffffffffffffffffffffffffffff",
    "ff00000000000000000000000000000000000000000000000000000000000000",
    "00000000000000000000000000000000000000000000000000000000000000ff",
    "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470",
    "a9059cbb",
    "70a08231",
    "23b872dd",
    "095ea7b3",
    "4e487b71",
    "08c379a0",
    "deadbeef",
    "cafebabe",
    "5555555555555555555555555555555555555555555555555555555555555555",
    "aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa",
    "0101010101010101010101010101010101010101010101010101010101010101",
)
