"""Registry of generated functions, bucketed by number of return values."""

from __future__ import annotations

from dataclasses import dataclass

MAX_INPUT_PARAMS: int = 5
MAX_OUTPUT_PARAMS: int = 5

# Return kinds
NO_RETURN: str = "noreturn"
SINGLE_RETURN: str = "singlereturn"
MULTI_RETURN: str = "multireturn"

# Call-site usages
CALL_NONE: str = "NONE"
CALL_SINGLE: str = "SINGLE"
CALL_MULTIDECL: str = "MULTIDECL"
CALL_MULTIASSIGN: str = "MULTIASSIGN"

CALL_USAGES: tuple[str, ...] = (CALL_NONE, CALL_SINGLE, CALL_MULTIDECL, CALL_MULTIASSIGN)

_USAGE_KIND: dict[str, str] = {
    CALL_NONE: NO_RETURN,
    CALL_SINGLE: SINGLE_RETURN,
    CALL_MULTIDECL: MULTI_RETURN,
    CALL_MULTIASSIGN: MULTI_RETURN,
}


@dataclass
class FunctionSig:
    """One registered function."""

    kind: str
    index: int
    num_inputs: int
    num_outputs: int

    @property
    def name(self) -> str:
        return f"foo_{self.kind}_{self.index}"


def return_kind(num_outputs: int) -> str:
    if num_outputs == 0:
        return NO_RETURN
    if num_outputs == 1:
        return SINGLE_RETURN
    return MULTI_RETURN


def usage_kind(usage: str) -> str:
    if usage not in _USAGE_KIND:
        raise ValueError(f"unknown call usage: {usage}")
    return _USAGE_KIND[usage]


class FunctionRegistry:
    """Functions stay callable for the rest of the translation once registered."""

    def __init__(self) -> None:
        self._buckets: dict[str, list[FunctionSig]] = {
            NO_RETURN: [],
            SINGLE_RETURN: [],
            MULTI_RETURN: [],
        }

    def register(self, num_inputs: int, num_outputs: int) -> FunctionSig:
        """Assign the next dense index in the bucket matching num_outputs."""
        if not 0 <= num_inputs <= MAX_INPUT_PARAMS:
            raise ValueError(f"input arity {num_inputs} out of range")
        if not 0 <= num_outputs <= MAX_OUTPUT_PARAMS:
            raise ValueError(f"output arity {num_outputs} out of range")
        kind = return_kind(num_outputs)
        bucket = self._buckets[kind]
        sig = FunctionSig(kind, len(bucket), num_inputs, num_outputs)
        bucket.append(sig)
        return sig

    def count(self, kind: str) -> int:
        return len(self._buckets[kind])

    def functions(self, kind: str) -> list[FunctionSig]:
        return list(self._buckets[kind])

    def lookup(self, kind: str, index: int) -> FunctionSig | None:
        bucket = self._buckets[kind]
        if 0 <= index < len(bucket):
            return bucket[index]
        return None

    def pick_callable(self, kind: str, selector: int) -> FunctionSig | None:
        """Choose a registered function of `kind` by input-derived selector."""
        bucket = self._buckets[kind]
        if not bucket:
            return None
        return bucket[selector % len(bucket)]

    def call_is_possible(self, usage: str, num_visible_vars: int) -> bool:
        """Whether a call statement with this usage can be emitted well-formed.

        Single-return functions are reserved for expression position, multi
        usages need a multi-return function, and multi-assignment needs at
        least one variable to assign to.
        """
        if usage == CALL_SINGLE:
            return False
        if self.count(usage_kind(usage)) == 0:
            return False
        if usage == CALL_MULTIASSIGN and num_visible_vars == 0:
            return False
        return True
