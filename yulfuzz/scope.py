"""Lexical scope bookkeeping for the Yul emitter.

Variables are named x_0, x_1, ... by a single live-variable counter. Entering
a scope checkpoints the counter; leaving restores it, so names declared inside
become unreachable and are handed out again by the next sibling scope.

Inside a function body the first `invisible_vars` names belong to the caller
side and cannot be referenced; the body's own parameters and locals continue
the counter from there.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager


class ScopeError(Exception):
    """Raised when push/pop discipline is violated."""


class ScopeTracker:
    """Stack of live-variable checkpoints, one per open lexical scope."""

    def __init__(self) -> None:
        self.num_live_vars: int = 0
        self.invisible_vars: int = 0
        self.in_function: bool = False
        # Sentinel base entry, never popped.
        self._checkpoints: list[int] = [0]
        self.entered: int = 0
        self.exited: int = 0

    @property
    def depth(self) -> int:
        """Number of scopes currently open above the sentinel."""
        return len(self._checkpoints) - 1

    @property
    def num_visible(self) -> int:
        return self.num_live_vars - self.invisible_vars

    # ── Push / pop ──────────────────────────────────────────

    def enter(self) -> None:
        self._checkpoints.append(self.num_live_vars)
        self.entered += 1

    def exit(self) -> None:
        if len(self._checkpoints) == 1:
            raise ScopeError("exit without matching enter")
        self.num_live_vars = self._checkpoints.pop()
        self.exited += 1

    @contextmanager
    def scope(self) -> Iterator[None]:
        self.enter()
        try:
            yield
        finally:
            self.exit()

    @contextmanager
    def function_scope(self) -> Iterator[None]:
        """Open a function body: caller-side variables become invisible."""
        was_in_function = self.in_function
        prev_invisible = self.invisible_vars
        self.in_function = True
        self.invisible_vars = self.num_live_vars
        try:
            with self.scope():
                yield
        finally:
            self.in_function = was_in_function
            self.invisible_vars = prev_invisible

    # ── Variables ───────────────────────────────────────────

    def is_variable_available(self) -> bool:
        return self.num_live_vars > self.invisible_vars

    def declare(self, count: int = 1) -> list[str]:
        """Allocate `count` fresh names in the current scope."""
        names: list[str] = []
        for _ in range(count):
            names.append(f"x_{self.num_live_vars}")
            self.num_live_vars += 1
        return names

    def visible_name(self, slot: int) -> str:
        """Name of the slot-th visible variable, 0 <= slot < num_visible."""
        if slot < 0 or slot >= self.num_visible:
            raise ScopeError(f"no visible variable at slot {slot}")
        return f"x_{self.invisible_vars + slot}"

    def reference(self, varnum: int) -> str:
        """Map an arbitrary input number onto a visible variable name."""
        if not self.is_variable_available():
            raise ScopeError("no variable in scope to reference")
        return self.visible_name(varnum % self.num_visible)

    def distinct_references(self, varnums: list[int]) -> list[str]:
        """Map input numbers onto pairwise distinct visible variables.

        Collisions probe forward to the next unused slot.
        """
        if len(varnums) > self.num_visible:
            raise ScopeError(
                f"{len(varnums)} distinct variables requested, {self.num_visible} visible"
            )
        used: set[int] = set()
        names: list[str] = []
        for varnum in varnums:
            slot = varnum % self.num_visible
            while slot in used:
                slot = (slot + 1) % self.num_visible
            used.add(slot)
            names.append(self.visible_name(slot))
        return names


class SwitchLiteralTracker:
    """Per-switch sets of case values already emitted."""

    def __init__(self) -> None:
        self._sets: list[set[int]] = []

    @property
    def depth(self) -> int:
        return len(self._sets)

    @contextmanager
    def switch(self) -> Iterator[None]:
        self._sets.append(set())
        try:
            yield
        finally:
            self._sets.pop()

    def is_literal_unique(self, value: int) -> bool:
        """Record value in the innermost switch; False if it was already there."""
        if not self._sets:
            raise ScopeError("case literal outside of a switch")
        current = self._sets[-1]
        if value in current:
            return False
        current.add(value)
        return True
