"""Tests for the scope tracker and switch literal tracker."""

import pytest

from yulfuzz.scope import ScopeError, ScopeTracker, SwitchLiteralTracker


# ── Scope push / pop ──


def test_exit_restores_live_count():
    t = ScopeTracker()
    t.declare()
    with t.scope():
        assert t.declare(2) == ["x_1", "x_2"]
        assert t.num_live_vars == 3
    assert t.num_live_vars == 1
    assert t.depth == 0


def test_sibling_scopes_reuse_names():
    t = ScopeTracker()
    with t.scope():
        first = t.declare()
    with t.scope():
        second = t.declare()
    assert first == second == ["x_0"]


def test_exit_on_sentinel_raises():
    t = ScopeTracker()
    with pytest.raises(ScopeError):
        t.exit()


def test_scope_released_on_exception():
    t = ScopeTracker()
    with pytest.raises(RuntimeError):
        with t.scope():
            t.declare()
            raise RuntimeError("boom")
    assert t.depth == 0
    assert t.num_live_vars == 0
    assert t.entered == t.exited == 1


# ── Function scopes ──


def test_function_scope_hides_caller_variables():
    t = ScopeTracker()
    t.declare(2)
    assert t.is_variable_available()
    with t.function_scope():
        assert t.in_function
        assert t.invisible_vars == 2
        assert not t.is_variable_available()
        assert t.declare() == ["x_2"]
        assert t.is_variable_available()
        assert t.reference(7) == "x_2"
    assert not t.in_function
    assert t.invisible_vars == 0
    assert t.num_live_vars == 2


def test_nested_function_scopes_restore_offsets():
    t = ScopeTracker()
    t.declare()
    with t.function_scope():
        t.declare()
        with t.function_scope():
            assert t.invisible_vars == 2
        assert t.invisible_vars == 1
    assert t.invisible_vars == 0


# ── References ──


def test_reference_wraps_modulo_visible():
    t = ScopeTracker()
    t.declare(3)
    assert t.reference(0) == "x_0"
    assert t.reference(4) == "x_1"


def test_reference_without_variables_raises():
    with pytest.raises(ScopeError):
        ScopeTracker().reference(0)


def test_distinct_references_probe_forward():
    t = ScopeTracker()
    t.declare(3)
    assert t.distinct_references([1, 1, 1]) == ["x_1", "x_2", "x_0"]


def test_distinct_references_need_enough_variables():
    t = ScopeTracker()
    t.declare()
    with pytest.raises(ScopeError):
        t.distinct_references([0, 1])


# ── Switch literals ──


def test_duplicate_literal_rejected():
    s = SwitchLiteralTracker()
    with s.switch():
        assert s.is_literal_unique(1)
        assert not s.is_literal_unique(1)
        assert s.is_literal_unique(2)
    assert s.depth == 0


def test_nested_switch_has_own_set():
    s = SwitchLiteralTracker()
    with s.switch():
        assert s.is_literal_unique(5)
        with s.switch():
            assert s.is_literal_unique(5)
        assert not s.is_literal_unique(5)


def test_literal_outside_switch_raises():
    with pytest.raises(ScopeError):
        SwitchLiteralTracker().is_literal_unique(0)
