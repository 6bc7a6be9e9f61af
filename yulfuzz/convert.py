"""Yul emitter: turns a fuzzer input tree into well-formed Yul source.

Validity is guaranteed by construction: variable references are resolved
against the scope tracker, call sites against the function registry, and
switch cases against the per-switch literal set. When a requested construct
cannot be emitted well-formed, a trivially valid stand-in is emitted instead;
translation of a well-typed tree never fails.

Function definitions are hoisted to the start of the top-level block. Yul
functions are visible throughout their enclosing block, so every registered
function is callable from every later call site.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager

from .ast import (
    Assignment,
    BinaryOp,
    Block,
    BoundedForStmt,
    BreakStmt,
    ContinueStmt,
    CopyFunc,
    Expr,
    ExtCodeCopy,
    ForStmt,
    FunctionCall,
    FunctionDef,
    IfStmt,
    Literal,
    LogFunc,
    NullaryOp,
    Program,
    RetRevStmt,
    SelfDestructStmt,
    Stmt,
    StopInvalidStmt,
    StoreFunc,
    SwitchStmt,
    TernaryOp,
    TypedVarDecl,
    UnaryOp,
    VarDecl,
    VarRef,
)
from .dictionary import HEX_DICTIONARY
from .registry import (
    CALL_MULTIASSIGN,
    CALL_MULTIDECL,
    CALL_NONE,
    MAX_INPUT_PARAMS,
    MAX_OUTPUT_PARAMS,
    SINGLE_RETURN,
    FunctionRegistry,
    FunctionSig,
    usage_kind,
)
from .scope import ScopeTracker, SwitchLiteralTracker
from .tokens import TokenSource, literal_value

logger = logging.getLogger(__name__)

MAX_TOPICS: int = 4
BOUNDED_LOOP_LIMIT: str = "0x60"
BOUNDED_LOOP_STEP: str = "0x20"

UNARY_OPS: dict[str, str] = {
    "NOT": "not",
    "MLOAD": "mload",
    "SLOAD": "sload",
    "ISZERO": "iszero",
    "CALLDATALOAD": "calldataload",
    "EXTCODESIZE": "extcodesize",
    "EXTCODEHASH": "extcodehash",
}

BINARY_OPS: dict[str, str] = {
    "ADD": "add",
    "SUB": "sub",
    "MUL": "mul",
    "DIV": "div",
    "MOD": "mod",
    "XOR": "xor",
    "AND": "and",
    "OR": "or",
    "EQ": "eq",
    "LT": "lt",
    "GT": "gt",
    "SHR": "shr",
    "SHL": "shl",
    "SAR": "sar",
    "SDIV": "sdiv",
    "SMOD": "smod",
    "EXP": "exp",
    "SLT": "slt",
    "SGT": "sgt",
    "BYTE": "byte",
    "SI": "signextend",
    "KECCAK": "keccak256",
}

TERNARY_OPS: dict[str, str] = {
    "ADDM": "addmod",
    "MULM": "mulmod",
}

NULLARY_OPS: dict[str, str] = {
    "PC": "pc",
    "MSIZE": "msize",
    "GAS": "gas",
    "CALLDATASIZE": "calldatasize",
    "CODESIZE": "codesize",
    "RETURNDATASIZE": "returndatasize",
    "ADDRESS": "address",
    "ORIGIN": "origin",
    "CALLER": "caller",
    "CALLVALUE": "callvalue",
    "GASPRICE": "gasprice",
    "COINBASE": "coinbase",
    "TIMESTAMP": "timestamp",
    "NUMBER": "number",
    "DIFFICULTY": "difficulty",
    "GASLIMIT": "gaslimit",
}

STORE_OPS: dict[str, str] = {
    "MSTORE": "mstore",
    "SSTORE": "sstore",
    "MSTORE8": "mstore8",
}

COPY_OPS: dict[str, str] = {
    "CALLDATA": "calldatacopy",
    "CODE": "codecopy",
    "RETURNDATA": "returndatacopy",
}

STOP_INVALID_OPS: dict[str, str] = {
    "STOP": "stop",
    "INVALID": "invalid",
}

RET_REV_OPS: dict[str, str] = {
    "RETURN": "return",
    "REVERT": "revert",
}

VAR_TYPES: dict[str, str] = {
    "BOOL": "bool",
    "S8": "s8",
    "S32": "s32",
    "S64": "s64",
    "S128": "s128",
    "S256": "s256",
    "U8": "u8",
    "U32": "u32",
    "U64": "u64",
    "U128": "u128",
    "U256": "u256",
}


def program_to_string(
    program: Program, input_size: int = 0, dictionary: Sequence[str] | None = None
) -> str:
    """Render a `Program` as Yul source text."""
    if dictionary is None:
        dictionary = HEX_DICTIONARY
    return Converter(dictionary, input_size).convert(program)


class Converter:
    """State for one translation. `convert` may be called once per instance."""

    _INDENT: str = "    "

    def __init__(self, dictionary: Sequence[str], input_size: int) -> None:
        self.scopes = ScopeTracker()
        self.registry = FunctionRegistry()
        self.tokens = TokenSource(dictionary, input_size)
        self.switch_literals = SwitchLiteralTracker()
        self._lines: list[str] = []
        self._indent_level: int = 0
        self._functions: list[list[str]] = []
        self._in_for_body: bool = False
        self._num_nested_for_loops: int = 0
        self._used: bool = False

    # ── Public ──────────────────────────────────────────────

    def convert(self, program: Program) -> str:
        if self._used:
            raise RuntimeError("Converter instances are single-use")
        self._used = True
        self._indent_level = 1
        with self.scopes.scope():
            for stmt in program.block.statements:
                self._emit_stmt(stmt)
        out = ["{"]
        for fn_lines in self._functions:
            out.extend(fn_lines)
        out.extend(self._lines)
        out.append("}")
        return "\n".join(out) + "\n"

    # ── Lines / Blocks ──────────────────────────────────────

    def _emit_line(self, line: str) -> None:
        self._lines.append(self._INDENT * self._indent_level + line)

    def _emit_body(self, block: Block) -> None:
        """Emit block contents one level deeper, in a fresh scope."""
        self._indent_level += 1
        with self.scopes.scope():
            for stmt in block.statements:
                self._emit_stmt(stmt)
        self._indent_level -= 1

    @contextmanager
    def _hoisted(self) -> Iterator[None]:
        """Redirect output into a new top-level function definition."""
        saved_lines = self._lines
        saved_indent = self._indent_level
        saved_in_for_body = self._in_for_body
        self._lines = []
        self._indent_level = 1
        self._in_for_body = False
        try:
            yield
        finally:
            self._functions.append(self._lines)
            self._lines = saved_lines
            self._indent_level = saved_indent
            self._in_for_body = saved_in_for_body

    # ── Stmts ───────────────────────────────────────────────

    def _emit_stmt(self, stmt: Stmt) -> None:
        if isinstance(stmt, VarDecl):
            value = self._render_expr(stmt.expr)
            name = self.scopes.declare()[0]
            self._emit_line(f"let {name} := {value}")
            return
        if isinstance(stmt, TypedVarDecl):
            typ = _lookup(VAR_TYPES, stmt.typ)
            value = self._render_expr(stmt.expr)
            name = self.scopes.declare()[0]
            self._emit_line(f"let {name}:{typ} := {value}")
            return
        if isinstance(stmt, Assignment):
            if not self.scopes.is_variable_available():
                logger.debug("assignment dropped: no variable in scope")
                return
            value = self._render_expr(stmt.expr)
            self._emit_line(f"{self.scopes.reference(stmt.ref.varnum)} := {value}")
            return
        if isinstance(stmt, IfStmt):
            self._emit_line(f"if {self._render_expr(stmt.cond)} {{")
            self._emit_body(stmt.body)
            self._emit_line("}")
            return
        if isinstance(stmt, StoreFunc):
            op = _lookup(STORE_OPS, stmt.op)
            self._emit_line(self._render_builtin(op, [stmt.loc, stmt.val]))
            return
        if isinstance(stmt, Block):
            self._emit_line("{")
            self._emit_body(stmt)
            self._emit_line("}")
            return
        if isinstance(stmt, ForStmt):
            self._emit_for_stmt(stmt)
            return
        if isinstance(stmt, BoundedForStmt):
            self._emit_bounded_for_stmt(stmt)
            return
        if isinstance(stmt, SwitchStmt):
            self._emit_switch_stmt(stmt)
            return
        if isinstance(stmt, BreakStmt):
            if self._in_for_body:
                self._emit_line("break")
            return
        if isinstance(stmt, ContinueStmt):
            if self._in_for_body:
                self._emit_line("continue")
            return
        if isinstance(stmt, LogFunc):
            num_topics = stmt.num_topics % (MAX_TOPICS + 1)
            args: list[Expr | None] = [stmt.pos, stmt.size]
            for i in range(num_topics):
                args.append(stmt.topics[i] if i < len(stmt.topics) else None)
            self._emit_line(self._render_builtin(f"log{num_topics}", args))
            return
        if isinstance(stmt, CopyFunc):
            op = _lookup(COPY_OPS, stmt.op)
            self._emit_line(
                self._render_builtin(op, [stmt.target, stmt.source, stmt.size])
            )
            return
        if isinstance(stmt, ExtCodeCopy):
            self._emit_line(
                self._render_builtin(
                    "extcodecopy", [stmt.addr, stmt.target, stmt.source, stmt.size]
                )
            )
            return
        if isinstance(stmt, StopInvalidStmt):
            self._emit_line(f"{_lookup(STOP_INVALID_OPS, stmt.op)}()")
            return
        if isinstance(stmt, RetRevStmt):
            op = _lookup(RET_REV_OPS, stmt.op)
            self._emit_line(self._render_builtin(op, [stmt.pos, stmt.size]))
            return
        if isinstance(stmt, SelfDestructStmt):
            self._emit_line(self._render_builtin("selfdestruct", [stmt.addr]))
            return
        if isinstance(stmt, FunctionCall):
            self._emit_call_stmt(stmt)
            return
        if isinstance(stmt, FunctionDef):
            self._emit_function_def(stmt)
            return
        raise TypeError("unhandled stmt type")

    def _emit_for_stmt(self, stmt: ForStmt) -> None:
        was_in_for_body = self._in_for_body
        # Variables declared in init stay visible in cond, post and body.
        with self.scopes.scope():
            self._in_for_body = False
            self._emit_line("for {")
            self._indent_level += 1
            for s in stmt.init.statements:
                self._emit_stmt(s)
            self._indent_level -= 1
            was_in_for_cond = self.tokens.in_for_cond
            self.tokens.in_for_cond = True
            cond = self._render_expr(stmt.cond)
            self.tokens.in_for_cond = was_in_for_cond
            self._emit_line(f"}} {cond} {{")
            self._emit_body(stmt.post)
            self._emit_line("} {")
            self._in_for_body = True
            self._emit_body(stmt.body)
            self._emit_line("}")
        self._in_for_body = was_in_for_body

    def _emit_bounded_for_stmt(self, stmt: BoundedForStmt) -> None:
        var = f"i_{self._num_nested_for_loops}"
        self._num_nested_for_loops += 1
        self._emit_line(
            f"for {{ let {var} := 0 }} lt({var}, {BOUNDED_LOOP_LIMIT}) "
            f"{{ {var} := add({var}, {BOUNDED_LOOP_STEP}) }} {{"
        )
        was_in_for_body = self._in_for_body
        self._in_for_body = True
        self._emit_body(stmt.body)
        self._in_for_body = was_in_for_body
        self._emit_line("}")
        self._num_nested_for_loops -= 1

    def _emit_switch_stmt(self, stmt: SwitchStmt) -> None:
        if not stmt.cases and stmt.default is None:
            logger.debug("switch dropped: no cases and no default")
            return
        self._emit_line(f"switch {self._render_expr(stmt.expr)}")
        with self.switch_literals.switch():
            for case in stmt.cases:
                label = self._render_literal(case.literal)
                if not self.switch_literals.is_literal_unique(literal_value(label)):
                    logger.debug("duplicate case literal %s dropped", label)
                    continue
                self._emit_line(f"case {label} {{")
                self._emit_body(case.body)
                self._emit_line("}")
        if stmt.default is not None:
            self._emit_line("default {")
            self._emit_body(stmt.default)
            self._emit_line("}")

    # ── Functions ───────────────────────────────────────────

    def _emit_function_def(self, fdef: FunctionDef) -> None:
        num_inputs = fdef.num_inputs % (MAX_INPUT_PARAMS + 1)
        num_outputs = fdef.num_outputs % (MAX_OUTPUT_PARAMS + 1)
        # Registered before the body so the body may call itself.
        sig = self.registry.register(num_inputs, num_outputs)
        with self._hoisted(), self.scopes.function_scope():
            params = self.scopes.declare(num_inputs)
            rets = self.scopes.declare(num_outputs)
            header = f"function {sig.name}({', '.join(params)})"
            if rets:
                header += " -> " + ", ".join(rets)
            self._emit_line(header + " {")
            self._emit_body(fdef.body)
            self._emit_line("}")
        self._emit_definition_call(sig)

    def _emit_definition_call(self, sig: FunctionSig) -> None:
        """Call a freshly defined function with calldata arguments."""
        args = [f"calldataload({32 * i})" for i in range(sig.num_inputs)]
        call = f"{sig.name}({', '.join(args)})"
        if sig.num_outputs == 0:
            self._emit_line(call)
            return
        results = [f"r_{i}" for i in range(sig.num_outputs)]
        self._emit_line("{")
        self._indent_level += 1
        self._emit_line(f"let {', '.join(results)} := {call}")
        for i, name in enumerate(results):
            self._emit_line(f"sstore({32 * i}, {name})")
        self._indent_level -= 1
        self._emit_line("}")

    def _emit_call_stmt(self, call: FunctionCall) -> None:
        usage = call.returns
        if not self.registry.call_is_possible(usage, self.scopes.num_visible):
            self._emit_call_fallback(usage)
            return
        sig = self.registry.pick_callable(usage_kind(usage), call.func_index)
        if sig is None:
            raise RuntimeError("feasible call without a callable")
        if usage == CALL_NONE:
            self._emit_line(self._render_call(sig, call.args))
            return
        if usage == CALL_MULTIDECL:
            text = self._render_call(sig, call.args)
            names = self.scopes.declare(sig.num_outputs)
            self._emit_line(f"let {', '.join(names)} := {text}")
            return
        if usage == CALL_MULTIASSIGN:
            # Assignment targets must be pairwise distinct.
            if sig.num_outputs > self.scopes.num_visible:
                self._emit_call_fallback(usage)
                return
            text = self._render_call(sig, call.args)
            varnums: list[int] = []
            for i in range(sig.num_outputs):
                varnums.append(call.outs[i].varnum if i < len(call.outs) else i)
            names = self.scopes.distinct_references(varnums)
            self._emit_line(f"{', '.join(names)} := {text}")
            return
        raise ValueError(f"unknown call usage: {usage}")

    def _emit_call_fallback(self, usage: str) -> None:
        logger.debug("%s call not possible, emitting a literal instead", usage)
        self._emit_line(f"pop({self.tokens.dictionary_token()})")

    def _render_call(self, sig: FunctionSig, args: list[Expr | None]) -> str:
        rendered: list[str] = []
        for i in range(sig.num_inputs):
            rendered.append(self._render_expr(args[i] if i < len(args) else None))
        return f"{sig.name}({', '.join(rendered)})"

    # ── Exprs ───────────────────────────────────────────────

    def _render_expr(self, expr: Expr | None) -> str:
        if expr is None:
            return self.tokens.dictionary_token()
        if isinstance(expr, Literal):
            return self._render_literal(expr)
        if isinstance(expr, VarRef):
            if not self.scopes.is_variable_available():
                return self.tokens.dictionary_token()
            return self.scopes.reference(expr.varnum)
        if isinstance(expr, UnaryOp):
            return self._render_builtin(_lookup(UNARY_OPS, expr.op), [expr.operand])
        if isinstance(expr, BinaryOp):
            return self._render_builtin(
                _lookup(BINARY_OPS, expr.op), [expr.left, expr.right]
            )
        if isinstance(expr, TernaryOp):
            return self._render_builtin(
                _lookup(TERNARY_OPS, expr.op), [expr.arg1, expr.arg2, expr.arg3]
            )
        if isinstance(expr, NullaryOp):
            return f"{_lookup(NULLARY_OPS, expr.op)}()"
        if isinstance(expr, FunctionCall):
            sig = self.registry.pick_callable(SINGLE_RETURN, expr.func_index)
            if sig is None:
                return self.tokens.dictionary_token()
            return self._render_call(sig, expr.args)
        raise TypeError("unhandled expr type")

    def _render_builtin(self, name: str, args: list[Expr | None]) -> str:
        rendered: list[str] = []
        for a in args:
            rendered.append(self._render_expr(a))
        return f"{name}({', '.join(rendered)})"

    def _render_literal(self, lit: Literal) -> str:
        if lit.intval is not None:
            return self.tokens.int_literal(lit.intval)
        if lit.hexval is not None:
            return self.tokens.hex_literal(lit.hexval)
        if lit.strval is not None:
            return self.tokens.string_literal(lit.strval)
        return self.tokens.dictionary_token()


def _lookup(table: dict[str, str], op: str) -> str:
    if op not in table:
        raise ValueError(f"unknown operator: {op}")
    return table[op]
