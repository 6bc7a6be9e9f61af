"""Yul fuzzer input tree: node definitions.

The tree mirrors the fuzzer grammar: every node owns its children, and a
child expression left as None stands for an unset choice.
"""

from __future__ import annotations

from dataclasses import dataclass, field


# ============================================================
# EXPRESSIONS
# ============================================================


@dataclass
class Expr:
    """Base for all expressions."""


@dataclass
class Literal(Expr):
    """Number, hex or string literal. None set means a dictionary token."""

    intval: int | None = None
    hexval: str | None = None
    strval: str | None = None


@dataclass
class VarRef(Expr):
    """Reference to a visible variable, chosen by varnum modulo the visible count."""

    varnum: int = 0


@dataclass
class UnaryOp(Expr):
    """NOT, MLOAD, SLOAD, ISZERO, CALLDATALOAD, EXTCODESIZE, EXTCODEHASH."""

    op: str
    operand: Expr | None = None


@dataclass
class BinaryOp(Expr):
    """ADD, SUB, ... KECCAK."""

    op: str
    left: Expr | None = None
    right: Expr | None = None


@dataclass
class TernaryOp(Expr):
    """ADDM, MULM."""

    op: str
    arg1: Expr | None = None
    arg2: Expr | None = None
    arg3: Expr | None = None


@dataclass
class NullaryOp(Expr):
    """Environment builtins taking no arguments (GAS, CALLER, ...)."""

    op: str


# ============================================================
# STATEMENTS
# ============================================================


@dataclass
class Stmt:
    """Base for all statements."""


@dataclass
class Block(Stmt):
    """{ statements }."""

    statements: list[Stmt] = field(default_factory=list)


@dataclass
class VarDecl(Stmt):
    """let x_N := expr."""

    expr: Expr | None = None


@dataclass
class TypedVarDecl(Stmt):
    """let x_N:type := expr."""

    typ: str
    expr: Expr | None = None


@dataclass
class Assignment(Stmt):
    """x_N := expr."""

    ref: VarRef
    expr: Expr | None = None


@dataclass
class IfStmt(Stmt):
    """if cond { ... }."""

    cond: Expr | None = None
    body: Block = field(default_factory=Block)


@dataclass
class StoreFunc(Stmt):
    """MSTORE, SSTORE, MSTORE8."""

    op: str
    loc: Expr | None = None
    val: Expr | None = None


@dataclass
class ForStmt(Stmt):
    """for { init } cond { post } { body }."""

    init: Block = field(default_factory=Block)
    cond: Expr | None = None
    post: Block = field(default_factory=Block)
    body: Block = field(default_factory=Block)


@dataclass
class BoundedForStmt(Stmt):
    """Loop with a generated induction variable and a fixed trip count."""

    body: Block = field(default_factory=Block)


@dataclass
class CaseStmt:
    """case literal { ... }."""

    literal: Literal
    body: Block = field(default_factory=Block)


@dataclass
class SwitchStmt(Stmt):
    """switch expr cases default?."""

    expr: Expr | None = None
    cases: list[CaseStmt] = field(default_factory=list)
    default: Block | None = None


@dataclass
class BreakStmt(Stmt):
    """break."""


@dataclass
class ContinueStmt(Stmt):
    """continue."""


@dataclass
class LogFunc(Stmt):
    """logN(pos, size, topics...)."""

    pos: Expr | None = None
    size: Expr | None = None
    num_topics: int = 0
    topics: list[Expr | None] = field(default_factory=list)


@dataclass
class CopyFunc(Stmt):
    """CALLDATA, CODE, RETURNDATA copies."""

    op: str
    target: Expr | None = None
    source: Expr | None = None
    size: Expr | None = None


@dataclass
class ExtCodeCopy(Stmt):
    """extcodecopy(addr, target, source, size)."""

    addr: Expr | None = None
    target: Expr | None = None
    source: Expr | None = None
    size: Expr | None = None


@dataclass
class TerminatingStmt(Stmt):
    """Base for statements that end execution of the emitted program."""


@dataclass
class StopInvalidStmt(TerminatingStmt):
    """STOP, INVALID."""

    op: str


@dataclass
class RetRevStmt(TerminatingStmt):
    """RETURN, REVERT."""

    op: str
    pos: Expr | None = None
    size: Expr | None = None


@dataclass
class SelfDestructStmt(TerminatingStmt):
    """selfdestruct(addr)."""

    addr: Expr | None = None


@dataclass
class FunctionCall(Stmt, Expr):
    """Call site. In expression position only single-return callees are used.

    returns is one of NONE, SINGLE, MULTIDECL, MULTIASSIGN.
    """

    returns: str = "NONE"
    func_index: int = 0
    args: list[Expr | None] = field(default_factory=list)
    outs: list[VarRef] = field(default_factory=list)


@dataclass
class FunctionDef(Stmt):
    """function foo_K(params) -> rets { body }; arities are reduced modulo 6."""

    num_inputs: int = 0
    num_outputs: int = 0
    body: Block = field(default_factory=Block)


@dataclass
class Program:
    """Root of the tree."""

    block: Block = field(default_factory=Block)
