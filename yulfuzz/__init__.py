"""Public API for the Yul program generator used in compiler fuzzing."""

from __future__ import annotations

import json
from collections.abc import Sequence

from .ast import Program
from .convert import Converter as Converter, program_to_string
from .scope import ScopeError as ScopeError
from .serialize import TreeError as TreeError, from_dict, to_dict


def load(source: str | bytes) -> Program:
    """Parse the JSON form of an input tree."""
    try:
        data = json.loads(source)
    except ValueError as e:
        raise TreeError(str(e), "$") from None
    return from_dict(data)


def dump(program: Program) -> str:
    """Serialize an input tree to its JSON form."""
    return json.dumps(to_dict(program))


def emit(
    program: Program, input_size: int = 0, dictionary: Sequence[str] | None = None
) -> str:
    """Translate an input tree to Yul source text."""
    return program_to_string(program, input_size, dictionary)


def convert(source: str | bytes, dictionary: Sequence[str] | None = None) -> str:
    """Load a JSON input tree and translate it, sized by its encoded length."""
    raw = source.encode("utf-8") if isinstance(source, str) else source
    return program_to_string(load(raw), len(raw), dictionary)
