"""Tests for loading and dumping input trees."""

import json

import pytest

import yulfuzz
from yulfuzz.ast import (
    Block,
    CaseStmt,
    FunctionCall,
    Literal,
    Program,
    SwitchStmt,
    VarDecl,
    VarRef,
)
from yulfuzz.serialize import TreeError, from_dict, to_dict


def test_to_dict_tags_nodes():
    p = Program(Block([VarDecl(Literal(intval=3))]))
    d = to_dict(p)
    assert d["_type"] == "Program"
    stmt = d["block"]["statements"][0]
    assert stmt == {
        "_type": "VarDecl",
        "expr": {"_type": "Literal", "intval": 3, "hexval": None, "strval": None},
    }


def test_dump_then_load_preserves_tree():
    p = Program(
        Block(
            [
                SwitchStmt(
                    VarRef(2),
                    [CaseStmt(Literal(strval="x"), Block([VarDecl(None)]))],
                    Block(),
                ),
                FunctionCall(returns="MULTIDECL", args=[None], outs=[VarRef(1)]),
            ]
        )
    )
    assert yulfuzz.load(yulfuzz.dump(p)) == p


def test_missing_fields_take_defaults():
    p = from_dict({"_type": "Program"})
    assert p == Program(Block([]))


def test_unknown_node_type():
    with pytest.raises(TreeError) as e:
        from_dict({"_type": "Program", "block": {"_type": "Blob"}})
    assert e.value.path == "$.block"


def test_unknown_field():
    with pytest.raises(TreeError):
        from_dict({"_type": "Program", "blocks": []})


def test_unknown_operator():
    data = {
        "_type": "Program",
        "block": {
            "_type": "Block",
            "statements": [
                {"_type": "VarDecl", "expr": {"_type": "NullaryOp", "op": "BALANCE"}}
            ],
        },
    }
    with pytest.raises(TreeError) as e:
        from_dict(data)
    assert "BALANCE" in e.value.message


def test_statement_in_expression_position():
    data = {
        "_type": "Program",
        "block": {
            "_type": "Block",
            "statements": [{"_type": "VarDecl", "expr": {"_type": "BreakStmt"}}],
        },
    }
    with pytest.raises(TreeError):
        from_dict(data)


def test_missing_required_field():
    data = {
        "_type": "Program",
        "block": {"_type": "Block", "statements": [{"_type": "Assignment"}]},
    }
    with pytest.raises(TreeError):
        from_dict(data)


def test_literal_with_two_values():
    data = {
        "_type": "Program",
        "block": {
            "_type": "Block",
            "statements": [
                {"_type": "VarDecl", "expr": {"_type": "Literal", "intval": 1, "strval": "a"}}
            ],
        },
    }
    with pytest.raises(TreeError):
        from_dict(data)


def test_boolean_is_not_an_integer():
    with pytest.raises(TreeError):
        from_dict(
            {
                "_type": "Program",
                "block": {
                    "_type": "Block",
                    "statements": [{"_type": "VarDecl", "expr": {"_type": "VarRef", "varnum": True}}],
                },
            }
        )


def test_invalid_json():
    with pytest.raises(TreeError):
        yulfuzz.load("{not json")


def test_root_must_be_program():
    with pytest.raises(TreeError):
        from_dict({"_type": "Block"})


def test_convert_sizes_by_encoded_length():
    source = '{"_type": "Program", "block": {"_type": "Block", "statements": [{"_type": "VarDecl"}]}}'
    out = yulfuzz.convert(source, dictionary=("0", "1", "2"))
    index = (len(source) ** 2) % 3
    assert f"let x_0 := 0x{index}" in out
    assert yulfuzz.convert(source.encode("utf-8"), dictionary=("0", "1", "2")) == out


def _in_block(stmt: dict) -> dict:
    return {"_type": "Program", "block": {"_type": "Block", "statements": [stmt]}}


_LIT = {"_type": "Literal", "intval": 1}
_BLOCK = {"_type": "Block", "statements": []}


@pytest.mark.parametrize(
    "data,path",
    [
        (
            {"_type": "Program", "block": {"_type": "Block", "statements": {"_type": "VarDecl"}}},
            "$.block.statements",
        ),
        (
            _in_block({"_type": "SwitchStmt", "cases": {"_type": "CaseStmt", "literal": _LIT}}),
            "$.block.statements[0].cases",
        ),
        (
            _in_block({"_type": "LogFunc", "topics": _LIT}),
            "$.block.statements[0].topics",
        ),
        (
            _in_block({"_type": "FunctionCall", "args": _LIT}),
            "$.block.statements[0].args",
        ),
        (
            _in_block({"_type": "FunctionCall", "outs": {"_type": "VarRef", "varnum": 0}}),
            "$.block.statements[0].outs",
        ),
    ],
)
def test_list_field_given_a_single_node(data, path):
    with pytest.raises(TreeError) as e:
        yulfuzz.load(json.dumps(data))
    assert e.value.path == path
    assert e.value.message == "expected a list"


@pytest.mark.parametrize(
    "stmt,field",
    [
        ({"_type": "IfStmt", "body": [_BLOCK]}, "body"),
        ({"_type": "ForStmt", "init": [_BLOCK]}, "init"),
        ({"_type": "ForStmt", "post": [_BLOCK]}, "post"),
        ({"_type": "SwitchStmt", "default": [_BLOCK]}, "default"),
        ({"_type": "Assignment", "ref": [{"_type": "VarRef", "varnum": 0}]}, "ref"),
        (
            {"_type": "SwitchStmt", "cases": [{"_type": "CaseStmt", "literal": [_LIT]}]},
            "cases[0].literal",
        ),
        ({"_type": "VarDecl", "expr": [_LIT]}, "expr"),
    ],
)
def test_node_field_given_a_list(stmt, field):
    with pytest.raises(TreeError) as e:
        yulfuzz.load(json.dumps(_in_block(stmt)))
    assert e.value.path == f"$.block.statements[0].{field}"


def test_program_block_given_a_list():
    with pytest.raises(TreeError) as e:
        from_dict({"_type": "Program", "block": [_BLOCK]})
    assert e.value.path == "$.block"


@pytest.mark.parametrize(
    "stmt,field",
    [
        ({"_type": "IfStmt", "body": None}, "body"),
        ({"_type": "Block", "statements": None}, "statements"),
        ({"_type": "Assignment", "ref": None}, "ref"),
        ({"_type": "FunctionDef", "num_inputs": None, "body": _BLOCK}, "num_inputs"),
        ({"_type": "FunctionCall", "outs": [None]}, "outs[0]"),
    ],
)
def test_null_where_a_value_is_required(stmt, field):
    with pytest.raises(TreeError) as e:
        from_dict(_in_block(stmt))
    assert e.value.path == f"$.block.statements[0].{field}"


def test_node_in_integer_field():
    with pytest.raises(TreeError):
        from_dict(_in_block({"_type": "VarDecl", "expr": {"_type": "VarRef", "varnum": _LIT}}))


def test_nullable_fields_accept_null():
    p = from_dict(
        _in_block(
            {
                "_type": "SwitchStmt",
                "expr": None,
                "cases": [{"_type": "CaseStmt", "literal": _LIT, "body": _BLOCK}],
                "default": None,
            }
        )
    )
    assert yulfuzz.emit(p).startswith("{\n")
