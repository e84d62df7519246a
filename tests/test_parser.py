from __future__ import annotations

import pytest

from mython import Class, ParseError
from mython.expressions import (
    Add,
    And,
    Comparison,
    Div,
    FieldValue,
    MethodCall,
    Mult,
    NewInstance,
    Not,
    NumericConst,
    Or,
    StringConst,
    Stringify,
    Sub,
    VariableValue,
)
from mython.helpers import greater_or_equal, less
from mython.lexer import Lexer
from mython.parser import Parser, parse_program
from mython.statements import (
    Assignment,
    ClassDefinition,
    Compound,
    FieldAssignment,
    IfElse,
    MethodBody,
    Print,
    Return,
)


def only_statement(source):
    program = parse_program(source)
    assert isinstance(program, Compound)
    assert len(program.statements) == 1
    return program.statements[0]


def test_operator_precedence():
    node = only_statement("x = 1 + 2 * 3 - 4 / 2").rv
    assert isinstance(node, Sub)
    assert isinstance(node.lhs, Add)
    assert isinstance(node.lhs.rhs, Mult)
    assert isinstance(node.rhs, Div)


def test_logic_precedence():
    node = only_statement("x = not a or b and c < d").rv
    assert isinstance(node, Or)
    assert isinstance(node.lhs, Not)
    assert isinstance(node.rhs, And)
    assert isinstance(node.rhs.rhs, Comparison)
    assert node.rhs.rhs.comparator is less


def test_comparison_operators_map_to_comparators():
    node = only_statement("x = a >= b").rv
    assert node.comparator is greater_or_equal


def test_unary_minus():
    literal = only_statement("x = -5").rv
    assert isinstance(literal, NumericConst)
    assert literal.holder.deref().value == -5

    negated = only_statement("x = -y").rv
    assert isinstance(negated, Mult)
    assert negated.lhs.holder.deref().value == -1
    assert isinstance(negated.rhs, VariableValue)


def test_assignments():
    plain = only_statement("x = 'a'")
    assert isinstance(plain, Assignment)
    assert plain.var == "x"
    assert isinstance(plain.rv, StringConst)

    field = only_statement("a.b.c = 1")
    assert isinstance(field, FieldAssignment)
    assert field.obj.dotted_ids == ["a", "b"]
    assert field.field_name == "c"


def test_print_and_return():
    printed = only_statement("print a, 'b', 1")
    assert isinstance(printed, Print)
    assert len(printed.args) == 3
    assert only_statement("print").args == []

    program = parse_program("class A:\n  def f():\n    return x.y\n")
    method = program.statements[0].cls.deref().methods[0]
    assert isinstance(method.body, MethodBody)
    returned = method.body.body.statements[0]
    assert isinstance(returned, Return)
    assert returned.statement.dotted_ids == ["x", "y"]


def test_class_definition_with_parent():
    source = """
class Base:
  def f(a, b):
    return a

class Child(Base):
  def g():
    return Child()
"""
    program = parse_program(source)
    base_def, child_def = program.statements
    assert isinstance(base_def, ClassDefinition)
    base = base_def.cls.try_as(Class)
    child = child_def.cls.try_as(Class)
    assert child.name == "Child"
    assert child.parent is base
    assert base.methods[0].formal_params == ["a", "b"]

    new_child = child.methods[0].body.body.statements[0].statement
    assert isinstance(new_child, NewInstance)
    assert new_child.cls is child


def test_calls_and_instances():
    source = """
class P:
  def __init__(v):
    self.v = v

p = P(1).chain().end(2, 3)
s = str(p)
"""
    program = parse_program(source)
    call = program.statements[1].rv
    assert isinstance(call, MethodCall)
    assert call.method == "end" and len(call.args) == 2
    assert isinstance(call.obj, MethodCall)
    assert isinstance(call.obj.obj, NewInstance)
    assert isinstance(program.statements[2].rv, Stringify)


def test_field_read_after_call():
    source = """
class P:
  def me():
    return self

x = P().me().inner.v
"""
    program = parse_program(source)
    read = program.statements[1].rv
    assert isinstance(read, FieldValue)
    assert read.field_name == "v"
    assert isinstance(read.obj, FieldValue)
    assert read.obj.field_name == "inner"
    assert isinstance(read.obj.obj, MethodCall)
    assert isinstance(read.obj.obj.obj, NewInstance)


def test_strict_flag_reaches_method_calls():
    parser = Parser(Lexer("x.f()"), strict_method_calls=True)
    call = parser.parse_program().statements[0]
    assert isinstance(call, MethodCall)
    assert call.strict
    assert call.obj.dotted_ids == ["x"]
    assert not only_statement("x.f()").strict


def test_if_else():
    source = """
if a:
  x = 1
else:
  x = 2
  y = 3
"""
    node = only_statement(source)
    assert isinstance(node, IfElse)
    assert len(node.if_body.statements) == 1
    assert len(node.else_body.statements) == 2

    no_else = only_statement("if a:\n  x = 1\n")
    assert no_else.else_body is None


@pytest.mark.parametrize(
    "source, message",
    [
        ("x = Missing()", "unknown class 'Missing'"),
        ("class A(Nope):\n  def f():\n    return 1\n", "unknown base class"),
        ("x = (1 + 2", r"expected '\)'"),
        ("x = str(1, 2)", "exactly one argument"),
        ("if a:\nx = 1\n", "expected INDENT"),
        ("print 1 2", "expected NEWLINE"),
        ("x = ", "expected an expression"),
    ],
)
def test_parse_errors(source, message):
    with pytest.raises(ParseError, match=message):
        parse_program(source)
