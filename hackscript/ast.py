"""Abstract Syntax Tree (AST) definitions for the HackScript language.

The AST classes defined in this module represent the syntactic structure
of parsed HackScript programs. They are used by the type checker and the
interpreter. Each node corresponds to a construct in the HackScript
grammar and is immutable once built; every node records the line and
column of the token it starts at.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from .types import TypeInfo


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    line: int = field(default=0, kw_only=True, compare=False)
    column: int = field(default=0, kw_only=True, compare=False)


@dataclass(frozen=True)
class Program(Node):
    body: Tuple['Statement', ...]


@dataclass(frozen=True)
class VariableDeclaration(Node):
    name: str
    type_annotation: Optional[TypeInfo]  # None when the type is inferred
    initializer: Optional['Expression']
    mutable: bool = True


@dataclass(frozen=True)
class Parameter(Node):
    name: str
    type_info: TypeInfo
    default_value: Optional['Expression'] = None


@dataclass(frozen=True)
class FunctionDeclaration(Node):
    name: str
    params: Tuple[Parameter, ...]
    return_type: TypeInfo
    body: 'BlockStatement'


@dataclass(frozen=True)
class BlockStatement(Node):
    body: Tuple['Statement', ...]


@dataclass(frozen=True)
class IfStatement(Node):
    condition: 'Expression'
    consequent: BlockStatement
    alternate: Optional[Union[BlockStatement, 'IfStatement']] = None


@dataclass(frozen=True)
class ForStatement(Node):
    init: Union[VariableDeclaration, 'ExpressionStatement']
    condition: 'Expression'
    update: 'Expression'
    body: BlockStatement


@dataclass(frozen=True)
class WhileStatement(Node):
    condition: 'Expression'
    body: BlockStatement


@dataclass(frozen=True)
class ReturnStatement(Node):
    value: Optional['Expression']


@dataclass(frozen=True)
class ExpressionStatement(Node):
    expression: 'Expression'


@dataclass(frozen=True)
class NumberLiteral(Node):
    value: Union[int, float]
    number_type: str  # 'int' or 'float'


@dataclass(frozen=True)
class StringLiteral(Node):
    value: str  # quotes of either kind give a string


@dataclass(frozen=True)
class BooleanLiteral(Node):
    value: bool


@dataclass(frozen=True)
class NullLiteral(Node):
    pass


@dataclass(frozen=True)
class Identifier(Node):
    name: str


@dataclass(frozen=True)
class BinaryExpression(Node):
    operator: str
    left: 'Expression'
    right: 'Expression'


@dataclass(frozen=True)
class UnaryExpression(Node):
    operator: str  # '-', '!', '++' or '--'
    operand: 'Expression'
    prefix: bool = True


@dataclass(frozen=True)
class AssignmentExpression(Node):
    target: 'Expression'
    value: 'Expression'


@dataclass(frozen=True)
class FunctionCall(Node):
    callee: 'Expression'
    arguments: Tuple['Expression', ...]


@dataclass(frozen=True)
class ArrayAccess(Node):
    target: 'Expression'
    index: 'Expression'


@dataclass(frozen=True)
class PropertyAccess(Node):
    target: 'Expression'
    name: str


@dataclass(frozen=True)
class ArrayLiteral(Node):
    elements: Tuple['Expression', ...]


@dataclass(frozen=True)
class ObjectLiteral(Node):
    properties: Tuple[Tuple[str, 'Expression'], ...]


Statement = Union[
    VariableDeclaration, FunctionDeclaration, BlockStatement, IfStatement,
    ForStatement, WhileStatement, ReturnStatement, ExpressionStatement,
]

Expression = Union[
    NumberLiteral, StringLiteral, BooleanLiteral, NullLiteral, Identifier,
    BinaryExpression, UnaryExpression, AssignmentExpression, FunctionCall,
    ArrayAccess, PropertyAccess, ArrayLiteral, ObjectLiteral,
]
