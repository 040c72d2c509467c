"""Static type checker for HackScript.

The checker walks a parsed `Program` before evaluation, infers a
`TypeInfo` for every expression and reports incompatible declarations,
assignments, arguments and returns as diagnostics. It never raises: all
problems are accumulated and the interpreter only evaluates a program
whose diagnostic list is empty.

Scopes are tracked with the same `Environment` chain the evaluator uses.
The checker's root scope is a child of the session environment, so
variables and functions left behind by earlier runs are visible while
nothing the checker declares leaks into the session.

Only mismatches between determinate types are reported. An expression
the checker cannot type (an unresolved identifier, a property access,
an `Array<any>` literal) is `unknown`/`any` and is accepted everywhere.
"""

from __future__ import annotations

from typing import List, Optional

from .ast import (
    Program, VariableDeclaration, FunctionDeclaration, BlockStatement,
    IfStatement, ForStatement, WhileStatement, ReturnStatement,
    ExpressionStatement, NumberLiteral, StringLiteral, BooleanLiteral,
    NullLiteral, Identifier, BinaryExpression, UnaryExpression,
    AssignmentExpression, FunctionCall, ArrayAccess, PropertyAccess,
    ArrayLiteral, ObjectLiteral, Node,
)
from .environment import Environment
from .errors import Diagnostic
from .functions import FunctionDefinition
from .types import (
    ANY, FUNCTION, NULL, OBJECT, UNKNOWN, TypeInfo, create_array_type,
    element_type, get_primitive_type, is_assignable, is_indeterminate,
)

ARITHMETIC_OPERATORS = ('+', '-', '*', '/', '%')
COMPARISON_OPERATORS = ('==', '!=', '<', '>', '<=', '>=')
LOGICAL_OPERATORS = ('&&', '||')


def is_compatible(from_type: TypeInfo, to_type: TypeInfo) -> bool:
    """Assignability as the checker applies it to inferred types."""
    if is_indeterminate(from_type) or to_type.name == 'any':
        return True
    if from_type.name == 'null':
        return to_type.nullable
    return is_assignable(from_type, to_type)


class TypeChecker:
    def __init__(self, env: Optional[Environment] = None):
        self.scope = Environment(parent=env)
        self.diagnostics: List[Diagnostic] = []
        self.current_function: Optional[FunctionDeclaration] = None

    def error(self, node: Node, message: str):
        self.diagnostics.append(Diagnostic(node.line, node.column, message, 'error'))

    def check(self, program: Program) -> List[Diagnostic]:
        for statement in program.body:
            self.check_statement(statement)
        return self.diagnostics

    # Statements

    def check_statement(self, stmt: Node):
        if isinstance(stmt, VariableDeclaration):
            declared = stmt.type_annotation
            init_type = self.infer(stmt.initializer) if stmt.initializer is not None else None
            if declared is not None and init_type is not None and not is_compatible(init_type, declared):
                self.error(stmt, f"Cannot assign {init_type.name} to {declared.name}")
            if declared is None:
                declared = UNKNOWN if init_type is None or init_type.name == 'null' else init_type
            self.scope.declare(stmt.name, declared, None, stmt.mutable)
            return
        if isinstance(stmt, FunctionDeclaration):
            self.check_function(stmt)
            return
        if isinstance(stmt, BlockStatement):
            self.check_block(stmt, Environment(parent=self.scope))
            return
        if isinstance(stmt, IfStatement):
            self.infer(stmt.condition)
            self.check_statement(stmt.consequent)
            if stmt.alternate is not None:
                self.check_statement(stmt.alternate)
            return
        if isinstance(stmt, ForStatement):
            outer = self.scope
            self.scope = Environment(parent=outer)
            try:
                self.check_statement(stmt.init)
                self.infer(stmt.condition)
                self.infer(stmt.update)
                self.check_statement(stmt.body)
            finally:
                self.scope = outer
            return
        if isinstance(stmt, WhileStatement):
            self.infer(stmt.condition)
            self.check_statement(stmt.body)
            return
        if isinstance(stmt, ReturnStatement):
            self.check_return(stmt)
            return
        if isinstance(stmt, ExpressionStatement):
            self.infer(stmt.expression)
            return
        raise NotImplementedError(f"check_statement: unexpected node type {type(stmt)}")

    def check_block(self, block: BlockStatement, scope: Environment):
        outer = self.scope
        self.scope = scope
        try:
            for inner in block.body:
                self.check_statement(inner)
        finally:
            self.scope = outer

    def check_function(self, stmt: FunctionDeclaration):
        # declared first so the body can recurse
        self.scope.define_function(FunctionDefinition(stmt.name, stmt.params, stmt.return_type, stmt.body))
        func_scope = Environment(parent=self.scope)
        for param in stmt.params:
            if param.default_value is not None:
                default_type = self.infer(param.default_value)
                if not is_compatible(default_type, param.type_info):
                    self.error(param, f"Default value of parameter '{param.name}': "
                                      f"cannot assign {default_type.name} to {param.type_info.name}")
            func_scope.declare(param.name, param.type_info, None, True)
        enclosing = self.current_function
        self.current_function = stmt
        try:
            self.check_block(stmt.body, func_scope)
        finally:
            self.current_function = enclosing

    def check_return(self, stmt: ReturnStatement):
        func = self.current_function
        value_type = self.infer(stmt.value) if stmt.value is not None else None
        if func is None:
            self.error(stmt, "Return statement outside of function")
            return
        expected = func.return_type
        if value_type is None:
            if expected.name != 'void' and not expected.nullable:
                self.error(stmt, f"Function '{func.name}' must return a value of type {expected.name}")
            return
        if expected.name == 'void':
            self.error(stmt, f"Function '{func.name}' is declared void and cannot return a value")
            return
        if not is_compatible(value_type, expected):
            self.error(stmt, f"Function '{func.name}' cannot return {value_type.name}, expected {expected.name}")

    # Expressions

    def infer(self, expr: Node) -> TypeInfo:
        if isinstance(expr, NumberLiteral):
            return get_primitive_type(expr.number_type) or TypeInfo.integer()
        if isinstance(expr, StringLiteral):
            return TypeInfo.string()
        if isinstance(expr, BooleanLiteral):
            return TypeInfo.boolean()
        if isinstance(expr, NullLiteral):
            return NULL
        if isinstance(expr, ArrayLiteral):
            element_types = [self.infer(e) for e in expr.elements]
            if not element_types:
                return create_array_type(ANY)
            return create_array_type(element_types[0])
        if isinstance(expr, ObjectLiteral):
            for _, value in expr.properties:
                self.infer(value)
            return OBJECT
        if isinstance(expr, Identifier):
            binding = self.scope.lookup(expr.name)
            if binding is not None:
                return binding.type_info
            if self.scope.lookup_function(expr.name) is not None:
                return FUNCTION
            return UNKNOWN
        if isinstance(expr, BinaryExpression):
            return self.infer_binary(expr)
        if isinstance(expr, UnaryExpression):
            operand = self.infer(expr.operand)
            if expr.operator == '!':
                return TypeInfo.boolean()
            if operand.name in ('int', 'float'):
                return operand
            return UNKNOWN
        if isinstance(expr, AssignmentExpression):
            return self.infer_assignment(expr)
        if isinstance(expr, FunctionCall):
            return self.infer_call(expr)
        if isinstance(expr, ArrayAccess):
            target = self.infer(expr.target)
            self.infer(expr.index)
            return element_type(target)
        if isinstance(expr, PropertyAccess):
            self.infer(expr.target)
            return UNKNOWN
        raise NotImplementedError(f"infer: unexpected node type {type(expr)}")

    def infer_binary(self, expr: BinaryExpression) -> TypeInfo:
        left = self.infer(expr.left)
        right = self.infer(expr.right)
        op = expr.operator
        if op in ARITHMETIC_OPERATORS:
            if left.name == 'float' or right.name == 'float':
                return TypeInfo.floating()
            if left.name == 'int' and right.name == 'int':
                return TypeInfo.integer()
            if op == '+' and (left.name == 'string' or right.name == 'string'):
                return TypeInfo.string()
            if left.primitive and right.primitive and not left.nullable and not right.nullable:
                self.error(expr, f"Operator '{op}' cannot be applied to {left.name} and {right.name}")
            return UNKNOWN
        if op in COMPARISON_OPERATORS:
            return TypeInfo.boolean()
        if op in LOGICAL_OPERATORS:
            return TypeInfo.boolean()
        return UNKNOWN

    def infer_assignment(self, expr: AssignmentExpression) -> TypeInfo:
        value_type = self.infer(expr.value)
        if isinstance(expr.target, Identifier):
            binding = self.scope.lookup(expr.target.name)
            if binding is None:
                return value_type
            if not is_compatible(value_type, binding.type_info):
                self.error(expr, f"Cannot assign {value_type.name} to {binding.type_info.name}")
            return binding.type_info
        self.infer(expr.target)
        return value_type

    def infer_call(self, expr: FunctionCall) -> TypeInfo:
        arg_types = [self.infer(arg) for arg in expr.arguments]
        if not isinstance(expr.callee, Identifier):
            self.infer(expr.callee)
            return UNKNOWN
        func = self.scope.lookup_function(expr.callee.name)
        if func is None:
            return UNKNOWN
        if func.arity is not None and len(arg_types) > func.arity:
            self.error(expr, f"Function '{func.name}' expects at most {func.arity} argument(s), got {len(arg_types)}")
        if func.is_builtin and func.arity is not None and len(arg_types) < func.arity:
            self.error(expr, f"Function '{func.name}' expects {func.arity} argument(s), got {len(arg_types)}")
        if not func.variadic:
            for param, arg, arg_type in zip(func.params, expr.arguments, arg_types):
                if not is_compatible(arg_type, param.type_info):
                    self.error(arg, f"Argument '{param.name}' of '{func.name}': "
                                    f"cannot assign {arg_type.name} to {param.type_info.name}")
        return func.return_type


def check_program(program: Program, env: Optional[Environment] = None) -> List[Diagnostic]:
    """Type check `program` against the session environment `env`."""
    return TypeChecker(env).check(program)
