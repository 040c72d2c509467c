"""Interpreter for the HackScript language.

This module ties the toolchain together: source text is tokenized and
parsed into an AST, the AST is type checked, and a program without
diagnostics is evaluated by a tree-walking evaluator against the
session's root environment.

`Interpreter` is the session object a host owns. Its root environment
persists across `execute` calls, so a later call sees the variables and
functions of an earlier one, until `reset` discards every user binding
and reinstalls only the builtins.
"""

from __future__ import annotations

import math
import sys
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from .ast import (
    Program, VariableDeclaration, FunctionDeclaration, BlockStatement,
    IfStatement, ForStatement, WhileStatement, ReturnStatement,
    ExpressionStatement, NumberLiteral, StringLiteral, BooleanLiteral,
    NullLiteral, Identifier, BinaryExpression, UnaryExpression,
    AssignmentExpression, FunctionCall, ArrayAccess, PropertyAccess,
    ArrayLiteral, ObjectLiteral, Node,
)
from .checker import check_program
from .environment import Environment
from .errors import Diagnostic, HackScriptError, ReturnSignal
from .functions import FunctionDefinition
from .parser import parse_program
from .std import populate_builtins
from .types import ANY, OBJECT, TypeInfo, make_type
from .values import (
    ArrayVal, NullVal, ObjectVal, coerce_value, is_number, is_truthy,
    to_string, type_name, values_equal, zero_value,
)


@dataclass
class ExecutionResult:
    """Outcome of one `Interpreter.execute` call.

    * did not compile: `success` is False and `diagnostics` is non-empty;
    * crashed: `success` is False, `error` holds the message and `output`
      whatever was printed before the fault;
    * completed: `success` is True and `value` is the value of the last
      executed statement (None when it produced none).
    """
    success: bool
    output: List[str] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    value: Any = None
    error: Optional[str] = None


@dataclass
class VariableInfo:
    name: str
    type: str
    value: Any
    mutable: bool


@dataclass
class FunctionInfo:
    name: str
    signature: str


def runtime_type(value: Any) -> TypeInfo:
    """Declared type for a `let`/`const` without annotation."""
    if isinstance(value, bool):
        return TypeInfo.boolean()
    if isinstance(value, int):
        return TypeInfo.integer()
    if isinstance(value, float):
        return TypeInfo.floating()
    if isinstance(value, str):
        return TypeInfo.string()
    if isinstance(value, ArrayVal):
        return make_type('Array', (ANY,))
    if isinstance(value, ObjectVal):
        return OBJECT
    return ANY


def truncate_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


# Each HackScript call costs several Python frames; this allows roughly
# 1500 nested script calls.
RECURSION_LIMIT = 12000


@contextmanager
def recursion_limit(limit: int):
    """Temporarily raise the Python recursion limit to at least `limit`."""
    saved = sys.getrecursionlimit()
    sys.setrecursionlimit(max(saved, limit))
    try:
        yield
    finally:
        sys.setrecursionlimit(saved)


class Interpreter:
    """Core interpreter that executes HackScript programs for one session."""
    def __init__(self, debug_level: int = 0, debug_file: Optional[str] = 'debug.txt',
                 max_steps: Optional[int] = None):
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 and debug_file else None
        self.max_steps = max_steps
        self.steps = 0
        self.output: List[str] = []
        self.diagnostics: List[Diagnostic] = []
        self.global_env = self.create_global_env()

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg, file=sys.stderr)

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    def create_global_env(self) -> Environment:
        return populate_builtins(Environment(), self.output)

    # Public API

    def execute(self, source: str) -> ExecutionResult:
        """Parse, check and run `source` in this session."""
        with recursion_limit(RECURSION_LIMIT):
            return self.execute_source(source)

    def execute_source(self, source: str) -> ExecutionResult:
        self.output.clear()
        program, diagnostics = compile_source(source, self.global_env)
        self.diagnostics = diagnostics
        self.debug(f"parsed {len(program.body)} statement(s), {len(diagnostics)} diagnostic(s)")
        if diagnostics:
            return ExecutionResult(False, list(self.output), list(diagnostics))
        try:
            value = self.run(program)
        except HackScriptError as e:
            self.debug(f"runtime error: {e.message}")
            return ExecutionResult(False, list(self.output), error=e.message)
        except RecursionError:
            self.debug("runtime error: maximum call depth exceeded")
            return ExecutionResult(False, list(self.output), error='Maximum call depth exceeded')
        self.debug(f"completed with {len(self.output)} output line(s)")
        return ExecutionResult(True, list(self.output), value=value)

    def run(self, program: Program, env: Optional[Environment] = None) -> Any:
        """Evaluate an already-checked program; returns the last statement's value."""
        if env is None:
            env = self.global_env
        self.steps = 0
        result = None
        with recursion_limit(RECURSION_LIMIT):
            try:
                for stmt in program.body:
                    result = self.execute_statement(stmt, env)
            except ReturnSignal as r:
                result = r.value
        return result

    def list_variables(self) -> List[VariableInfo]:
        return [
            VariableInfo(name, binding.type_info.name, binding.value, binding.mutable)
            for name, binding in self.global_env.bindings.items()
        ]

    def list_functions(self) -> List[FunctionInfo]:
        return [FunctionInfo(func.name, func.signature()) for func in self.global_env.user_functions()]

    def reset(self):
        """Discard all user bindings, functions, output and diagnostics."""
        self.output = []
        self.diagnostics = []
        self.global_env = self.create_global_env()
        self.debug("session reset")

    # Statements

    def tick(self):
        self.steps += 1
        if self.max_steps is not None and self.steps > self.max_steps:
            raise HackScriptError(f"Execution exceeded the step limit of {self.max_steps}")

    def execute_block(self, statements, env: Environment) -> Any:
        result = None
        for stmt in statements:
            result = self.execute_statement(stmt, env)
        return result

    def execute_statement(self, node: Node, env: Environment) -> Any:
        self.tick()
        if self.debug_level >= 4:
            self.debug(f"execute {type(node).__name__} at {node.line}:{node.column}")
        if isinstance(node, VariableDeclaration):
            if node.initializer is not None:
                value = self.evaluate(node.initializer, env)
                type_info = node.type_annotation or runtime_type(value)
                value = coerce_value(value, type_info)
            else:
                type_info = node.type_annotation
                value = zero_value(type_info)
            env.declare(node.name, type_info, value, node.mutable)
            if self.debug_level >= 2:
                self.debug(f"declare {node.name}: {type_info.name} = {to_string(value)}")
            return None
        if isinstance(node, FunctionDeclaration):
            env.define_function(FunctionDefinition(node.name, node.params, node.return_type, node.body))
            if self.debug_level >= 2:
                self.debug(f"define function {node.name}")
            return None
        if isinstance(node, BlockStatement):
            # block-local declarations vanish with block_env
            block_env = Environment(parent=env)
            return self.execute_block(node.body, block_env)
        if isinstance(node, IfStatement):
            cond = self.evaluate(node.condition, env)
            truthy = is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {to_string(cond)} -> {truthy}")
            if truthy:
                return self.execute_statement(node.consequent, env)
            if node.alternate is not None:
                return self.execute_statement(node.alternate, env)
            return None
        if isinstance(node, ForStatement):
            for_env = Environment(parent=env)
            self.execute_statement(node.init, for_env)
            result = None
            while is_truthy(self.evaluate(node.condition, for_env)):
                self.tick()
                result = self.execute_statement(node.body, for_env)
                self.evaluate(node.update, for_env)
            return result
        if isinstance(node, WhileStatement):
            result = None
            while is_truthy(self.evaluate(node.condition, env)):
                self.tick()
                result = self.execute_statement(node.body, env)
            return result
        if isinstance(node, ReturnStatement):
            value = self.evaluate(node.value, env) if node.value is not None else NullVal()
            raise ReturnSignal(value)
        if isinstance(node, ExpressionStatement):
            return self.evaluate(node.expression, env)
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    # Expressions

    def evaluate(self, node: Node, env: Environment) -> Any:
        if isinstance(node, NumberLiteral):
            return node.value
        if isinstance(node, StringLiteral):
            return node.value
        if isinstance(node, BooleanLiteral):
            return node.value
        if isinstance(node, NullLiteral):
            return NullVal()
        if isinstance(node, ArrayLiteral):
            return ArrayVal([self.evaluate(e, env) for e in node.elements])
        if isinstance(node, ObjectLiteral):
            return ObjectVal({key: self.evaluate(value, env) for key, value in node.properties})
        if isinstance(node, Identifier):
            binding = env.lookup(node.name)
            if binding is not None:
                return binding.value
            func = env.lookup_function(node.name)
            if func is not None:
                return func
            raise HackScriptError(f"Undefined variable: {node.name}")
        if isinstance(node, BinaryExpression):
            left = self.evaluate(node.left, env)
            # Short-circuit for && and ||
            if node.operator == '&&':
                return is_truthy(left) and is_truthy(self.evaluate(node.right, env))
            if node.operator == '||':
                return is_truthy(left) or is_truthy(self.evaluate(node.right, env))
            right = self.evaluate(node.right, env)
            try:
                return self.apply_binary_op(node.operator, left, right)
            except OverflowError:
                raise HackScriptError(f"Numeric overflow in '{node.operator}': integer too large to convert to float")
        if isinstance(node, UnaryExpression):
            return self.evaluate_unary(node, env)
        if isinstance(node, AssignmentExpression):
            if not isinstance(node.target, Identifier):
                raise HackScriptError('Invalid assignment target')
            value = self.evaluate(node.value, env)
            return env.assign(node.target.name, value)
        if isinstance(node, FunctionCall):
            return self.evaluate_call(node, env)
        if isinstance(node, ArrayAccess):
            target = self.evaluate(node.target, env)
            index = self.evaluate(node.index, env)
            if not isinstance(target, ArrayVal):
                raise HackScriptError(f"Array access on non-array value of type {type_name(target)}")
            if isinstance(index, bool) or not isinstance(index, int):
                raise HackScriptError(f"Array index must be an int, got {type_name(index)}")
            if index < 0 or index >= len(target.items):
                raise HackScriptError(f"Array index out of bounds: {index} (length {len(target.items)})")
            return target.items[index]
        if isinstance(node, PropertyAccess):
            target = self.evaluate(node.target, env)
            return self.get_property(target, node.name)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def evaluate_unary(self, node: UnaryExpression, env: Environment) -> Any:
        operand = self.evaluate(node.operand, env)
        op = node.operator
        if op == '!':
            return not is_truthy(operand)
        if not is_number(operand):
            raise HackScriptError(f"Unary operator '{op}' requires a number, got {type_name(operand)}")
        if op == '-':
            return -operand
        if op in ('++', '--'):
            updated = operand + 1 if op == '++' else operand - 1
            if isinstance(node.operand, Identifier):
                updated = env.assign(node.operand.name, updated)
            return updated if node.prefix else operand
        raise HackScriptError(f"Unknown unary operator: {op}")

    def get_property(self, target: Any, name: str) -> Any:
        if isinstance(target, NullVal):
            raise HackScriptError(f"Cannot read property '{name}' of null")
        if isinstance(target, ObjectVal):
            return target.fields.get(name, NullVal())
        if name == 'length' and isinstance(target, str):
            return len(target)
        if name == 'length' and isinstance(target, ArrayVal):
            return len(target.items)
        raise HackScriptError(f"Property '{name}' does not exist on {type_name(target)}")

    def evaluate_call(self, node: FunctionCall, env: Environment) -> Any:
        if isinstance(node.callee, Identifier):
            args = [self.evaluate(arg, env) for arg in node.arguments]
            name = node.callee.name
            func = env.lookup_function(name)
            if func is None:
                binding = env.lookup(name)
                if binding is None:
                    raise HackScriptError(f"Unknown function: {name}")
                func = binding.value
            if not isinstance(func, FunctionDefinition):
                raise HackScriptError(f"'{name}' is not a function")
        else:
            func = self.evaluate(node.callee, env)
            args = [self.evaluate(arg, env) for arg in node.arguments]
            if not isinstance(func, FunctionDefinition):
                raise HackScriptError(f"Value of type {type_name(func)} is not a function")
        return self.call_function(func, args, env)

    def call_function(self, func: FunctionDefinition, args: List[Any], env: Environment) -> Any:
        if self.debug_level >= 3:
            self.debug(f"call {func.name}({', '.join(to_string(a) for a in args)})")
        if func.native is not None:
            # Check arity; None means variadic
            if func.arity is not None and len(args) != func.arity:
                raise HackScriptError(f"{func.name}() expects {func.arity} argument(s), got {len(args)}")
            return func.native(args)
        # The callee scope hangs off the calling environment, not the defining one
        call_env = Environment(parent=env)
        for i, param in enumerate(func.params):
            if i < len(args):
                value = args[i]
            elif param.default_value is not None:
                value = self.evaluate(param.default_value, env)
            else:
                value = zero_value(param.type_info)
            call_env.declare(param.name, param.type_info, coerce_value(value, param.type_info), True)
        try:
            result = self.execute_statement(func.body, call_env)
        except ReturnSignal as r:
            result = r.value
        if result is None:
            return NullVal()
        return coerce_value(result, func.return_type)

    def apply_binary_op(self, op: str, a: Any, b: Any) -> Any:
        if op == '+':
            # If either operand is string, perform concatenation
            if isinstance(a, str) or isinstance(b, str):
                return to_string(a) + to_string(b)
            self.require_numbers(op, a, b)
            return a + b
        if op == '-':
            self.require_numbers(op, a, b)
            return a - b
        if op == '*':
            self.require_numbers(op, a, b)
            return a * b
        if op == '/':
            self.require_numbers(op, a, b)
            if b == 0:
                raise HackScriptError('Division by zero')
            if isinstance(a, int) and isinstance(b, int):
                return truncate_div(a, b)
            return a / b
        if op == '%':
            self.require_numbers(op, a, b)
            if b == 0:
                raise HackScriptError('Modulo by zero')
            if isinstance(a, int) and isinstance(b, int):
                return a - b * truncate_div(a, b)
            return math.fmod(a, b)
        if op == '==':
            return values_equal(a, b)
        if op == '!=':
            return not values_equal(a, b)
        if op in ('<', '>', '<=', '>='):
            if not ((is_number(a) and is_number(b)) or (isinstance(a, str) and isinstance(b, str))):
                raise HackScriptError(
                    f"Operator '{op}' cannot compare {type_name(a)} and {type_name(b)}")
            if op == '<':
                return a < b
            if op == '>':
                return a > b
            if op == '<=':
                return a <= b
            return a >= b
        raise HackScriptError(f"Unknown binary operator: {op}")

    def require_numbers(self, op: str, a: Any, b: Any):
        if not (is_number(a) and is_number(b)):
            raise HackScriptError(
                f"Operator '{op}' cannot be applied to {type_name(a)} and {type_name(b)}")


def run_program(source: str, debug_level: int = 0, max_steps: Optional[int] = None) -> ExecutionResult:
    """Convenience function to check and run a HackScript program in a fresh session."""
    interpreter = Interpreter(debug_level=debug_level, max_steps=max_steps)
    try:
        return interpreter.execute(source)
    finally:
        interpreter.close()


def compile_source(source: str, env: Optional[Environment] = None) -> Tuple[Program, List[Diagnostic]]:
    """Parse and type check `source` without running it."""
    try:
        program, diagnostics = parse_program(source)
        diagnostics.extend(check_program(program, env))
    except RecursionError:
        return Program((), line=1, column=1), [Diagnostic(1, 1, 'Expression nested too deeply', 'error')]
    return program, diagnostics
