"""Recursive-descent parser for the HackScript language.

The parser consumes the token list produced by `tokenizer.tokenize` in a
single left-to-right pass with one token of lookahead and builds a
`Program` node. A syntax error inside a statement does not stop parsing:
the error is recorded as a `Diagnostic`, the parser skips one token past
the failure point and resumes with the next statement, so a single pass
reports every recoverable error.

Expression precedence, lowest to highest: assignment, `||`, `&&`,
equality, relational, additive, multiplicative, unary prefix, postfix
(call, index, member, `++`/`--`), primary.
"""

from __future__ import annotations

import ast as py_ast
from typing import List, Optional, Tuple, Union

from .ast import (
    Program, VariableDeclaration, Parameter, FunctionDeclaration,
    BlockStatement, IfStatement, ForStatement, WhileStatement,
    ReturnStatement, ExpressionStatement, NumberLiteral, StringLiteral,
    BooleanLiteral, NullLiteral, Identifier, BinaryExpression,
    UnaryExpression, AssignmentExpression, FunctionCall, ArrayAccess,
    PropertyAccess, ArrayLiteral, ObjectLiteral, Node,
)
from .errors import Diagnostic, ParseError
from .tokenizer import Token, tokenize
from .types import TypeInfo, make_type


OPERATOR_KINDS = ('OP', 'PUNCT', 'KEYWORD')


class Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0
        self.diagnostics: List[Diagnostic] = []

    # Token helpers

    def peek(self) -> Optional[Token]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def match(self, expected: Union[str, Tuple[str, ...]]) -> bool:
        """True if the next token is the operator, punctuation or keyword `expected`."""
        token = self.peek()
        if token is None or token.kind not in OPERATOR_KINDS:
            return False
        if isinstance(expected, tuple):
            return token.value in expected
        return token.value == expected

    def match_kind(self, kind: str) -> bool:
        token = self.peek()
        return token is not None and token.kind == kind

    def consume(self) -> Token:
        token = self.peek()
        if token is None:
            raise self.error("Unexpected end of input")
        self.pos += 1
        return token

    def expect(self, expected: str) -> Token:
        if not self.match(expected):
            raise self.error(f"Expected '{expected}', got {self.describe(self.peek())}")
        return self.consume()

    def expect_kind(self, kind: str, what: str) -> Token:
        if not self.match_kind(kind):
            raise self.error(f"Expected {what}, got {self.describe(self.peek())}")
        return self.consume()

    def describe(self, token: Optional[Token]) -> str:
        if token is None:
            return 'end of input'
        return f"'{token.value}'"

    def position(self) -> Tuple[int, int]:
        token = self.peek()
        if token is None:
            if self.tokens:
                last = self.tokens[-1]
                return last.line, last.column + len(last.value)
            return 1, 1
        return token.line, token.column

    def error(self, message: str) -> ParseError:
        line, column = self.position()
        return ParseError(message, line, column, self.peek())

    def at(self, token: Token) -> dict:
        return {'line': token.line, 'column': token.column}

    # Statements

    def parse_program(self) -> Program:
        statements: List[Node] = []
        while self.peek() is not None:
            start = self.pos
            try:
                statements.append(self.parse_statement())
            except ParseError as e:
                self.diagnostics.append(Diagnostic(e.line, e.column, e.message, 'error'))
                # skip the offending token and resume
                self.pos = max(self.pos, start) + 1
        return Program(tuple(statements), line=1, column=1)

    def parse_statement(self) -> Node:
        token = self.peek()
        if token is None:
            raise self.error("Unexpected end of input")
        if self.match(('let', 'const')):
            return self.parse_variable_declaration()
        if self.match('func'):
            return self.parse_function_declaration()
        if self.match('if'):
            return self.parse_if_statement()
        if self.match('for'):
            return self.parse_for_statement()
        if self.match('while'):
            return self.parse_while_statement()
        if self.match('return'):
            return self.parse_return_statement()
        if self.match('{'):
            return self.parse_block()
        return self.parse_expression_statement()

    def parse_variable_declaration(self) -> VariableDeclaration:
        keyword = self.consume()
        name_token = self.expect_kind('IDENT', 'variable name')
        type_annotation: Optional[TypeInfo] = None
        if self.match(':'):
            self.consume()
            type_annotation = self.parse_type()
        initializer = None
        if self.match('='):
            self.consume()
            initializer = self.parse_expression()
        if type_annotation is None and initializer is None:
            raise self.error(f"Declaration of '{name_token.value}' needs a type annotation or an initializer")
        self.expect(';')
        return VariableDeclaration(
            name_token.value, type_annotation, initializer,
            mutable=keyword.value == 'let', **self.at(keyword),
        )

    def parse_type(self) -> TypeInfo:
        # IDENT ['<' type (',' type)* '>'] ['?']
        base = self.expect_kind('IDENT', 'type name')
        generic_params: List[TypeInfo] = []
        if self.match('<'):
            self.consume()
            generic_params.append(self.parse_type())
            while self.match(','):
                self.consume()
                generic_params.append(self.parse_type())
            self.expect('>')
        nullable = False
        if self.match('?'):
            self.consume()
            nullable = True
        return make_type(base.value, tuple(generic_params), nullable)

    def parse_function_declaration(self) -> FunctionDeclaration:
        keyword = self.consume()
        name_token = self.expect_kind('IDENT', 'function name')
        self.expect('(')
        params: List[Parameter] = []
        if not self.match(')'):
            params = self.parse_parameter_list()
        self.expect(')')
        self.expect('->')
        return_type = self.parse_type()
        body = self.parse_block()
        return FunctionDeclaration(name_token.value, tuple(params), return_type, body, **self.at(keyword))

    def parse_parameter_list(self) -> List[Parameter]:
        params: List[Parameter] = []
        while True:
            name_token = self.expect_kind('IDENT', 'parameter name')
            self.expect(':')
            type_info = self.parse_type()
            default_value = None
            if self.match('='):
                self.consume()
                default_value = self.parse_expression()
            params.append(Parameter(name_token.value, type_info, default_value, **self.at(name_token)))
            if not self.match(','):
                break
            self.consume()
        return params

    def parse_block(self) -> BlockStatement:
        brace = self.expect('{')
        statements: List[Node] = []
        while not self.match('}'):
            if self.peek() is None:
                raise self.error("Unterminated block, expected '}'")
            statements.append(self.parse_statement())
        self.consume()
        return BlockStatement(tuple(statements), **self.at(brace))

    def parse_if_statement(self) -> IfStatement:
        keyword = self.consume()
        self.expect('(')
        condition = self.parse_expression()
        self.expect(')')
        consequent = self.parse_block()
        alternate: Optional[Union[BlockStatement, IfStatement]] = None
        if self.match('else'):
            self.consume()
            if self.match('if'):
                alternate = self.parse_if_statement()
            else:
                alternate = self.parse_block()
        return IfStatement(condition, consequent, alternate, **self.at(keyword))

    def parse_for_statement(self) -> ForStatement:
        keyword = self.consume()
        self.expect('(')
        if self.match(('let', 'const')):
            init: Node = self.parse_variable_declaration()
        else:
            init = self.parse_expression_statement()
        condition = self.parse_expression()
        self.expect(';')
        update = self.parse_expression()
        self.expect(')')
        body = self.parse_block()
        return ForStatement(init, condition, update, body, **self.at(keyword))

    def parse_while_statement(self) -> WhileStatement:
        keyword = self.consume()
        self.expect('(')
        condition = self.parse_expression()
        self.expect(')')
        body = self.parse_block()
        return WhileStatement(condition, body, **self.at(keyword))

    def parse_return_statement(self) -> ReturnStatement:
        keyword = self.consume()
        value = None
        if not self.match(';'):
            value = self.parse_expression()
        self.expect(';')
        return ReturnStatement(value, **self.at(keyword))

    def parse_expression_statement(self) -> ExpressionStatement:
        token = self.peek()
        expression = self.parse_expression()
        self.expect(';')
        return ExpressionStatement(expression, **self.at(token))

    # Expressions

    def parse_expression(self) -> Node:
        return self.parse_assignment()

    def parse_assignment(self) -> Node:
        left = self.parse_logical_or()
        if self.match('='):
            self.consume()
            right = self.parse_assignment()
            return AssignmentExpression(left, right, line=left.line, column=left.column)
        return left

    def parse_binary(self, operators: Tuple[str, ...], operand) -> Node:
        node = operand()
        while self.match(operators):
            op_token = self.consume()
            right = operand()
            node = BinaryExpression(op_token.value, node, right, line=node.line, column=node.column)
        return node

    def parse_logical_or(self) -> Node:
        return self.parse_binary(('||',), self.parse_logical_and)

    def parse_logical_and(self) -> Node:
        return self.parse_binary(('&&',), self.parse_equality)

    def parse_equality(self) -> Node:
        return self.parse_binary(('==', '!='), self.parse_relational)

    def parse_relational(self) -> Node:
        return self.parse_binary(('<', '>', '<=', '>='), self.parse_additive)

    def parse_additive(self) -> Node:
        return self.parse_binary(('+', '-'), self.parse_multiplicative)

    def parse_multiplicative(self) -> Node:
        return self.parse_binary(('*', '/', '%'), self.parse_unary)

    def parse_unary(self) -> Node:
        if self.match(('-', '!', '++', '--')):
            op_token = self.consume()
            operand = self.parse_unary()
            return UnaryExpression(op_token.value, operand, True, **self.at(op_token))
        return self.parse_postfix()

    def parse_postfix(self) -> Node:
        node = self.parse_primary()
        while True:
            if self.match('['):
                self.consume()
                index = self.parse_expression()
                self.expect(']')
                node = ArrayAccess(node, index, line=node.line, column=node.column)
                continue
            if self.match('('):
                self.consume()
                args: List[Node] = []
                if not self.match(')'):
                    args.append(self.parse_expression())
                    while self.match(','):
                        self.consume()
                        args.append(self.parse_expression())
                self.expect(')')
                node = FunctionCall(node, tuple(args), line=node.line, column=node.column)
                continue
            if self.match('.'):
                self.consume()
                name_token = self.expect_kind('IDENT', 'property name')
                node = PropertyAccess(node, name_token.value, line=node.line, column=node.column)
                continue
            if self.match(('++', '--')):
                op_token = self.consume()
                node = UnaryExpression(op_token.value, node, False, line=node.line, column=node.column)
                continue
            break
        return node

    def parse_primary(self) -> Node:
        token = self.peek()
        if token is None:
            raise self.error("Unexpected end of input in expression")
        pos = self.at(token)
        if token.kind == 'INT':
            self.consume()
            try:
                value = int(token.value)
            except ValueError:
                raise ParseError("Integer literal too large", token.line, token.column, token)
            return NumberLiteral(value, 'int', **pos)
        if token.kind == 'FLOAT':
            self.consume()
            return NumberLiteral(float(token.value), 'float', **pos)
        if token.kind == 'STRING':
            self.consume()
            return StringLiteral(self.decode_string(token), **pos)
        if token.kind == 'KEYWORD' and token.value in ('true', 'false'):
            self.consume()
            return BooleanLiteral(token.value == 'true', **pos)
        if token.kind == 'KEYWORD' and token.value == 'null':
            self.consume()
            return NullLiteral(**pos)
        if token.kind == 'IDENT':
            self.consume()
            return Identifier(token.value, **pos)
        if self.match('('):
            self.consume()
            expr = self.parse_expression()
            self.expect(')')
            return expr
        if self.match('['):
            return self.parse_array_literal()
        if self.match('{'):
            return self.parse_object_literal()
        raise self.error(f"Unexpected token {self.describe(token)}")

    def decode_string(self, token: Token) -> str:
        try:
            return py_ast.literal_eval(token.value)
        except (ValueError, SyntaxError):
            raise ParseError(f"Invalid string literal {token.value}", token.line, token.column, token)

    def parse_array_literal(self) -> ArrayLiteral:
        bracket = self.consume()
        elements: List[Node] = []
        if not self.match(']'):
            elements.append(self.parse_expression())
            while self.match(','):
                self.consume()
                elements.append(self.parse_expression())
        self.expect(']')
        return ArrayLiteral(tuple(elements), **self.at(bracket))

    def parse_object_literal(self) -> ObjectLiteral:
        brace = self.consume()
        properties: List[Tuple[str, Node]] = []
        if not self.match('}'):
            properties.append(self.parse_property())
            while self.match(','):
                self.consume()
                properties.append(self.parse_property())
        self.expect('}')
        return ObjectLiteral(tuple(properties), **self.at(brace))

    def parse_property(self) -> Tuple[str, Node]:
        token = self.peek()
        if token is not None and token.kind == 'IDENT':
            key = self.consume().value
        elif token is not None and token.kind == 'STRING':
            key = self.decode_string(self.consume())
        else:
            raise self.error(f"Expected property name, got {self.describe(token)}")
        self.expect(':')
        return key, self.parse_expression()


def parse_program(source: str) -> Tuple[Program, List[Diagnostic]]:
    """Parse HackScript source into a Program AST plus syntax diagnostics."""
    parser = Parser(tokenize(source))
    program = parser.parse_program()
    return program, parser.diagnostics
