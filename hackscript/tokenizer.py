"""Tokenizer for the HackScript language.

The token grammar is declared as a set of Lark terminals and lexed with
Lark's basic (longest-priority-first) lexer. Only the lexer is used: the
`start` rule merely lists every terminal so that none is pruned from the
grammar. Parsing proper is done by the hand-written recursive-descent
parser in `parser.py`.

Terminal priorities decide between overlapping matches:

* comments win over the `/` operator,
* two-character operators (`==`, `->`, `++`, ...) win over single characters,
* floats win over integers,
* `OTHER` matches any leftover character so that unknown input becomes a
  single-character token instead of a lexing failure.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from lark import Lark


KEYWORDS = frozenset({
    'let', 'const', 'func', 'if', 'else', 'for', 'while', 'return',
    'true', 'false', 'null',
})

PUNCTUATION = frozenset('(){}[];,:.?')

TWO_CHAR_OPERATORS = ('==', '!=', '<=', '>=', '&&', '||', '->', '::', '++', '--')


HACKSCRIPT_TOKENS = r"""
    start: _token*
    _token: FLOAT | INT | STRING | NAME | OP2 | OP1 | OTHER

    FLOAT.3: /\d+\.\d+/
    INT.2: /\d+/
    STRING.2: /"(?:[^"\\\n]|\\.)*"/ | /'(?:[^'\\\n]|\\.)*'/
    NAME.2: /[A-Za-z_][A-Za-z0-9_]*/
    OP2.3: "==" | "!=" | "<=" | ">=" | "&&" | "||" | "->" | "::" | "++" | "--"
    OP1.1: /[-+*\/%=<>!(){}\[\];,:.?]/
    OTHER: /./

    WS.1: /\s+/
    LINE_COMMENT.4: /\/\/[^\n]*/
    BLOCK_COMMENT.4: /\/\*[\s\S]*?\*\//
    %ignore WS
    %ignore LINE_COMMENT
    %ignore BLOCK_COMMENT
"""


HACKSCRIPT_LEXER = Lark(
    HACKSCRIPT_TOKENS,
    parser='lalr',
    lexer='basic',
)


@dataclass(frozen=True)
class Token:
    kind: str  # IDENT, KEYWORD, INT, FLOAT, STRING, OP, PUNCT, UNKNOWN
    value: str
    line: int
    column: int

    def __str__(self) -> str:
        return self.value


def _classify(lark_type: str, value: str) -> str:
    if lark_type == 'NAME':
        return 'KEYWORD' if value in KEYWORDS else 'IDENT'
    if lark_type in ('OP1', 'OP2'):
        return 'PUNCT' if value in PUNCTUATION else 'OP'
    if lark_type == 'OTHER':
        return 'UNKNOWN'
    return lark_type


def tokenize(source: str) -> List[Token]:
    """Convert source code into a list of tokens.

    Whitespace and comments are dropped. String tokens keep their quotes
    and escapes; the parser decodes them. The minus sign is always its
    own token; negative numbers are parsed by the unary expression rule.
    """
    tokens: List[Token] = []
    for tok in HACKSCRIPT_LEXER.lex(source):
        value = str(tok)
        tokens.append(Token(_classify(tok.type, value), value, tok.line, tok.column))
    return tokens
