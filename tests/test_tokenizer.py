from hackscript.tokenizer import tokenize


def kinds(source):
    return [(t.kind, t.value) for t in tokenize(source)]


def test_declaration_tokens():
    assert kinds('let x: int = 42;') == [
        ('KEYWORD', 'let'), ('IDENT', 'x'), ('PUNCT', ':'), ('IDENT', 'int'),
        ('OP', '='), ('INT', '42'), ('PUNCT', ';'),
    ]


def test_two_char_operators_win():
    values = [t.value for t in tokenize('a == b != c <= d >= e && f || g -> h :: i++ j--')]
    for op in ('==', '!=', '<=', '>=', '&&', '||', '->', '::', '++', '--'):
        assert op in values


def test_float_and_int():
    assert kinds('3.14 7') == [('FLOAT', '3.14'), ('INT', '7')]


def test_minus_is_separate_token():
    assert kinds('-5') == [('OP', '-'), ('INT', '5')]


def test_strings_keep_quotes():
    assert kinds('"hi\\n" \'c\'') == [('STRING', '"hi\\n"'), ('STRING', "'c'")]


def test_comments_and_whitespace_dropped():
    source = '// comment\nlet /* inline\nblock */ y = 1; // trailing'
    assert [t.value for t in tokenize(source)] == ['let', 'y', '=', '1', ';']


def test_unknown_character():
    assert kinds('a @ b') == [('IDENT', 'a'), ('UNKNOWN', '@'), ('IDENT', 'b')]


def test_positions_are_one_based():
    tokens = tokenize('let a = 1;\n  print(a);')
    assert (tokens[0].line, tokens[0].column) == (1, 1)
    print_token = next(t for t in tokens if t.value == 'print')
    assert (print_token.line, print_token.column) == (2, 3)


def test_keywords_vs_identifiers():
    assert kinds('return returned null nullable') == [
        ('KEYWORD', 'return'), ('IDENT', 'returned'), ('KEYWORD', 'null'), ('IDENT', 'nullable'),
    ]
