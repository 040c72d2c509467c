import builtins
import json
import shutil
from pathlib import Path

import pytest

from hackscript.__main__ import main

EXAMPLES_DIR = Path(__file__).resolve().parent.parent / 'examples'


def test_runs_program_file(capsys):
    main([str(EXAMPLES_DIR / 'program_2.hs')])
    out = capsys.readouterr().out.strip()
    assert out == '5! = 120\n10! = 3628800'


def test_runtime_error_exits_with_status_1(capsys):
    with pytest.raises(SystemExit) as exc:
        main([str(EXAMPLES_DIR / 'program_7.hs')])
    assert exc.value.code == 1
    captured = capsys.readouterr()
    assert captured.out.splitlines() == ['first: 10', 'last: 30']
    assert 'Runtime error: Array index out of bounds: 3 (length 3)' in captured.err


def test_diagnostics_go_to_stderr(capsys):
    with pytest.raises(SystemExit):
        main([str(EXAMPLES_DIR / 'program_8.hs')])
    err = capsys.readouterr().err.splitlines()
    assert err[0] == '1:1: error: Cannot assign string to int'
    assert len(err) == 2


def test_missing_file(capsys):
    with pytest.raises(SystemExit):
        main(['does_not_exist.hs'])
    assert 'not found' in capsys.readouterr().err


def test_max_steps_flag(tmp_path, capsys):
    program = tmp_path / 'spin.hs'
    program.write_text('while (true) { 1; }', encoding='utf-8')
    with pytest.raises(SystemExit):
        main(['--max-steps', '50', str(program)])
    assert 'step limit of 50' in capsys.readouterr().err


def test_emit_and_run_ast(tmp_path, capsys):
    program = tmp_path / 'program_4.hs'
    shutil.copy(EXAMPLES_DIR / 'program_4.hs', program)
    main(['--emit-ast', str(program)])
    ast_path = tmp_path / 'program_4.hs.ast.json'
    assert capsys.readouterr().out.strip() == str(ast_path)
    assert json.loads(ast_path.read_text(encoding='utf-8'))['type'] == 'Program'

    main(['--ast', str(ast_path)])
    assert capsys.readouterr().out.splitlines() == ['Hi World', 'Hi HackScript']


def test_interactive_session(monkeypatch, capsys):
    lines = iter([
        'let total: int = 2;',
        'func twice(n: int) -> int { return n * 2; }',
        'twice(total);',
        ':vars',
        ':funcs',
        ':reset',
        ':vars',
        'print("after reset");',
        ':quit',
    ])
    monkeypatch.setattr(builtins, 'input', lambda prompt='': next(lines))
    main(['-i'])
    out = capsys.readouterr().out.splitlines()
    assert out == [
        '=> 4',
        'let total: int = 2',
        'func twice(n: int) -> int',
        'after reset',
    ]


def test_interactive_session_ends_on_eof(monkeypatch, capsys):
    def no_input(prompt=''):
        raise EOFError
    monkeypatch.setattr(builtins, 'input', no_input)
    main(['--interactive'])
    assert capsys.readouterr().out == '\n'
