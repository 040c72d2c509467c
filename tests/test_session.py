from hackscript.interpreter import Interpreter


def test_state_persists_between_executions():
    interp = Interpreter()
    assert interp.execute('let counter: int = 1;').success
    assert interp.execute('func bump(by: int) -> int { counter = counter + by; return counter; }').success
    result = interp.execute('bump(4);')
    assert result.success
    assert result.value == 5


def test_output_is_per_execution():
    interp = Interpreter()
    assert interp.execute('print("one");').output == ['one']
    assert interp.execute('print("two");').output == ['two']


def test_failed_compile_leaves_session_untouched():
    interp = Interpreter()
    interp.execute('let a = 1;')
    result = interp.execute('let b: int = "x"; a = 99;')
    assert not result.success
    assert result.diagnostics
    assert [(v.name, v.value) for v in interp.list_variables()] == [('a', 1)]


def test_checker_sees_session_types():
    interp = Interpreter()
    interp.execute('let name: string = "x";')
    result = interp.execute('name = 5;')
    assert [d.message for d in result.diagnostics] == ['Cannot assign int to string']


def test_list_variables_and_functions():
    interp = Interpreter()
    interp.execute('const limit = 10; let xs: Array<int> = [1]; func add(a: int, b: int = 1) -> int { return a + b; }')
    variables = {v.name: v for v in interp.list_variables()}
    assert variables['limit'].mutable is False
    assert variables['limit'].type == 'int'
    assert variables['xs'].type == 'Array<int>'
    functions = interp.list_functions()
    assert [f.name for f in functions] == ['add']
    assert functions[0].signature == 'func add(a: int, b: int) -> int'


def test_reset_discards_user_state_but_keeps_builtins():
    interp = Interpreter()
    interp.execute('let a = 1; func f() -> int { return 1; }')
    interp.reset()
    assert interp.list_variables() == []
    assert interp.list_functions() == []
    assert interp.execute('a;').error == 'Undefined variable: a'
    assert interp.execute('print(len("ok"));').output == ['2']


def test_debug_trace_is_written(tmp_path):
    trace = tmp_path / 'trace.txt'
    interp = Interpreter(debug_level=4, debug_file=str(trace))
    interp.execute('let a = 1; if (a) { print(a); }')
    interp.close()
    text = trace.read_text(encoding='utf-8')
    assert 'declare a: int = 1' in text
    assert 'if condition 1 -> True' in text
    assert 'call print(1)' in text
    assert 'execute IfStatement' in text
