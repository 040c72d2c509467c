import sys

import pytest

from hackscript.interpreter import Interpreter, run_program
from hackscript.values import ArrayVal, NullVal


def run_ok(source):
    result = run_program(source)
    assert result.success, result.diagnostics or result.error
    return result


def value_of(expression):
    return run_ok(expression + ';').value


def error_of(source):
    result = run_program(source)
    assert not result.success
    assert result.diagnostics == []
    return result.error


def test_program_without_faults_succeeds():
    result = run_ok('let a = 1;')
    assert result.diagnostics == []
    assert result.error is None


def test_print_joins_arguments():
    assert run_ok('print("Hello", 1, true);').output == ['Hello 1 true']


def test_assignment_updates_binding():
    interp = Interpreter()
    result = interp.execute('let x: int = 5; x = x + 1;')
    assert result.success
    assert result.value == 6
    variables = {v.name: v for v in interp.list_variables()}
    assert variables['x'].value == 6
    assert variables['x'].type == 'int'


def test_recursive_factorial():
    source = '''
    func factorial(n: int) -> int {
        if (n <= 1) { return 1; }
        return n * factorial(n - 1);
    }
    factorial(5);
    '''
    assert run_ok(source).value == 120


def test_default_parameter():
    source = 'func greet(name: string = "World") -> string { return "Hi " + name; } greet();'
    assert run_ok(source).value == 'Hi World'


def test_const_cannot_be_reassigned():
    message = error_of('const pi: float = 3.14; pi = 3.0;')
    assert message == 'Cannot assign to immutable variable: pi'


def test_int_widens_into_float_slot():
    interp = Interpreter()
    interp.execute('let y: float = 3;')
    value = interp.list_variables()[0].value
    assert isinstance(value, float) and value == 3.0


@pytest.mark.parametrize('index', ['-1', '3'])
def test_array_index_out_of_bounds(index):
    message = error_of(f'let xs = [1, 2, 3]; xs[{index}];')
    assert message.startswith('Array index out of bounds')


def test_array_index_returns_stored_element():
    assert value_of('["a", "b", "c"][1]') == 'b'


def test_integer_division_truncates():
    assert value_of('7 / 2') == 3
    assert value_of('-7 / 2') == -3
    assert value_of('-7 % 2') == -1
    assert value_of('7.0 / 2') == 3.5


def test_division_by_zero():
    assert error_of('1 / 0;') == 'Division by zero'
    assert error_of('1 % 0;') == 'Modulo by zero'


def test_string_concatenation_stringifies():
    assert value_of('"n=" + 1 + ", f=" + 2.5 + ", b=" + false + ", z=" + null') == 'n=1, f=2.5, b=false, z=null'


def test_integral_float_prints_without_fraction():
    assert run_ok('print(2.0, 0.5 + 0.5, 1.25);').output == ['2 1 1.25']


def test_equality_is_deep():
    assert value_of('[1, [2, 3]] == [1, [2, 3]]') is True
    assert value_of('1 == 1.0') is True
    assert value_of('"1" == 1') is False
    assert value_of('null == null') is True
    assert value_of('({a: 1}) != ({a: 2})') is True


def test_logical_operators_short_circuit():
    source = '''
    let calls = 0;
    func touch() -> bool { calls = calls + 1; return true; }
    let a = false && touch();
    let b = true || touch();
    calls;
    '''
    assert run_ok(source).value == 0
    assert value_of('1 && "x"') is True
    assert value_of('0 || ""') is False


def test_truthiness_in_conditions():
    source = '''
    let seen = "";
    if (0) { seen = seen + "zero"; }
    if ("") { seen = seen + "empty"; }
    if (null) { seen = seen + "null"; }
    if ([]) { seen = seen + "array"; }
    if (-1) { seen = seen + "neg"; }
    seen;
    '''
    assert run_ok(source).value == 'arrayneg'


def test_increment_and_decrement():
    source = 'let i = 1; let a = i++; let b = ++i; let c = i--; print(a, b, c, i);'
    assert run_ok(source).output == ['1 3 3 2']


def test_for_loop_variable_is_scoped():
    interp = Interpreter()
    result = interp.execute('let total = 0; for (let i = 0; i < 4; i++) { total = total + i; } total;')
    assert result.value == 6
    assert [v.name for v in interp.list_variables()] == ['total']


def test_while_loop():
    assert run_ok('let n = 0; while (n < 10) { n = n + 3; } n;').value == 12


def test_function_without_return_yields_last_value():
    source = 'func f() -> int { 1 + 1; } func g() -> void { let z = 1; } print(f(), g());'
    assert run_ok(source).output == ['2 null']


def test_missing_argument_uses_zero_value():
    source = 'func f(a: int, s: string) -> string { return s + a; } f(5);'
    assert run_ok(source).value == '5'


def test_call_site_scoping():
    source = '''
    func show() -> int { return hidden; }
    func outer() -> int { let hidden = 7; return show(); }
    outer();
    '''
    assert run_ok(source).value == 7


def test_functions_are_values():
    assert run_ok('let p = print; p("via value");').output == ['via value']
    assert error_of('let n = 1; n();') == "'n' is not a function"


def test_unknown_function():
    assert error_of('missing();') == 'Unknown function: missing'


def test_undefined_variable():
    assert error_of('print(nope);') == 'Undefined variable: nope'


def test_property_access():
    assert value_of('"hello".length') == 5
    assert value_of('[1, 2].length') == 2
    assert isinstance(value_of('({a: 1}).b'), NullVal)
    assert error_of('let n = null; n.x;') == "Cannot read property 'x' of null"


def test_invalid_assignment_target():
    assert error_of('let xs = [1]; xs[0] = 2;') == 'Invalid assignment target'


def test_relational_requires_matching_kinds():
    assert value_of('"apple" < "banana"') is True
    assert error_of('[1] < 2;').startswith("Operator '<' cannot compare")


def test_redeclaration_replaces_binding():
    interp = Interpreter()
    interp.execute('let a: int = 1;')
    result = interp.execute('let a: string = "now text"; a;')
    assert result.value == 'now text'


def test_top_level_value_is_array():
    value = value_of('[1, 2, 3]')
    assert isinstance(value, ArrayVal)
    assert value.items == [1, 2, 3]


def test_step_limit():
    result = run_program('while (true) { 1; }', max_steps=100)
    assert not result.success
    assert result.error == 'Execution exceeded the step limit of 100'


def test_deep_recursion_is_reported():
    result = run_program('func f(n: int) -> int { return f(n + 1); } f(0);')
    assert not result.success
    assert result.error == 'Maximum call depth exceeded'


def test_output_before_fault_is_kept():
    result = run_program('print("before"); let xs = []; xs[0]; print("after");')
    assert result.output == ['before']
    assert result.error.startswith('Array index out of bounds')


DOUBLING = 'let x = 1; for (let i = 0; i < {n}; i++) {{ x = x * 2; }} '


@pytest.mark.skipif(not hasattr(sys, 'set_int_max_str_digits'), reason='no integer string conversion limit')
def test_printing_huge_integer_is_a_runtime_error():
    result = run_program(DOUBLING.format(n=15000) + 'print(x);')
    assert not result.success
    assert result.error == 'Integer too large to convert to string'


def test_huge_integer_mixed_with_float():
    message = error_of(DOUBLING.format(n=1100) + 'x + 0.5;')
    assert message == "Numeric overflow in '+': integer too large to convert to float"
    message = error_of(DOUBLING.format(n=1100) + 'let f: float = x;')
    assert message == 'Integer too large to convert to float'


def test_deep_recursion_within_limit():
    source = '''
    func sum(n: int) -> int {
        if (n <= 0) { return 0; }
        return n + sum(n - 1);
    }
    sum(1000);
    '''
    limit = sys.getrecursionlimit()
    assert run_ok(source).value == 500500
    assert sys.getrecursionlimit() == limit


def test_deeply_nested_source_is_a_diagnostic():
    result = run_program('(' * 3000 + '1' + ')' * 3000 + ';')
    assert not result.success
    assert [d.message for d in result.diagnostics] == ['Expression nested too deeply']


def test_single_quoted_literals_are_strings():
    result = run_ok("let s: string = 'a'; s + 1;")
    assert result.value == 'a1'
    assert value_of("type('b')") == 'string'
