"""Builtin function registry.

`populate_builtins` installs the host-implemented functions into an
environment's function table. It is called with a fresh root environment
at session start and again on every reset, so the registry is always
rebuilt identically.
"""

from typing import Any, List

from hackscript.ast import Parameter
from hackscript.environment import Environment
from hackscript.errors import HackScriptError
from hackscript.functions import FunctionDefinition
from hackscript.types import ANY, TypeInfo, create_nullable_type, make_type
from hackscript.values import ArrayVal, NullVal, to_string, type_name

from .conversions import parse_float, parse_int

BUILTIN_NAMES = ('print', 'println', 'len', 'type', 'toString', 'parseInt', 'parseFloat')


def populate_builtins(env: Environment, output: List[str]) -> Environment:
    """Install the builtins into `env`; printed lines are appended to `output`."""

    def std_print(args: List[Any]) -> Any:
        output.append(' '.join(to_string(a) for a in args))
        return NullVal()

    def std_len(args: List[Any]) -> Any:
        obj = args[0]
        if isinstance(obj, str):
            return len(obj)
        if isinstance(obj, ArrayVal):
            return len(obj.items)
        raise HackScriptError(f"len() requires string or array argument, got {type_name(obj)}")

    def std_type(args: List[Any]) -> Any:
        return type_name(args[0])

    def std_to_string(args: List[Any]) -> Any:
        return to_string(args[0])

    def std_parse_int(args: List[Any]) -> Any:
        result = parse_int(to_string(args[0]))
        return NullVal() if result is None else result

    def std_parse_float(args: List[Any]) -> Any:
        result = parse_float(to_string(args[0]))
        return NullVal() if result is None else result

    variadic = (Parameter('args', make_type('Array', (ANY,))),)
    any_param = (Parameter('obj', ANY),)
    str_param = (Parameter('str', TypeInfo.string()),)

    env.define_function(FunctionDefinition('print', variadic, TypeInfo.void(), native=std_print, variadic=True))
    env.define_function(FunctionDefinition('println', variadic, TypeInfo.void(), native=std_print, variadic=True))
    env.define_function(FunctionDefinition('len', any_param, TypeInfo.integer(), native=std_len))
    env.define_function(FunctionDefinition('type', any_param, TypeInfo.string(), native=std_type))
    env.define_function(FunctionDefinition('toString', any_param, TypeInfo.string(), native=std_to_string))
    env.define_function(FunctionDefinition(
        'parseInt', str_param, create_nullable_type(TypeInfo.integer()), native=std_parse_int))
    env.define_function(FunctionDefinition(
        'parseFloat', str_param, create_nullable_type(TypeInfo.floating()), native=std_parse_float))
    return env
