"""Runtime values for the HackScript evaluator.

Scalars are plain Python `int`, `float`, `str` and `bool`. Everything
else has an explicit wrapper: `NullVal` for null, `ArrayVal` for ordered
arrays, `ObjectVal` for key/value objects and `FunctionDefinition` (see
`functions.py`) for builtin and user-defined function references.

Every conversion below (truthiness, stringification, structural type
name, equality) checks `bool` before `int`, since `bool` is an `int`
subclass in Python, and raises on a value it does not recognise.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List

from .errors import HackScriptError
from .functions import FunctionDefinition
from .types import TypeInfo

# integral floats at or above this magnitude print in exponent form
INTEGRAL_PRINT_LIMIT = 1e21


class NullVal:
    """Marker object for the HackScript `null` value."""
    def __repr__(self) -> str:
        return 'null'

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, NullVal)

    def __hash__(self) -> int:
        return hash(NullVal)


@dataclass(eq=False)
class ArrayVal:
    """An ordered, mutable array of runtime values."""
    items: List[Any] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"Array({self.items!r})"


@dataclass(eq=False)
class ObjectVal:
    """A key -> value object built from an object literal."""
    fields: Dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        return f"Object({self.fields!r})"


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_truthy(value: Any) -> bool:
    if isinstance(value, NullVal):
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return len(value) > 0
    if isinstance(value, (ArrayVal, ObjectVal, FunctionDefinition)):
        return True
    raise TypeError(f"unknown runtime value {value!r}")


def format_number(value: Any) -> str:
    if isinstance(value, int):
        try:
            return str(value)
        except ValueError:
            raise HackScriptError("Integer too large to convert to string")
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'Infinity' if value > 0 else '-Infinity'
    if value.is_integer() and abs(value) < INTEGRAL_PRINT_LIMIT:
        return str(int(value))
    return repr(value)


def to_string(value: Any) -> str:
    """Convert a value to the text `print` and `toString` produce."""
    if isinstance(value, NullVal):
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, str):
        return value
    if isinstance(value, ArrayVal):
        return '[' + ', '.join(to_string(item) for item in value.items) + ']'
    if isinstance(value, ObjectVal):
        try:
            return json.dumps(_json_ready(value), separators=(',', ':'), ensure_ascii=False)
        except ValueError:
            raise HackScriptError("Integer too large to convert to string")
    if isinstance(value, FunctionDefinition):
        return repr(value)
    raise TypeError(f"unknown runtime value {value!r}")


def _json_ready(value: Any) -> Any:
    if isinstance(value, NullVal):
        return None
    if isinstance(value, float) and value.is_integer() and abs(value) < INTEGRAL_PRINT_LIMIT:
        return int(value)
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, ArrayVal):
        return [_json_ready(item) for item in value.items]
    if isinstance(value, ObjectVal):
        return {key: _json_ready(item) for key, item in value.fields.items()}
    if isinstance(value, FunctionDefinition):
        return repr(value)
    raise TypeError(f"unknown runtime value {value!r}")


def type_name(value: Any) -> str:
    """Return the structural type name reported by the `type` builtin.

    Numbers are told apart by integral-ness, so `2.0` reports `int`.
    """
    if isinstance(value, NullVal):
        return 'null'
    if isinstance(value, bool):
        return 'bool'
    if isinstance(value, int):
        return 'int'
    if isinstance(value, float):
        return 'int' if math.isfinite(value) and value.is_integer() else 'float'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, ArrayVal):
        return 'Array<any>'
    if isinstance(value, ObjectVal):
        return 'object'
    if isinstance(value, FunctionDefinition):
        return 'function'
    raise TypeError(f"unknown runtime value {value!r}")


def zero_value(type_info: TypeInfo) -> Any:
    """Value installed for a declaration or parameter without an initializer."""
    name = type_info.name
    if name == 'int':
        return 0
    if name == 'float':
        return 0.0
    if name == 'string':
        return ''
    if name == 'bool':
        return False
    return NullVal()


def coerce_value(value: Any, type_info: TypeInfo) -> Any:
    """Widen an integer stored into a `float` (or `float?`) slot."""
    if type_info.base_name == 'float' and not type_info.generic_params and is_number(value):
        try:
            return float(value)
        except OverflowError:
            raise HackScriptError("Integer too large to convert to float")
    return value


def values_equal(a: Any, b: Any) -> bool:
    """Deep equality used by `==` and `!=`."""
    if is_number(a) and is_number(b):
        return a == b
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if isinstance(a, str) and isinstance(b, str):
        return a == b
    if isinstance(a, NullVal) or isinstance(b, NullVal):
        return isinstance(a, NullVal) and isinstance(b, NullVal)
    if isinstance(a, ArrayVal) and isinstance(b, ArrayVal):
        if len(a.items) != len(b.items):
            return False
        return all(values_equal(x, y) for x, y in zip(a.items, b.items))
    if isinstance(a, ObjectVal) and isinstance(b, ObjectVal):
        if a.fields.keys() != b.fields.keys():
            return False
        return all(values_equal(a.fields[k], b.fields[k]) for k in a.fields)
    return a is b


def to_python(value: Any) -> Any:
    """Convert a runtime value into plain Python data for host code."""
    if isinstance(value, NullVal):
        return None
    if isinstance(value, ArrayVal):
        return [to_python(item) for item in value.items]
    if isinstance(value, ObjectVal):
        return {key: to_python(item) for key, item in value.fields.items()}
    return value
