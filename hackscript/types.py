"""Static type descriptors for HackScript.

A type is described by its rendered `name` (for example `int`,
`Array<string>` or `float?`), a flag telling whether the base type is one
of the fixed primitives, a nullable flag, and the generic arguments it was
built from. Assignability is decided on these descriptors alone; the
runtime never consults them except to pick zero values and to widen
integers stored into `float` slots.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class TypeInfo:
    """Represents a HackScript type annotation or an inferred type.

    `Array<int>` becomes
    `TypeInfo(name='Array<int>', generic_params=(TypeInfo('int', True),))`.
    Nullable types carry the trailing `?` in their name, so `int?` and `int`
    never compare equal by name.
    """
    name: str
    primitive: bool = False
    nullable: bool = False
    generic_params: Tuple['TypeInfo', ...] = ()

    def __repr__(self) -> str:
        return self.name

    @property
    def base_name(self) -> str:
        base = self.name[:-1] if self.nullable and self.name.endswith('?') else self.name
        return base.split('<', 1)[0]

    # Convenience constructors
    @staticmethod
    def integer() -> 'TypeInfo':
        return PRIMITIVE_TYPES['int']

    @staticmethod
    def floating() -> 'TypeInfo':
        return PRIMITIVE_TYPES['float']

    @staticmethod
    def string() -> 'TypeInfo':
        return PRIMITIVE_TYPES['string']

    @staticmethod
    def boolean() -> 'TypeInfo':
        return PRIMITIVE_TYPES['bool']

    @staticmethod
    def char() -> 'TypeInfo':
        return PRIMITIVE_TYPES['char']

    @staticmethod
    def void() -> 'TypeInfo':
        return PRIMITIVE_TYPES['void']


PRIMITIVE_TYPES: Dict[str, TypeInfo] = {
    name: TypeInfo(name, primitive=True)
    for name in ('int', 'float', 'string', 'bool', 'char', 'void')
}

UNKNOWN = TypeInfo('unknown')
ANY = TypeInfo('any')
NULL = TypeInfo('null', primitive=True, nullable=True)
OBJECT = TypeInfo('object')
FUNCTION = TypeInfo('function')


def get_primitive_type(name: str) -> Optional[TypeInfo]:
    return PRIMITIVE_TYPES.get(name)


def make_type(base: str, generic_params: Tuple[TypeInfo, ...] = (), nullable: bool = False) -> TypeInfo:
    """Build the descriptor for an annotation such as `Array<int>?`."""
    name = base
    if generic_params:
        name += '<' + ', '.join(p.name for p in generic_params) + '>'
    if nullable:
        name += '?'
    primitive = not generic_params and base in PRIMITIVE_TYPES
    return TypeInfo(name, primitive, nullable, tuple(generic_params))


def create_array_type(element_type: TypeInfo) -> TypeInfo:
    return TypeInfo(f"Array<{element_type.name}>", False, False, (element_type,))


def create_nullable_type(base_type: TypeInfo) -> TypeInfo:
    if base_type.nullable:
        return base_type
    return TypeInfo(f"{base_type.name}?", base_type.primitive, True, base_type.generic_params)


def is_assignable(from_type: TypeInfo, to_type: TypeInfo) -> bool:
    """Return True if a value of `from_type` may be stored in a `to_type` slot."""
    if from_type.name == to_type.name:
        return True
    # int widens to float
    if from_type.name == 'int' and to_type.name == 'float':
        return True
    # wrapping into a nullable target
    if to_type.nullable and not from_type.nullable:
        return True
    return False


def is_indeterminate(t: TypeInfo) -> bool:
    """True for types the checker cannot reason about (`unknown`, `any`, `Array<any>`)."""
    if t.name in ('unknown', 'any'):
        return True
    return any(is_indeterminate(p) for p in t.generic_params)


def element_type(t: TypeInfo) -> TypeInfo:
    if t.base_name == 'Array' and t.generic_params:
        return t.generic_params[0]
    return UNKNOWN
