from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional

from .errors import HackScriptError
from .functions import FunctionDefinition
from .types import TypeInfo
from .values import coerce_value


@dataclass
class Binding:
    """Storage record for one variable in one scope."""
    type_info: TypeInfo
    value: Any
    mutable: bool = True


class Environment:
    """Represents a scope mapping identifiers to bindings and functions.

    `parent` links to the enclosing scope, or is None at the root. Lookups
    walk the parent chain; declarations and function definitions always
    land in this scope, never in an ancestor.
    """
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.bindings: Dict[str, Binding] = {}
        self.functions: Dict[str, FunctionDefinition] = {}

    def declare(self, name: str, type_info: TypeInfo, value: Any, mutable: bool = True) -> Binding:
        # Redeclaring a name in the same scope replaces the earlier binding
        binding = Binding(type_info, value, mutable)
        self.bindings[name] = binding
        return binding

    def lookup(self, name: str) -> Optional[Binding]:
        env: Optional[Environment] = self
        while env is not None:
            if name in env.bindings:
                return env.bindings[name]
            env = env.parent
        return None

    def resolve(self, name: str) -> Binding:
        binding = self.lookup(name)
        if binding is None:
            raise HackScriptError(f"Undefined variable: {name}")
        return binding

    def get(self, name: str) -> Any:
        return self.resolve(name).value

    def assign(self, name: str, value: Any) -> Any:
        """Store into an existing binding found through the chain."""
        binding = self.resolve(name)
        if not binding.mutable:
            raise HackScriptError(f"Cannot assign to immutable variable: {name}")
        binding.value = coerce_value(value, binding.type_info)
        return binding.value

    def define_function(self, func: FunctionDefinition):
        self.functions[func.name] = func

    def lookup_function(self, name: str) -> Optional[FunctionDefinition]:
        env: Optional[Environment] = self
        while env is not None:
            if name in env.functions:
                return env.functions[name]
            env = env.parent
        return None

    def user_functions(self) -> Iterator[FunctionDefinition]:
        for func in self.functions.values():
            if not func.is_builtin:
                yield func
