from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from .ast import BlockStatement, Parameter
from .types import TypeInfo


@dataclass(eq=False)
class FunctionDefinition:
    """A callable installed in an environment's function table.

    User-defined functions carry their `body`; builtins carry a host
    `native` callable that receives the evaluated argument list.
    """
    name: str
    params: Tuple[Parameter, ...]
    return_type: TypeInfo
    body: Optional[BlockStatement] = None
    native: Optional[Callable[[List[Any]], Any]] = None
    variadic: bool = False

    @property
    def is_builtin(self) -> bool:
        return self.native is not None

    @property
    def arity(self) -> Optional[int]:
        return None if self.variadic else len(self.params)

    def signature(self) -> str:
        params = ', '.join(f"{p.name}: {p.type_info.name}" for p in self.params)
        return f"func {self.name}({params}) -> {self.return_type.name}"

    def __repr__(self) -> str:
        if self.is_builtin:
            return f"<builtin {self.name}>"
        return f"<function {self.name}>"
