from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from .types import Value


@dataclass
class Binding:
    mutable: bool
    value: Value


class Environment:
    """A lexical scope mapping names to bindings, chained to its enclosing scope.

    Redeclaration checks belong to the interpreter: `define` overwrites
    silently, and `contains` only looks at this frame so that a block can
    shadow a name declared further out.
    """
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.bindings: Dict[str, Binding] = {}

    def define(self, name: str, mutable: bool, value: Value) -> None:
        self.bindings[name] = Binding(mutable, value)

    def get(self, name: str) -> Optional[Binding]:
        env: Optional[Environment] = self
        while env is not None:
            if name in env.bindings:
                return env.bindings[name]
            env = env.parent
        return None

    def assign(self, name: str, value: Value) -> None:
        binding = self.get(name)
        if binding is None:
            raise KeyError(name)
        binding.value = value

    def contains(self, name: str) -> bool:
        return name in self.bindings

    def child(self) -> 'Environment':
        return Environment(parent=self)

    def names(self) -> List[str]:
        return list(self.bindings)
