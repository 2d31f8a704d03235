from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from diagnostics import ContractViolation


class ArgState(Enum):
    TYPED = "typed"
    PARTIALLY_NAMED = "partially named"
    COMPLETE = "complete"


@dataclass
class Arg:
    type: str  # extern block type expression
    name: Optional[str] = None


@dataclass
class Function:
    name: str
    return_type: str
    args: List[Arg] = field(default_factory=list)
    named: int = 0

    @classmethod
    def typed(cls, name: str, return_type: str, arg_types: List[str]) -> 'Function':
        """Creates a function whose arity is fixed by its signature's parameter types."""
        return cls(name=name, return_type=return_type, args=[Arg(type=t) for t in arg_types])

    @property
    def arity(self) -> int:
        return len(self.args)

    @property
    def state(self) -> ArgState:
        if self.named >= self.arity:
            return ArgState.COMPLETE
        if self.named == 0:
            return ArgState.TYPED
        return ArgState.PARTIALLY_NAMED

    def name_next_arg(self, name: str):
        if self.state == ArgState.COMPLETE:
            raise ContractViolation(
                f"parameter '{name}' exceeds the {self.arity} parameter(s) of '{self.name}'")
        self.args[self.named].name = name
        self.named += 1
