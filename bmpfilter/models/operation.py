from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from ..exceptions import InvalidArgumentError
from .kernel import Kernel


class OperationKind(str, Enum):
    GRAYSCALE = "grayscale"
    CONVOLVE = "convolve"


@dataclass(frozen=True)
class Operation:
    """
    What to do to a decoded image. Convolution carries its kernel;
    grayscale carries nothing.
    """
    kind: OperationKind
    kernel: Kernel | None = None

    def __post_init__(self):
        try:
            kind = OperationKind(self.kind)
        except ValueError as e:
            raise InvalidArgumentError(f"Unknown operation '{self.kind}'") from e
        object.__setattr__(self, "kind", kind)
        if kind is OperationKind.CONVOLVE and self.kernel is None:
            raise InvalidArgumentError("A convolve operation needs a kernel")

    @classmethod
    def grayscale(cls) -> "Operation":
        return cls(OperationKind.GRAYSCALE)

    @classmethod
    def convolve(cls, kernel: Kernel) -> "Operation":
        return cls(OperationKind.CONVOLVE, kernel)

    def describe(self) -> str:
        if self.kind is OperationKind.GRAYSCALE:
            return "grayscale"
        return f"convolve[{self.kernel.name}]"
