"""
Caller-owned storage for scalar bindings.

A Slot is a mutable cell handed to the parser: its current value is the
default shown in help, and a successful binding overwrites it. Lists are
bound directly (the parser appends to them), so only scalars need a Slot.

    >>> file = Slot("default.file")
    >>> verbosity = Slot(0)
"""
import builtins

from .utils import Unset


class Slot[T]:
    __slots__ = ("value",)

    def __init__(self, value: T = None, /):
        self.value = value

    def converter(self, type=Unset, /):
        """
        Resolve the string converter for this slot.

        An explicit `type` wins; otherwise the class of the current value is
        used, falling back to str when the slot holds None.
        """
        if type is not Unset:
            if not callable(type):
                raise TypeError("slot converter must be callable")
            return type
        if self.value is None:
            return str
        return builtins.type(self.value)

    def __repr__(self):
        return f"Slot({self.value!r})"

    def __str__(self):
        return str(self.value)


__all__ = (
    "Slot",
)
