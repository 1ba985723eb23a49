"""Callable contract: the capability any call target must have."""

from abc import ABC, abstractmethod


class Callable(ABC):
    """Anything that may appear as the callee of a call expression."""

    @abstractmethod
    def arity(self):
        """Number of arguments invoke expects."""

    @abstractmethod
    def invoke(self, args):
        """Calls this with the already-evaluated args (len(args) == arity()) and returns a dscript value."""


class NativeFunction(Callable):
    """Callable backed by a Python function."""

    def __init__(self, name, arity, func):
        self.name = name
        self._arity = arity
        self.func = func

    def arity(self):
        return self._arity

    def invoke(self, args):
        return self.func(*args)

    def __repr__(self):
        return f"<native fn {self.name}>"

    def __str__(self):
        return self.__repr__()

