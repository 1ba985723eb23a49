"""Lexical scopes for dscript.

Scopes live in an arena (a list) and refer to their parent by index rather than by reference. Since blocks nest
strictly and nothing outlives the block that created it, the arena behaves like a stack: entering a block appends a
child of the current scope, leaving it truncates the arena back and restores the previous cursor.

Resolution is dynamic: every get/assign walks the parent indices from the current scope outward.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from dscript.core.errors import DuplicateBinding, ImmutableAssignment, UndefinedVariable


@dataclass
class Binding:
    value: Any
    is_mutable: bool


@dataclass
class Scope:
    parent: Optional[int] = None
    bindings: Dict[str, Binding] = field(default_factory=dict)


class ScopeArena:
    """All live scopes of one interpreter. current is the index of the innermost scope being executed."""
    GLOBAL = 0

    def __init__(self):
        self.scopes = [Scope()]
        self.current = ScopeArena.GLOBAL

    @property
    def depth(self):
        return len(self.scopes)

    @contextmanager
    def child(self):
        """Enters a fresh child of the current scope for the duration of the with block, even if it raises."""
        previous = self.current
        index = len(self.scopes)

        self.scopes.append(Scope(parent=previous))
        self.current = index
        try:
            yield index
        finally:
            self.current = previous
            del self.scopes[index:]

    def define(self, name, value, is_mutable):
        """Binds name (a Token) in the current scope. Shadowing outer bindings is allowed."""
        bindings = self.scopes[self.current].bindings
        if name.text in bindings:
            raise DuplicateBinding(name)
        bindings[name.text] = Binding(value, is_mutable)

    def get(self, name):
        return self.resolve(name).value

    def assign(self, name, value):
        binding = self.resolve(name)
        if not binding.is_mutable:
            raise ImmutableAssignment(name)
        binding.value = value

    def resolve(self, name):
        """Returns the innermost Binding of name, walking parent indices outward."""
        index = self.current
        while index is not None:
            scope = self.scopes[index]
            if name.text in scope.bindings:
                return scope.bindings[name.text]
            index = scope.parent
        raise UndefinedVariable(name)
