"""
Lexical environments for the evaluator.

Environments form a chain via the ``parent`` reference. Each one owns its own
bindings; lookup and assignment walk outward until the name is found.
Mutability is recorded per binding and enforced on assignment.
"""

from typing import Dict, Optional, Set

from .values import Value, null_val, bool_val
from ..errors import (
    error_undeclared_variable,
    error_already_declared,
    error_constant_reassignment,
)
from ..tokens import SourceSpan


class Environment:
    """
    A single scope of variable bindings.

    Usage:
        env = Environment()
        env.declare("x", number_val(1))
        inner = env.child("block")
        inner.assign("x", number_val(2))   # rebinds in env
    """

    def __init__(self, parent: Optional["Environment"] = None, name: str = "anonymous"):
        self.parent = parent
        self.name = name  # For debugging
        self.variables: Dict[str, Value] = {}
        self.constants: Set[str] = set()

    def __repr__(self) -> str:
        return f"Environment({self.name!r}, {sorted(self.variables)})"

    def child(self, name: str = "block") -> "Environment":
        """Create a nested scope whose parent is this environment."""
        return Environment(parent=self, name=name)

    def declare(self, name: str, value: Value, constant: bool = False,
                span: Optional[SourceSpan] = None) -> Value:
        """Bind a new name in this scope. Shadowing a parent binding is allowed."""
        if name in self.variables:
            raise error_already_declared(name, span)

        self.variables[name] = value
        if constant:
            self.constants.add(name)
        return value

    def resolve(self, name: str, span: Optional[SourceSpan] = None) -> "Environment":
        """Find the environment in the chain that owns ``name``."""
        env = self
        while env is not None:
            if name in env.variables:
                return env
            env = env.parent
        raise error_undeclared_variable(name, span)

    def lookup(self, name: str, span: Optional[SourceSpan] = None) -> Value:
        """Return the value bound to ``name`` in the nearest owning scope."""
        return self.resolve(name, span).variables[name]

    def assign(self, name: str, value: Value, span: Optional[SourceSpan] = None) -> Value:
        """Rebind an existing name in whichever scope owns it."""
        env = self.resolve(name, span)
        if name in env.constants:
            raise error_constant_reassignment(name, span)
        env.variables[name] = value
        return value

    def has(self, name: str) -> bool:
        """Check if a name is bound in this scope or any parent."""
        env = self
        while env is not None:
            if name in env.variables:
                return True
            env = env.parent
        return False

    def is_constant(self, name: str) -> bool:
        """Check if the nearest binding of ``name`` is constant."""
        return name in self.resolve(name).constants


def create_global_environment() -> Environment:
    """
    Create a root environment with the built-in constants.

    Returns:
        An Environment binding ``null``, ``true`` and ``false`` as constants
    """
    env = Environment(name="global")
    env.declare("null", null_val(), constant=True)
    env.declare("true", bool_val(True), constant=True)
    env.declare("false", bool_val(False), constant=True)
    return env
