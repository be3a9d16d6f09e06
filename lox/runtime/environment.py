"""Environment chain: linked, mutable name -> value scopes.

An Environment is created per block, per function call and per method binding. Environments are shared by reference:
every closure created in a scope holds on to it, so later writes are visible to all of them.
"""

from lox.lang.error import LoxRuntimeError


class Environment:

    def __init__(self, enclosing=None):
        self.values = {}
        self.enclosing = enclosing

    def define(self, name, value):
        """Binds name in this scope. Never fails; rebinding a name in the same scope shadows the old value."""
        self.values[name] = value

    def get(self, name):
        """Looks up token name in this scope, then outward through the enclosing chain."""
        environment = self
        while environment is not None:
            if name.lexeme in environment.values:
                return environment.values[name.lexeme]
            environment = environment.enclosing
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name, value):
        """Assigns to the nearest scope that defines token name."""
        environment = self
        while environment is not None:
            if name.lexeme in environment.values:
                environment.values[name.lexeme] = value
                return
            environment = environment.enclosing
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def get_at(self, distance, name):
        """Reads name directly from the scope distance hops out (as computed by the Resolver)."""
        return self.ancestor(distance).values[name]

    def assign_at(self, distance, name, value):
        self.ancestor(distance).values[name] = value

    def ancestor(self, distance):
        environment = self
        for __ in range(distance):
            environment = environment.enclosing
        return environment

    def __repr__(self):
        return f"Environment({list(self.values)}, enclosing={self.enclosing!r})"
