"""Runtime object model for Lox: anything callable (functions, classes, natives) and class instances.

Runtime values are represented with Python values where possible: nil is None, booleans are bool, numbers are float and
strings are str. Everything else is one of the classes below.
"""

from abc import ABC, abstractmethod

from lox.lang.error import LoxRuntimeError
from lox.runtime.environment import Environment


class Return(Exception):
    """Unwinds from a return statement to the function call that issued it. Not an error: it carries the returned
    value.
    """

    def __init__(self, value):
        super().__init__()
        self.value = value


class LoxCallable(ABC):
    """Capability of being called with parentheses. Arity is checked by the caller before call is invoked."""

    @abstractmethod
    def arity(self):
        """Number of arguments this callable expects."""

    @abstractmethod
    def call(self, interpreter, arguments):
        """Invokes this callable with a list of already-evaluated arguments and returns the result."""


class NativeFunction(LoxCallable):
    """Function implemented in Python, e.g. clock."""

    def __init__(self, name, arity, function):
        self.name = name
        self._arity = arity
        self.function = function

    def arity(self):
        return self._arity

    def call(self, interpreter, arguments):
        return self.function(*arguments)

    def __str__(self):
        return "<native fn>"


class LoxFunction(LoxCallable):
    """User-defined function or method, closing over the environment it was declared in."""

    def __init__(self, declaration, closure, is_initializer=False):
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    def arity(self):
        return len(self.declaration.params)

    def bind(self, instance):
        """Returns a new LoxFunction whose closure is a fresh scope defining `this` as instance."""
        environment = Environment(self.closure)
        environment.define("this", instance)
        return LoxFunction(self.declaration, environment, self.is_initializer)

    def call(self, interpreter, arguments):
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)

        try:
            interpreter.execute_block(self.declaration.body, environment)
        except Return as returned:
            if self.is_initializer:
                return self.closure.get_at(0, "this")
            return returned.value

        if self.is_initializer:  # initializers always produce the instance
            return self.closure.get_at(0, "this")
        return None

    def __str__(self):
        return f"<fn {self.declaration.name.lexeme}>"


class LoxClass(LoxCallable):
    """Class: a method table plus an optional superclass. Calling a class constructs an instance."""

    def __init__(self, name, superclass, methods):
        self.name = name
        self.superclass = superclass
        self.methods = methods

    def lookup(self, name):
        """Returns the unbound method called name from this class or its superclass chain, or None."""
        klass = self
        while klass is not None:
            if name in klass.methods:
                return klass.methods[name]
            klass = klass.superclass
        return None

    def find_method(self, instance, name):
        """Returns the method called name bound to instance, or None if no class in the chain defines it."""
        method = self.lookup(name)
        if method is None:
            return None
        return method.bind(instance)

    def arity(self):
        initializer = self.lookup("init")
        return initializer.arity() if initializer is not None else 0

    def call(self, interpreter, arguments):
        instance = LoxInstance(self)
        initializer = self.find_method(instance, "init")
        if initializer is not None:
            initializer.call(interpreter, arguments)
        return instance

    def __str__(self):
        return self.name


class LoxInstance:
    """Instance of a LoxClass, with its own fields. Fields can be added at any time by assignment."""

    def __init__(self, klass):
        self.klass = klass
        self.fields = {}

    def get(self, name):
        """Fields shadow methods; methods are bound to this instance before being returned."""
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]

        method = self.klass.find_method(self, name.lexeme)
        if method is not None:
            return method

        raise LoxRuntimeError(name, f"Undefined property '{name.lexeme}'.")

    def set(self, name, value):
        self.fields[name.lexeme] = value

    def __str__(self):
        return f"{self.klass.name} instance"
