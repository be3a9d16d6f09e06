"""Error handling for the Lox interpreter. Only GenericExceptions should be encountered while running: if another type of
error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Compile-time problems (scan, parse and resolution errors) never stop their phase. They are accumulated in a
Diagnostics value that the Session inspects between phases, and are raised all at once as a CompileError. Runtime
errors are fatal to the run and unwind straight to the ErrorHandler as a LoxRuntimeError.
"""

import sys
from dataclasses import dataclass
from typing import Optional

from termcolor import colored

from lox.grammar.tokens import TokenType


@dataclass(frozen=True)
class Diagnostic:
    """A single compile-time or runtime problem, attributed to a source line."""
    line: int
    where: str
    message: str
    lexeme: Optional[str] = None  # offending source text, used to highlight the error
    column: Optional[int] = None  # where lexeme starts on its line, if known

    def __str__(self):
        where = f" {self.where}" if self.where else ""
        return f"[line {self.line}] Error{where}: {self.message}"


class Diagnostics:
    """Accumulates Diagnostics for one phase (or one run of several phases)."""

    def __init__(self):
        self.reported = []

    def error(self, line, message):
        """Reports an error that is only known by line (scan errors)."""
        self.reported.append(Diagnostic(line, "", message))

    def token_error(self, token, message):
        """Reports an error located at token."""
        if token.type is TokenType.EOF:
            self.reported.append(Diagnostic(token.line, "at end", message))
        else:
            self.reported.append(Diagnostic(token.line, f"at '{token.lexeme}'", message, token.lexeme, token.column))

    def __len__(self):
        return len(self.reported)

    def __bool__(self):
        return bool(self.reported)

    def __iter__(self):
        return iter(self.reported)


class GenericException(Exception):
    """Templates an error message so that it can be used to throw a Lox error. exprs are the snippets substituted
    into msg, and are bolded when displayed.
    """
    exit_code = 70

    def __init__(self, msg, exprs=None, internal=False):
        if exprs is None:
            exprs = []
        if isinstance(exprs, str):
            exprs = [exprs]

        super().__init__(msg.format(*exprs))
        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.internal = internal
        self.diagnostics = []


class CompileError(GenericException):
    """Raised by the Session once a compile-time phase finished with diagnostics. No part of the program runs."""
    exit_code = 65

    def __init__(self, phase, diagnostics):
        count = len(diagnostics)
        super().__init__("{} failed with " + f"{count} error{'s' if count != 1 else ''}", phase)
        self.phase = phase
        self.diagnostics = list(diagnostics)


class LoxRuntimeError(GenericException):
    """Raised by the Interpreter on the first runtime error. token is the token the error is attributed to."""
    exit_code = 70

    def __init__(self, token, message):
        super().__init__(message)
        self.token = token
        self.message = message
        self.diagnostics = [Diagnostic(token.line, "", message, token.lexeme or None, token.column)]


class ParseError(Exception):
    """Unwinds the Parser to the nearest declaration so that it can synchronize. Never escapes the Parser."""


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom Lox errors."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.file = None
        self.source = {}  # line number: line text of the last registered source

    def register_file(self, path):
        """Registers path as the origin of upcoming errors."""
        self.file = path
        self.source = {}

    def register_source(self, source):
        """Registers source text so that errors can display the offending line. Should be called prior to Session
        add/run.
        """
        self.source = {line_num: line for line_num, line in enumerate(source.splitlines(), 1)}

    def remove_source(self):
        """Forgets the registered source. Should be called after a successful Session add/run."""
        self.source = {}

    @staticmethod
    def diagnose(line, lexeme, warning=False, column=None):
        """Returns line with lexeme highlighted and underlined, at column if lexeme is found there and at its first
        occurrence otherwise. None if lexeme isn't in line.
        """
        if column is not None and line[column:column + len(lexeme)] == lexeme:
            start = column
        else:
            start = line.find(lexeme)
        if not lexeme or start == -1:
            return None
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR
        end = start + len(lexeme)

        diagnosis = "  " + line[:start]
        diagnosis += colored(line[start:end], color, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += colored("^" + "~" * (end - start - 1), color, attrs=["bold"])

        return diagnosis

    def render(self, diagnostic, warning=False):
        """Returns the text displayed for diagnostic."""
        label, color = ("warning: ", ErrorHandler.WARNING) if warning else ("error: ", ErrorHandler.ERROR)
        where = f" {diagnostic.where}" if diagnostic.where else ""

        text = colored(f"{self.file}:{diagnostic.line}:", attrs=["bold"]) + " "
        text += colored(label, color, attrs=["bold"]) + diagnostic.message + where

        line = self.source.get(diagnostic.line)
        if line is not None and diagnostic.lexeme:
            diagnosis = ErrorHandler.diagnose(line, diagnostic.lexeme, warning, diagnostic.column)
            if diagnosis:
                text += "\n" + diagnosis
        return text

    def warn(self, diagnostic):
        """Prints a warning for diagnostic. Never fatal."""
        print(self.render(diagnostic, warning=True), file=sys.stderr)

    def throw(self, error):
        """Throws error. error must be a GenericException. Exits with error.exit_code if fatal."""
        if error.diagnostics:
            for diagnostic in error.diagnostics:
                print(self.render(diagnostic), file=sys.stderr)
        else:
            error_msg = ""
            if error.internal:
                error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])
            error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
            print(error_msg, file=sys.stderr)

        if self.fatal:
            sys.exit(error.exit_code)
        self.source = {}  # if error occurred, reset source (no need if error is fatal)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum recursion depth exceeded"))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}", internal=True))
            do_exit = True

        return not do_exit
