"""Session control for Lox. Drives the pipeline (scan, parse, resolve, interpret) over source text, either for a whole
file or for the successive inputs of the interactive shell.
"""

from lox.grammar.parser import Parser
from lox.grammar.scanner import Scanner
from lox.interpreter import Interpreter
from lox.lang.error import CompileError, Diagnostics, GenericException
from lox.resolver import Resolver


class Session:
    """Governs a Lox session. The interpreter (and so the global scope) lives as long as the session."""
    SH_FILE = "<stdin>"  # command-line interpreter filename

    def __init__(self, error_handler, path=SH_FILE, cmd_line=False, echo=True):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode
        self.echo = echo          # whether or not printed values are written to stdout

        self.interpreter = Interpreter(self.write)
        self.results = []  # every line printed by the program, in order
        self.to_exec = []  # statements added but not yet run

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r", encoding="utf-8") as file:
                    source = file.read()
            except OSError:
                raise GenericException("'{}' could not be opened", path)
            self.add(source)

        elif not cmd_line:
            raise GenericException("'{}' is a reserved filename", Session.SH_FILE)

    def add(self, source):
        """Scans, parses and resolves source, queueing its statements for run. Raises a CompileError, without queueing
        anything, if any phase reported a diagnostic; later phases are skipped.
        """
        self.error_handler.register_source(source)  # in case error is raised

        diagnostics = Diagnostics()
        tokens = Scanner(source, diagnostics).scan_tokens()
        statements = Parser(tokens, diagnostics).parse()
        if diagnostics:
            raise CompileError("parsing", diagnostics)

        Resolver(self.interpreter, diagnostics).resolve(statements)
        if diagnostics:
            raise CompileError("resolution", diagnostics)

        self.to_exec.extend(statements)
        return statements

    def run(self):
        """Runs the queued statements. The first runtime error is raised as a LoxRuntimeError, and the remaining
        statements are dropped.
        """
        statements, self.to_exec = self.to_exec, []
        self.interpreter.interpret(statements)
        self.error_handler.remove_source()  # error was not raised

    def write(self, text):
        """Output sink handed to the interpreter."""
        self.results.append(text)
        if self.echo:
            print(text)

    def pop(self):
        """Removes and returns all printed lines collected so far."""
        results, self.results = self.results, []
        return results
