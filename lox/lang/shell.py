"""Handles interactive/command-line mode for the Lox interpreter. Uses cmd as backend."""

import cmd

from lox.grammar.scanner import Scanner
from lox.grammar.tokens import TokenType
from lox.lang.error import Diagnostic, Diagnostics


class Shell(cmd.Cmd):
    """Lox interpreter shell."""
    intro = "Lox interpreter :: Python backend\nType 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    @staticmethod
    def needs_continuation(source):
        """Whether or not source has unclosed braces, in which case more input is expected. Braces inside strings and
        comments don't count; scan errors are left for the Session to report.
        """
        tokens = Scanner(source, Diagnostics()).scan_tokens()
        opened = sum(token.type is TokenType.LEFT_BRACE for token in tokens)
        closed = sum(token.type is TokenType.RIGHT_BRACE for token in tokens)
        return opened > closed

    def default(self, line):
        """Executes arbitrary Lox source."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            source = self._tmp_line + line + "\n"

            if Shell.needs_continuation(source):
                self._tmp_line = source
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            try:
                self.sess.add(source)
                self.sess.run()
            finally:
                self.sess.pop()  # already echoed

    def onecmd(self, line):
        """Routes continuation lines straight to default, so that e.g. a line starting with 'help' inside a block
        isn't mistaken for a command.
        """
        if self._tmp_line and line != "EOF":
            return self.default(line)
        return super().onecmd(line)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the Lox interpreter!\n\n"
              "Lox is a small dynamically-typed language with first-class functions, closures \n"
              "and classes. Statements end with ';' and blocks span several lines until their \n"
              "braces are balanced.\n\n"
              "Try it out by typing 'var greeting = \"hi\";' and then 'print greeting;'. \n"
              "Type 'exit' or press Ctrl-D to leave.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        if self._tmp_line:
            self.sess.error_handler.warn(Diagnostic(self.line_num, "", "unfinished input discarded"))
        return True

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
