"""Runs Lox scripts, or starts the interactive shell when no script is given. Also uses the error handling context
manager, which picks the exit status: 65 for compile errors, 70 for runtime errors. Called from the lox console script.
"""

import argparse

from lox.lang.error import ErrorHandler
from lox.lang.session import Session
from lox.lang.shell import Shell


def main(argv=None):
    """Runs lox interpreter. Called from lox executable script."""
    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="lox", description="Run Lox scripts")
        parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
        args = parser.parse_args(argv)

        if args.file is not None:
            sess = Session(error_handler, args.file)
            sess.run()
        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True)).cmdloop()


if __name__ == "__main__":
    main()
