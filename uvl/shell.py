"""Interactive prompt for uvl. Uses cmd as backend."""

import cmd

from termcolor import colored

from .errors import UvlError
from .interpreter import Interpreter
from .types import NilVal, to_string


class Shell(cmd.Cmd):
    """uvl read-eval-print loop.

    Every line runs through a single prompt-mode interpreter, so names
    declared on one line stay visible on the next. `help`, `env` and
    `exit` are commands only when typed alone; `env = 2` is uvl source.
    """
    intro = "uvl interpreter\nType 'help' for more information."
    prompt = "::> "
    source_name = "stdin"

    def __init__(self, interpreter=None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.interpreter = interpreter if interpreter is not None else Interpreter(prompt_mode=True)

    def default(self, line):
        """Runs a line of uvl source."""
        try:
            value = self.interpreter.run(self.source_name, line)
        except UvlError as err:
            self.stdout.write(colored(f"{err.name}: ", "red", attrs=["bold"]) + str(err) + "\n")
            self.interpreter.reset()
            return
        if not isinstance(value, NilVal):
            self.stdout.write(to_string(value) + "\n")

    def do_help(self, arg):
        """Prints a short intro."""
        if arg:
            return self.default(self.lastcmd)
        self.stdout.write(
            "uvl evaluates one statement per line; the trailing ';' is optional.\n\n"
            "  let x = 1         declare an immutable name\n"
            "  let mut y = 2     declare a mutable name\n"
            "  y = y + x         assign (evaluates to the old value)\n"
            "  println \"hi\"      print a value\n\n"
            "Commands: env (list names), exit, Ctrl-D.\n"
        )

    def do_env(self, arg):
        """Lists the names declared in this session."""
        if arg:
            return self.default(self.lastcmd)
        env = self.interpreter.global_env
        for name in env.names():
            binding = env.get(name)
            kind = "mut " if binding.mutable else ""
            self.stdout.write(f"{kind}{name} = {to_string(binding.value)}\n")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return False

    def do_EOF(self, arg):
        """Exits interpreter."""
        self.stdout.write("\n")
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        if arg:
            return self.default(self.lastcmd)
        return True
