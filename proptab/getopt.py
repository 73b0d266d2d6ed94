"""
Option parser - POSIX getopt-style parsing of command-line arguments.

The option string lists the accepted letters; a letter followed by ':' takes
an argument (``"ab:"`` accepts ``-a`` and ``-b value``). Optional arguments
are not supported.

Usage:
    parser = OptionParser(sys.argv, "vo:")
    while (opt := parser.option()) is not END_OPTION:
        if opt == "o":
            output = parser.optarg
    files = parser.args()
"""

from __future__ import annotations

from typing import Iterator, Sequence

# Returned by OptionParser.option() once the options are exhausted
END_OPTION = None


class OptionError(ValueError):
    """An option letter that the option string does not accept."""

    reason = "option not supported"

    def __init__(self, option: str) -> None:
        self.option = option
        super().__init__(f"getopt: {self.reason}: -{option}")


class MissingArgument(OptionError):
    """An option that takes an argument came last with nothing after it."""

    reason = "no argument given"


class OptionParser:
    """
    Walks ``args`` option by option. ``args[0]`` is the program name and is
    skipped, so ``sys.argv`` can be passed as is.

    Parsing ends at the first non-option argument, at a lone ``-``, at
    ``--`` (which is consumed) or when the arguments run out.
    """

    def __init__(self, args: Sequence[str], opts: str) -> None:
        self._args = list(args)
        self._opts = opts
        self._index = 1       # index in args of the current option word
        self._pos = 0         # position of the next letter in that word
        self._has_arg = False  # the last option returned has an argument
        self._done = False

    def option(self) -> str | None:
        """Return the next option letter, or END_OPTION when there are none.

        Raises OptionError for a letter the option string does not accept
        and MissingArgument when a required argument is missing. Parsing can
        continue after either.
        """
        if self._done:
            return END_OPTION
        if self._has_arg:
            self._index += 1
            self._pos = 0
            self._has_arg = False
        if self._index >= len(self._args):
            self._done = True
            return END_OPTION

        if self._pos == 0:
            word = self._args[self._index]
            if len(word) <= 1 or word[0] != "-":
                self._done = True
                return END_OPTION
            if word == "--":
                self._index += 1
                self._done = True
                return END_OPTION
            self._pos = 1

        word = self._args[self._index]
        letter = word[self._pos]
        self._pos += 1
        if self._pos >= len(word):
            self._index += 1
            self._pos = 0

        if ord(letter) <= 0x20 or ord(letter) >= 0x7F or letter in ":-":
            raise OptionError(letter)
        i = self._opts.find(letter)
        if i < 0:
            raise OptionError(letter)
        if self._opts[i + 1:i + 2] == ":":
            if self._index >= len(self._args):
                raise MissingArgument(letter)
            self._has_arg = True
        return letter

    @property
    def optarg(self) -> str:
        """Argument of the last option returned, or "" when it has none."""
        if not self._has_arg:
            return ""
        return self._args[self._index][self._pos:]

    def args(self) -> list[str]:
        """Arguments not processed yet."""
        i = self._index
        if self._has_arg:
            i += 1
        return self._args[i:]

    def __iter__(self) -> Iterator[tuple[str, str]]:
        """Yield ``(letter, optarg)`` pairs until the options run out."""
        while (letter := self.option()) is not END_OPTION:
            yield letter, self.optarg
