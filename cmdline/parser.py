"""
cmdline parser: turn argv-like tokens into an OptionRegistry.

Token rules (left to right, positions are 1-based)
- "--"            every remaining token is a leftover argument.
- "-"             leftover argument (conventionally stdin).
- "--name[=v]"    long option, optional inline value.
- "-x", "-x=VALUE"
                  short option, optional inline value.
- "-name[=v]"     long option spelled with one dash (when no short key matches).
- "-xVALUE"       short option followed by its inline value (tried last).
- "-5", "-1.5"    negative numbers are leftovers unless they name a short key.
- anything else   leftover argument; with stop=True, it and the rest are leftovers.

Values
- After an option, values are taken from the following tokens until "--" or a
  token naming a declared option. How many depends on nargs:
  • n  → exactly n values in total (inline value included).
  • ?  → one value when no inline value was given and one is available.
  • +  → one or more.
  • *  → zero or more.
  • 0  → none; an inline value is an error.
- Every occurrence is a fresh Option (copy.replace of the descriptor), so an
  option given twice shows up twice in the registry and its values merge.

Faults
- Reported through Parser.trigger(), which merges the parser's presentation
  settings (shell/fancy/colorful/deferred/prog) into the fault:
  • non-deferred: errors raise (or print and exit in shell mode) immediately;
  • deferred: faults are collected and surfaced together when parsing ends,
    errors as one CommandExit.
- Every message starts from the position of the offending token.

Quick example
    >>> options = Options(Option("o", "output", nargs=1), Option("v", "verbose"))
    >>> registry = Parser(options).parse("-v --output=out.txt in.txt")
    >>> registry.get_option_value("o"), registry.get_args()
    ('out.txt', ('in.txt',))
"""
import copy
import difflib
import re
import shlex
from collections import deque

from .faults import *
from .options import Options
from .registry import OptionRegistry
from .utils import *


class Parser:
    """
    Basic command-line parser for an Options declaration.

    Parameters
    - options: Options
      The declared options.
    - stop: bool (keyword-only)
      Stop option processing at the first leftover argument or unknown option;
      that token and all following ones become leftovers.
    - shell: bool (keyword-only)
      Print faults through rich and exit instead of raising.
    - fancy / colorful: bool (keyword-only)
      Fault presentation (panel chrome, colors).
    - deferred: bool (keyword-only)
      Collect faults and surface them together at the end of parse().
    - prog: Unset | str (keyword-only)
      Program name used in fault headers.
    """

    def __init__(
            self,
            options,
            /,
            *,
            stop=False,
            shell=False,
            fancy=False,
            colorful=True,
            deferred=False,
            prog=Unset,
    ):
        if not isinstance(options, Options):
            raise TypeError("parser 'options' must be an options collection")
        if not isinstance(prog, str | UnsetType):
            raise TypeError("parser 'prog' must be a string")

        self._options = options
        self._stop = bool(stop)
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)
        self._deferred = bool(deferred)
        self._prog = prog

        self._faults = []
        self._tokens = deque()
        self._index = 0

    options = property(lambda self: self._options)
    stop = mirror("stop")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")
    deferred = mirror("deferred")
    prog = mirror("prog")

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this parser's presentation settings merged in.
        """
        fault = copy.replace(
            fault,
            **options,
            shell=self._shell,
            fancy=self._fancy,
            colorful=self._colorful,
            deferred=self._deferred,
            prog=self._prog,
        )
        if self._deferred:
            return self._faults.append(fault)
        trigger(fault)

    def _lookup(self, token):
        """
        Resolve a dash token to (option, spelling, inline value) without reporting anything.

        The spelling is the part of the token naming the option ("--file", "-f").
        Returns None when the token does not name a declared option.
        """
        if token.startswith("--"):
            name, equals, value = token[2:].partition("=")
            if option := self._options.longs.get(name):
                return option, "--" + name, value if equals else None
            return None

        body = token[1:]
        if option := self._options.shorts.get(body):
            return option, token, None

        name, equals, value = body.partition("=")
        if equals and (option := self._options.shorts.get(name)):
            return option, "-" + name, value
        if option := self._options.longs.get(name):
            return option, "-" + name, value if equals else None
        if body and (option := self._options.shorts.get(body[0])):
            return option, "-" + body[0], body[1:]
        return None

    def _optionlike(self, token):
        """
        Whether a token is meant as an option (negative numbers are not, unless declared).
        """
        if not token.startswith("-") or token in ("-", "--"):
            return False
        if re.fullmatch(r"-\d+(\.\d*)?([eE][-+]?\d+)?", token):
            return self._lookup(token) is not None
        return True

    def _resolve_token(self, token):
        """
        Resolve a dash token to (option, spelling, inline value) or report why it cannot be.

        Returns None after a fault was reported (deferred mode keeps going).
        """
        if resolved := self._lookup(token):
            return resolved

        if token.startswith("--") and not re.fullmatch(r"--[^\W\d_](-?[^\W_]+)*(=.*)?", token, re.DOTALL):
            return self.trigger(MalformedTokenError(
                "bad form of option %r at %s position" % (token, ordinal(self._index)),
                title="malformed option",
                code=FaultCode.MALFORMED_TOKEN,
                hint="long options look like --name or --name=value",
                token=token,
                index=self._index,
                docs=getdoc(FaultCode.MALFORMED_TOKEN)
            ))

        input = token.partition("=")[0]
        spellings = [name for option in self._options for name in option.names]
        suggestions = difflib.get_close_matches(input, spellings, 5)
        try:
            hint = "did you mean %r?" % suggestions[0]
        except IndexError:
            hint = "put it after '--' to pass it as a plain argument"
        return self.trigger(UnknownOptionError(
            "unknown option %r at %s position" % (input, ordinal(self._index)),
            title="unknown option",
            code=FaultCode.UNKNOWN_OPTION,
            hint=hint,
            token=token,
            index=self._index,
            suggestions=suggestions,
            docs=getdoc(FaultCode.UNKNOWN_OPTION)
        ))

    def _available(self):
        """
        Whether the next token can be taken as a value.
        """
        return bool(self._tokens) and self._tokens[0] != "--" and not (
            self._tokens[0].startswith("-") and self._lookup(self._tokens[0]) is not None
        )

    def _take(self, occurrence, limit=None):
        """
        Move available tokens into the occurrence until it holds 'limit' values.
        """
        while self._available() and (limit is None or len(occurrence.values) < limit):
            occurrence.add_value(self._tokens.popleft())
            self._index += 1

    def _parse_option(self, registry, option, input, value):
        """
        Build one occurrence of option, collect its values and register it.
        """
        start = self._index
        occurrence = copy.replace(option)

        if value is not None:
            if option.nargs == 0:
                self.trigger(FlagAssignmentError(
                    "option %r at %s position does not take a value" % (input, ordinal(start)),
                    title="option cannot take a value",
                    code=FaultCode.FLAG_ASSIGNMENT,
                    hint="remove everything from the value on (for example: %s)" % input,
                    input=input,
                    index=start,
                    option=option,
                    docs=getdoc(FaultCode.FLAG_ASSIGNMENT)
                ))
            else:
                if not value:
                    self.trigger(EmptyInlineValueWarning(
                        "empty inline value for option %r at %s position" % (input, ordinal(start)),
                        title="empty inline value",
                        code=FaultCode.EMPTY_INLINE_VALUE,
                        hint="add a value after '=' (for example: %s=<value>)" % input,
                        input=input,
                        index=start,
                        option=option,
                        docs=getdoc(FaultCode.EMPTY_INLINE_VALUE)
                    ))
                occurrence.add_value(value)

        match option.nargs:
            case "?":
                if value is None:
                    self._take(occurrence, 1)
            case "*":
                self._take(occurrence)
            case "+":
                self._take(occurrence)
                if not occurrence.values:
                    self._missing(option, input, start)
            case int() as nargs if nargs > 0:
                self._take(occurrence, nargs)
                if not (count := len(occurrence.values)):
                    self._missing(option, input, start)
                elif count < nargs:
                    self.trigger(NotEnoughValuesError(
                        "option %r at %s position expects %d %s but got %d" % (
                            input, ordinal(start), nargs, pluralize("value"), count
                        ),
                        title="not enough values",
                        code=FaultCode.NOT_ENOUGH_VALUES,
                        hint="pass %d more after %s" % (nargs - count, input),
                        input=input,
                        index=start,
                        option=option,
                        docs=getdoc(FaultCode.NOT_ENOUGH_VALUES)
                    ))

        registry.add_option(occurrence)

    def _missing(self, option, input, index):
        self.trigger(MissingArgumentError(
            "option %r at %s position requires a value" % (input, ordinal(index)),
            title="missing value",
            code=FaultCode.MISSING_ARGUMENT,
            hint="pass it as %s=<value> or %s <value>" % (input, input),
            input=input,
            index=index,
            option=option,
            docs=getdoc(FaultCode.MISSING_ARGUMENT)
        ))

    def _finalize(self):
        """
        Surface collected warnings, then every collected error as one CommandExit.
        """
        exceptions = []
        warnings = []

        for fault in self._faults:
            if isinstance(fault, CommandException):
                exceptions.append(fault)
            elif isinstance(fault, CommandWarning):
                warnings.append(fault)
            else:
                raise RuntimeError("unexpected fault")

        for warning in warnings:
            trigger(warning)

        if not exceptions:
            return

        trigger(
            CommandExit(exceptions),
            shell=self._shell,
            fancy=self._fancy,
            colorful=self._colorful,
            deferred=self._deferred,
            prog=self._prog,
        )

    def parse(self, arguments, /):
        """
        Parse argv-like tokens (or a shell-like string) into a new OptionRegistry.

        phases
        - loop: classify each token; options go through _resolve_token() and
          _parse_option(), everything else becomes a leftover (see module docs).
        - required: every required option that never showed up is reported.
        - finalize: in deferred mode, collected faults are surfaced.
        """
        if isinstance(arguments, str):
            arguments = shlex.split(arguments)

        registry = OptionRegistry()
        self._faults.clear()
        self._tokens = deque(arguments)
        self._index = 0

        while self._tokens:
            token = self._tokens.popleft()
            self._index += 1

            if not isinstance(token, str):
                raise TypeError("parse() arguments must be strings")

            if token == "--":
                break

            if not self._optionlike(token):
                registry.add_arg(token)
                if self._stop:
                    break
                continue

            if self._stop and self._lookup(token) is None:
                registry.add_arg(token)
                break

            if resolved := self._resolve_token(token):
                self._parse_option(registry, *resolved)

        # whatever is left after "--" or a stop is taken verbatim
        while self._tokens:
            registry.add_arg(self._tokens.popleft())
            self._index += 1

        for option in self._options.required:
            if not registry.has_option(option.opt):
                self.trigger(MissingOptionError(
                    "missing required option %r" % " | ".join(option.names),
                    title="missing required option",
                    code=FaultCode.MISSING_OPTION,
                    hint="pass %s" % option.names[-1] + (" <value>" if option.nargs else ""),
                    option=option,
                    docs=getdoc(FaultCode.MISSING_OPTION)
                ))

        self._finalize()
        return registry


def parse(options, arguments, /, **settings):
    """
    Convenience wrapper: Parser(options, **settings).parse(arguments).
    """
    return Parser(options, **settings).parse(arguments)


__all__ = (
    "Parser",
    "parse",
)
