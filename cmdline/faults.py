"""
cmdline faults (errors and warnings) and their rendering.

Scope
- FaultCode: stable numeric identifiers for every user-facing issue raised while
  parsing a command line or converting option values.
- CommandException / CommandWarning: base types carrying a message plus keyword
  options (title, code, hint, docs and any context such as token/index/option).
  They render themselves with rich and know how to surface themselves.
- CommandExit: exception group used when faults were collected (deferred mode).
- trigger(): single entry point to surface a fault with runtime options merged in.
- getdoc(): optional per-code documentation provided by the host application.

Surfacing rules
- shell=False (library use): exceptions are raised, warnings go through warnings.warn.
- shell=True (end-user programs): faults are printed to stderr through rich and
  errors terminate the process with exit status 1.

Host customization (attributes looked up on __main__)
- __styles__: rich style overrides, keyed like the palettes below.
- __codes__:  FaultCode -> label mapping used by FaultCode.normalize().
- __docs__:   FaultCode -> documentation string used by getdoc().
- __prog__:   program name shown in fault headers.
"""
import copy
import os.path
import sys
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, UnsetType, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - tokens and options (1111x/1112x)
      • MALFORMED_TOKEN, UNKNOWN_OPTION, FLAG_ASSIGNMENT, MISSING_ARGUMENT,
        NOT_ENOUGH_VALUES, MISSING_OPTION
    - values (1113x)
      • UNCOERCIBLE_VALUE
    - warnings (12xxx)
      • EMPTY_INLINE_VALUE
    """
    # --- token/option errors (11xxx) ---
    MALFORMED_TOKEN     = 11111
    UNKNOWN_OPTION      = 11112
    FLAG_ASSIGNMENT     = 11113
    MISSING_ARGUMENT    = 11117
    NOT_ENOUGH_VALUES   = 11122
    MISSING_OPTION      = 11125

    # --- value errors (11xxx) ---
    UNCOERCIBLE_VALUE   = 11131

    # --- warnings (12xxx) ---
    EMPTY_INLINE_VALUE  = 12111

    def normalize(self):
        """
        return the host label for this code, or the numeric value as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _program(options):
    """
    program name for headers: explicit 'prog' option, then __main__.__prog__, then argv[0].
    """
    fallback = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "cmdline"
    return coalesce(options.get("prog", Unset), getattr(__import__("__main__"), "__prog__", fallback))


def _compose(fault, palette, *, title, message):
    """
    shared rich layout for single faults: "[ prog — code | title ]", message, hint.

    'title' and 'message' name the palette entries used for those parts so
    errors and warnings can share the layout with different colors.
    """
    styles = defaultdict(str, palette | getattr(__import__("__main__"), "__styles__", {}))
    colorful = fault.options.get("colorful", False)
    fancy = fault.options.get("fancy", False)

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style])

    code = fault.options.get("code")
    header = Text.assemble(
        "[ ",
        text(_program(fault.options), "prog-name"),
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else code, "code"),
        " | ",
        text(fault.options.get("title", type(fault).__name__).title(), title),
        " ]"
    )
    body = text(fault.message, message)
    hint = Text.assemble(text(" → ", "hint-arrow"), text(fault.options.get("hint"), "hint"))

    if fancy:
        try:
            width = int((console.width - 4) * fault.options["ratio"])
        except KeyError:
            width = None
        return Panel(Group(body, hint), title=header, title_align="left", width=width)

    return Group(header, body, hint)


class CommandException(Exception):
    """
    base of every parse/conversion error; str(exception) is its message.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | UnsetType)
        self.message = coalesce(message, "")
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _compose(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        }, title="error-title", message="error-message")

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        if self.options.get("deferred", False):
            return
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MalformedTokenError(CommandException): ...
class UnknownOptionError(CommandException): ...
class FlagAssignmentError(CommandException): ...
class MissingArgumentError(CommandException): ...
class NotEnoughValuesError(CommandException): ...
class MissingOptionError(CommandException): ...
class UncoercibleValueError(CommandException): ...


class CommandWarning(ABC, Warning):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | UnsetType)
        self.message = coalesce(message, "")
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message

    def __rich__(self):
        return _compose(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "warning-title": "bold #FFC2E0",
            "warning-message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        }, title="warning-title", message="warning-message")

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=3)
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class EmptyInlineValueWarning(CommandWarning): ...


class CommandExit(ExceptionGroup[CommandException]):
    """
    every error collected during a deferred parse, surfaced at once.
    """

    def __new__(cls, exceptions, **options):
        return super().__new__(cls, "bad exit", tuple(exceptions))

    def __init__(self, exceptions, **options):
        super().__init__("bad exit", tuple(exceptions))
        self.options = MappingProxyType(options)

    def __rich__(self):
        styles = defaultdict(str, {
            "prog-name": "bold #E6E6F0",
            "title": "bold #FF4DA6",
        } | getattr(__import__("__main__"), "__styles__", {}))
        colorful = self.options.get("colorful", False)

        def text(fragment, style=""):
            return Text(str(fragment), styles[style] if colorful else "")

        header = Text.assemble("[ ", text(_program(self.options), "prog-name"), " — ", text(self.message.title(), "title"), " ]")

        # children inherit the group's presentation and shrink inside the panel
        renders = [copy.replace(exception, ratio=2/3, colorful=colorful, fancy=self.options.get("fancy", False))
                   for exception in self.exceptions]

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.exceptions, **{**self.options, **overrides})


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ (see the base classes above).
    - options are merged into a copy of the fault before it is triggered.

    typical options
    - shell, fancy, colorful, deferred, prog, title, code, hint, docs, plus any
      context the message refers to (token, index, option, ...).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    documentation for a fault code from __main__.__docs__, or None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "CommandException",
    "MalformedTokenError",
    "UnknownOptionError",
    "FlagAssignmentError",
    "MissingArgumentError",
    "NotEnoughValuesError",
    "MissingOptionError",
    "UncoercibleValueError",
    "CommandWarning",
    "EmptyInlineValueWarning",
    "CommandExit",
    "FaultCode",
    "trigger",
    "getdoc",
)
