"""
cmdline utilities (small helpers shared by every layer)

Overview
- UnsetType / Unset
  • Singleton sentinel for "argument not given", distinct from None so that None
    stays available as a real user value (e.g., an explicit default).
  • Falsey, printable as "Unset", sealed against subclassing.

- coalesce(value, default=None)
  • Swap Unset for a concrete default; every other value (None, 0, "", []) passes through.

- rename(callable, name) / @rename("name")
  • Give generated callables a stable __name__/__qualname__ for readable tracebacks.

- mirror("attr")
  • Read-only property over a private backing field (self._attr). Containers are
    copied on every read so callers cannot reach the backing storage.

- pluralize(text) and ordinal(number)
  • Wording helpers for fault messages ("2 values", "at third position").

Names not listed in __all__ are internal.
"""
import builtins
import functools
import re
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Sentinel type for a value that was not provided.

    A single instance, Unset, exists per process. It is falsey but never equal
    to None, so APIs can tell "not passed" apart from "passed as None".
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in annotations (e.g., str | UnsetType).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Return object, or default when object is the Unset sentinel.

    Falsey values are preserved:
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set __name__/__qualname__ on a callable, or build a decorator that will.

    Forms
    - rename(callable, name) -> callable (renamed in place)
    - rename(name)           -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _detach(object):
    """
    Copy containers (recursively) so the caller gets storage of its own.

    Sequences other than strings become lists, mappings become dicts, sets
    become sets. Anything else is returned as-is.
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return list(map(_detach, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_detach, object.values())))
    elif isinstance(object, Set):
        return set(map(_detach, object))
    return object


def mirror(name, /):
    """
    Define a read-only property that reads self._{name} through _detach().

    Example
    - Given self._values, declare values = mirror("values").
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _detach(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def pluralize(text, /):
    """
    Best-effort English plural of the last word in text.

    Only the regular rules are covered (s/sh/ch/x/z -> +es, consonant+y -> -ies,
    everything else -> +s); fault copy in this package never needs irregulars.

    Examples
    - pluralize("value")          -> "values"
    - pluralize("option entry")   -> "option entries"
    - pluralize("Switch")         -> "Switches"
    """
    if not isinstance(text, str):
        raise TypeError("pluralize() argument must be a string")

    # head + last word + trailing whitespace
    match = re.search(r'(\S+)(\s*)$', text)
    if not match:
        return text

    head, last, trail = text[:match.start(1)], match.group(1), match.group(2)
    lower = last.lower()

    if lower.endswith(("s", "sh", "ch", "x", "z")):
        plural = lower + "es"
    elif lower.endswith("y") and len(lower) > 1 and lower[-2] not in "aeiou":
        plural = lower[:-1] + "ies"
    else:
        plural = lower + "s"

    if last.isupper():
        plural = plural.upper()
    elif last[:1].isupper():
        plural = plural[:1].upper() + plural[1:]

    return head + plural + trail


@functools.cache
def ordinal(number, /):
    """
    Human-friendly ordinal for a 1-based position.

    1..10 are spelled out ("first".."tenth"); larger numbers use numeric
    suffixes with the usual teens exception (11th, 12th, 13th).
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


Unset = UnsetType()
"""
Sentinel for "not provided". Use coalesce(value, default) to materialize it.
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "pluralize",
    "ordinal",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
