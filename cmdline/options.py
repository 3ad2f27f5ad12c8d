r"""
cmdline option descriptors.

Overview
- Option: one declared command-line option, and also one parsed occurrence of it.
  • key: short identifier ("f" for -f). The sentinel LONG_ONLY (a single space)
    means "no short form, the long key identifies this option".
  • long_key: optional long identifier ("file" for --file).
  • type: tag handed to cmdline.values.coerce (ValueType member or callable).
  • nargs: 0 (presence only), n >= 1 (exactly n values), "?", "+" or "*".
  • separator: optional character splitting each raw value ("-D key=value").
  • required, metavar, descr: parsing constraint and help metadata.
  • values: the strings collected for this occurrence, in order.

- Options: the declared set, indexed by short and by long key.

Identity
- Options never define structural equality. Every parsed occurrence is its own
  object: the parser asks for copy.replace(descriptor), which yields a fresh
  instance with the same metadata and no values. Two occurrences with equal
  content are therefore still two distinct entries.

Validation (raised as TypeError/ValueError at construction)
- key: LONG_ONLY, or a non-empty string without whitespace, '=' or a leading '-'.
- long_key: r"[^\W\d_](-?[^\W_]+)*" (unicode letters allowed, no underscores).
- LONG_ONLY requires a long_key.
- type: ValueType member or callable.
- nargs: non-negative int (bool rejected) or one of "?", "+", "*".
- separator: a single character; only meaningful for value-bearing options.
- metavar/descr: non-empty after trimming when provided.

Quick example
    >>> from cmdline.options import Option, Options
    >>> options = Options(
    ...     Option("f", "file", nargs=1, metavar="PATH"),
    ...     Option("D", nargs=2, separator="="),
    ...     Option(long_key="verbose"),
    ... )
    >>> options["--file"].key
    'f'
"""
import builtins
import re
from types import MappingProxyType

from rich.text import Text

from .utils import *
from .values import ValueType

LONG_ONLY = " "
"""
Short-key sentinel: the option has no short form and is looked up by its long key.
"""


class OptionType(type):
    """
    Metaclass exposing __introspectable__ fields as read-only properties.

    It also derives __typename__ ("option", "option-set", ...) for messages and
    provides __repr__/__rich_repr__ driven by __displayable__ (falling back to
    __introspectable__).
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        if "__repr__" not in namespace:
            @rename("__repr__")
            def __repr__(self):
                return "%s(%s)" % (type(self).__typename__, ", ".join(
                    "%s=%r" % pair for pair in self.__rich_repr__()
                ))
            self.__repr__ = __repr__

        if "__rich_repr__" not in namespace:
            @rename("__rich_repr__")
            def __rich_repr__(self):
                for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                    yield name, getattr(self, name)
            self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_keys(cls, metadata, /):
    """
    Validate the short/long keys and normalize an omitted long key to None.
    """
    if not isinstance(key := metadata["key"], str):
        raise TypeError(f"{cls.__typename__} 'key' must be a string")
    if key != LONG_ONLY and not re.fullmatch(r"[^\s=\-][^\s=]*", key):
        raise ValueError(f"{cls.__typename__} 'key' must be a non-empty name without whitespace or leading '-'")

    if not isinstance(long_key := metadata["long_key"], str | UnsetType):
        raise TypeError(f"{cls.__typename__} 'long_key' must be a string")
    if isinstance(long_key, str) and not re.fullmatch(r"[^\W\d_](-?[^\W_]+)*", long_key):
        raise ValueError(f"{cls.__typename__} 'long_key' must be a valid long option name (unicodes are allowed)")

    if key == LONG_ONLY and long_key is Unset:
        raise TypeError(f"{cls.__typename__} without a short key must specify a 'long_key'")

    metadata["long_key"] = coalesce(long_key)


def _sanitize_arity(cls, metadata, /):
    """
    Validate type tag, nargs and separator.
    """
    if not isinstance(metadata["type"], ValueType) and not callable(metadata["type"]):
        raise TypeError(f"{cls.__typename__} 'type' must be a value-type or a callable")

    nargs = metadata["nargs"]
    if isinstance(nargs, bool) or not isinstance(nargs, int | str):
        raise TypeError(f"{cls.__typename__} 'nargs' must be a string or an integer")
    if isinstance(nargs, str) and nargs not in ("?", "+", "*"):
        raise ValueError(f"{cls.__typename__} 'nargs' must be one of '?', '+', or '*'")
    if isinstance(nargs, int) and nargs < 0:
        raise ValueError(f"{cls.__typename__} 'nargs' cannot be negative")

    if not isinstance(separator := metadata["separator"], str | UnsetType):
        raise TypeError(f"{cls.__typename__} 'separator' must be a string")
    if isinstance(separator, str):
        if len(separator) != 1:
            raise ValueError(f"{cls.__typename__} 'separator' must be a single character")
        if nargs == 0:
            raise TypeError(f"{cls.__typename__} without values cannot specify a 'separator'")
    metadata["separator"] = coalesce(separator)


def _sanitize_help(cls, metadata, /):
    """
    Validate metavar/descr (trimmed, non-empty) and default them to None.
    """
    for name, kinds in (("metavar", str | UnsetType), ("descr", str | Text | UnsetType)):
        if not isinstance(object := metadata[name], kinds):
            raise TypeError(f"{cls.__typename__} {name!r} must be a string")
        elif isinstance(object, str) and not (object := object.strip()):
            raise ValueError(f"{cls.__typename__} {name!r} cannot be empty")
        metadata[name] = coalesce(object)

    if metadata["metavar"] is not None and metadata["nargs"] == 0:
        raise TypeError(f"{cls.__typename__} without values cannot specify a 'metavar'")


class Option(metaclass=OptionType):
    """
    A declared option, and the value object for each parsed occurrence.

    The registry treats it as opaque apart from key, long_key, type and values.
    The parser fills values through add_value(); everyone else sees a copy.
    """

    __introspectable__ = (
        "key",
        "long_key",
        "type",
        "nargs",
        "separator",
        "required",
        "metavar",
        "descr",
        "values",
    )

    __displayable__ = (
        "key",
        "long_key",
        "type",
        "nargs",
        "required",
        "values",
    )

    def __init__(
            self,
            key=LONG_ONLY,
            /,
            long_key=Unset,
            type=ValueType.STRING,
            nargs=0,
            separator=Unset,
            required=False,
            metavar=Unset,
            descr=Unset,
            *,
            values=(),
    ):
        """
        Build an option descriptor.

        Parameters
        - key: str
          Short key, or LONG_ONLY (the default) when only a long key exists.
        - long_key: Unset | str
          Long key, without leading dashes.
        - type: ValueType | Callable[[str], Any]
          Tag passed to coerce() by OptionRegistry.get_option_object().
        - nargs: int | "?" | "+" | "*"
          Number of values an occurrence takes (0 means presence only).
        - separator: Unset | str
          Single character splitting each raw value into several values.
        - required: bool
          The parser fails when the option is absent.
        - metavar/descr: Unset | str
          Help metadata.
        - values: Iterable[str] (keyword-only)
          Initial values of this occurrence (mostly useful for tests and for
          callers that build registries by hand).
        """
        metadata = {
            "key": key,
            "long_key": long_key,
            "type": type,
            "nargs": nargs,
            "separator": separator,
            "required": bool(required),
            "metavar": metavar,
            "descr": descr,
        }
        cls = builtins.type(self)
        _sanitize_keys(cls, metadata)
        _sanitize_arity(cls, metadata)
        _sanitize_help(cls, metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

        self._values = []
        for value in values:
            self.add_value(value)

    @property
    def opt(self):
        """
        The key this option is registered under: key, or long_key for LONG_ONLY.
        """
        return self._long_key if self._key == LONG_ONLY else self._key

    @property
    def names(self):
        """
        Command-line spellings, short first (e.g., ("-f", "--file")).
        """
        names = []
        if self._key != LONG_ONLY:
            names.append("-" + self._key)
        if self._long_key is not None:
            names.append("--" + self._long_key)
        return tuple(names)

    def add_value(self, value, /):
        """
        Append a raw value, split on the separator when one is set.
        """
        if not isinstance(value, str):
            raise TypeError(f"{type(self).__typename__} values must be strings")
        if self._separator is None:
            self._values.append(value)
        else:
            self._values.extend(value.split(self._separator))

    def __replace__(self, *unused, **overrides):
        """
        Fresh occurrence with the same metadata (values are not carried over).
        """
        assert not unused, "positional arguments are not allowed"
        # sanitized None means "not given" and goes back in as Unset
        metadata = {
            name: Unset if (object := getattr(self, "_" + name)) is None else object
            for name in ("key", "long_key", "type", "nargs", "separator", "required", "metavar", "descr")
        } | overrides
        return type(self)(metadata.pop("key"), metadata.pop("long_key"), **metadata)


class Options(metaclass=OptionType):
    """
    Declared options, in insertion order, indexed by short and long key.

    Lookups accept "f", "-f", "file" and "--file". A bare or single-dash name is
    tried as a short key first and then as a long key; a double-dash name is
    only looked up as a long key.
    """

    __introspectable__ = ("options",)

    def __init__(self, *options):
        self._options = []
        self._shorts = {}
        self._longs = {}
        for option in options:
            self.add(option)

    def add(self, option, /):
        """
        Declare an option; returns it. Keys must be unique per namespace.
        """
        if not isinstance(option, Option):
            raise TypeError(f"{type(self).__typename__} entries must be options")
        if option.key != LONG_ONLY and option.key in self._shorts:
            raise ValueError(f"{type(self).__typename__} already declares '-{option.key}'")
        if option.long_key is not None and option.long_key in self._longs:
            raise ValueError(f"{type(self).__typename__} already declares '--{option.long_key}'")

        if option.key != LONG_ONLY:
            self._shorts[option.key] = option
        if option.long_key is not None:
            self._longs[option.long_key] = option
        self._options.append(option)
        return option

    @property
    def shorts(self):
        return MappingProxyType(self._shorts)

    @property
    def longs(self):
        return MappingProxyType(self._longs)

    @property
    def required(self):
        return tuple(option for option in self._options if option.required)

    def get(self, name, default=None, /):
        try:
            return self[name]
        except KeyError:
            return default

    def __getitem__(self, name, /):
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__typename__} keys must be strings")
        if name.startswith("--"):
            return self._longs[name[2:]]
        name = name.removeprefix("-")
        try:
            return self._shorts[name]
        except KeyError:
            return self._longs[name]

    def __contains__(self, name, /):
        return self.get(name) is not None

    def __iter__(self):
        return iter(self._options)

    def __len__(self):
        return len(self._options)


__all__ = (
    "LONG_ONLY",
    "Option",
    "Options",
)
