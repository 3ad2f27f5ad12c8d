"""
cmdline option registry: the result of parsing a command line.

What it holds
- Every option occurrence the parser recognized, indexed by key. An option given
  twice is two occurrences; both are kept and their values are merged on lookup.
- Every distinct occurrence once, by identity, for whole-registry iteration.
- Leftover tokens (not options, not option values) in the order they were seen.

How keys work
- An occurrence is indexed under option.key, except when the key is the
  LONG_ONLY sentinel (a single space): then option.long_key is used instead.
  hasOption-style lookups therefore use the short key when one exists and the
  long key otherwise.

Absent vs empty
- get_option_values() returns None for an unknown key and ALSO for a known key
  whose occurrences carry no values. has_option() still tells them apart. This
  collapsing is deliberate and kept for compatibility with callers that test
  "values is None" to mean "no values".

Threading
- No locking. A registry is built by one parse and then read; sharing one
  across threads while it is being filled needs external synchronization.

Quick example
    >>> from cmdline import Option, OptionRegistry
    >>> registry = OptionRegistry()
    >>> registry.add_option(Option("x", nargs=1, values=["a"]))
    >>> registry.add_option(Option("x", nargs=2, values=["b", "c"]))
    >>> registry.add_arg("file.txt")
    >>> registry.get_option_values("x")
    ['a', 'b', 'c']
    >>> registry.get_args()
    ('file.txt',)
"""
from .options import LONG_ONLY
from .utils import *
from .values import coerce as _coerce


class OptionRegistry:
    """
    Parsed options and leftover arguments, queried by short or long key.

    Storage
    - _options: key -> list of occurrences (never an empty list).
    - _identities: id(occurrence) -> occurrence, insertion-ordered.
    - _args: leftover tokens.

    The two option maps are only written by add_option(), which keeps them in
    sync. There is no removal API.
    """

    def __init__(self, *, coerce=Unset):
        """
        Parameters
        - coerce: Unset | Callable[[str, Any], Any] (keyword-only)
          Value converter used by get_option_object(); defaults to
          cmdline.values.coerce.
        """
        self._options = {}
        self._identities = {}
        self._args = []
        self._coerce = coalesce(coerce, _coerce)

    def add_option(self, option, /):
        """
        Register a parsed occurrence under its effective key.

        The same instance added twice is indexed twice under its key but kept
        once in the identity map.
        """
        self._identities[id(option)] = option

        key = option.key
        if key == LONG_ONLY:
            key = option.long_key

        self._options.setdefault(key, []).append(option)

    def add_arg(self, arg, /):
        """
        Append a leftover token.
        """
        self._args.append(arg)

    def has_option(self, key, /):
        return str(key) in self._options

    def get_option_values(self, key, /):
        """
        Values of every occurrence of key, concatenated in registration order.

        Returns None when the key is unknown or when the concatenation is empty.
        """
        values = []
        for option in self._options.get(str(key), ()):
            values.extend(option.values)
        return values or None

    def get_option_value(self, key, default=None, /):
        """
        First value of key, stripped of surrounding whitespace, or default.

        Only the first value is ever returned; later values (of a repeated or
        multi-valued option) are reachable through get_option_values().
        """
        values = self.get_option_values(key)
        return values[0].strip() if values is not None else default

    def get_option_object(self, key, /):
        """
        First value of key converted with the type tag of its first occurrence.

        Returns None without calling the converter when there is no value.
        Converter errors (e.g., UncoercibleValueError) propagate unchanged.
        """
        if (value := self.get_option_value(key)) is None:
            return None
        return self._coerce(value, self._options[str(key)][0].type)

    def get_args(self):
        """
        Snapshot of the leftover tokens.
        """
        return tuple(self._args)

    def get_arg_list(self):
        """
        The leftover token list itself (same content and order as get_args()).
        """
        return self._args

    def get_options(self):
        """
        Snapshot of every distinct occurrence; order is not part of the contract.
        """
        return tuple(self._identities.values())

    def iterator(self):
        """
        A new iterator over the distinct occurrences (see get_options()).
        """
        return iter(tuple(self._identities.values()))

    __iter__ = iterator

    def __contains__(self, key, /):
        return self.has_option(key)

    def __len__(self):
        return len(self._identities)

    def __rich_repr__(self):
        yield "options", {key: [option.values for option in options] for key, options in self._options.items()}
        yield "args", list(self._args)

    def __repr__(self):
        return "option-registry(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


__all__ = (
    "OptionRegistry",
)
