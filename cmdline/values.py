"""
Value coercion: turn an option's raw string into a typed Python object.

An option carries a type tag that is opaque to the registry; coerce() is the
one place that interprets it. A tag is either a ValueType member or any
callable taking the raw string (int, float, a custom converter, ...).

    >>> coerce("42", ValueType.NUMBER)
    42
    >>> coerce("2.5", float)
    2.5

Conversion failures raise UncoercibleValueError chained to the original
exception. Unsupported tags are programmer errors and raise TypeError.
"""
import datetime
import importlib
import os
import pathlib
from enum import Enum
from urllib.parse import urlsplit

from .faults import FaultCode, UncoercibleValueError, getdoc


class ValueType(Enum):
    """
    Built-in type tags understood by coerce().
    """
    STRING = "string"
    OBJECT = "object"
    NUMBER = "number"
    DATE = "date"
    CLASS = "class"
    EXISTING_FILE = "existing-file"
    FILE = "file"
    FILES = "files"
    URL = "url"


def _number(value):
    # integral first, then anything float() accepts (fractions, exponents)
    try:
        return int(value)
    except ValueError:
        return float(value)


def _resolve(value):
    """
    Import "package.module:attribute" or "package.module.attribute".
    """
    if ":" in value:
        module, _, qualname = value.partition(":")
    else:
        module, _, qualname = value.rpartition(".")
    if not module or not qualname:
        raise ValueError(f"{value!r} is not a dotted path")
    object = importlib.import_module(module)
    for name in qualname.split("."):
        object = getattr(object, name)
    return object


def _instantiate(value):
    cls = _resolve(value)
    if not isinstance(cls, type):
        raise TypeError(f"{value!r} is not a class")
    return cls()


def _existing(value):
    path = pathlib.Path(value)
    if not path.is_file():
        raise FileNotFoundError(f"no such file: {value!r}")
    return path


def _files(value):
    return [pathlib.Path(part) for part in value.split(os.pathsep) if part]


def _url(value):
    url = urlsplit(value)
    if not url.scheme or not url.netloc:
        raise ValueError(f"{value!r} is not an absolute url")
    return url


_converters = {
    ValueType.STRING: str,
    ValueType.OBJECT: _instantiate,
    ValueType.NUMBER: _number,
    ValueType.DATE: datetime.datetime.fromisoformat,
    ValueType.CLASS: _resolve,
    ValueType.EXISTING_FILE: _existing,
    ValueType.FILE: pathlib.Path,
    ValueType.FILES: _files,
    ValueType.URL: _url,
}


def coerce(value, type=ValueType.STRING, /):
    """
    Convert a raw option value according to a type tag.

    Parameters
    - value: str
      The raw (already trimmed) option value.
    - type: ValueType | Callable[[str], Any]
      The tag of the first occurrence of the option.

    Returns
    - the converted object (see ValueType for the built-in conversions).

    Raises
    - TypeError: the tag is neither a ValueType nor callable.
    - UncoercibleValueError: the converter rejected the value.
    """
    if isinstance(type, ValueType):
        converter = _converters[type]
        label = type.value
    elif callable(type):
        converter = type
        label = getattr(type, "__name__", repr(type))
    else:
        raise TypeError(f"unsupported value type {type!r}")

    try:
        return converter(value)
    except (ValueError, TypeError, ArithmeticError, ImportError, AttributeError, OSError) as exception:
        raise UncoercibleValueError(
            "cannot convert %r to %s" % (value, label),
            title="uncoercible value",
            code=FaultCode.UNCOERCIBLE_VALUE,
            hint="pass a valid %s value" % label,
            docs=getdoc(FaultCode.UNCOERCIBLE_VALUE),
            value=value,
            type=type,
        ) from exception


__all__ = (
    "ValueType",
    "coerce",
)
