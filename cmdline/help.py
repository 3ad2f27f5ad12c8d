"""
Help rendering for an Options declaration (rich-based, color-aware).

    >>> from cmdline import Option, Options
    >>> from cmdline.help import display
    >>> display(Options(Option("f", "file", nargs=1, descr="input file")), "tool")

Palette keys (override any of them through __styles__ in __main__)
- usage-label, program-name, metavar, option-name, required-name
- argument-description, required-marker, panel-title

When colorful is False no style is applied at all.
"""
from collections import defaultdict

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .options import Options
from .utils import *


def _metavar(option):
    """
    Metavar shaped by arity: VALUE, [VALUE], VALUE [VALUE ...], [VALUE ...], VALUE VALUE.
    """
    metavar = option.metavar or (option.long_key or option.key).upper().replace("-", "_")
    match option.nargs:
        case 0:
            return ""
        case "?":
            return "[%s]" % metavar
        case "*":
            return "[%s ...]" % metavar
        case "+":
            return "%s [%s ...]" % (metavar, metavar)
        case int() as nargs:
            return " ".join([metavar] * nargs)


def render(options, /, prog=Unset, *, descr=Unset, colorful=True, fancy=False):
    """
    Build the help renderable for options.

    Parameters
    - options: Options
    - prog: Unset | str
      Program name for the usage line (defaults to __main__.__prog__ or "program").
    - descr: Unset | str (keyword-only)
      Short description printed under the usage line.
    - colorful / fancy: bool (keyword-only)
      Colors and panel chrome.

    Returns
    - rich renderable (Group, or Panel when fancy).
    """
    if not isinstance(options, Options):
        raise TypeError("render() argument must be an options collection")

    styles = defaultdict(str, {
        "usage-label": "bold #00E6FF",
        "program-name": "bold #FF4D94",
        "option-name": "bold #00E6FF",
        "required-name": "bold #22C55E",
        "metavar": "bold #FFD600",
        "argument-description": "#9CA3AF",
        "required-marker": "italic #F97316",
        "panel-title": "bold #FF4D94",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    prog = coalesce(prog, getattr(__import__("__main__"), "__prog__", "program"))

    usage = Text()
    usage.append("usage", styler("usage-label")).append(": ")
    usage.append(prog, styler("program-name"))
    for option in options.required:
        usage.append(" ")
        usage.append(option.names[0], styler("required-name"))
        if metavar := _metavar(option):
            usage.append(" ").append(metavar, styler("metavar"))
    if len(options) > len(options.required):
        usage.append(" [options]")

    table = Table(box=None, show_header=False, pad_edge=False, padding=(0, 2))
    table.add_column("names", no_wrap=True)
    table.add_column("descr")
    for option in options:
        names = Text(", ").join(
            Text(name, styler("required-name" if option.required else "option-name")) for name in option.names
        )
        if metavar := _metavar(option):
            names.append(" ").append(metavar, styler("metavar"))
        if isinstance(option.descr, Text):
            description = option.descr.copy()
        else:
            description = Text(option.descr or "", styler("argument-description"))
        if option.required:
            description.append(" (required)" if description else "(required)", styler("required-marker"))
        table.add_row(names, description)

    renders = [usage]
    if descr is not Unset:
        renders.extend([Text(""), descr if isinstance(descr, Text) else Text(descr)])
    if len(options):
        renders.extend([Text(""), table])

    if fancy:
        return Panel(Group(*renders), title=Text(prog, styler("panel-title")), title_align="left")
    return Group(*renders)


def display(options, /, prog=Unset, *, descr=Unset, colorful=True, fancy=False, stderr=False):
    """
    Print render(...) to the terminal (stdout, or stderr when stderr=True).
    """
    Console(stderr=stderr).print(render(options, prog, descr=descr, colorful=colorful, fancy=fancy))


__all__ = (
    "render",
    "display",
)
