import sys

from rich.pretty import pprint

from cmdline import *
from cmdline.help import display

__prog__ = "demo"

options = Options(
    Option("f", "file", type=ValueType.FILE, nargs=1, required=True, descr="file to process"),
    Option("n", "count", type=ValueType.NUMBER, nargs=1, descr="how many times"),
    Option("D", nargs=1, separator="=", metavar="KEY=VALUE", descr="define a property"),
    Option("h", "help", descr="show this help and exit"),
    Option(long_key="debug", descr="print the parsed registry"),
)


if __name__ == '__main__':
    if {"-h", "--help"} & set(sys.argv[1:]):
        display(options, descr="Parse a command line into an option registry.")
        sys.exit(0)

    registry = Parser(options, shell=True, deferred=True).parse(sys.argv[1:])
    if registry.has_option("debug"):
        pprint(registry)
    pprint(registry.get_option_object("f"))
    pprint(registry.get_option_object("n"))
