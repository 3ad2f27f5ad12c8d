"""
OptionRegistry behavioral tests.

Scope
- Presence, values and first-value queries by short key, long key (LONG_ONLY) and absent key.
- Merging of repeated occurrences, trimming of the first value only.
- Absent vs empty collapsing in get_option_values (kept on purpose).
- Identity-based deduplication in get_options()/iterator().
- Leftover argument order and the two leftover views.
- get_option_object delegation to the converter.

Conventions
- Test method names follow CamelCase per project convention.
- Options are built through the public Option descriptor with keyword 'values'.
"""
import unittest
from unittest import TestCase

from cmdline import LONG_ONLY, Option, OptionRegistry, UncoercibleValueError, ValueType


class TestAbsentKeys(TestCase):
    """Queries for keys that were never registered."""

    def setUp(self):
        self.registry = OptionRegistry()
        self.registry.add_option(Option("f", nargs=1, values=["1"]))

    def testHasOptionIsFalse(self):
        self.assertFalse(self.registry.has_option("z"))
        self.assertNotIn("z", self.registry)

    def testValuesAreNone(self):
        self.assertIsNone(self.registry.get_option_values("z"))

    def testValueIsNone(self):
        self.assertIsNone(self.registry.get_option_value("z"))

    def testValueFallsBackToDefault(self):
        self.assertEqual(self.registry.get_option_value("z", "fallback"), "fallback")

    def testObjectIsNoneWithoutCallingConverter(self):
        calls = []
        registry = OptionRegistry(coerce=lambda value, type: calls.append(value))
        self.assertIsNone(registry.get_option_object("z"))
        self.assertEqual(calls, [])


class TestSingleOption(TestCase):
    """One occurrence with two values."""

    def setUp(self):
        self.registry = OptionRegistry()
        self.registry.add_option(Option("f", nargs=2, values=["1", "2"]))

    def testHasOption(self):
        self.assertTrue(self.registry.has_option("f"))
        self.assertIn("f", self.registry)

    def testValues(self):
        self.assertEqual(self.registry.get_option_values("f"), ["1", "2"])

    def testFirstValue(self):
        self.assertEqual(self.registry.get_option_value("f"), "1")

    def testDefaultIgnoredWhenPresent(self):
        self.assertEqual(self.registry.get_option_value("f", "fallback"), "1")

    def testValuesAreACopy(self):
        self.registry.get_option_values("f").append("3")
        self.assertEqual(self.registry.get_option_values("f"), ["1", "2"])


class TestRepeatedOption(TestCase):
    """Repeated registration under one key concatenates in call order."""

    def testConcatenationOrder(self):
        registry = OptionRegistry()
        registry.add_option(Option("x", nargs=1, values=["a"]))
        registry.add_option(Option("x", nargs=2, values=["b", "c"]))
        self.assertEqual(registry.get_option_values("x"), ["a", "b", "c"])

    def testFirstValueComesFromFirstOccurrence(self):
        registry = OptionRegistry()
        registry.add_option(Option("x", nargs=1, values=["a"]))
        registry.add_option(Option("x", nargs=1, values=["b"]))
        self.assertEqual(registry.get_option_value("x"), "a")

    def testStructurallyEqualOccurrencesStayDistinct(self):
        registry = OptionRegistry()
        first = Option("x", nargs=1, values=["a"])
        second = Option("x", nargs=1, values=["a"])
        registry.add_option(first)
        registry.add_option(second)
        self.assertEqual(len(registry.get_options()), 2)
        self.assertEqual(registry.get_option_values("x"), ["a", "a"])


class TestLongOnlyKey(TestCase):
    """The single-space short key makes the long key the lookup key."""

    def setUp(self):
        self.registry = OptionRegistry()
        self.registry.add_option(Option(LONG_ONLY, "verbose", nargs=1, values=["true"]))

    def testLongKeyIsPresent(self):
        self.assertTrue(self.registry.has_option("verbose"))

    def testSentinelIsNotPresent(self):
        self.assertFalse(self.registry.has_option(" "))

    def testValueByLongKey(self):
        self.assertEqual(self.registry.get_option_value("verbose"), "true")

    def testShortKeyWinsWhenPresent(self):
        registry = OptionRegistry()
        registry.add_option(Option("v", "verbose"))
        self.assertTrue(registry.has_option("v"))
        self.assertFalse(registry.has_option("verbose"))


class TestTrimming(TestCase):
    """Only the first value returned by get_option_value is trimmed."""

    def setUp(self):
        self.registry = OptionRegistry()
        self.registry.add_option(Option("t", nargs=2, values=[" x ", " y "]))

    def testFirstValueTrimmed(self):
        self.assertEqual(self.registry.get_option_value("t"), "x")

    def testValuesUntouched(self):
        self.assertEqual(self.registry.get_option_values("t"), [" x ", " y "])


class TestEmptyValues(TestCase):
    """A registered option without values is present but has no values."""

    def setUp(self):
        self.registry = OptionRegistry()
        self.registry.add_option(Option("q"))

    def testPresent(self):
        self.assertTrue(self.registry.has_option("q"))

    def testEmptyCollapsesToNone(self):
        self.assertIsNone(self.registry.get_option_values("q"))

    def testValueIsDefault(self):
        self.assertIsNone(self.registry.get_option_value("q"))
        self.assertEqual(self.registry.get_option_value("q", "d"), "d")


class TestIdentity(TestCase):
    """get_options()/iterator() enumerate each distinct occurrence once."""

    def testEveryOccurrenceOnce(self):
        registry = OptionRegistry()
        occurrences = [
            Option("a", nargs=1, values=["1"]),
            Option("a", nargs=1, values=["2"]),
            Option(LONG_ONLY, "bee"),
        ]
        for occurrence in occurrences:
            registry.add_option(occurrence)
        self.assertCountEqual(map(id, registry.get_options()), map(id, occurrences))
        self.assertCountEqual(map(id, registry.iterator()), map(id, occurrences))

    def testSameInstanceAddedTwice(self):
        registry = OptionRegistry()
        occurrence = Option("a", nargs=1, values=["1"])
        registry.add_option(occurrence)
        registry.add_option(occurrence)
        self.assertEqual(len(registry.get_options()), 1)
        self.assertEqual(len(registry), 1)
        # indexed twice under its key, so its values show up twice
        self.assertEqual(registry.get_option_values("a"), ["1", "1"])

    def testIteratorIsRestartable(self):
        registry = OptionRegistry()
        registry.add_option(Option("a"))
        registry.add_option(Option("b"))
        self.assertEqual(len(list(registry.iterator())), 2)
        self.assertEqual(len(list(registry.iterator())), 2)
        self.assertEqual(len(list(registry)), 2)

    def testGetOptionsIsSnapshot(self):
        registry = OptionRegistry()
        registry.add_option(Option("a"))
        snapshot = registry.get_options()
        registry.add_option(Option("b"))
        self.assertEqual(len(snapshot), 1)
        self.assertEqual(len(registry.get_options()), 2)


class TestArgs(TestCase):
    """Leftover arguments keep their order and are not deduplicated."""

    def setUp(self):
        self.registry = OptionRegistry()
        for arg in ("foo", "bar", "foo"):
            self.registry.add_arg(arg)

    def testArgsOrder(self):
        self.assertEqual(self.registry.get_args(), ("foo", "bar", "foo"))

    def testArgListMatchesArgs(self):
        self.assertEqual(tuple(self.registry.get_arg_list()), self.registry.get_args())

    def testArgsSnapshot(self):
        snapshot = self.registry.get_args()
        self.registry.add_arg("baz")
        self.assertEqual(snapshot, ("foo", "bar", "foo"))

    def testEmptyRegistry(self):
        registry = OptionRegistry()
        self.assertEqual(registry.get_args(), ())
        self.assertEqual(registry.get_arg_list(), [])
        self.assertEqual(registry.get_options(), ())


class TestOptionObject(TestCase):
    """get_option_object converts the first value with the first occurrence's tag."""

    def testDefaultConverter(self):
        registry = OptionRegistry()
        registry.add_option(Option("n", type=ValueType.NUMBER, nargs=1, values=[" 42 "]))
        self.assertEqual(registry.get_option_object("n"), 42)

    def testFirstOccurrenceTypeWins(self):
        seen = []
        registry = OptionRegistry(coerce=lambda value, type: seen.append((value, type)) or value)
        registry.add_option(Option("n", type=int, nargs=1, values=["1"]))
        registry.add_option(Option("n", type=float, nargs=1, values=["2"]))
        self.assertEqual(registry.get_option_object("n"), "1")
        self.assertEqual(seen, [("1", int)])

    def testConverterErrorPropagates(self):
        registry = OptionRegistry()
        registry.add_option(Option("n", type=ValueType.NUMBER, nargs=1, values=["many"]))
        with self.assertRaises(UncoercibleValueError):
            registry.get_option_object("n")

    def testNoValueSkipsConverter(self):
        calls = []
        registry = OptionRegistry(coerce=lambda value, type: calls.append(value))
        registry.add_option(Option("q"))
        self.assertIsNone(registry.get_option_object("q"))
        self.assertEqual(calls, [])


class TestIdempotence(TestCase):
    """Getters return equal results when nothing was added in between."""

    def testRepeatedReads(self):
        registry = OptionRegistry()
        registry.add_option(Option("x", nargs=2, values=["a", "b"]))
        registry.add_arg("rest")
        for getter in (
            lambda: registry.has_option("x"),
            lambda: registry.get_option_values("x"),
            lambda: registry.get_option_value("x"),
            lambda: registry.get_args(),
            lambda: registry.get_options(),
        ):
            self.assertEqual(getter(), getter())


class TestRepresentation(TestCase):
    """Debugging representations."""

    def testRepr(self):
        registry = OptionRegistry()
        registry.add_option(Option("x", nargs=1, values=["a"]))
        registry.add_arg("rest")
        self.assertEqual(repr(registry), "option-registry(options={'x': [['a']]}, args=['rest'])")


if __name__ == '__main__':
    unittest.main()
