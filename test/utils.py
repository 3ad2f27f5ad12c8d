"""
Utilities behavioral tests (sentinel, coalesce, rename, mirror, wording helpers).

Scope
- Unset is a falsey singleton usable in PEP 604 unions and sealed against subclassing.
- coalesce only replaces Unset.
- rename in both call forms; mirror copies containers on read.
- pluralize and ordinal wording used by fault messages.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from cmdline.utils import Unset, UnsetType, coalesce, mirror, ordinal, pluralize, rename


class TestUnset(TestCase):
    """The not-provided sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalseyAndDistinctFromNone(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertEqual(repr(Unset), "Unset")

    def testUnion(self):
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("x", str | UnsetType)
        self.assertNotIsInstance(1, str | Unset)

    def testSealed(self):
        with self.assertRaises(TypeError):
            type("Subclass", (UnsetType,), {})


class TestCoalesce(TestCase):
    """coalesce keeps every value except Unset."""

    def testUnsetReplaced(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testFalseyValuesKept(self):
        for value in (None, 0, "", []):
            self.assertIs(coalesce(value, "fallback"), value)


class TestRename(TestCase):
    """rename(callable, name) and @rename(name)."""

    def testDirectForm(self):
        function = rename(lambda: None, "named")
        self.assertEqual(function.__name__, "named")
        self.assertEqual(function.__qualname__, "named")

    def testDecoratorForm(self):
        @rename("other")
        def function():
            pass

        self.assertEqual(function.__name__, "other")

    def testValidation(self):
        with self.assertRaises(TypeError):
            rename(1, "name")
        with self.assertRaises(TypeError):
            rename(lambda: None, 1)
        with self.assertRaises(TypeError):
            rename()


class TestMirror(TestCase):
    """mirror exposes private fields read-only and detached."""

    class Holder:
        values = mirror("values")
        table = mirror("table")
        name = mirror("name")

        def __init__(self):
            self._values = ("a", ["b"])
            self._table = {"k": ["v"]}
            self._name = "holder"

    def testSequencesCopied(self):
        holder = self.Holder()
        values = holder.values
        self.assertEqual(values, ["a", ["b"]])
        values[1].append("c")
        self.assertEqual(holder.values, ["a", ["b"]])

    def testMappingsCopied(self):
        holder = self.Holder()
        holder.table["k"].append("w")
        self.assertEqual(holder.table, {"k": ["v"]})

    def testStringsUntouched(self):
        self.assertEqual(self.Holder().name, "holder")

    def testReadOnly(self):
        with self.assertRaises(AttributeError):
            self.Holder().name = "other"

    def testNameMustBeString(self):
        with self.assertRaises(TypeError):
            mirror(1)


class TestWording(TestCase):
    """pluralize and ordinal."""

    def testPluralize(self):
        self.assertEqual(pluralize("value"), "values")
        self.assertEqual(pluralize("option entry"), "option entries")
        self.assertEqual(pluralize("Switch"), "Switches")
        self.assertEqual(pluralize("KEY"), "KEYS")
        self.assertEqual(pluralize("day"), "days")

    def testOrdinalSpelled(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(10), "tenth")

    def testOrdinalSuffixes(self):
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(23), "23rd")
        self.assertEqual(ordinal(24), "24th")
        self.assertEqual(ordinal(111), "111th")
        self.assertEqual(ordinal(112), "112th")


if __name__ == '__main__':
    unittest.main()
