"""
Tests for the shared utilities.

This module verifies:
- The Unset sentinel (singleton, falsy, printable, copy-stable, final).
- coalesce() only replaces Unset.
- rename() in function and decorator forms.
- mirror() exposes read-only copies of private fields.
- conforms() on plain, union and parametrised container types.
- progname() lookup order.
"""
import copy
import pickle
import sys
import unittest
from typing import Any
from unittest import TestCase

from inparse.utils import *


class UnsetTest(TestCase):
    """Semantic guarantees of the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsy(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)

    def testRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testCopyPreservesIdentity(self):
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testPicklePreservesIdentity(self):
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testFinal(self):
        with self.assertRaises(TypeError):
            class Sub(UnsetType):  # NOQA: F-841
                pass

    def testUnionWithUnset(self):
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("name", str | Unset)


class CoalesceTest(TestCase):
    """coalesce() replaces Unset and nothing else."""

    def testReplacesUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")

    def testDefaultsToNone(self):
        self.assertIsNone(coalesce(Unset))

    def testPreservesFalseyValues(self):
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertEqual(coalesce("", "x"), "")
        self.assertEqual(coalesce([], [1]), [])


class RenameTest(TestCase):
    """rename() sets __name__ and __qualname__."""

    def testFunctionForm(self):
        function = rename(lambda value: value, "identity")
        self.assertEqual(function.__name__, "identity")
        self.assertEqual(function.__qualname__, "identity")

    def testDecoratorForm(self):
        @rename("to_int")
        def transformation(value):
            return int(value)

        self.assertEqual(transformation.__name__, "to_int")
        self.assertEqual(transformation("3"), 3)

    def testRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            rename(3, "name")

    def testRejectsNonStringName(self):
        with self.assertRaises(TypeError):
            rename(lambda: None, 3)
        with self.assertRaises(TypeError):
            rename(3)

    def testRejectsBuiltins(self):
        with self.assertRaises(TypeError):
            rename(len, "size")

    def testArity(self):
        with self.assertRaises(TypeError):
            rename()


class MirrorTest(TestCase):
    """mirror() builds read-only properties returning copies."""

    class Holder:
        items = mirror("items")
        name = mirror("name")

        def __init__(self):
            self._items = ["a", "b"]
            self._name = "holder"

    def testReadsBackingField(self):
        holder = self.Holder()
        self.assertEqual(holder.items, ["a", "b"])
        self.assertEqual(holder.name, "holder")

    def testReturnsCopies(self):
        holder = self.Holder()
        holder.items.append("c")
        self.assertEqual(holder.items, ["a", "b"])

    def testReadOnly(self):
        holder = self.Holder()
        with self.assertRaises(AttributeError):
            holder.name = "other"

    def testRejectsNonString(self):
        with self.assertRaises(TypeError):
            mirror(3)


class ConformsTest(TestCase):
    """conforms() runtime checks."""

    def testPlainTypes(self):
        self.assertTrue(conforms(3, int))
        self.assertFalse(conforms("3", int))
        self.assertTrue(conforms(True, bool))

    def testBooleansAreNotIntegers(self):
        self.assertFalse(conforms(True, int))
        self.assertFalse(conforms(False, float | int))
        self.assertFalse(conforms([True], list[int]))
        self.assertTrue(conforms(True, bool | None))
        self.assertTrue(conforms(True, object))

    def testAnything(self):
        self.assertTrue(conforms(object(), Any))
        self.assertTrue(conforms(None, object))

    def testUnions(self):
        self.assertTrue(conforms(None, int | None))
        self.assertTrue(conforms(3, int | None))
        self.assertFalse(conforms("3", int | None))

    def testLists(self):
        self.assertTrue(conforms(["a", "b"], list[str]))
        self.assertFalse(conforms(["a", 2], list[str]))
        self.assertFalse(conforms(("a", "b"), list[str]))
        self.assertTrue(conforms([], list[int]))

    def testTuples(self):
        self.assertTrue(conforms((1, 2, 3), tuple[int, ...]))
        self.assertTrue(conforms((1, "a"), tuple[int, str]))
        self.assertFalse(conforms((1, "a", 2), tuple[int, str]))

    def testMappingsAndSets(self):
        self.assertTrue(conforms({"a": 1}, dict[str, int]))
        self.assertFalse(conforms({"a": "1"}, dict[str, int]))
        self.assertTrue(conforms({1, 2}, set[int]))
        self.assertFalse(conforms({1, "2"}, set[int]))


class PrognameTest(TestCase):
    """progname() lookup order."""

    def testExplicit(self):
        self.assertEqual(progname("exec"), "exec")

    def testMainAttribute(self):
        main = sys.modules["__main__"]
        missing = not hasattr(main, "__prog__")
        previous = getattr(main, "__prog__", None)
        main.__prog__ = "configured"
        try:
            self.assertEqual(progname(), "configured")
        finally:
            if missing:
                del main.__prog__
            else:
                main.__prog__ = previous


if __name__ == "__main__":
    unittest.main()
