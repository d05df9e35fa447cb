"""
Constraint behavioral tests.

Scope
- Constraint: evaluation, messages, declared value types, immutability,
  and propagation of predicate exceptions.
- Factories: choices, between, matching, length.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from inparse import Constraint, MismatchedTypeError, between, choices, length, matching


class TestConstraint(TestCase):
    """Behavioral tests for Constraint."""

    def testCallReportsPassAndFail(self):
        even = Constraint(lambda value: value % 2 == 0, "The value must be even")
        self.assertTrue(even(4))
        self.assertFalse(even(3))
        self.assertTrue(even.call(2))
        self.assertFalse(even.call(1))

    def testResultIsBoolean(self):
        truthy = Constraint(lambda value: value)
        self.assertIs(truthy("x"), True)
        self.assertIs(truthy(""), False)

    def testMessage(self):
        self.assertEqual(Constraint(bool, "must be set").message, "must be set")
        self.assertEqual(Constraint(bool).message, "")

    def testPredicateExceptionPropagates(self):
        def explode(value):
            raise RuntimeError("Error")

        with self.assertRaises(RuntimeError):
            Constraint(explode).call(0)

    def testDeclaredTypeMismatch(self):
        even = Constraint(lambda value: value % 2 == 0, "The value must be even", type=int)
        with self.assertRaises(MismatchedTypeError):
            even("4")

    def testDeclaredParametrisedType(self):
        short = Constraint(lambda values: len(values) < 3, type=list[str])
        self.assertTrue(short(["a"]))
        with self.assertRaises(MismatchedTypeError):
            short([1])

    def testBooleanIsNotAnInteger(self):
        positive = Constraint(lambda value: value > 0, type=int)
        self.assertTrue(positive(1))
        with self.assertRaises(MismatchedTypeError):
            positive(True)

    def testPredicateMustBeCallable(self):
        with self.assertRaises(TypeError):
            Constraint(3)

    def testMessageMustBeString(self):
        with self.assertRaises(TypeError):
            Constraint(bool, 3)

    def testImmutable(self):
        constraint = Constraint(bool, "message")
        with self.assertRaises(AttributeError):
            constraint.message = "other"
        with self.assertRaises(AttributeError):
            constraint._message = "other"

    def testRepr(self):
        self.assertIn("message='must be set'", repr(Constraint(bool, "must be set")))


class TestFactories(TestCase):
    """Behavioral tests for the ready-made constraints."""

    def testChoices(self):
        mode = choices("fast", "safe")
        self.assertTrue(mode("fast"))
        self.assertFalse(mode("slow"))
        self.assertEqual(mode.message, "Value must be one of: fast, safe")

    def testChoicesRequiresValues(self):
        with self.assertRaises(TypeError):
            choices()

    def testBetween(self):
        threads = between(1, 64)
        self.assertTrue(threads(1))
        self.assertTrue(threads(64))
        self.assertFalse(threads(0))
        self.assertFalse(threads(65))
        self.assertEqual(threads.message, "Value must be between 1 and 64")

    def testBetweenBoundsOrder(self):
        with self.assertRaises(ValueError):
            between(2, 1)

    def testMatching(self):
        identifier = matching(r"[a-z]+")
        self.assertTrue(identifier("abc"))
        self.assertFalse(identifier("abc1"))
        with self.assertRaises(MismatchedTypeError):
            identifier(3)

    def testLength(self):
        pair = length(2, 2)
        self.assertTrue(pair(["a", "b"]))
        self.assertFalse(pair(["a"]))
        self.assertTrue(length(1)(["a", "b", "c"]))
        self.assertEqual(length(1).message, "Value length must be at least 1")

    def testLengthBounds(self):
        with self.assertRaises(ValueError):
            length(-1)
        with self.assertRaises(ValueError):
            length(3, 2)

    def testCustomMessage(self):
        self.assertEqual(between(1, 2, message="pick one or two").message, "pick one or two")


if __name__ == "__main__":
    unittest.main()
