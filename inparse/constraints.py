"""
inparse constraints: named predicates gating whether a value may be accepted.

Overview
- Constraint(predicate, message="", type=Unset)
  • Immutable pair of a predicate and the message shown when it fails.
  • Optional declared value type: calling the constraint with a value that does
    not conform to it is a configuration error (MismatchedTypeError), never a
    silent False.
  • Constraints only report pass/fail. The option that owns them decides what
    a failure means (it raises ConstraintViolationError with the message).
  • Exceptions raised by the predicate itself propagate unchanged.

- Ready-made factories
  • choices(*values): value must be one of the given values.
  • between(lower, upper): lower <= value <= upper.
  • matching(pattern): the whole string matches a regular expression.
  • length(minimum=0, maximum=Unset): len(value) within bounds.
  Each accepts message= to replace its default message.

Quick example:
    >>> even = Constraint(lambda value: value % 2 == 0, "The value must be even", type=int)
    >>> even(4), even(3)
    (True, False)
"""
import builtins
import re

from .faults import MismatchedTypeError
from .utils import *


def _typename(type, /):
    if isinstance(type, builtins.type):
        return type.__name__
    return repr(type)


class Constraint:
    """
    A named predicate over a value.

    Properties
    - predicate: the wrapped callable (value -> truthy/falsy).
    - message: text reported by the owning option on failure ("" means the
      option falls back to a generic message).
    - type: declared value type, or Unset when any value is accepted.
    """
    __slots__ = ("_predicate", "_message", "_type")

    predicate = mirror("predicate")
    message = mirror("message")
    type = mirror("type")

    def __init__(self, predicate, message="", /, type=Unset):
        if not callable(predicate):
            raise TypeError("constraint predicate must be callable")
        if not isinstance(message, str):
            raise TypeError("constraint message must be a string")
        self._predicate = predicate
        self._message = message
        self._type = type

    def __setattr__(self, name, value, /):
        if hasattr(self, name):
            raise AttributeError("constraint is immutable")
        object.__setattr__(self, name, value)

    def __call__(self, value, /):
        if self._type is not Unset and not conforms(value, self._type):
            raise MismatchedTypeError(
                "constraint expects a value of type %s but received %s" % (
                    _typename(self._type), builtins.type(value).__name__
                ),
                hint="declare the constraint for the value type it actually receives "
                     "(raw input, or transformed value after transform_before_check())",
                constraint=self,
                value=value,
            )
        return bool(self._predicate(value))

    def call(self, value, /):
        """
        Evaluate the constraint (same as calling it).
        """
        return self(value)

    def __repr__(self):
        name = getattr(self._predicate, "__qualname__", repr(self._predicate))
        if self._type is Unset:
            return f"constraint({name}, message={self._message!r})"
        return f"constraint({name}, message={self._message!r}, type={_typename(self._type)})"


def choices(*values, message=Unset):
    """
    Build a constraint accepting only the given values.

    Example
    - choices("fast", "safe") accepts "fast" and rejects "slow".
    """
    if not values:
        raise TypeError("choices() requires at least one value")

    @rename("choices")
    def predicate(value):
        return value in values

    return Constraint(predicate, coalesce(message, "Value must be one of: %s" % ", ".join(map(str, values))))


def between(lower, upper, /, *, message=Unset):
    """
    Build a constraint accepting values in the closed range [lower, upper].

    Typically registered after a numeric transformation:
        SingleOption("-t").to_int().transform_before_check().add_constraint(between(1, 64))
    """
    if lower > upper:
        raise ValueError("between() lower bound cannot be greater than the upper bound")

    @rename("between")
    def predicate(value):
        return lower <= value <= upper

    return Constraint(predicate, coalesce(message, "Value must be between %s and %s" % (lower, upper)))


def matching(pattern, /, *, message=Unset):
    """
    Build a constraint accepting strings fully matched by a regular expression.
    """
    compiled = re.compile(pattern)

    @rename("matching")
    def predicate(value):
        return compiled.fullmatch(value) is not None

    return Constraint(predicate, coalesce(message, "Value must match the pattern %s" % compiled.pattern), type=str)


def length(minimum=0, maximum=Unset, /, *, message=Unset):
    """
    Build a constraint on len(value), e.g. the number of compound values.
    """
    if minimum < 0:
        raise ValueError("length() minimum cannot be negative")
    if maximum is not Unset and maximum < minimum:
        raise ValueError("length() maximum cannot be lower than the minimum")

    @rename("length")
    def predicate(value):
        return minimum <= len(value) and (maximum is Unset or len(value) <= maximum)

    if maximum is Unset:
        default = "Value length must be at least %d" % minimum
    else:
        default = "Value length must be between %d and %d" % (minimum, maximum)
    return Constraint(predicate, coalesce(message, default))


__all__ = (
    "Constraint",
    "choices",
    "between",
    "matching",
    "length",
)
