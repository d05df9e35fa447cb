"""
inparse utilities shared by the constraint, option and parser layers.

Contents
- Unset: the "nothing given" marker. Options may legitimately default to None,
  so None cannot play that role. Unset is falsy, prints as "Unset", survives
  copy/pickle as itself, and its type cannot be extended.
- coalesce(object, default=None): Unset becomes `default`; anything else,
  including None, 0 and "", is returned untouched.
- rename(callable, name) and @rename(name): give generated transformations
  readable names (to_int, elements_to_float, ...) for tracebacks and reprs.
- mirror(name): property factory reading self._<name>; lists, dicts and sets
  are handed out as fresh copies so callers cannot reach internal state.
- conforms(value, type): isinstance() that also understands unions and
  parametrised builtins (list[str], tuple[int, ...], dict[str, int]).
- progname(prog=Unset): program name for usage text and fault headers.

Only the names in __all__ are meant for use outside the package.

    >>> coalesce(Unset, 8)
    8
    >>> conforms(["-v", "--verbose"], list[str])
    True
"""
import builtins
import functools
import os.path
import sys
import types
import typing
from collections.abc import Mapping, Sequence, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker.

    There is exactly one instance per interpreter; calling UnsetType() hands
    back that same object.
    """

    def __or__(self, other, /):
        """
        Allow `str | Unset` in isinstance() checks and annotations.
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("UnsetType cannot be subclassed")


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    Return `object`, or `default` when `object` is Unset.

    - coalesce(Unset, 1)   -> 1
    - coalesce(None, 1)    -> None
    - coalesce("", "x")    -> ""
    """
    if object is Unset:
        return default
    return object


def rename(*parameters):
    """
    Name a callable, directly or as a decorator.

    - rename(function, "to_int") returns `function` with __name__ and
      __qualname__ set to "to_int".
    - @rename("to_int") does the same to the decorated function.

    Anything else (non-callable target, non-string name, read-only builtin,
    wrong argument count) raises TypeError.
    """
    match parameters:
        case (name,):
            if not isinstance(name, str):
                raise TypeError("rename() name must be a string")
            return functools.partial(_apply_name, name=name)
        case (target, name):
            return _apply_name(target, name=name)
        case _:
            raise TypeError("rename() expects 1 or 2 arguments, got %d" % len(parameters))


def _apply_name(target, /, *, name):
    if not builtins.callable(target):
        raise TypeError("rename() target must be callable")
    if not isinstance(name, str):
        raise TypeError("rename() name must be a string")
    try:
        target.__name__ = name
        target.__qualname__ = name
    except (AttributeError, TypeError):
        raise TypeError("rename() cannot change the name of %r" % (target,)) from None
    return target


def _detached(object):
    """
    Copy lists, tuples, dicts and sets (recursively); return anything else as is.
    """
    match object:
        case str() | bytes():
            return object
        case Mapping():
            return {key: _detached(value) for key, value in object.items()}
        case Set():
            return {_detached(value) for value in object}
        case Sequence():
            return [_detached(value) for value in object]
        case _:
            return object


def mirror(name, /):
    """
    Build a read-only property over the private field "_<name>".
    """
    if not isinstance(name, str):
        raise TypeError("mirror() name must be a string")

    @rename(name)
    def getter(self):
        return _detached(getattr(self, "_" + name))

    return property(getter)


def conforms(value, type, /):
    """
    Check whether a value conforms to a (possibly parametrised) type.

    Supported forms
    - plain classes: isinstance(value, type)
    - typing.Any / object: always true
    - unions: int | None, typing.Optional[str], typing.Union[...]
    - list[T], set[T], frozenset[T]: the container type and every element
    - tuple[T, ...] and tuple[A, B]: variadic and fixed shapes
    - dict[K, V] (and other Mapping origins): keys and values

    Any other parametrised form is checked against its origin only.

    Examples
    - conforms(3, int)                 -> True
    - conforms(["1", 2], list[str])    -> False
    - conforms(None, int | None)       -> True
    """
    if type is typing.Any or type is object:
        return True

    origin = typing.get_origin(type)
    arguments = typing.get_args(type)

    if origin is typing.Union or origin is types.UnionType:
        return any(conforms(value, argument) for argument in arguments)
    if origin is None:
        if type is None:
            return value is None
        if isinstance(value, bool) and type is not bool:
            # bool is an int subclass; only bool itself (or object) accepts it
            return False
        return isinstance(value, type)
    if not isinstance(value, origin):
        return False
    if not arguments:
        return True

    if issubclass(origin, tuple):
        if len(arguments) == 2 and arguments[1] is Ellipsis:
            return all(conforms(element, arguments[0]) for element in value)
        return len(value) == len(arguments) and all(map(conforms, value, arguments))
    if issubclass(origin, Mapping):
        key, item = arguments
        return all(conforms(k, key) and conforms(v, item) for k, v in value.items())
    if issubclass(origin, (Sequence, Set)) and len(arguments) == 1:
        return all(conforms(element, arguments[0]) for element in value)
    return True


def progname(prog=Unset, /):
    """
    Resolve the program name shown in usage text and fault headers.

    Lookup order
    - the explicit `prog` argument, when provided;
    - a __prog__ attribute on the host application's __main__ module;
    - the basename of sys.argv[0] ("program" when that is empty).
    """
    if prog is not Unset:
        return prog
    try:
        return getattr(__import__("__main__"), "__prog__")
    except AttributeError:
        return os.path.basename(sys.argv[0] if sys.argv else "") or "program"


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "conforms",
    "progname",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
