r"""
inparse option variants and their value pipeline.

Overview
- Variants (a closed set; none of them can be subclassed)
  • FlagOption: zero-argument boolean switch, e.g. -v/--verbose.
  • SingleOption: consumes exactly one following token, e.g. -o FILE.
  • CompoundOption: greedily consumes one or more following tokens.
  BaseOption holds the shared state and cannot be instantiated directly.

- Builders (each returns the option itself for chaining)
  • add_names, add_description, add_default_value, be_required
  • add_constraint, transform_before_check
  • to / add_transformation, to_int, to_float, to_double
  • CompoundOption.elements_to

- Value pipeline (set_value)
  • the raw input must match the variant's raw type
    (flag: bool, single: str, compound: non-empty list of str);
  • check-then-transform (default): constraints see the raw input, then the
    transformation runs and the result is stored;
  • transform-then-check (after transform_before_check()): the transformation
    runs first and constraints see the transformed value;
  • with no transformation, the raw input must already conform to the declared
    type, otherwise MissingTransformationError;
  • the first failing constraint raises ConstraintViolationError; the value is
    stored only once every constraint passed.

- Introspection & representation
  • OptionType metaclass provides __typename__ ("flag-option", ...), stable
    __repr__/__rich_repr__ and read-only properties for every name listed in
    __introspectable__.

Quick example:
    >>> threads = SingleOption("-t", "--threads").to_int().add_default_value(1)
    >>> threads.set_value("8").get_value(int)
    8
"""
import builtins
import copy
import functools
import operator
import re

from .constraints import Constraint
from .faults import *
from .utils import *


class OptionType(type):
    """
    Metaclass shared by every option variant.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens),
      used in messages and representations.
    - Expose the names listed in __introspectable__ as read-only properties
      backed by "_<name>" fields (see mirror()).
    - Provide stable __repr__/__rich_repr__ implementations.
    - Seal classes declared with the `final=True` class keyword.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, /, final=False, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
            **options
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - flag-option(names=['-v', '--verbose'], description='', required=True, ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers.
            """
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        if final:
            @rename("__init_subclass__")
            def __init_subclass__(cls, **options):  # NOQA: F-841
                """
                Disallow subclassing of sealed option variants.
                """
                raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
            self.__init_subclass__ = classmethod(__init_subclass__)

        return self


def _typename(type, /):
    if isinstance(type, builtins.type):
        return type.__name__
    return repr(type)


def _caster(cast, name, /):
    """
    Internal: wrap a numeric constructor into a named transformation that
    reports unparsable tokens as UncastableValueError.

    Digit grouping ("4_2") is rejected even though int() and float() accept it.
    """

    @rename(name)
    def transformation(token):
        try:
            if "_" in token:
                raise ValueError("digit grouping is not accepted")
            return cast(token)
        except ValueError as exc:
            raise UncastableValueError(
                f"Value {token!r} cannot be converted to {cast.__name__}",
                token=token,
            ) from exc

    return transformation


class BaseOption(metaclass=OptionType):
    """
    State and pipeline shared by every option variant.

    Properties
    - names: ordered aliases; the first one is the reference name.
    - description: help text shown by Parser.usage() ("" hides the line).
    - required: whether the parser reports the option when it is absent.
      Defaults to True; add_default_value() turns it off.
    - placeholder: argument hint shown in usage text.
    - type: declared value type (Unset when undeclared).

    Variant contract
    - __rawtype__: type the raw input must conform to.
    - _placeholder: usage hint for the variant.
    - is_flag / is_single / is_compound: class-level dispatch constants.
    """
    __introspectable__ = (
        "names",
        "description",
        "required",
        "placeholder",
        "type",
    )
    __rawtype__ = object

    _placeholder = ""

    is_flag = False
    is_single = False
    is_compound = False

    def __init__(self, *names, type=Unset):
        if builtins.type(self) is BaseOption:
            raise TypeError(f"cannot instantiate {BaseOption.__typename__!r} directly, use a variant")

        self._names = []
        self._description = ""
        self._required = True
        self._value = Unset
        self._default = Unset
        self._transformation = Unset
        self._constraints = []
        self._transform_first = False
        self._type = type
        self.add_names(*names)

    def __deepcopy__(self, memo, /):
        """
        Copy names, constraints list, value and default; transformations and
        declared types are shared.
        """
        replica = copy.copy(self)
        memo[id(self)] = replica
        replica._names = list(self._names)
        replica._constraints = list(self._constraints)
        replica._value = copy.deepcopy(self._value, memo)
        replica._default = copy.deepcopy(self._default, memo)
        return replica

    @property
    def reference(self):
        """
        The first (canonical) name, used in messages and usage text.
        """
        if not self._names:
            raise NamelessOptionError(
                f"{builtins.type(self).__typename__} has no names",
                hint="pass at least one name to the constructor or to add_names()",
            )
        return self._names[0]

    @property
    def has_value(self):
        return self._value is not Unset

    @property
    def has_default_value(self):
        return self._default is not Unset

    @property
    def transforms_first(self):
        """
        Whether constraints run against the transformed value.
        """
        return self._transform_first

    def add_names(self, *names):
        """
        Append aliases, in order.

        Errors
        - TypeError: a name is not a string.
        - ValueError: a name is empty (after trimming) or repeated within this option.
        Duplicates across options are reported by the parser at registration.
        """
        accepted = []
        for name in names:
            if not isinstance(name, str):
                raise TypeError(f"{builtins.type(self).__typename__} names must be strings")
            elif not (name := name.strip()):
                raise ValueError(f"{builtins.type(self).__typename__} names cannot be empty-strings")
            elif name in self._names or name in accepted:
                raise ValueError(f"{builtins.type(self).__typename__} names cannot contain duplicates")
            accepted.append(name)
        self._names.extend(accepted)
        return self

    def add_description(self, description, /):
        if not isinstance(description, str):
            raise TypeError(f"{builtins.type(self).__typename__} description must be a string")
        self._description = description.strip()
        return self

    def add_default_value(self, value, /):
        """
        Store a default and make the option optional.

        The default is returned by get_value() when nothing was parsed. It never
        goes through constraints or transformations.
        """
        self._default = value
        self._required = False
        return self

    def be_required(self, required=True, /):
        """
        Set whether the option must be given.

        Requiring an option that already has a default is allowed but pointless:
        its default still satisfies the missing-option check. A
        RequiredWithDefaultWarning is emitted in that case.
        """
        if not isinstance(required, bool):
            raise TypeError(f"{builtins.type(self).__typename__} required flag must be a boolean")
        if required and self.has_default_value:
            trigger(RequiredWithDefaultWarning(
                f"Option {self._names[0] if self._names else builtins.type(self).__typename__} "
                f"is required but has a default value",
                hint="the default value still satisfies the missing-option check",
            ))
        self._required = required
        return self

    def add_constraint(self, constraint, message="", /, type=Unset):
        """
        Register a constraint, evaluated in registration order.

        Accepts either a ready Constraint, or a predicate with an optional
        message and declared value type (the type the constraint will see:
        the raw input, or the transformed value after transform_before_check()).
        """
        if isinstance(constraint, Constraint):
            if message or type is not Unset:
                raise TypeError(f"{builtins.type(self).__typename__} cannot override the message or type of a constraint")
        else:
            constraint = Constraint(constraint, message, type=type)
        self._constraints.append(constraint)
        return self

    def transform_before_check(self):
        """
        Switch the pipeline to transform-then-check (one-way).
        """
        self._transform_first = True
        return self

    def to(self, transformation, /, type=Unset):
        """
        Install the transformation from raw input to the stored value.

        `type` declares the resulting value type; when given, every
        transformed value must conform to it.
        """
        if not callable(transformation):
            raise TypeError(f"{builtins.type(self).__typename__} transformation must be callable")
        self._transformation = transformation
        self._type = coalesce(type, self._type)
        return self

    def add_transformation(self, transformation, /, type=Unset):
        """
        Same as to().
        """
        return self.to(transformation, type=type)

    def to_int(self):
        raise NotImplementedError

    def to_float(self):
        raise NotImplementedError

    def to_double(self):
        """
        Same as to_float() (Python floats are double precision).
        """
        return self.to_float()

    def _admit(self, raw, /):
        if not conforms(raw, builtins.type(self).__rawtype__):
            raise MismatchedTypeError(
                f"Option {self.reference} expects raw input of type {_typename(builtins.type(self).__rawtype__)} "
                f"but received {builtins.type(raw).__name__}",
                option=self.reference,
                value=raw,
            )
        return raw

    def _transform(self, raw, /):
        if self._transformation is Unset:
            if self._type is not Unset and not conforms(raw, self._type):
                raise MissingTransformationError(
                    f"Option {self.reference} declares values of type {_typename(self._type)} "
                    f"but has no transformation from {builtins.type(raw).__name__}",
                    hint="install one with to(), to_int(), to_float() or to_double()",
                    option=self.reference,
                )
            return raw
        value = self._transformation(raw)
        if self._type is not Unset and not conforms(value, self._type):
            raise MismatchedTypeError(
                f"Option {self.reference} transformation produced {builtins.type(value).__name__} "
                f"instead of {_typename(self._type)}",
                option=self.reference,
                value=value,
            )
        return value

    def _check(self, value, /):
        for constraint in self._constraints:
            if not constraint(value):
                raise ConstraintViolationError(
                    constraint.message or "Constraint not satisfied.",
                    option=self.reference,
                    value=value,
                )

    def set_value(self, raw, /):
        """
        Run raw input through the pipeline and store the result.

        Nothing is stored when any step fails.
        """
        raw = self._admit(raw)
        if self._transform_first:
            value = self._transform(raw)
            self._check(value)
        else:
            self._check(raw)
            value = self._transform(raw)
        self._value = value
        return self

    def _retrieve(self, value, type, /):
        if type is not Unset and not conforms(value, type):
            raise MismatchedTypeError(
                f"Option {self.reference} holds a value of type {builtins.type(value).__name__}, "
                f"not {_typename(type)}",
                option=self.reference,
                value=value,
            )
        if isinstance(value, list):
            return list(value)
        return value

    def get_value(self, type=Unset, /):
        """
        Return the parsed value, else the default value.

        Errors
        - MissingValueError: neither a value nor a default is present.
        - MismatchedTypeError: `type` is given and the value does not conform.
        """
        if not self.has_value:
            return self.get_default_value(type)
        return self._retrieve(self._value, type)

    def get_default_value(self, type=Unset, /):
        if not self.has_default_value:
            raise MissingValueError("No default value", option=self._names[0] if self._names else Unset)
        return self._retrieve(self._default, type)


class FlagOption(BaseOption, final=True):
    """
    Zero-argument boolean switch.

    The parser sets it to True when given, or to the negation of its default
    when it has one (a flag defaulting to True becomes False).
    """
    __rawtype__ = bool

    _placeholder = ""

    is_flag = True

    def to_int(self):
        return self.to(rename(lambda value: int(value), "to_int"), type=int)

    def to_float(self):
        return self.to(rename(lambda value: float(value), "to_float"), type=float)


class SingleOption(BaseOption, final=True):
    """
    Option consuming exactly one following token.
    """
    __rawtype__ = str

    _placeholder = " value"

    is_single = True

    def to_int(self):
        return self.to(_caster(int, "to_int"), type=int)

    def to_float(self):
        return self.to(_caster(float, "to_float"), type=float)


class CompoundOption(BaseOption, final=True):
    """
    Option consuming every following token up to the next alias.

    The raw input is a non-empty list of strings. to() receives the whole list;
    elements_to() and the numeric conversions apply to every element and
    produce a list of the same length.
    """
    __rawtype__ = list[str] | tuple[str, ...]

    _placeholder = " value1 value2 ..."

    is_compound = True

    def elements_to(self, transformation, /, type=Unset):
        """
        Install an element-wise transformation; `type` declares the element type.
        """
        if not callable(transformation):
            raise TypeError(f"{builtins.type(self).__typename__} transformation must be callable")

        @rename("elements_to_" + getattr(transformation, "__name__", "value").removeprefix("to_"))
        def each(values):
            return [transformation(value) for value in values]

        return self.to(each, type=list[type] if type is not Unset else Unset)

    def to_int(self):
        return self.elements_to(_caster(int, "to_int"), type=int)

    def to_float(self):
        return self.elements_to(_caster(float, "to_float"), type=float)

    def _admit(self, raw, /):
        raw = list(super()._admit(raw))
        if not raw:
            raise AtLeastOneValueRequiredError(
                f"After the {self.reference} option should be at least an extra argument!",
                option=self.reference,
            )
        return raw


__all__ = (
    "BaseOption",
    "FlagOption",
    "SingleOption",
    "CompoundOption",
)
