"""
inparse faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every issue the parser
  can surface. Codes are grouped by domain to keep searches predictable.
- ParserException / ParserWarning: base types that carry message + options and
  know how to render themselves (rich) and how to surface themselves
  (raise, warn, or print-and-exit).
- trigger(): central entry point to surface any fault with runtime options.

Taxonomy
- ConfigurationError: the program built or queried the parser incorrectly
  (duplicated alias, missing transformation, wrong retrieval type, ...).
- ParsingError: the command line itself is wrong (unknown token, missing
  trailing value, constraint violation, missing required option, ...).
- HelpRequested: control flow rather than failure; it carries the usage text
  and, in shell mode, terminates the program successfully.

Integration
- Option and parser code raise faults directly. Parser.trigger() re-surfaces
  them with its rendering configuration (shell/fancy/colorful/prog).
- In non-shell mode, exceptions are raised and warnings go through
  warnings.warn; in shell mode, they are rendered via rich on stderr.
- str(fault) is always exactly the fault message.
"""
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce, progname

console = Console(stderr=True)
output = Console()


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - configuration (211xx)
      • DUPLICATED_NAME, NAMELESS_OPTION, UNKNOWN_OPTION,
        MISSING_TRANSFORMATION, MISSING_VALUE, MISMATCHED_TYPE
    - argument shape (221xx)
      • INVALID_ARGUMENTS, OPTION_VALUE_REQUIRED,
        AT_LEAST_ONE_VALUE_REQUIRED, MISSING_OPTION
    - values (231xx)
      • CONSTRAINT_VIOLATION, UNCASTABLE_VALUE
    - control flow (241xx)
      • HELP_REQUESTED
    - warnings (251xx)
      • REQUIRED_WITH_DEFAULT
    """
    # --- configuration errors (21xxx) ---
    DUPLICATED_NAME             = 21101
    NAMELESS_OPTION             = 21102
    UNKNOWN_OPTION              = 21103
    MISSING_TRANSFORMATION      = 21111
    MISSING_VALUE               = 21112
    MISMATCHED_TYPE             = 21113

    # --- argument-shape errors (22xxx) ---
    INVALID_ARGUMENTS           = 22101
    OPTION_VALUE_REQUIRED       = 22102
    AT_LEAST_ONE_VALUE_REQUIRED = 22103
    MISSING_OPTION              = 22104

    # --- value errors (23xxx) ---
    CONSTRAINT_VIOLATION        = 23101
    UNCASTABLE_VALUE            = 23102

    # --- control flow (24xxx) ---
    HELP_REQUESTED              = 24101

    # --- warnings (25xxx) ---
    REQUIRED_WITH_DEFAULT       = 25101

    def normalize(self):
        """
        label shown in fault headers.

        a program may define __codes__ (FaultCode -> label) in its __main__
        module; codes missing from it render as their number.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


_palettes = {
    "error": {
        "prog-name": "bold #E6E6F0",
        "code": "bold #00E5FF",
        "title": "bold #FF4DA6",
        "message": "#C8C8D0",
        "hint-arrow": "#9CE19C dim",
        "hint": "italic #9CE19C",
    },
    "warning": {
        "prog-name": "bold #E6E6F0",
        "code": "bold #FFB400",
        "title": "bold #FFC2E0",
        "message": "#D6D6DE",
        "hint-arrow": "#B8EFAF dim",
        "hint": "italic #B8EFAF",
    },
}


def _render(fault, palette, /):
    """
    build the rich renderable shared by exceptions and warnings.

    layout
    - header: "[ prog — code | Title ]"
    - body: the message, then an optional "→ hint" line
    - fancy: header becomes the title of a Panel wrapping the body
    """
    styles = defaultdict(str, _palettes[palette] | getattr(__import__("__main__"), "__styles__", {}))
    colorful = fault.options.get("colorful", False)

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style] if colorful else "")

    header = Text.assemble(
        "[ ",
        text(progname(fault.options.get("prog", Unset)), "prog-name"),
        " — ",
        text(fault.code.normalize() if fault.code else "-", "code"),
        " | ",
        text(fault.title.title(), "title"),
        " ]"
    )
    body = [text(fault.message, "message")]
    if hint := fault.options.get("hint"):
        body.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

    if fault.options.get("fancy", False):
        return Panel(Group(*body), title=header, title_align="left")
    return Group(header, *body)


class ParserException(Exception):
    """
    base type of every error raised by the parser.

    contract
    - message: the exact user-facing text (also what str() returns).
    - options: read-only mapping of context (code, title, hint, token, option,
      and rendering switches shell/fancy/colorful/prog).
    - subclasses declare their default code/title as class keywords:
        class MyError(ParsingError, code=FaultCode.X, title="short title"): ...
    """
    __faultcode__ = Unset
    __faulttitle__ = "parser error"

    def __init_subclass__(cls, /, code=Unset, title=Unset, **options):
        super().__init_subclass__(**options)
        cls.__faultcode__ = coalesce(code, cls.__faultcode__)
        cls.__faulttitle__ = coalesce(title, cls.__faulttitle__)

    def __init__(self, message=Unset, /, **options):
        if not isinstance(message, str | Unset):
            raise TypeError(f"{type(self).__name__} message must be a string")
        self.message = coalesce(message, "")
        self.options = MappingProxyType(options)
        super().__init__(self.message)

    @property
    def code(self):
        return self.options.get("code", type(self).__faultcode__)

    @property
    def title(self):
        return self.options.get("title", type(self).__faulttitle__)

    def __str__(self):
        return self.message

    def __rich__(self):
        return _render(self, "error")

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from self.__cause__
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        replaced = type(self)(self.message, **{**self.options, **overrides})
        replaced.__cause__ = self.__cause__
        return replaced.with_traceback(self.__traceback__)


class ConfigurationError(ParserException, title="configuration error"): ...
class DuplicatedNameError(ConfigurationError, code=FaultCode.DUPLICATED_NAME, title="duplicated option name"): ...
class NamelessOptionError(ConfigurationError, code=FaultCode.NAMELESS_OPTION, title="nameless option"): ...
class UnknownOptionError(ConfigurationError, code=FaultCode.UNKNOWN_OPTION, title="unknown option"): ...
class MissingTransformationError(ConfigurationError, code=FaultCode.MISSING_TRANSFORMATION, title="missing transformation"): ...
class MissingValueError(ConfigurationError, code=FaultCode.MISSING_VALUE, title="missing value"): ...
class MismatchedTypeError(ConfigurationError, code=FaultCode.MISMATCHED_TYPE, title="mismatched type"): ...


class ParsingError(ParserException, title="parsing error"): ...
class InvalidArgumentsError(ParsingError, code=FaultCode.INVALID_ARGUMENTS, title="invalid arguments"): ...
class OptionValueRequiredError(ParsingError, code=FaultCode.OPTION_VALUE_REQUIRED, title="option value required"): ...
class AtLeastOneValueRequiredError(ParsingError, code=FaultCode.AT_LEAST_ONE_VALUE_REQUIRED, title="at least one value required"): ...
class MissingOptionError(ParsingError, code=FaultCode.MISSING_OPTION, title="missing option"): ...
class ConstraintViolationError(ParsingError, code=FaultCode.CONSTRAINT_VIOLATION, title="constraint not satisfied"): ...
class UncastableValueError(ParsingError, code=FaultCode.UNCASTABLE_VALUE, title="uncastable value"): ...


class HelpRequested(ParserException, code=FaultCode.HELP_REQUESTED, title="usage"):
    """
    signal that the help flag was given; the message is the usage text.

    not a failure: in shell mode the usage is printed on stdout and the
    program exits with status 0. outside shell mode it is raised like any
    other fault so the caller decides what to do with the text.
    """

    @property
    def usage(self):
        return self.message

    def __rich__(self):
        usage = Text(self.message.rstrip("\n"))
        if self.options.get("fancy", False):
            return Panel(usage, title=progname(self.options.get("prog", Unset)), title_align="left")
        return usage

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        output.print(self)
        sys.exit(0)


class ParserWarning(Warning):
    """
    base type of every warning emitted by the parser.

    same message/options contract as ParserException; surfaced through
    warnings.warn outside shell mode, printed (without exiting) in shell mode.
    """
    __faultcode__ = Unset
    __faulttitle__ = "parser warning"

    def __init_subclass__(cls, /, code=Unset, title=Unset, **options):
        super().__init_subclass__(**options)
        cls.__faultcode__ = coalesce(code, cls.__faultcode__)
        cls.__faulttitle__ = coalesce(title, cls.__faulttitle__)

    def __init__(self, message=Unset, /, **options):
        if not isinstance(message, str | Unset):
            raise TypeError(f"{type(self).__name__} message must be a string")
        self.message = coalesce(message, "")
        self.options = MappingProxyType(options)
        super().__init__(self.message)

    @property
    def code(self):
        return self.options.get("code", type(self).__faultcode__)

    @property
    def title(self):
        return self.options.get("title", type(self).__faulttitle__)

    def __str__(self):
        return self.message

    def __rich__(self):
        return _render(self, "warning")

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=self.options.get("stacklevel", 4))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class RequiredWithDefaultWarning(ParserWarning, code=FaultCode.REQUIRED_WITH_DEFAULT, title="required option with default"): ...


def trigger(fault, /, **options):
    """
    copy `fault` with `options` merged in, then surface the copy.

    the copy decides how: raised or warned in library mode, printed (and, for
    errors, followed by sys.exit) in shell mode. any object with __replace__
    and __trigger__ methods is accepted.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() needs an object with __replace__ and __trigger__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "ParserException",
    "ConfigurationError",
    "DuplicatedNameError",
    "NamelessOptionError",
    "UnknownOptionError",
    "MissingTransformationError",
    "MissingValueError",
    "MismatchedTypeError",
    "ParsingError",
    "InvalidArgumentsError",
    "OptionValueRequiredError",
    "AtLeastOneValueRequiredError",
    "MissingOptionError",
    "ConstraintViolationError",
    "UncastableValueError",
    "HelpRequested",
    "ParserWarning",
    "RequiredWithDefaultWarning",
    "FaultCode",
    "trigger",
)
