"""
inparse parser: option registry, argv scanner and usage text.

Lifecycle
- build: add_option()/add_help_option() register options under every alias;
  an alias can belong to a single option.
- parse: parse(argv) walks argv once (argv[0] is the program name and is
  skipped), dispatching every alias to its option:
  • flag: set to True, or to the negation of its default when it has one;
  • single: the next token is the value; it must exist and must not be an alias;
  • compound: every following token up to the next alias (at least one).
  Then the help flag short-circuits with HelpRequested, and every required
  option with neither a value nor a default is reported as missing.
- query: get_value(name, type) by any alias, usage() for the synopsis.

Faults
- Every fault goes through Parser.trigger(), which applies the parser's
  rendering configuration: raised in library mode (default), printed with rich
  followed by sys.exit in shell mode.
"""
import copy
import difflib
from collections import deque
from collections.abc import Sequence

from .faults import *
from .options import BaseOption, FlagOption
from .utils import *


class Parser:
    """
    Flat registry of options and the argv scanner.

    Parameters
    - prog: Unset | str
      Program name in usage text and fault headers. Falls back to
      __main__.__prog__, then to the basename of sys.argv[0].
    - shell: bool
      Print faults and exit instead of raising (HelpRequested exits with 0).
    - fancy: bool
      Render faults inside rich panels (shell mode).
    - colorful: bool
      Apply the fault palettes (shell mode).
    """
    prog = mirror("prog")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")

    def __init__(self, prog=Unset, *, shell=False, fancy=False, colorful=False):
        if not isinstance(prog, str | Unset):
            raise TypeError("parser 'prog' must be a string")
        elif isinstance(prog, str) and not (prog := prog.strip()):
            raise ValueError("parser 'prog' cannot be empty")

        self._prog = prog
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)

        self._options = {}  # reference -> option, in registration order
        self._names = {}  # alias -> reference
        self._helper = Unset

    def __repr__(self):
        return "parser(prog=%r, options=%r)" % (self._prog, list(self._options))

    def __rich_repr__(self):
        yield "prog", self._prog
        yield "options", list(self._options.values())
        yield "shell", self._shell, False
        yield "fancy", self._fancy, False
        yield "colorful", self._colorful, False

    def __contains__(self, name):
        return name in self._names

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this parser's rendering configuration.

        Explicit options take precedence over the parser's own.
        """
        trigger(fault, **{
            "prog": progname(self._prog),
            "shell": self._shell,
            "fancy": self._fancy,
            "colorful": self._colorful,
        } | options)

    def add_option(self, factory, /):
        """
        Register an option, given as an instance or as a zero-argument factory.

        The parser keeps its own deep copy of the option: later changes to the
        given instance (or to whatever the factory returned) do not reach it,
        and the same instance can be registered by several parsers. Every alias
        is checked before anything is registered, so a collision leaves the
        registry untouched.
        """
        if isinstance(factory, BaseOption):
            option = factory
        elif callable(factory):
            option = factory()
        else:
            raise TypeError("add_option() argument must be an option or a callable returning one")
        if not isinstance(option, BaseOption):
            raise TypeError("add_option() factory must return an option")
        option = copy.deepcopy(option)

        if not (names := option.names):
            return self.trigger(NamelessOptionError(
                "Option has no names",
                hint="pass at least one name, e.g. %s(\"-x\", \"--example\")" % type(option).__name__,
            ))

        for name in names:
            if name in self._names:
                return self.trigger(DuplicatedNameError(
                    "Option already exists!",
                    hint="%r is already an alias of %s" % (name, self._names[name]),
                    option=name,
                ))

        self._options[reference := names[0]] = option
        self._names.update(dict.fromkeys(names, reference))
        return self

    def add_help_option(self):
        """
        Register the -h/--help flag; passing it makes parse() signal HelpRequested.
        """
        self.add_option(lambda: FlagOption("-h", "--help").add_description("Shows how to use the program.").add_default_value(False))
        self._helper = self._options["-h"]
        return self

    def get_value(self, name, type=Unset, /):
        """
        Return the value (or default) of the option registered under `name`.

        Errors
        - UnknownOptionError: no option has this alias.
        - MissingValueError / MismatchedTypeError: see BaseOption.get_value().
        """
        try:
            reference = self._names[name]
        except KeyError:
            suggestions = difflib.get_close_matches(str(name), self._names.keys(), 1)
            return self.trigger(UnknownOptionError(
                "The option %s was not assigned at the parser" % (name,),
                hint="did you mean %r?" % suggestions[0] if suggestions else Unset,
                option=name,
            ))
        try:
            return self._options[reference].get_value(type)
        except ParserException as fault:
            self.trigger(fault)

    def usage(self, prog=Unset, /):
        """
        Build the usage text.

        Format
        - "Usage: <prog>" followed, for each option in registration order, by
          " <ref placeholder>" when required or " [ref placeholder]" otherwise;
        - a blank line, then "<ref> -> <description>" for every described option;
        - a trailing blank line.
        """
        synopsis = "Usage: %s" % progname(coalesce(prog, self._prog))
        descriptions = ""
        for reference, option in self._options.items():
            if option.required:
                synopsis += " <%s%s>" % (reference, option.placeholder)
            else:
                synopsis += " [%s%s]" % (reference, option.placeholder)
            if option.description:
                descriptions += "%s -> %s\n" % (reference, option.description)
        return synopsis + "\n\n" + descriptions + "\n"

    def parse(self, argv, /):
        """
        Scan argv (argv[0] is skipped) and store every option value.

        Values set by a previous parse() are kept; a Parser is meant to parse
        a single command line.
        """
        if isinstance(argv, str) or not isinstance(argv, Sequence):
            raise TypeError("parse() argument must be a sequence of strings")
        if not all(isinstance(token, str) for token in argv):
            raise TypeError("parse() argument must only contain strings")

        tokens = deque(argv[1:])
        index = 1
        try:
            while tokens:
                token = tokens.popleft()
                option = self._resolve_token(token, index=index)
                if option.is_flag:
                    index += self._parse_flag(option)
                elif option.is_single:
                    index += self._parse_single(option, token, tokens, index=index)
                else:
                    index += self._parse_compound(option, token, tokens, index=index)
            self._finalize()
        except ParserException as fault:
            self.trigger(fault)
        return self

    def _resolve_token(self, token, *, index):
        try:
            return self._options[self._names[token]]
        except KeyError:
            pass

        suggestions = difflib.get_close_matches(token, self._names.keys(), 5)
        if suggestions:
            hint = "did you mean %r?" % suggestions[0]
        elif self._helper is not Unset:
            hint = "try '%s %s' to see all available options" % (progname(self._prog), self._helper.reference)
        else:
            hint = Unset
        raise InvalidArgumentsError(
            "Invalid arguments provided!",
            hint=hint,
            token=token,
            index=index,
            suggestions=suggestions,
        )

    def _parse_flag(self, option):
        option.set_value(not option.get_default_value() if option.has_default_value else True)
        return 1

    def _parse_single(self, option, token, tokens, *, index):
        """
        consume the value following `token`; returns how many argv entries were read.
        """
        if not tokens or tokens[0] in self._names:
            raise OptionValueRequiredError(
                "After the %s option should be an extra argument!" % token,
                hint="pass a value right after %s (for example: %s%s)" % (token, token, option.placeholder),
                option=option.reference,
                token=token,
                index=index,
            )
        option.set_value(tokens.popleft())
        return 2

    def _parse_compound(self, option, token, tokens, *, index):
        values = []
        while tokens and tokens[0] not in self._names:
            values.append(tokens.popleft())
        if not values:
            raise AtLeastOneValueRequiredError(
                "After the %s option should be at least an extra argument!" % token,
                hint="pass one or more values right after %s (for example: %s%s)" % (token, token, option.placeholder),
                option=option.reference,
                token=token,
                index=index,
            )
        option.set_value(values)
        return 1 + len(values)

    def _finalize(self):
        if self._helper is not Unset and self._helper.get_value():
            raise HelpRequested(self.usage())
        for reference, option in self._options.items():
            if option.required and not option.has_value and not option.has_default_value:
                raise MissingOptionError(
                    "Missing option %s" % reference,
                    hint="pass %s%s" % (reference, option.placeholder),
                    option=reference,
                )


__all__ = (
    "Parser",
)
