"""
Argot parser: declare the command line in tree order, bind values as you go.

What this module provides
- Parser: one exclusively owned, mutable context. Every binding call
  (arg, flag, count, list, positional, positional_list, subcommand, group,
  done) resolves its declaration against the token stream exactly once and
  returns the parser so calls chain.

Core ideas
- Consumption: a matched token is claimed and never inspected again; later
  declarations only see what is left.
- Scope: subcommands open levels, done() closes them. Declarations inside a
  branch that was not taken are visited but inert; once the deepest committed
  branch is closed, everything that follows is inert too.
- Dual mode: when -h/--help is present, live declarations are forwarded to the
  help printer instead of touching the input, and caller storage is left as is.
- Fail fast: the first fault is remembered; every later binding call re-raises
  it without doing any work.

Quick start
    from argot import Parser, Slot

    file, debug, verbosity, commands = Slot("default.file"), Slot(False), Slot(0), []

    parser = (
        Parser("prog -Dvv build --file=main.c")
        .app_version("1.0.0")
        .flag("D", "debug", "enter debug mode", debug)
        .count("v", "verbose", "increase verbosity", verbosity)
        .subcommand("build", "build a target", commands)
            .arg("f", "file", "file to build", file, label="FILE")
            .done()
    )
    if parser.wants_help():
        parser.print_help()

Storage
- Scalars bind into a Slot (its current value doubles as the help default and,
  unless type= is given, its class is the converter).
- Lists, positional lists and subcommand paths append to a caller list.
"""
import copy
import functools
import importlib.metadata
import os.path
import shlex
import sys
from collections.abc import Iterable
from warnings import catch_warnings

from .faults import *
from .masks import ConsumptionMask, RunResolver
from .matching import MatchEngine, ValueLocation
from .printer import Argument, Positional, Subcommand, Printer, arg_string
from .scopes import ScopeTracker
from .slots import Slot
from .tokens import TokenStore, LooksLike, Unused
from .utils import *

HELP_SHORT = "h"
HELP_LONG = "help"


def _tokenize(prompt):
    """
    Normalize a prompt into the full token list (program name included).

    - Unset: sys.argv as-is.
    - str: shell-like string split with shlex.split.
    - Iterable[str]: used as-is; every element must be a string.
    """
    if prompt is Unset:
        return list(sys.argv)
    if isinstance(prompt, str):
        return shlex.split(prompt)
    if isinstance(prompt, Iterable):
        tokens = list(prompt)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("Parser() argument must be a string or an iterable of strings")
        return tokens
    raise TypeError("Parser() argument must be a string or an iterable of strings")


def _check_codes(short, long, /):
    """
    Reject malformed option codes at declaration time (programming errors).
    """
    if not isinstance(short, str) or not isinstance(long, str):
        raise TypeError("option short code and long name must be strings")
    if len(short) > 1 or short in ("-", "="):
        raise ValueError(f"option short code must be a single character other than '-' or '=', got {short!r}")
    if long.startswith("-") or "=" in long:
        raise ValueError(f"option long name must not start with '-' or contain '=', got {long!r}")
    if not short and not long:
        raise ValueError("an option needs a short code or a long name")


def _spelling(short, long, /):
    """
    Preferred single spelling of an option for hints ("--file" over "-f").
    """
    return f"--{long}" if long else f"-{short}"


def _default(value, /):
    """
    Help text for a current value; None when there is nothing worth showing.
    """
    if value is None or value is Unset:
        return None
    return str(value) or None


def _binding(method, /):
    """
    Wrap a binding operation: re-raise an earlier fault, surface new ones, return self.
    """
    @functools.wraps(method)
    def wrapper(self, /, *args, **kwargs):
        if self._fault is not None:
            raise self._fault
        try:
            method(self, *args, **kwargs)
        except ParserError as fault:
            self.trigger(fault)
        return self

    return wrapper


def _shorthand(method, form, /):
    """
    Derive short_<name>/long_<name> from a binding taking (short, long, descr, into).
    """
    if form == "short":
        def shorthand(self, short, descr, into, /, **options):
            return method(self, short, "", descr, into, **options)
    else:
        def shorthand(self, long, descr, into, /, **options):
            return method(self, "", long, descr, into, **options)

    shorthand.__doc__ = f"Declare {method.__name__}() with a {form} form only."
    return rename(shorthand, f"{form}_{method.__name__}")


class Parser:
    """
    Declarative token matcher with subcommand scoping and help rendering.

    Parameters
    - prompt: Unset (sys.argv), a shell-like string, or an iterable of strings.
      In every form the first token is the program name.
    - shell: render faults on stderr and exit(1) instead of raising.
    - fancy: wrap faults and help in rich panels.
    - colorful: keep rich styles (False renders plain text).

    The implicit help flag (-h/--help) is evaluated during construction; see
    wants_help() and print_help().
    """

    def __init__(self, prompt=Unset, /, *, shell=False, fancy=False, colorful=True):
        tokens = _tokenize(prompt)

        self.shell = bool(shell)
        self.fancy = bool(fancy)
        self.colorful = bool(colorful)

        self._store = TokenStore(tokens)
        self._mask = ConsumptionMask(self._store.bound)
        self._runs = RunResolver(self._store, self._mask)
        self._engine = MatchEngine(self._store, self._mask, self._runs)
        self._scope = ScopeTracker()
        self._printer = Printer(
            os.path.basename(tokens[0]) if tokens else "",
            colorful=self.colorful,
            fancy=self.fancy,
        )
        self._variadic = False
        self._help = False
        self._fault = None

        help = Slot(False)
        self.flag(HELP_SHORT, HELP_LONG, "print this help dialog", help)
        self._help = help.value

    @classmethod
    def from_args(cls, **options):
        """
        Parser over the live process arguments (sys.argv).
        """
        return cls(Unset, **options)

    @classmethod
    def from_strings(cls, tokens, /, **options):
        """
        Parser over an explicit token sequence (program name first).
        """
        if isinstance(tokens, str):
            raise TypeError("from_strings() argument must be an iterable of strings, not a string")
        return cls(tokens, **options)

    @property
    def tokens(self):
        return self._store.tokens

    @property
    def argstop(self):
        return self._store.argstop

    @property
    def fault(self):
        """
        The first fault raised by a binding call, or None.
        """
        return self._fault

    def __repr__(self):
        return f"Parser({list(self._store)!r}, {self._scope!r})"

    # -- faults ---------------------------------------------------------------

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this parser's runtime flags.

        Errors are remembered (sticky) before being raised or rendered;
        warnings are only emitted.
        """
        fault = copy.replace(
            fault,
            **options,
            prog=self._printer.prog,
            shell=self.shell,
            fancy=self.fancy,
            colorful=self.colorful,
        )
        if isinstance(fault, ParserError):
            self._fault = fault
        fault.__trigger__()

    def _convert(self, convert, raw, failure, /):
        """
        Run a converter, turning exceptions into `failure(exception)` and
        re-emitting its warnings as ConversionWarning.
        """
        try:
            with catch_warnings(record=True) as caught:
                value = convert(raw)
        except Exception as exception:
            raise failure(exception) from exception

        for warning in map(lambda warning: warning.message, caught):
            self.trigger(ConversionWarning(
                "converting %r raised a warning: %s" % (raw, warning),
                title="conversion warning",
                code=FaultCode.CONVERSION_WARNING,
                hint="check the value format; expected %s" % getattr(convert, "__name__", "value"),
                docs=getdoc(FaultCode.CONVERSION_WARNING),
                token=raw,
                warning=warning,
            ))
        return value

    def _value(self, found, short, long, convert, /):
        """
        Extract and convert the value of a matched option, claiming a spaced value token.
        """
        names = arg_string(short, long)
        match found.location:
            case ValueLocation.TAKES_NEXT if found.position + 1 in self._mask:
                self._mask.claim(position := found.position + 1)
                raw = self._store[position]
            case ValueLocation.EQUALS:
                position = found.position
                raw = self._store[position][found.offset + 1:]
            case _:
                raise MissingArgValueError(
                    "missing argument value for %s from %s position" % (names, ordinal(found.position)),
                    title="missing argument value",
                    code=FaultCode.MISSING_ARG_VALUE,
                    hint="pass a value as '{0} VALUE' or '{0}=VALUE'".format(_spelling(short, long)),
                    docs=getdoc(FaultCode.MISSING_ARG_VALUE),
                    short=short,
                    long=long,
                    position=found.position,
                )

        return self._convert(convert, raw, lambda exception: ConstructionError(
            "failed to construct value for %s from %s position: %s" % (names, ordinal(position), exception),
            title="construction error",
            code=FaultCode.CONSTRUCTION_FAILED,
            hint="use a valid %s for %s" % (getattr(convert, "__name__", "value"), names),
            docs=getdoc(FaultCode.CONSTRUCTION_FAILED),
            short=short,
            long=long,
            token=raw,
            position=position,
            exception=exception,
        ))

    def _reject_value(self, found, short, long, kind, /):
        if found.location is ValueLocation.ABSENT:
            return
        raise InvalidInputError(
            "invalid input: %s from %s position, %s should not have a value" % (
                arg_string(short, long), ordinal(found.position), kind
            ),
            title="invalid input",
            code=FaultCode.INVALID_INPUT,
            hint="drop the '=VALUE' part; %ss are presence-only" % kind,
            docs=getdoc(FaultCode.INVALID_INPUT),
            short=short,
            long=long,
            token=self._store[found.position],
            position=found.position,
        )

    def _claim(self, found, /):
        # cluster hits are retired by the run resolver once every character is claimed
        if not found.runs:
            self._mask.claim(found.position)

    # -- application metadata ---------------------------------------------------

    def app_name(self, name, /):
        """
        Set the application name shown in help (defaults to basename of token 0).
        """
        self._printer.name = name
        return self

    def app_desc(self, descr, /):
        self._printer.descr = descr
        return self

    def app_long_desc(self, descr, /):
        self._printer.long_descr = descr
        return self

    def app_version(self, version, /):
        self._printer.version = version
        return self

    def app_metadata(self, distribution, /):
        """
        Fill name, version and summary from an installed distribution's metadata.

        Raises
        - importlib.metadata.PackageNotFoundError when the distribution is missing.
        """
        metadata = importlib.metadata.metadata(distribution)
        self._printer.name = metadata["Name"]
        self._printer.version = metadata["Version"]
        if summary := metadata.get("Summary"):
            self._printer.descr = summary
        return self

    def wants_help(self):
        """
        Whether -h/--help was given; when True, bindings only feed the printer.
        """
        return self._help

    def print_help(self, console=Unset, /):
        """
        Render the help collected so far (for the deepest committed subcommand).
        """
        self._printer.print(console)

    # -- scope ---------------------------------------------------------------

    @_binding
    def done(self):
        """
        Close the innermost open group, or else the innermost subcommand level.

        Raises
        - InvalidStateError when nothing is open.
        """
        self._scope.close()

    @_binding
    def group(self, name, descr, /):
        """
        Open a help-only section; options declared until done() are listed under it.

        Raises
        - NestedGroupError when another group is still open.
        """
        live = self._scope.live()
        self._scope.open_group(name)
        if live and self._help:
            self._printer.add_group(name, descr)

    @_binding
    def subcommand(self, name, descr, into, /, *, type=str, long_descr=Unset):
        """
        Declare a subcommand and open its level (close it with done()).

        The level is always entered so nested declarations keep their depth.
        When the subcommand is the next candidate under the committed path and
        its name is found among the unclaimed tokens, the token is claimed, its
        converted value is appended to `into`, and the level becomes committed.

        Raises
        - InvalidStateError for an empty name.
        - SubcommandConstructionError when `type` rejects the name.
        """
        self._scope.descend()
        if not self._scope.live(subcommand=True):
            return

        if self._help:
            # keep going: a committed subcommand moves help to its own level
            self._printer.add_subcommand(Subcommand(name, descr))

        if not name:
            raise InvalidStateError(
                "invalid parser state: subcommand(...) given empty name",
                title="invalid parser state",
                code=FaultCode.INVALID_STATE,
                hint="give every subcommand a non-empty name",
                docs=getdoc(FaultCode.INVALID_STATE),
            )

        if (found := self._engine.find_subcommand(name)) is None:
            return

        self._mask.claim(found.position)
        into.append(self._convert(type, self._store[found.position], lambda exception: SubcommandConstructionError(
            "failed to construct subcommand %r from %s position: %s" % (name, ordinal(found.position), exception),
            title="construction error",
            code=FaultCode.SUBCOMMAND_CONSTRUCTION_FAILED,
            hint="use a converter accepting %r" % name,
            docs=getdoc(FaultCode.SUBCOMMAND_CONSTRUCTION_FAILED),
            name=name,
            position=found.position,
            exception=exception,
        )))

        self._scope.commit_level()
        self._printer.new_level(name, descr, coalesce(long_descr, ""))

    # -- options ---------------------------------------------------------------

    @_binding
    def arg(self, short, long, descr, into, /, *, type=Unset, label=Unset, required=False):
        """
        Declare a value-taking option ("-f VALUE", "-f=VALUE", "--file VALUE",
        "--file=VALUE", or "-vxf VALUE" at the end of a cluster).

        Parameters
        - short/long: single character and long name ("" for none).
        - into: Slot receiving the converted value.
        - type: converter (defaults to the class of into.value, or str).
        - label: value placeholder shown in help (e.g. "FILE").
        - required: fault when the option is absent.

        Raises
        - MissingArgValueError, ConstructionError, MissingArgumentError,
          ValuedArgInRunError.
        """
        _check_codes(short, long)
        if not self._scope.live():
            return

        if self._help:
            self._printer.add_argument(Argument(
                short, long, descr, coalesce(label), _default(into.value), required
            ), self._scope.group)
            return

        if (found := self._engine.find_match(short, long, True)) is None:
            if required:
                raise MissingArgumentError(
                    "required argument was not given: %s" % arg_string(short, long),
                    title="missing argument",
                    code=FaultCode.MISSING_ARGUMENT,
                    hint="pass %s with a value" % _spelling(short, long),
                    docs=getdoc(FaultCode.MISSING_ARGUMENT),
                    short=short,
                    long=long,
                )
            return

        self._claim(found)
        into.value = self._value(found, short, long, into.converter(type))

    short_arg = _shorthand(arg, "short")
    long_arg = _shorthand(arg, "long")

    @_binding
    def flag(self, short, long, descr, into, /, *, invert=False):
        """
        Declare a presence-only switch; when found, into.value becomes `not invert`.

        Raises
        - InvalidInputError when the flag is given a value ("-f=1").
        """
        _check_codes(short, long)
        if not self._scope.live():
            return

        if self._help:
            self._printer.add_argument(Argument(
                short, long, descr, None, _default(into.value), False
            ), self._scope.group)
            if short != HELP_SHORT and long != HELP_LONG:
                return

        if (found := self._engine.find_match(short, long, False)) is None:
            return

        self._claim(found)
        self._reject_value(found, short, long, "flag")
        into.value = not invert

    short_flag = _shorthand(flag, "short")
    long_flag = _shorthand(flag, "long")

    @_binding
    def count(self, short, long, descr, into, /, *, step=1):
        """
        Declare a repeatable counter: every occurrence adds `step` to into.value,
        including every occurrence inside clusters ("-vvv" adds three steps).

        Raises
        - InvalidInputError when the counter is given a value.
        - TypeError when `into` holds None (counters need a starting value).
        """
        _check_codes(short, long)
        if into.value is None:
            raise TypeError("count() target slot must hold a starting value such as 0, not None")
        if not self._scope.live():
            return

        if self._help:
            self._printer.add_argument(Argument(
                short, long, descr, None, _default(into.value), False
            ), self._scope.group)
            return

        while (found := self._engine.find_match(short, long, False)) is not None:
            self._claim(found)
            self._reject_value(found, short, long, "count")
            for _ in range(max(found.runs, 1)):
                into.value += step

    short_count = _shorthand(count, "short")
    long_count = _shorthand(count, "long")

    @_binding
    def list(self, short, long, descr, into, /, *, type=str, label=Unset, required=False):
        """
        Declare a repeatable value-taking option; values are appended to `into`
        in match order. required means at least one occurrence.
        """
        _check_codes(short, long)
        if not self._scope.live():
            return

        if self._help:
            self._printer.add_argument(Argument(
                short, long, descr, coalesce(label), None, required
            ), self._scope.group)
            return

        found_any = False
        while (found := self._engine.find_match(short, long, True)) is not None:
            found_any = True
            self._claim(found)
            into.append(self._value(found, short, long, type))

        if required and not found_any:
            raise MissingArgumentError(
                "required argument was not given: %s" % arg_string(short, long),
                title="missing argument",
                code=FaultCode.MISSING_ARGUMENT,
                hint="pass %s at least once" % _spelling(short, long),
                docs=getdoc(FaultCode.MISSING_ARGUMENT),
                short=short,
                long=long,
            )

    short_list = _shorthand(list, "short")
    long_list = _shorthand(list, "long")

    # -- positionals -------------------------------------------------------------

    @_binding
    def positional(self, name, descr, into, /, *, type=Unset, required=False):
        """
        Declare the next ordered positional: it takes the lowest unclaimed token.

        Raises
        - UnorderedPositionalsError after a positional_list() declaration.
        - MissingPositionalError when required and nothing is left.
        - PositionalConstructionError when the converter rejects the token.
        """
        if not self._scope.live():
            return

        if self._variadic:
            raise UnorderedPositionalsError(
                "declaring a positional after a variadic positional has no effect: %s" % name,
                title="unordered positionals",
                code=FaultCode.UNORDERED_POSITIONALS,
                hint="declare %r before the variadic positional" % name,
                docs=getdoc(FaultCode.UNORDERED_POSITIONALS),
                name=name,
            )

        if self._help:
            self._printer.add_positional(Positional(name, descr, _default(into.value), required, False))
            return

        if (position := self._mask.first()) is None:
            if required:
                raise MissingPositionalError(
                    "required positional was not given: %s" % name,
                    title="missing positional",
                    code=FaultCode.MISSING_POSITIONAL,
                    hint="pass a value for %r" % name,
                    docs=getdoc(FaultCode.MISSING_POSITIONAL),
                    name=name,
                )
            return

        convert = into.converter(type)
        into.value = self._convert(convert, raw := self._store[position], lambda exception: PositionalConstructionError(
            "failed to construct positional %r from %s position: %s" % (name, ordinal(position), exception),
            title="construction error",
            code=FaultCode.POSITIONAL_CONSTRUCTION_FAILED,
            hint="use a valid %s for %r" % (getattr(convert, "__name__", "value"), name),
            docs=getdoc(FaultCode.POSITIONAL_CONSTRUCTION_FAILED),
            name=name,
            token=raw,
            position=position,
            exception=exception,
        ))
        self._mask.claim(position)

    @_binding
    def positional_list(self, name, descr, into, /, *, type=str, required=False):
        """
        Declare the variadic positional: every unclaimed token (ascending), then
        every token after "--", appended to `into`. Only one per parse.

        Raises
        - MultipleVariadicError on a second declaration.
        - MissingPositionalError when required and nothing was collected.
        """
        if not self._scope.live():
            return

        if self._variadic:
            raise MultipleVariadicError(
                "second declared variadic positional has no effect: %s" % name,
                title="multiple variadic",
                code=FaultCode.MULTIPLE_VARIADIC,
                hint="collect every remaining positional with a single positional_list()",
                docs=getdoc(FaultCode.MULTIPLE_VARIADIC),
                name=name,
            )
        self._variadic = True

        if self._help:
            self._printer.add_positional(Positional(name, descr, None, required, True))
            return

        positions = [*self._mask]
        if (argstop := self._store.argstop) is not None:
            positions.extend(range(argstop + 1, len(self._store)))

        values = []
        for position in positions:
            values.append(self._convert(type, raw := self._store[position], lambda exception: PositionalConstructionError(
                "failed to construct positional %r from %s position: %s" % (name, ordinal(position), exception),
                title="construction error",
                code=FaultCode.POSITIONAL_CONSTRUCTION_FAILED,
                hint="use a valid %s for %r" % (getattr(type, "__name__", "value"), name),
                docs=getdoc(FaultCode.POSITIONAL_CONSTRUCTION_FAILED),
                name=name,
                token=raw,
                position=position,
                exception=exception,
            )))

        for position in positions:
            self._mask.claim(position)
        into.extend(values)

        if required and not values:
            raise MissingPositionalError(
                "required positional was not given: %s..." % name,
                title="missing positional",
                code=FaultCode.MISSING_POSITIONAL,
                hint="pass at least one value for %r" % name,
                docs=getdoc(FaultCode.MISSING_POSITIONAL),
                name=name,
            )

    # -- reporting ---------------------------------------------------------------

    def unused(self):
        """
        Report every token no declaration claimed.

        Tokens that entered cluster tracking contribute one "-c" entry per
        character still open; other tokens are reported whole and classified
        by their leading characters.
        """
        report = []
        for position in self._mask:
            token = self._store[position]
            if self._runs.tracked(position):
                report.extend(
                    Unused(f"-{token[offset]}", LooksLike.SHORT, position)
                    for offset in self._runs.remaining(position)
                )
                continue
            report.append(Unused.of(token, position))
        return tuple(report)

    def report_unused(self):
        """
        Emit an UnusedTokenWarning per unused entry and return the report.
        """
        report = self.unused()
        for entry in report:
            self.trigger(UnusedTokenWarning(
                "%s (from %s position)" % (entry, ordinal(entry.position)),
                title="unused token",
                code=FaultCode.UNUSED_TOKEN,
                hint="check for typos or declare it; run with --help to list what is accepted",
                docs=getdoc(FaultCode.UNUSED_TOKEN),
                token=entry.token,
                position=entry.position,
                looks_like=entry.looks_like,
            ))
        return report


__all__ = (
    "Parser",
)
