"""
Argot faults (errors and warnings) and rendering.

Scope
- FaultCode: stable numeric identifiers for every user-facing issue raised
  while binding declarations against the token stream.
- ParserError / ParserWarning: base types carrying a message plus read-only
  options, able to render themselves through rich.
- trigger(): central entry point to surface a fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Taxonomy
- declaration state: done() without an open scope, empty subcommand names,
  nested groups, options registered into an unknown help group.
- input shape: values given to flags/counters, valued shorts buried in a cluster.
- missing value: an option matched structurally with nothing to consume.
- construction: the converter rejected the raw string.
- required-but-absent: required options/positionals with zero matches.
- ordering: a second variadic positional, or a positional after a variadic one.

Integration
- The parser stores the first fault and re-raises it on every later binding call.
- In non-shell mode errors are raised and warnings go through warnings.warn;
  in shell mode both are rendered on stderr and errors exit with status 1.
"""
import copy
import inspect
import sys
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used by the parser (stable identifiers).

    grouping
    - declaration state (1110x): INVALID_STATE, NESTED_GROUP, MISSING_GROUP
    - input shape (1112x): INVALID_INPUT, VALUED_ARG_IN_RUN, MISSING_ARG_VALUE
    - construction (1113x): CONSTRUCTION_FAILED, POSITIONAL_CONSTRUCTION_FAILED,
      SUBCOMMAND_CONSTRUCTION_FAILED
    - required (1114x): MISSING_ARGUMENT, MISSING_POSITIONAL
    - ordering (1115x): MULTIPLE_VARIADIC, UNORDERED_POSITIONALS
    - warnings (121xx): CONVERSION_WARNING, UNUSED_TOKEN

    normalize() lets the host remap codes to custom labels through a __codes__
    mapping in __main__ while the numeric values stay stable.
    """
    # --- declaration state errors ---
    INVALID_STATE                  = 11101
    NESTED_GROUP                   = 11102
    MISSING_GROUP                  = 11103

    # --- input shape errors ---
    INVALID_INPUT                  = 11121
    VALUED_ARG_IN_RUN              = 11122
    MISSING_ARG_VALUE              = 11123

    # --- construction errors ---
    CONSTRUCTION_FAILED            = 11131
    POSITIONAL_CONSTRUCTION_FAILED = 11132
    SUBCOMMAND_CONSTRUCTION_FAILED = 11133

    # --- required-but-absent errors ---
    MISSING_ARGUMENT               = 11141
    MISSING_POSITIONAL             = 11142

    # --- ordering errors ---
    MULTIPLE_VARIADIC              = 11151
    UNORDERED_POSITIONALS          = 11152

    # --- warnings ---
    CONVERSION_WARNING             = 12131
    UNUSED_TOKEN                   = 12141

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to
        override numeric ids; otherwise the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, title):
    """
    build the rich renderable shared by errors and warnings.

    layout: "[ prog — code | title ]", the message, then "→ hint".
    """
    main = __import__("__main__")
    options = fault.options
    colorful = options.get("colorful", True)
    fancy = options.get("fancy", False)

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    prog = text(getattr(main, "__prog__", options.get("prog") or "argot"), styler("prog-name"))
    code = options.get("code")

    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else "?", styler("code")),
        " | ",
        text(str(options.get("title", "")).title(), styler(title)),
        " ]"
    )
    message = text(fault.message, styler(title.replace("title", "message")))
    renders = [message]
    if hint := options.get("hint"):
        renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

    if fancy:
        width = console.width - 4
        try:
            width = int(width * options["ratio"])
        except KeyError:
            width = None
        return Panel(Group(*renders), title=header, title_align="left", width=width)

    return Group(header, *renders)


class ParserError(Exception):
    """
    base class of every error raised while binding declarations.

    attributes
    - message: lowercased, position-first sentence describing the fault.
    - options: read-only mapping with code/title/hint/docs plus context
      (short, long, name, token, position, exception) and runtime flags
      (prog, shell, fancy, colorful).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        }, "error-title")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class InvalidStateError(ParserError): ...
class NestedGroupError(ParserError): ...
class MissingGroupError(ParserError): ...
class InvalidInputError(ParserError): ...
class ValuedArgInRunError(ParserError): ...
class MissingArgValueError(ParserError): ...
class ConstructionError(ParserError): ...
class PositionalConstructionError(ParserError): ...
class SubcommandConstructionError(ParserError): ...
class MissingArgumentError(ParserError): ...
class MissingPositionalError(ParserError): ...
class MultipleVariadicError(ParserError): ...
class UnorderedPositionalsError(ParserError): ...


class ParserWarning(ABC, Warning):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "warning-title": "bold #FFC2E0",
            "warning-message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        }, "warning-title")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ConversionWarning(ParserWarning): ...
class UnusedTokenWarning(ParserWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace() before triggering.
    - errors raise (or print and exit in shell mode); warnings warn (or print).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ keyed by
    FaultCode; missing entries yield None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ParserError",
    "InvalidStateError",
    "NestedGroupError",
    "MissingGroupError",
    "InvalidInputError",
    "ValuedArgInRunError",
    "MissingArgValueError",
    "ConstructionError",
    "PositionalConstructionError",
    "SubcommandConstructionError",
    "MissingArgumentError",
    "MissingPositionalError",
    "MultipleVariadicError",
    "UnorderedPositionalsError",
    "ParserWarning",
    "ConversionWarning",
    "UnusedTokenWarning",
    "trigger",
    "getdoc",
)
