"""
Argot help printer: collects declaration metadata and renders it with rich.

The parser forwards, in declaration order, everything it sees while in help
mode: application metadata, subcommands of the current level, groups, options
and positionals. The printer never answers back; it only renders on request.

Layout
    name version - short description

    usage: name {subcommand} [-abc --long LABEL] -r REQ file [files...]

    long description

    subcommands:
        build        build a target

    logging:         adjust logging output
        -D, --debug  enter debug mode [default: False]

    options:
        -p, --package PKG        rename the package [required, default: main]
            --release            do a release build [default: False]

    positionals:
        file         file to build [required]
        files...     additional files to build

Customization
- Define a mapping named __styles__ in __main__ to override palette entries.
- colorful=False strips every style; fancy=True wraps the help in a Panel.
"""
import itertools
from collections import defaultdict
from typing import NamedTuple

from rich.console import Console, Group as RenderGroup
from rich.panel import Panel
from rich.text import Text

from .faults import FaultCode, MissingGroupError, getdoc
from .utils import Unset

LEFT_PAD = 4
MID_PAD = 8


def arg_string(short, long, /, *, align=False):
    """
    Render an option's names: "-s, --long", "-s", or "--long".

    With align=True a long-only option is indented by the width of "-s, " so
    it lines up with options that have both forms.
    """
    if short and long:
        return f"-{short}, --{long}"
    if short:
        return f"-{short}"
    if long:
        return f"{' ' * 4 * align}--{long}"
    raise ValueError("an option needs a short code or a long name")


def _accessories(default, required):
    if default is not None and required:
        return f" [required, default: {default}]"
    if default is not None:
        return f" [default: {default}]"
    if required:
        return " [required]"
    return ""


class Argument(NamedTuple):
    short: str
    long: str
    descr: str
    label: str | None = None
    default: str | None = None
    required: bool = False

    @property
    def left(self):
        names = arg_string(self.short, self.long, align=True)
        return f"{names} {self.label}" if self.label else names

    @property
    def accessories(self):
        return _accessories(self.default, self.required)


class Positional(NamedTuple):
    name: str
    descr: str
    default: str | None = None
    required: bool = False
    variadic: bool = False

    @property
    def left(self):
        return f"{self.name}..." if self.variadic else self.name

    @property
    def accessories(self):
        return _accessories(self.default, self.required)


class Subcommand(NamedTuple):
    name: str
    descr: str

    @property
    def left(self):
        return self.name


class Group:
    __slots__ = ("name", "descr", "options")

    def __init__(self, name, descr, /):
        self.name = name
        self.descr = descr
        self.options = []

    def __repr__(self):
        return f"Group({self.name!r}, {self.descr!r}, options={self.options!r})"


class Printer:
    """
    Write-only sink of help metadata, rendered through rich on demand.

    State
    - name/version/descr/long_descr: application metadata.
    - path: names of the committed subcommands, appended to the program name.
    - subcommands: candidates of the deepest committed level only.
    - groups/options/positionals: every live declaration seen in help mode.
    """

    def __init__(self, name="", /, *, colorful=True, fancy=False):
        self.name = name
        self.version = ""
        self.descr = ""
        self.long_descr = ""
        self.path = []
        self.colorful = colorful
        self.fancy = fancy
        self.subcommands = []
        self.groups = {}
        self.options = []
        self.positionals = []

    @property
    def prog(self):
        return " ".join(part for part in (self.name, *self.path) if part)

    def new_level(self, name, descr="", long_descr="", /):
        """
        Enter a committed subcommand: extend the program path and drop the
        previous level's subcommand candidates.
        """
        self.path.append(name)
        self.descr = descr
        self.long_descr = long_descr
        self.subcommands.clear()

    def add_subcommand(self, subcommand, /):
        self.subcommands.append(subcommand)

    def add_group(self, name, descr, /):
        self.groups[name] = Group(name, descr)

    def add_argument(self, argument, group=None, /):
        if group is None:
            self.options.append(argument)
            return
        try:
            self.groups[group].options.append(argument)
        except KeyError:
            raise MissingGroupError(
                "cannot add option %r to unknown group %r" % (argument.left.strip(), group),
                title="missing group",
                code=FaultCode.MISSING_GROUP,
                hint="open the group with group() before declaring its options",
                docs=getdoc(FaultCode.MISSING_GROUP),
                group=group,
            ) from None

    def add_positional(self, positional, /):
        self.positionals.append(positional)

    def _arguments(self):
        return itertools.chain(
            self.options,
            *(group.options for _, group in sorted(self.groups.items()))
        )

    def usage(self):
        """
        Build the usage line (without the "usage: prog" prefix).

        Unlabeled optional shorts are fused ("-Dv"); labeled or long options are
        listed separately; required options follow the bracketed optional ones.
        """
        shorts = {False: [], True: []}
        longs = {False: [], True: []}

        for argument in self._arguments():
            if argument.short and not argument.label:
                shorts[argument.required].append(argument.short)
            elif argument.short:
                longs[argument.required].append(f"-{argument.short} {argument.label}")
            elif argument.label:
                longs[argument.required].append(f"--{argument.long} {argument.label}")
            else:
                longs[argument.required].append(f"--{argument.long}")

        def section(required):
            fused = "-" + "".join(shorts[required]) if shorts[required] else ""
            return " ".join(part for part in (fused, *longs[required]) if part)

        parts = []
        if self.subcommands:
            parts.append("{subcommand}")
        if optional := section(False):
            parts.append(f"[{optional}]")
        if required := section(True):
            parts.append(required)
        for positional in self.positionals:
            parts.append(positional.left if positional.required else f"[{positional.left}]")

        return " ".join(parts)

    def __rich__(self):
        styles = defaultdict(str, {
            # head
            "program-name": "bold #FF4D94",
            "version": "#36C5F0",
            "description-section": "italic #A3A3A3",
            "usage-label": "bold #00E6FF",
            "usage-section": "bold #36C5F0",
            "long-description": "#D1D5DB",

            # sections
            "section-label": "bold #FFFFFF",
            "group-label": "bold #FFFFFF",
            "group-description": "italic #9CA3AF",

            # rows
            "option-name": "bold #00E6FF",
            "metavar": "bold #FFD600",
            "subcommand": "bold #36C5F0",
            "positional": "bold #22C55E",
            "argument-description": "#9CA3AF",
            "accessory": "#737373",

            # fancy panel
            "panel-title": "bold #FF4D94",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self.colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not self.colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        entries = [*self.subcommands, *self._arguments(), *self.positionals]
        longest = max((len(entry.left) for entry in entries), default=0)

        def row(left, descr, accessories, /):
            line = Text(" " * LEFT_PAD)
            line.append(left)
            line.append(" " * (longest - len(left) + MID_PAD))
            line.append(text(descr, styler("argument-description")))
            line.append(text(accessories, styler("accessory")))
            return line

        def option(argument):
            names = text(arg_string(argument.short, argument.long, align=True), styler("option-name"))
            if argument.label:
                names = Text.assemble(names, " ", text(argument.label, styler("metavar")))
            return row(names, argument.descr, argument.accessories)

        renders = []

        if self.name:
            header = text(self.prog, styler("program-name"))
            if self.version:
                header = Text.assemble(header, " ", text(self.version, styler("version")))
                if self.descr:
                    header = Text.assemble(header, " - ", text(self.descr, styler("description-section")))
            renders.append(header.append("\n"))

        if entries:
            usage = Text()
            usage.append("usage", styler("usage-label")).append(": ")
            usage.append(text(self.prog, styler("program-name")))
            if line := self.usage():
                usage.append(" ").append(text(line, styler("usage-section")))
            renders.append(usage.append("\n"))

        if self.long_descr:
            renders.append(text(self.long_descr, styler("long-description")).append("\n"))

        if self.subcommands:
            section = Text.assemble(text("subcommands", styler("section-label")), ":\n")
            for subcommand in self.subcommands:
                section.append(row(text(subcommand.name, styler("subcommand")), subcommand.descr, "")).append("\n")
            renders.append(section)

        for _, group in sorted(self.groups.items()):
            if not group.options:
                continue
            section = Text.assemble(text(group.name, styler("group-label")), ":")
            section.append(" " * max(longest - len(group.name) + LEFT_PAD + MID_PAD - 1, 1))
            section.append(text(group.descr, styler("group-description"))).append("\n")
            for argument in group.options:
                section.append(option(argument)).append("\n")
            renders.append(section)

        if self.options:
            section = Text.assemble(text("options", styler("section-label")), ":\n")
            for argument in self.options:
                section.append(option(argument)).append("\n")
            renders.append(section)

        if self.positionals:
            section = Text.assemble(text("positionals", styler("section-label")), ":\n")
            for positional in self.positionals:
                left = text(positional.left, styler("positional"))
                section.append(row(left, positional.descr, positional.accessories)).append("\n")
            renders.append(section)

        if renders:
            renders[-1].rstrip()

        renderable = RenderGroup(*renders)

        if self.fancy:
            renderable = Panel(
                renderable,
                title=Text.assemble("[ ", f"{self.prog or 'help'} HELP".upper(), " ]", style=styler("panel-title")),
                title_align="left",
            )

        return renderable

    def print(self, console=Unset, /):
        """
        Render the collected help to `console` (stdout by default).
        """
        if console is Unset:
            console = Console()
        console.print(self)


__all__ = (
    "LEFT_PAD",
    "MID_PAD",
    "arg_string",
    "Argument",
    "Positional",
    "Subcommand",
    "Group",
    "Printer",
)
