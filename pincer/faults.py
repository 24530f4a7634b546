"""
Pincer faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every way an extraction
  can fail. Codes are grouped by domain to keep logs/searches predictable.
- ArgumentsError: base type that carries message + options and knows how to
  render itself in a friendly, actionable way through rich.
- trigger(): central entry point to surface a fault (raise, or print and exit
  in shell mode).
- getdoc(): optional description lookup for a code from the host application.

Taxonomy (token consumed?)
- NonTextArgumentError       → a token is not valid UTF-8 where text is required
- OptionWithoutAValueError   → option found without a usable value        (no)
- OptionValueParsingError    → decoder rejected an option value           (no)
- MissingOptionError         → required option not found                  (n/a)
- ArgumentParsingError       → decoder rejected a free argument           (yes)
- MissingArgumentError       → required free argument not found           (n/a)
- UnusedArgsLeftError        → leftover flags or tokens after extraction  (no)

Integration
- The Arguments store raises these directly; callers decide whether to abort,
  retry, or ignore. A program entry point usually forwards them to
  trigger(fault, shell=True) to print a rendered report and exit with status 1.
"""
import os
import sys
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
    canonical fault codes used across the store (stable identifiers).

    grouping (by high-level domain)
    - tokens (2110x)
      • NON_TEXT_ARGUMENT
    - options (2111x)
      • OPTION_WITHOUT_A_VALUE, OPTION_VALUE_PARSING_FAILED, MISSING_OPTION
    - free arguments (2112x)
      • ARGUMENT_PARSING_FAILED, MISSING_ARGUMENT
    - residue (2114x)
      • UNUSED_ARGS_LEFT

    rationale
    - codes are discoverable (searchable in logs and docs) and normalized to a string
      via normalize() so hosts can remap them if desired.
    """
    # --- token errors (21xxx) ---
    NON_TEXT_ARGUMENT           = 21101

    # --- option errors (21xxx) ---
    OPTION_WITHOUT_A_VALUE      = 21111
    OPTION_VALUE_PARSING_FAILED = 21112
    MISSING_OPTION              = 21113

    # --- free argument errors (21xxx) ---
    ARGUMENT_PARSING_FAILED     = 21121
    MISSING_ARGUMENT            = 21122

    # --- residue errors (21xxx) ---
    UNUSED_ARGS_LEFT            = 21141

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ArgumentsError(Exception):
    """
    Base class for every extraction failure.

    Attributes
    - message: str, the stable one-line description (also str(error)).
    - options: read-only mapping with rendering context (code, title, hint, docs)
      and fault specifics (key, keys, value, cause, index, tokens, ...).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message if self.message is not Unset else ""

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

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

        prog = text(
            self.options.get("prog") or getattr(main, "__prog__", None) or _progname(),
            styler("prog-name")
        )
        code = self.options.get("code")
        title = self.options.get("title") or "error"

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else "-", styler("code")),
            " | ",
            text(title.title(), styler("error-title")),
            " ]"
        )
        message = text(str(self), styler("error-message"))
        renders = [message]

        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))
        if docs := self.options.get("docs"):
            renders.append(text(docs))

        if fancy:
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self
        console.print(self)
        if self.options.get("deferred", False):
            return
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        replaced = type(self)(self.message, **{**self.options, **overrides})
        replaced.__cause__ = self.__cause__
        return replaced


class NonTextArgumentError(ArgumentsError): ...
class OptionWithoutAValueError(ArgumentsError): ...
class OptionValueParsingError(ArgumentsError): ...
class MissingOptionError(ArgumentsError): ...
class ArgumentParsingError(ArgumentsError): ...
class MissingArgumentError(ArgumentsError): ...
class UnusedArgsLeftError(ArgumentsError): ...


def _progname():
    # Program label for headers when the host did not provide __prog__.
    try:
        return os.path.basename(sys.argv[0]) or "pincer"
    except IndexError:
        return "pincer"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ArgumentsError).
    - options are merged into the fault via __replace__(**options) before triggering.
    - outside shell mode the fault is raised; in shell mode it is rendered on
      stderr through rich and the process exits with status 1 unless deferred.

    typical options
    - shell, fancy, colorful, deferred, prog, hint, docs.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    lookup
    - the host application may expose a __docs__ mapping in __main__ where keys
      are FaultCode instances and values are short documentation strings.
    - when not found, returns None (renderers treat docs as optional).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "ArgumentsError",
    "NonTextArgumentError",
    "OptionWithoutAValueError",
    "OptionValueParsingError",
    "MissingOptionError",
    "ArgumentParsingError",
    "MissingArgumentError",
    "UnusedArgsLeftError",
    "FaultCode",
    "trigger",
    "getdoc",
)
