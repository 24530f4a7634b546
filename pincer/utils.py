"""
Pincer utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the keys, faults, and arguments layers so the
  store, its errors, and their messages agree on the same semantics.

Overview
- UnsetType / Unset
  • Singleton sentinel for “not found / not provided” without conflating with None,
    which is a perfectly valid decoded value or caller default.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, preserving None/0/""/[].

- ordinal(number)
  • Human-friendly 1-based position labels for fault hints (“second”, “12th”).

- textify(token) / lossy(token)
  • Interpret a raw token (str, possibly carrying surrogate escapes, or bytes)
    as UTF-8 text: strictly (Unset when impossible) or lossily (for messages).

Stability and contract
- Names in __all__ are supported; everything else may change without notice.
"""
import functools
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not found or not provided.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable: this type is sealed; do not subclass.
    - Singleton per process: UnsetType() always yields the same instance.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in annotations (e.g., str | UnsetType).
        """
        try:
            return other | type(self)
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

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Returns object unless it is Unset, in which case default is returned.
    Falsey values like None, 0, "" or [] are preserved as-is.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


@functools.cache  # Memoize to avoid recomputing common ordinals in hints
def ordinal(number, /):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with correct English suffixes.
    """
    if not isinstance(number, int) or isinstance(number, bool):
        raise TypeError("ordinal() argument must be an integer")
    if number < 1:
        raise ValueError("ordinal() argument must be a positive integer")

    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    # The “teens”: 11th, 12th, 13th (and 111th, 112th, 113th, …)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def textify(token, /):
    """
    Interpret a raw token as UTF-8 text.

    Behavior
    - bytes: decoded strictly as UTF-8.
    - str: returned unchanged when it is encodable as UTF-8, i.e. when it does
      not carry lone surrogates (Python's surrogateescape form of undecodable
      OS arguments).
    - Returns Unset when the token is not valid text.
    """
    if isinstance(token, bytes):
        try:
            return token.decode("utf-8")
        except UnicodeDecodeError:
            return Unset
    try:
        token.encode("utf-8")
    except UnicodeEncodeError:
        return Unset
    return token


def lossy(token, /):
    """
    Best-effort text rendition of a raw token for messages (never fails).
    """
    if isinstance(token, bytes):
        return token.decode("utf-8", "replace")
    try:
        return token.encode("utf-8", "surrogateescape").decode("utf-8", "replace")
    except UnicodeEncodeError:
        # Surrogates outside the escape range (not produced by os/sys decoding)
        return token.encode("utf-8", "replace").decode("utf-8")


Unset = UnsetType()
"""
Internal sentinel for “not found / not provided”.

Notes
- Singleton: there is only one Unset instance.
- Distinct from None: a decoder may legitimately return None.
- Typical pattern: value = coalesce(result, default).
"""


__all__ = (
    # Functions
    "coalesce",
    "ordinal",
    "textify",
    "lossy",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
