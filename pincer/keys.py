"""
Pincer key specifications.

Overview
- Keys: one or two accepted spellings (aliases) for the same flag or option.
  • primary: required, conventionally short ("-w").
  • secondary: optional, conventionally long ("--width").

Shape rules (always enforced, not debug-only)
- A lone alias must start with '-' (so "-v" and "--version" are both fine).
- With two aliases, the primary must start with '-' but not with '--', and the
  secondary must start with '--'.
Violations are programming errors in the calling code, so they raise the
built-in ValueError/TypeError instead of a user-facing ArgumentsError.

Coercion
- Every extraction accepts a Keys, a single string, or a 1/2-item tuple/list of
  strings; Keys.coerce() normalizes them.

Quick example:
    >>> Keys("-w", "--width")
    keys('-w', '--width')
    >>> str(Keys.coerce(("-w", "--width")))
    '-w/--width'
"""
from typing import final

from .utils import *


@final
class Keys:
    """
    Immutable, hashable pair of aliases for one flag or option.

    Iterating yields the aliases in search order (primary first); an absent
    secondary alias is skipped.
    """
    __slots__ = ("_first", "_second")

    def __new__(cls, first, second=Unset, /):
        if not isinstance(first, str):
            raise TypeError("keys primary alias must be a string")
        if not isinstance(second, str | Unset):
            raise TypeError("keys secondary alias must be a string")

        if not first.startswith("-"):
            raise ValueError("keys alias %r must start with '-'" % first)

        # An empty secondary alias means "no secondary alias"
        if second:
            if first.startswith("--"):
                raise ValueError("keys primary alias %r must be short (single '-')" % first)
            if not second.startswith("--"):
                raise ValueError("keys secondary alias %r must be long (start with '--')" % second)

        self = super().__new__(cls)
        object.__setattr__(self, "_first", first)
        object.__setattr__(self, "_second", second or Unset)
        return self

    @classmethod
    def coerce(cls, object, /):
        """
        Normalize a caller-supplied key specification into Keys.

        Accepted forms
        - Keys: returned as-is.
        - str: a single alias.
        - tuple/list of one or two strings: primary and optional secondary.

        Raises
        - TypeError: for any other shape (including the wrong item count).
        - ValueError: when an alias breaks the shape rules.
        """
        if isinstance(object, cls):
            return object
        if isinstance(object, str):
            return cls(object)
        if isinstance(object, tuple | list) and 1 <= len(object) <= 2:
            return cls(*object)
        raise TypeError("keys must be a string, a Keys, or a pair of strings")

    @property
    def first(self):
        return self._first

    @property
    def second(self):
        return coalesce(self._second)

    def __iter__(self):
        yield self._first
        if self._second:
            yield self._second

    def __len__(self):
        return 1 + bool(self._second)

    def __eq__(self, other):
        if not isinstance(other, Keys):
            return NotImplemented
        return (self._first, self._second) == (other._first, other._second)

    def __hash__(self):
        return hash((type(self), self._first, self._second))

    def __setattr__(self, name, value):
        raise AttributeError("keys are immutable")

    def __delattr__(self, name):
        raise AttributeError("keys are immutable")

    def __str__(self):
        # Used in messages: '-w' or '-w/--width'
        return "/".join(self)

    def __repr__(self):
        return "keys(%s)" % ", ".join(map(repr, self))

    def __rich_repr__(self):
        yield from self

    def __reduce__(self):
        return type(self), tuple(self)

    def __init_subclass__(cls, **options):
        raise TypeError("type 'Keys' is not an acceptable base type")


__all__ = (
    "Keys",
)
