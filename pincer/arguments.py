r"""
Pincer argument store.

Overview
- Arguments: an ordered, mutable list of raw tokens from which a caller plucks
  flags, options, and free (positional) arguments, in any order it likes. Every
  successful extraction removes what it consumed, so each token is used at most
  once and whatever remains at the end is, by definition, unrecognized.

Token grammar
- Flags: a bare token equal to an alias (-v, --verbose).
- Options, two-token form: -w 10, --width 10 (the next token is the value, even
  when it looks like a flag).
- Options, inline form: -w=10, --width=10, --width='10', --width="1 0".
- Free arguments: anything else; the lone "-" (stdin) is never a stray flag.

Search precedence
- The two-token form is searched for every alias before any inline search
  begins. Within one form, aliases are tried in order (primary first) and the
  first matching position wins.

Removal rules
- Option extraction removes nothing when it fails (the token stays visible to
  finish()/free()).
- Free extraction removes the token even when decoding it fails.

Decoders
- Any callable taking the value and returning the decoded object (int, float,
  pathlib.Path, a validating function, ...). Whatever it raises is wrapped into
  an ArgumentsError whose cause is str(exception) and whose __cause__ is the
  exception itself.
- *_os_str variants hand the decoder the raw token (str with possible surrogate
  escapes, or bytes) and never require it to be text.

Lifecycle
- finish(), free() and free_os() consume the store; afterwards every operation
  raises RuntimeError.

Quick example:
    >>> args = Arguments(["-v", "--width=10", "input.txt"])
    >>> args.contains(("-v", "--verbose"))
    True
    >>> args.opt_value_from_fn(("-w", "--width"), int, 5)
    10
    >>> args.free()
    ['input.txt']
"""
import sys
from collections import namedtuple
from enum import IntEnum

from .faults import *
from .keys import Keys
from .utils import *

# Placeholder for tokens that cannot be shown as text in residue listings.
NON_TEXT_PLACEHOLDER = "(not a UTF-8 string)"


class PairKind(IntEnum):
    """
    How a key-value pair was spelled; the value is the number of tokens it spans.
    """
    SINGLE_ARGUMENT = 1  # --key=value
    TWO_ARGUMENTS   = 2  # --key value


_Pair = namedtuple("_Pair", ("value", "kind", "index", "key"))


def _sanitized(iterable):
    """
    Yield tokens from an iterable, validating element types.

    Raises
    - TypeError: if any element is neither str nor bytes.
    """
    if isinstance(iterable, str | bytes):
        raise TypeError("arguments must be built from an iterable of tokens, not a single token")
    for token in iterable:
        if isinstance(token, bytearray):
            token = bytes(token)
        if not isinstance(token, str | bytes):
            raise TypeError("arguments tokens must be strings or bytes")
        yield token


def _looks_like_flag(text, /):
    return text is not Unset and text.startswith("-") and text != "-"


class Arguments:
    """
    Mutable store of raw command-line tokens with destructive extraction.

    Construction
    - Arguments(tokens) / Arguments.from_args(tokens): the tokens must not
      include the program name.
    - Arguments.from_env(): sys.argv without its first element.
    """
    __slots__ = ("_tokens",)

    def __init__(self, tokens=(), /):
        self._tokens = list(_sanitized(tokens))

    @classmethod
    def from_args(cls, tokens, /):
        """
        Build a store from an explicit token list (program name already removed).
        """
        return cls(tokens)

    @classmethod
    def from_env(cls):
        """
        Build a store from sys.argv, dropping the executable path.
        """
        return cls(sys.argv[1:])

    # --- internals -------------------------------------------------------

    def _live(self):
        if self._tokens is Unset:
            raise RuntimeError("arguments were already consumed by finish() or free()")
        return self._tokens

    def _consume(self):
        tokens = self._live()
        self._tokens = Unset
        return tokens

    def _index_of(self, keys, /):
        """
        Locate the first token equal to an alias, trying aliases in order.

        Returns
        - (index, key) of the match, or Unset.
        """
        tokens = self._live()
        for key in keys:
            for index, token in enumerate(tokens):
                if textify(token) == key:
                    return index, key
        return Unset

    def _index_of_inline(self, keys, /):
        """
        Locate the first text token spelled '<alias>=...', trying aliases in order.
        """
        tokens = self._live()
        for key in keys:
            prefix = key + "="
            for index, token in enumerate(tokens):
                if (text := textify(token)) is not Unset and text.startswith(prefix):
                    return index, key
        return Unset

    def _find_value(self, keys, /):
        """
        Find the raw text value for an option without consuming anything.

        Returns
        - _Pair(value, kind, index, key) where kind tells how many tokens to
          remove starting at index, or Unset when the option is absent.

        Raises
        - OptionWithoutAValueError: the option has no (usable) value.
        - NonTextArgumentError: the two-token value is not text.
        """
        tokens = self._live()

        if (found := self._index_of(keys)) is not Unset:
            index, key = found
            try:
                value = tokens[index + 1]
            except IndexError:
                raise _option_without_a_value(key, index) from None
            if (value := textify(value)) is Unset:
                raise _non_text_argument(index + 1)
            return _Pair(value, PairKind.TWO_ARGUMENTS, index, key)

        if (found := self._index_of_inline(keys)) is not Unset:
            index, key = found
            value = textify(tokens[index])[len(key) + 1:]

            # A quoted value must be closed by the same quote character.
            if value[:1] in ("'", '"'):
                quote, value = value[0], value[1:]
                if not value.endswith(quote):
                    raise _option_without_a_value(key, index)
                value = value[:-1]

            if not value:
                raise _option_without_a_value(key, index)
            return _Pair(value, PairKind.SINGLE_ARGUMENT, index, key)

        return Unset

    def _opt_value(self, keys, function, /):
        if (pair := self._find_value(Keys.coerce(keys))) is Unset:
            return Unset
        try:
            result = function(pair.value)
        except Exception as exception:
            raise _option_value_parsing_failed(pair.key, pair.index, pair.value, exception) from exception

        # Remove only once every check has passed.
        del self._live()[pair.index:pair.index + pair.kind]
        return result

    def _opt_raw_value(self, keys, function, /):
        if (found := self._index_of(Keys.coerce(keys))) is Unset:
            return Unset
        tokens = self._live()
        index, key = found
        try:
            value = tokens[index + 1]
        except IndexError:
            raise _option_without_a_value(key, index) from None
        try:
            result = function(value)
        except Exception as exception:
            raise _option_value_parsing_failed(key, index, lossy(value), exception) from exception

        del tokens[index:index + PairKind.TWO_ARGUMENTS]
        return result

    def _check_for_flags(self, tokens, /):
        """
        Fail when flag-looking tokens remain (the lone "-" is a free argument).

        Non-text tokens cannot be flags and are skipped.
        """
        flags = [text for token in tokens if _looks_like_flag(text := textify(token))]
        if flags:
            raise _unused_args_left(flags)

    def _opt_free(self, function, /, *, raw):
        tokens = self._live()
        self._check_for_flags(tokens)
        if not tokens:
            return Unset

        # Free arguments are consumed even when decoding fails.
        token = tokens.pop(0)
        if raw:
            value = token
        elif (value := textify(token)) is Unset:
            raise _non_text_argument(0)

        try:
            return function(value)
        except Exception as exception:
            raise _argument_parsing_failed(lossy(token), exception) from exception

    # --- flags -----------------------------------------------------------

    def contains(self, keys, /):
        """
        Check for a flag and remove it.

        Parameters
        - keys: Keys | str | tuple[str] | tuple[str, str]

        Returns
        - True when a token equal to one of the aliases was found (and the
          first such token, primary alias first, was removed); otherwise False.

        Notes
        - Use it once per flag: a second call only succeeds if the flag was
          given twice.
        """
        if (found := self._index_of(Keys.coerce(keys))) is Unset:
            return False
        del self._live()[found[0]]
        return True

    # --- options ---------------------------------------------------------

    def opt_value_from_fn(self, keys, function, /, default=None):
        """
        Parse an optional key-value pair with a decoder.

        Parameters
        - keys: Keys | str | tuple[str] | tuple[str, str]
        - function: Callable[[str], T], any exception it raises is a decode failure.
        - default: returned when the option is absent (None unless given).

        Returns
        - the decoded value (both tokens, or the single inline token, removed),
          or default.

        Raises
        - OptionWithoutAValueError: option present without a usable value.
        - OptionValueParsingError: the decoder rejected the value.
        - NonTextArgumentError: the value token is not text.
        In every error case the option's tokens stay in the store.
        """
        return coalesce(self._opt_value(keys, function), default)

    def opt_value_from_str(self, keys, /, default=None):
        """
        Parse an optional key-value pair as a plain string.
        """
        return coalesce(self._opt_value(keys, str), default)

    def opt_value_from_os_str(self, keys, function, /, default=None):
        """
        Parse an optional key-value pair from the raw value token.

        Only the two-token form is supported: inline values need text
        inspection. The decoder receives the token unchanged (str, possibly
        with surrogate escapes, or bytes).
        """
        return coalesce(self._opt_raw_value(keys, function), default)

    def value_from_fn(self, keys, function, /):
        """
        Parse a required key-value pair with a decoder.

        Raises
        - MissingOptionError: the option is absent.
        - everything opt_value_from_fn() raises.
        """
        keys = Keys.coerce(keys)
        if (result := self._opt_value(keys, function)) is Unset:
            raise _missing_option(keys)
        return result

    def value_from_str(self, keys, /):
        return self.value_from_fn(keys, str)

    def value_from_os_str(self, keys, function, /):
        keys = Keys.coerce(keys)
        if (result := self._opt_raw_value(keys, function)) is Unset:
            raise _missing_option(keys)
        return result

    def values_from_fn(self, keys, function, /):
        """
        Parse every occurrence of a repeated option, in order of discovery.

        Returns
        - list of decoded values; empty when the option never appears.

        Raises
        - the first extraction error encountered (values already collected are
          consumed; the failing occurrence stays in the store).
        """
        keys = Keys.coerce(keys)
        values = []
        while (result := self._opt_value(keys, function)) is not Unset:
            values.append(result)
        return values

    def values_from_str(self, keys, /):
        return self.values_from_fn(keys, str)

    def values_from_os_str(self, keys, function, /):
        keys = Keys.coerce(keys)
        values = []
        while (result := self._opt_raw_value(keys, function)) is not Unset:
            values.append(result)
        return values

    # --- free arguments --------------------------------------------------

    def opt_free_from_fn(self, function, /, default=None):
        """
        Take the first remaining token as a free argument and decode it.

        Behavior
        - Leftover flags are reported first (UnusedArgsLeftError) and nothing is
          consumed in that case.
        - An empty store returns default.
        - Otherwise the first token is removed, then decoded; it stays removed
          even when decoding fails (ArgumentParsingError).
        """
        return coalesce(self._opt_free(function, raw=False), default)

    def opt_free_from_str(self, /, default=None):
        return coalesce(self._opt_free(str, raw=False), default)

    def opt_free_from_os_str(self, function, /, default=None):
        return coalesce(self._opt_free(function, raw=True), default)

    def free_from_fn(self, function, /):
        """
        Like opt_free_from_fn(), but an empty store raises MissingArgumentError.
        """
        if (result := self._opt_free(function, raw=False)) is Unset:
            raise _missing_argument()
        return result

    def free_from_str(self):
        return self.free_from_fn(str)

    def free_from_os_str(self, function, /):
        if (result := self._opt_free(function, raw=True)) is Unset:
            raise _missing_argument()
        return result

    def free(self):
        """
        Consume the store and return every remaining token as a free argument.

        Raises
        - UnusedArgsLeftError: flag-looking tokens remain ("-" excluded).
        - NonTextArgumentError: a remaining token is not text (see free_os()).
        """
        tokens = self._consume()
        self._check_for_flags(tokens)
        arguments = []
        for index, token in enumerate(tokens):
            if (text := textify(token)) is Unset:
                raise _non_text_argument(index)
            arguments.append(text)
        return arguments

    def free_os(self):
        """
        Consume the store and return every remaining token unchanged.

        Raises
        - UnusedArgsLeftError: flag-looking tokens remain ("-" excluded).
        """
        tokens = self._consume()
        self._check_for_flags(tokens)
        return tokens

    # --- completion ------------------------------------------------------

    def finish(self):
        """
        Consume the store and check that nothing is left.

        Use it instead of free() when no free arguments are expected.

        Raises
        - UnusedArgsLeftError: listing every remaining token (non-text tokens
          are shown as a placeholder).
        """
        if tokens := self._consume():
            raise _unused_args_left([coalesce(textify(token), NON_TEXT_PLACEHOLDER) for token in tokens])

    def subcommand(self):
        """
        Take the first token as a subcommand name.

        Returns
        - the removed first token, or None when the store is empty or the
          first token looks like a flag (starts with '-').

        Raises
        - NonTextArgumentError: the first token is not text (it is kept).
        """
        tokens = self._live()
        if not tokens:
            return None
        if (text := textify(tokens[0])) is Unset:
            raise _non_text_argument(0)
        if text.startswith("-"):
            return None
        del tokens[0]
        return text

    # --- introspection ---------------------------------------------------

    def __len__(self):
        return len(self._live())

    def __repr__(self):
        if self._tokens is Unset:
            return "arguments(consumed)"
        return "arguments(%r)" % self._tokens

    def __rich_repr__(self):
        if self._tokens is not Unset:
            yield from self._tokens


def _non_text_argument(index, /):
    return NonTextArgumentError(
        "argument is not a UTF-8 string",
        title="non-text argument",
        code=FaultCode.NON_TEXT_ARGUMENT,
        hint="the %s remaining argument must be valid UTF-8 text" % ordinal(index + 1),
        index=index,
        docs=getdoc(FaultCode.NON_TEXT_ARGUMENT),
    )


def _option_without_a_value(key, index, /):
    return OptionWithoutAValueError(
        "the %r option doesn't have an associated value" % key,
        title="option without a value",
        code=FaultCode.OPTION_WITHOUT_A_VALUE,
        hint="add a value to %r at %s position (for example: %s <value> or %s=<value>)" % (
            key, ordinal(index + 1), key, key
        ),
        key=key,
        index=index,
        docs=getdoc(FaultCode.OPTION_WITHOUT_A_VALUE),
    )


def _option_value_parsing_failed(key, index, value, exception, /):
    return OptionValueParsingError(
        "failed to parse a %r value: %s" % (key, exception),
        title="option value parsing failed",
        code=FaultCode.OPTION_VALUE_PARSING_FAILED,
        hint="%r at %s position was given %r; use a valid value" % (key, ordinal(index + 1), value),
        key=key,
        index=index,
        value=value,
        cause=str(exception),
        docs=getdoc(FaultCode.OPTION_VALUE_PARSING_FAILED),
    )


def _missing_option(keys, /):
    return MissingOptionError(
        "the %r option must be set" % str(keys),
        title="missing option",
        code=FaultCode.MISSING_OPTION,
        hint="pass %s <value>" % " or ".join(keys),
        keys=keys,
        docs=getdoc(FaultCode.MISSING_OPTION),
    )


def _argument_parsing_failed(value, exception, /):
    return ArgumentParsingError(
        "failed to parse %r: %s" % (value, exception),
        title="argument parsing failed",
        code=FaultCode.ARGUMENT_PARSING_FAILED,
        hint="replace %r with a valid value" % value,
        value=value,
        cause=str(exception),
        docs=getdoc(FaultCode.ARGUMENT_PARSING_FAILED),
    )


def _missing_argument():
    return MissingArgumentError(
        "free-standing argument is missing",
        title="missing argument",
        code=FaultCode.MISSING_ARGUMENT,
        hint="add the missing positional argument",
        docs=getdoc(FaultCode.MISSING_ARGUMENT),
    )


def _unused_args_left(tokens, /):
    return UnusedArgsLeftError(
        "unused arguments left: %s" % ", ".join(tokens),
        title="unused arguments",
        code=FaultCode.UNUSED_ARGS_LEFT,
        hint="remove the extra inputs or check their spelling",
        tokens=tuple(tokens),
        docs=getdoc(FaultCode.UNUSED_ARGS_LEFT),
    )


__all__ = (
    # Public API surface for consumers of pincer.arguments.
    # These names are re-exported from the package __init__.
    "Arguments",
    "PairKind",
    "NON_TEXT_PLACEHOLDER",
)
