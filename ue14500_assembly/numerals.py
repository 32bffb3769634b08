"""
UE14500 Numeral Lexer
=====================

Address and control fields are written as prefixed numerals:

    0b101000    binary
    0o50        octal
    0h28        hexadecimal

A field parser tries binary, then octal, then hexadecimal, and accepts the
first form that matches. The order is fixed.
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple, Type

from ue14500_assembly.errors import ExpectedAddress, ParseError, UnexpectedEoi


@dataclass(frozen=True)
class NumeralForm:
    """A prefixed numeral notation."""
    name: str
    prefix: str
    radix: int
    pattern: re.Pattern


def _form(name: str, prefix: str, radix: int, digits: str, max_digits: int) -> NumeralForm:
    # Digit run must end at a token boundary: "0o78" is not 0o7 + "8".
    pattern = re.compile(
        rf'{re.escape(prefix)}([{digits}]{{1,{max_digits}}})(?![0-9A-Za-z_])')
    return NumeralForm(name, prefix, radix, pattern)


BINARY = _form('binary', '0b', 2, '01', 32)
OCTAL = _form('octal', '0o', 8, '0-7', 11)
HEXADECIMAL = _form('hexadecimal', '0h', 16, '0-9a-fA-F', 8)

NUMERAL_FORMS = (BINARY, OCTAL, HEXADECIMAL)


def read_numeral(text: str, pos: int, form: NumeralForm,
                 error: Type[ParseError] = ExpectedAddress,
                 end: Optional[int] = None) -> Tuple[int, int]:
    """Read a single numeral of the given form.

    Args:
        text: Source text
        pos: Offset to start reading at
        form: Numeral notation required at ``pos``
        error: ParseError subclass raised on mismatch
        end: Offset to stop reading at (defaults to the end of text)

    Returns:
        Tuple of (value, characters consumed)

    Raises:
        ParseError: ``error(pos)`` if no numeral of that form starts at pos
    """
    end = len(text) if end is None else end
    match = form.pattern.match(text, pos, end)
    if not match:
        raise error(pos, text)
    return int(match.group(1), form.radix), match.end() - pos


def read_field(text: str, pos: int,
               error: Type[ParseError] = ExpectedAddress,
               end: Optional[int] = None) -> Tuple[int, int]:
    """Read a numeral in any supported notation.

    Forms are tried in ``NUMERAL_FORMS`` order; the first match wins.

    Raises:
        UnexpectedEoi: If pos is already at the end of input
        ParseError: ``error(pos)`` if no form matches
    """
    end = len(text) if end is None else end
    if pos >= end:
        raise UnexpectedEoi(pos, text)

    for form in NUMERAL_FORMS:
        try:
            return read_numeral(text, pos, form, error, end)
        except error:
            continue

    raise error(pos, text)
