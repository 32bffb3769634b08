"""
UE14500 Assembly Errors
=======================

Exception hierarchy shared by the parser, the codec and the loader.

Every syntax error raised while parsing assembly text is a ``ParseError``
carrying the character offset of the failure point, plus the derived
1-based line and column used for diagnostics.
"""

from typing import Optional, Sequence


class AssemblyError(Exception):
    """Exception raised when assembly fails."""
    pass


class ParseError(AssemblyError):
    """Base class for syntax errors in assembly text."""

    expected = 'construct'

    def __init__(self, offset: int, text: Optional[str] = None):
        self.offset = offset
        self.line, self.column = _locate(text, offset)
        super().__init__(f"{self.describe()} at line {self.line}, column {self.column}")

    def describe(self) -> str:
        return f"expected {self.expected}"


class ExpectedInstruction(ParseError):
    """No mnemonic alternative matched at the current position."""

    expected = 'instruction'

    def __init__(self, offset: int, text: Optional[str] = None,
                 candidates: Sequence = ()):
        self.candidates = tuple(candidates)
        super().__init__(offset, text)


class ExpectedAddress(ParseError):
    expected = 'address'


class ExpectedControl(ParseError):
    expected = 'control'


class ExpectedWord(ParseError):
    expected = 'end of line after word'


class ExpectedComment(ParseError):
    expected = 'comment'


class UnexpectedEoi(ParseError):
    expected = 'more input'

    def describe(self) -> str:
        return "unexpected end of input"


def _locate(text: Optional[str], offset: int):
    if text is None:
        return 1, offset + 1
    line = text.count('\n', 0, offset) + 1
    column = offset - (text.rfind('\n', 0, offset) + 1) + 1
    return line, column
