"""
UE14500 Assembly Parser
=======================

Line-oriented grammar for UE14500 assembly text:

    program := (comment | word)*          surrounding blank lines trimmed
    comment := ';' text_to_eol newline
    word    := mnemonic space+ addr space+ ctrl newline
    newline := '\\n' | '\\r\\n' | end of input

Example:
    ; set the output enable
    ONE  0o77 0b0
    STOC 0o50 0b0
    NOP0 0o77 0b1

Mnemonics are case-insensitive within the spellings listed in the instruction
table (``One``, ``one``, ``ONE``). Blank lines between content lines are a
syntax error.
"""

import logging
from typing import List, Tuple, Type

from ue14500_assembly.errors import (
    ExpectedAddress,
    ExpectedComment,
    ExpectedControl,
    ExpectedInstruction,
    ExpectedWord,
    ParseError,
    UnexpectedEoi,
)
from ue14500_assembly.numerals import read_field
from ue14500_assembly.words import (
    ADDR_MASK,
    ADDR_POS,
    CTRL_MASK,
    Address,
    Comment,
    Control,
    Instruction,
    Node,
    Word,
)

logger = logging.getLogger(__name__)

HSPACE = ' \t'

# Longest spellings first so that "stoc" is tried before "sto"
MNEMONICS: Tuple[Tuple[str, Instruction], ...] = tuple(sorted(
    ((spelling, inst) for inst in Instruction for spelling in inst.spellings),
    key=lambda item: len(item[0]),
    reverse=True,
))


class AssemblyParser:
    """Recursive-descent parser over a fully buffered source string."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.end = len(text)
        # (line, message) for every field truncated while parsing
        self.warnings: List[Tuple[int, str]] = []

    # -------------------------------------------------------------------------
    # Program
    # -------------------------------------------------------------------------

    def parse(self) -> List[Node]:
        """Parse a whole program into nodes."""
        self.pos = len(self.text) - len(self.text.lstrip())
        self.end = max(len(self.text.rstrip()), self.pos)

        nodes = []
        while self.pos < self.end:
            nodes.append(self.line())
        return nodes

    def line(self) -> Node:
        self.skip_space()
        if self.peek() == ';':
            node = self.comment()
            self.newline(ExpectedComment)
        else:
            node = self.word()
            self.newline(ExpectedWord)
        return node

    # -------------------------------------------------------------------------
    # Constructs
    # -------------------------------------------------------------------------

    def comment(self) -> Comment:
        if self.peek() != ';':
            raise self.error(ExpectedComment)

        start = self.pos + 1
        stop = self.text.find('\n', start, self.end)
        if stop == -1:
            stop = self.end

        self.pos = stop
        return Comment(self.text[start:stop].rstrip())

    def word(self) -> Word:
        instruction = self.instruction()
        self.separator(ExpectedAddress)
        address = self.address()
        self.separator(ExpectedControl)
        control = self.control()
        return Word(instruction, address, control)

    def instruction(self) -> Instruction:
        if self.pos >= self.end:
            raise self.error(UnexpectedEoi)

        for spelling, instruction in MNEMONICS:
            stop = self.pos + len(spelling)
            if self.text.startswith(spelling, self.pos, self.end) and self.at_boundary(stop):
                self.pos = stop
                return instruction

        raise ExpectedInstruction(self.pos, self.text, candidates=tuple(Instruction))

    def address(self) -> Address:
        start = self.pos
        value = self.field(ExpectedAddress)
        limit = ADDR_MASK >> ADDR_POS
        if value > limit:
            self.warn_truncated('address', value, value & limit, start)
        return Address(value & limit)

    def control(self) -> Control:
        start = self.pos
        value = self.field(ExpectedControl)
        if value > CTRL_MASK:
            self.warn_truncated('control', value, value & CTRL_MASK, start)
        return Control(value & CTRL_MASK)

    # -------------------------------------------------------------------------
    # Lexical helpers
    # -------------------------------------------------------------------------

    def field(self, error: Type[ParseError]) -> int:
        value, consumed = read_field(self.text, self.pos, error, self.end)
        self.pos += consumed
        return value

    def separator(self, error: Type[ParseError]):
        """Consume one or more spaces; ``error`` names the next field."""
        if self.pos >= self.end:
            raise self.error(UnexpectedEoi)
        if self.peek() not in HSPACE:
            raise self.error(error)
        self.skip_space()

    def newline(self, error: Type[ParseError]):
        self.skip_space()
        if self.pos >= self.end:
            return
        if self.text.startswith('\r\n', self.pos):
            self.pos += 2
        elif self.text.startswith('\n', self.pos):
            self.pos += 1
        else:
            raise self.error(error)

    def skip_space(self):
        while self.pos < self.end and self.text[self.pos] in HSPACE:
            self.pos += 1

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < self.end else ''

    def at_boundary(self, pos: int) -> bool:
        return pos >= self.end or not (self.text[pos].isalnum() or self.text[pos] == '_')

    def error(self, error: Type[ParseError]) -> ParseError:
        return error(self.pos, self.text)

    def warn_truncated(self, field: str, value: int, kept: int, offset: int):
        line = self.text.count('\n', 0, offset) + 1
        msg = f"{field} {value} does not fit its field, truncated to {kept}"
        self.warnings.append((line, msg))
        logger.warning(f"Line {line}: {msg}")

    def finish(self, error: Type[ParseError]):
        """Require that nothing follows the construct just parsed."""
        self.newline(error)
        if self.pos < self.end:
            raise self.error(error)


# =============================================================================
# Entry Points
# =============================================================================

def parse_assembly(text: str) -> List[Node]:
    """Parse assembly text into an ordered list of Word and Comment nodes.

    Raises:
        ParseError: On the first syntax error; no partial result is returned
    """
    nodes = AssemblyParser(text).parse()
    words = sum(1 for node in nodes if isinstance(node, Word))
    logger.debug(f"Parsed {len(nodes)} nodes ({words} words, {len(nodes) - words} comments)")
    return nodes


def read_file(path) -> List[Node]:
    """Read an assembly file from disk and parse it."""
    with open(path, 'r', encoding='utf-8') as f:
        source = f.read()
    return parse_assembly(source)


def parse_comment(text: str) -> Comment:
    """Parse exactly one comment line; anything after its newline is an error."""
    parser = AssemblyParser(text)
    node = parser.comment()
    parser.finish(ExpectedComment)
    return node


def parse_word(text: str) -> Word:
    """Parse exactly one word line; anything after its newline is an error."""
    parser = AssemblyParser(text)
    node = parser.word()
    parser.finish(ExpectedWord)
    return node


def parse_instruction(text: str) -> Instruction:
    return AssemblyParser(text).instruction()


def parse_address(text: str) -> Address:
    return AssemblyParser(text).address()


def parse_control(text: str) -> Control:
    return AssemblyParser(text).control()
