"""
UE14500 Word Model
==================

The UE14500 executes a single 12-bit word format:

    IIII AAAAAA CC

    I: instruction (opcode), bits 8-11
    A: address / operand,    bits 2-7
    C: I/O control,          bits 0-1

Instructions and controls are closed enumerations driven by lookup tables.
Addresses carry a derived addressing-mode classification that is computed
from fixed sub-ranges of the 6-bit address space.
"""

import enum
from dataclasses import dataclass, replace
from typing import Tuple, Union


# =============================================================================
# Field Layout
# =============================================================================

WORD_BITS = 12

INST_BITS = 4
INST_POS = 8
INST_MASK = 0b1111_000000_00

ADDR_BITS = 6
ADDR_POS = 2
ADDR_MASK = 0b0000_111111_00

CTRL_BITS = 2
CTRL_POS = 0
CTRL_MASK = 0b0000_000000_11


# =============================================================================
# Instruction Set Definition
# =============================================================================

# code -> (mnemonic, accepted spelling)
INSTRUCTION_TABLE = {
    0b0000: ('nop0', 'Nop0'),
    0b0001: ('ld',   'Ld'),
    0b0010: ('add',  'Add'),
    0b0011: ('sub',  'Sub'),
    0b0100: ('one',  'One'),
    0b0101: ('nand', 'Nand'),
    0b0110: ('or',   'Or'),
    0b0111: ('xor',  'Xor'),
    0b1000: ('sto',  'Sto'),
    0b1001: ('stoc', 'StoC'),
    0b1010: ('ien',  'Ien'),
    0b1011: ('oen',  'Oen'),
    0b1100: ('ioc',  'Ioc'),
    0b1101: ('rtn',  'Rtn'),
    0b1110: ('skz',  'Skz'),
    0b1111: ('nopf', 'NopF'),
}

# Inclusive address ranges -> classification name
ADDRESS_TABLE = (
    (range(0b000_000, 0b100_111 + 1), 'GENERAL',        'general'),
    (range(0b101_000, 0b101_111 + 1), 'PARALLEL_READ',  'parallel read'),
    (range(0b110_000, 0b110_111 + 1), 'EXTERNAL_INPUT', 'external input'),
    (range(0b111_000, 0b111_000 + 1), 'QRR',            'qrr'),
    (range(0b111_001, 0b111_001 + 1), 'RR',             'rr'),
    (range(0b111_010, 0b111_011 + 1), 'HIGH_INPUT',     'high input'),
    (range(0b111_100, 0b111_111 + 1), 'LOW_INPUT',      'low input / high-z'),
)

# code -> control name
CONTROL_TABLE = {
    0b00: 'null',
    0b01: 'copy and shift out',
    0b10: 'undefined',
    0b11: 'stop tape',
}


class Instruction(enum.IntEnum):
    """One of the sixteen UE14500 opcodes."""

    NOP0 = 0b0000
    LD = 0b0001
    ADD = 0b0010
    SUB = 0b0011
    ONE = 0b0100
    NAND = 0b0101
    OR = 0b0110
    XOR = 0b0111
    STO = 0b1000
    STOC = 0b1001
    IEN = 0b1010
    OEN = 0b1011
    IOC = 0b1100
    RTN = 0b1101
    SKZ = 0b1110
    NOPF = 0b1111

    @classmethod
    def from_bits(cls, bits: int) -> 'Instruction':
        """Extract the instruction field from a whole word."""
        return cls((bits & INST_MASK) >> INST_POS)

    @property
    def code(self) -> int:
        return int(self)

    @property
    def mnemonic(self) -> str:
        return INSTRUCTION_TABLE[self.code][0]

    @property
    def spellings(self) -> Tuple[str, ...]:
        """Spellings accepted on input: as tabled, lowercase, uppercase."""
        spelling = INSTRUCTION_TABLE[self.code][1]
        return tuple(dict.fromkeys((spelling, spelling.lower(), spelling.upper())))

    @property
    def binary(self) -> str:
        return f"{self.code:04b}"

    @property
    def octal(self) -> str:
        return f"{self.code:02o}"

    def __format__(self, spec: str) -> str:
        if spec == 'b':
            return self.binary
        if spec == 'o':
            return self.octal
        return format(self.mnemonic, spec)

    def __str__(self) -> str:
        return self.mnemonic


AddressKind = enum.Enum(
    'AddressKind',
    [(kind, label) for _, kind, label in ADDRESS_TABLE],
    module=__name__,
)
AddressKind.__doc__ = "Addressing-mode classification of a 6-bit address."


def classify(value: int) -> AddressKind:
    """Return the addressing-mode classification for a 6-bit address value."""
    for span, kind, _ in ADDRESS_TABLE:
        if value in span:
            return AddressKind[kind]
    raise ValueError(f"address out of range: {value}")


@dataclass(frozen=True)
class Address:
    """A 6-bit address. The classification is derived from the value."""

    value: int

    def __post_init__(self):
        object.__setattr__(self, 'value', int(self.value) & (ADDR_MASK >> ADDR_POS))

    @classmethod
    def from_bits(cls, bits: int) -> 'Address':
        """Extract the address field from a whole word."""
        return cls((bits & ADDR_MASK) >> ADDR_POS)

    @property
    def kind(self) -> AddressKind:
        return classify(self.value)

    @property
    def name(self) -> str:
        return self.kind.value

    @property
    def binary(self) -> str:
        return f"{self.value:06b}"

    @property
    def octal(self) -> str:
        return f"{self.value:02o}"

    def __int__(self) -> int:
        return self.value

    def __format__(self, spec: str) -> str:
        if spec == 'b':
            return self.binary
        if spec == 'o':
            return self.octal
        return format(self.value, spec)


class Control(enum.IntEnum):
    """The 2-bit I/O control field."""

    NULL = 0b00
    COPY_SHIFT = 0b01
    UNDEFINED = 0b10
    STOP_TAPE = 0b11

    @classmethod
    def from_bits(cls, bits: int) -> 'Control':
        return cls((bits & CTRL_MASK) >> CTRL_POS)

    @property
    def code(self) -> int:
        return int(self)

    @property
    def label(self) -> str:
        return CONTROL_TABLE[self.code]

    @property
    def binary(self) -> str:
        return f"{self.code:02b}"

    @property
    def octal(self) -> str:
        return f"{self.code:01o}"

    def __format__(self, spec: str) -> str:
        if spec == 'b':
            return self.binary
        if spec == 'o':
            return self.octal
        return format(self.label, spec)

    def __str__(self) -> str:
        return self.label


# =============================================================================
# Data Structures
# =============================================================================

@dataclass(frozen=True)
class Word:
    """Represents a 12-bit code word."""
    instruction: Instruction
    address: Address
    control: Control

    @classmethod
    def from_bits(cls, bits: int) -> 'Word':
        """Decode a word. Bits above the low 12 are ignored."""
        return cls(
            Instruction.from_bits(bits),
            Address.from_bits(bits),
            Control.from_bits(bits),
        )

    def to_bits(self) -> int:
        return (self.instruction.code << INST_POS
                | self.address.value << ADDR_POS
                | self.control.code << CTRL_POS)

    def __int__(self) -> int:
        return self.to_bits()

    def with_instruction(self, instruction: Instruction) -> 'Word':
        return replace(self, instruction=instruction)

    def with_address(self, address: Address) -> 'Word':
        return replace(self, address=address)

    def with_control(self, control: Control) -> 'Word':
        return replace(self, control=control)


@dataclass(frozen=True)
class Comment:
    """Represents a comment line; text excludes the leading ';'."""
    text: str


Node = Union[Word, Comment]


def decode(bits: int) -> Word:
    return Word.from_bits(bits)


def encode(word: Word) -> int:
    return word.to_bits()
