"""
UE14500 Assembly Package
========================

This package provides an assembler for the UE14500 12-bit-word processor,
a codec for its packed binary images, and helper utilities for loading
programs.

Quick start:
    from ue14500_assembly import parse_assembly, encode_binary, decode_binary

    nodes = parse_assembly("ONE 0o77 0b0\\nSTOC 0o50 0b0\\n")
    image = encode_binary(nodes)
    words = decode_binary(image)

    # Exception-raising helpers
    from ue14500_assembly import assemble_file, UE14500Loader

    image = assemble_file("path/to/program.asm")
"""

from ue14500_assembly.binary import decode_binary, encode_binary
from ue14500_assembly.errors import (
    AssemblyError,
    ExpectedAddress,
    ExpectedComment,
    ExpectedControl,
    ExpectedInstruction,
    ExpectedWord,
    ParseError,
    UnexpectedEoi,
)
from ue14500_assembly.parser import parse_assembly
from ue14500_assembly.ue14500asm import UE14500Assembler
from ue14500_assembly.ue14500_loader import (
    UE14500Loader,
    assemble,
    assemble_file,
    load_binary,
)
from ue14500_assembly.words import (
    Address,
    AddressKind,
    Comment,
    Control,
    Instruction,
    Node,
    Word,
)

__all__ = [
    'Address',
    'AddressKind',
    'AssemblyError',
    'Comment',
    'Control',
    'ExpectedAddress',
    'ExpectedComment',
    'ExpectedControl',
    'ExpectedInstruction',
    'ExpectedWord',
    'Instruction',
    'Node',
    'ParseError',
    'UE14500Assembler',
    'UE14500Loader',
    'UnexpectedEoi',
    'Word',
    'assemble',
    'assemble_file',
    'decode_binary',
    'encode_binary',
    'load_binary',
    'parse_assembly',
]

__version__ = '1.0.0'
