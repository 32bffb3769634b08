"""
UE14500 Program Loader
======================

Helper module to assemble UE14500 programs and load binary images from code.

Usage:
    from ue14500_assembly.ue14500_loader import UE14500Loader

    loader = UE14500Loader()
    image = loader.assemble_file("path/to/program.asm")
    words = loader.get_words()

    # Or load a pre-assembled binary
    words = loader.load_binary("path/to/program.bin")
"""

import logging
from typing import List, Optional, Sequence, Tuple

from ue14500_assembly import binary
from ue14500_assembly.errors import AssemblyError
from ue14500_assembly.ue14500asm import UE14500Assembler
from ue14500_assembly.words import (
    ADDR_MASK,
    ADDR_POS,
    CTRL_MASK,
    Address,
    Comment,
    Control,
    Instruction,
    Word,
)

logger = logging.getLogger(__name__)


class UE14500Loader:
    """Helper class for assembling and loading UE14500 programs."""

    def __init__(self):
        self.assembler: Optional[UE14500Assembler] = None
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def assemble(self, source: str) -> bytes:
        """Assemble source code and return the packed binary image.

        Args:
            source: Assembly source code as string

        Returns:
            Packed 12-bit words, final byte zero-padded

        Raises:
            AssemblyError: If assembly fails
        """
        self.assembler = UE14500Assembler()
        success = self.assembler.assemble(source)
        self.errors = self.assembler.errors
        self.warnings = self.assembler.warnings

        if not success:
            raise AssemblyError("Assembly failed:\n" + "\n".join(self.errors))

        return self.assembler.get_binary()

    def assemble_file(self, filepath: str) -> bytes:
        """Assemble a file and return the packed binary image.

        Raises:
            FileNotFoundError: If file doesn't exist
            AssemblyError: If assembly fails
        """
        with open(filepath, 'r', encoding='utf-8') as f:
            source = f.read()
        return self.assemble(source)

    def load_binary(self, filepath: str) -> List[Word]:
        """Load a pre-assembled binary file.

        A trailing fragment shorter than one word is treated as padding.
        """
        return binary.read_file(filepath)

    def get_words(self) -> List[Word]:
        """Get the words from the last assembly."""
        if self.assembler is None:
            return []
        return list(self.assembler.words)

    def get_comments(self) -> List[Comment]:
        """Get the comments from the last assembly, in source order."""
        if self.assembler is None:
            return []
        return self.assembler.comments

    def create_simple_program(self, instructions: Sequence[Tuple]) -> bytes:
        """Create a binary image from instruction tuples.

        This is a convenience method for building small programs without
        writing assembly text.

        Args:
            instructions: Tuples of (mnemonic, address) or
                (mnemonic, address, control)

        Example:
            image = loader.create_simple_program([
                ('ONE', 0o77),
                ('STOC', 0o50),
                ('NOP0', 0o77, 1),
            ])
        """
        words = []
        self.warnings = []
        for index, item in enumerate(instructions):
            mnemonic = item[0].upper()
            address = item[1] if len(item) > 1 else 0
            control = item[2] if len(item) > 2 else 0

            try:
                instruction = Instruction[mnemonic]
            except KeyError:
                raise ValueError(f"Unknown mnemonic: {item[0]}") from None

            for field, value, limit in (('address', address, ADDR_MASK >> ADDR_POS),
                                        ('control', control, CTRL_MASK)):
                if value > limit:
                    msg = f"{field} {value} does not fit its field, truncated to {value & limit}"
                    self.warnings.append(f"Entry {index}: {msg}")
                    logger.warning(f"Entry {index}: {msg}")

            words.append(Word(instruction, Address(address), Control.from_bits(control)))

        return binary.encode_binary(words)


# Convenience functions for quick use
def assemble(source: str) -> bytes:
    """Quick assemble source code to a binary image."""
    loader = UE14500Loader()
    return loader.assemble(source)


def assemble_file(filepath: str) -> bytes:
    """Quick assemble file to a binary image."""
    loader = UE14500Loader()
    return loader.assemble_file(filepath)


def load_binary(filepath: str) -> List[Word]:
    """Quick load of a binary image into words."""
    loader = UE14500Loader()
    return loader.load_binary(filepath)
