"""
UE14500 Binary Codec
====================

Binary images are a raw stream of 12-bit words packed MSB-first:

    IIIIAAAA AACCIIII AAAAAACC ...

No header, no word count. The final byte is zero-padded, so an image of
``n`` words is ``ceil(12 * n / 8)`` bytes long, and a trailing fragment of
fewer than 12 bits is padding rather than a truncated word.
"""

import io
import logging
from typing import BinaryIO, Iterable, List

from ue14500_assembly.words import (
    ADDR_BITS,
    CTRL_BITS,
    INST_BITS,
    WORD_BITS,
    Node,
    Word,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Bit Streams
# =============================================================================

class BitWriter:
    """Writes MSB-first bit fields to a binary stream."""

    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self.acc = 0
        self.pending = 0
        self.written = 0

    def write_bits(self, value: int, count: int):
        """Append the low ``count`` bits of value, most significant first."""
        self.acc = (self.acc << count) | (value & ((1 << count) - 1))
        self.pending += count
        while self.pending >= 8:
            self.pending -= 8
            self.stream.write(bytes([(self.acc >> self.pending) & 0xFF]))
            self.written += 1
        self.acc &= (1 << self.pending) - 1

    def pad_to_byte(self):
        """Zero-fill up to the next byte boundary."""
        if self.pending:
            self.write_bits(0, 8 - self.pending)


class BitReader:
    """Reads MSB-first bit fields from a binary stream."""

    def __init__(self, stream: BinaryIO):
        self.stream = stream
        self.acc = 0
        self.available = 0

    def read_bits(self, count: int) -> int:
        """Read ``count`` bits.

        Raises:
            EOFError: If the stream holds fewer than count bits. The bits
                already buffered stay in ``available``.
        """
        while self.available < count:
            chunk = self.stream.read(1)
            if not chunk:
                raise EOFError(f"{self.available} bits left, {count} requested")
            self.acc = (self.acc << 8) | chunk[0]
            self.available += 8

        self.available -= count
        value = self.acc >> self.available
        self.acc &= (1 << self.available) - 1
        return value


# =============================================================================
# Serialization
# =============================================================================

def serialize(stream: BinaryIO, nodes: Iterable[Node]) -> int:
    """Pack words into a writable binary stream.

    Comments are skipped; they occupy no bits.

    Returns:
        Number of words written
    """
    writer = BitWriter(stream)
    count = 0

    for node in nodes:
        if not isinstance(node, Word):
            continue
        writer.write_bits(node.instruction.code, INST_BITS)
        writer.write_bits(node.address.value, ADDR_BITS)
        writer.write_bits(node.control.code, CTRL_BITS)
        count += 1

    writer.pad_to_byte()
    logger.debug(f"Serialized {count} words into {writer.written} bytes")
    return count


def deserialize(stream: BinaryIO) -> List[Word]:
    """Unpack words from a readable binary stream until it runs dry."""
    reader = BitReader(stream)
    words = []

    while True:
        try:
            bits = reader.read_bits(WORD_BITS)
        except EOFError:
            break
        words.append(Word.from_bits(bits))

    if reader.available:
        logger.debug(f"Discarded {reader.available} trailing pad bits")
    return words


def encode_binary(nodes: Iterable[Node]) -> bytes:
    """Encode nodes to a packed byte string."""
    buf = io.BytesIO()
    serialize(buf, nodes)
    return buf.getvalue()


def decode_binary(data: bytes) -> List[Word]:
    """Decode a packed byte string into words."""
    return deserialize(io.BytesIO(data))


# =============================================================================
# Files
# =============================================================================

def read_file(path) -> List[Word]:
    """Read a binary image from disk and decode its words."""
    with open(path, 'rb') as f:
        return deserialize(f)


def write_file(path, nodes: Iterable[Node]) -> int:
    """Encode nodes and write the binary image to disk."""
    with open(path, 'wb') as f:
        return serialize(f, nodes)
