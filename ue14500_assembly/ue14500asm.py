#!/usr/bin/env python3
"""
UE14500 Assembler
=================

Assembler for the UE14500 1-bit processor, generating packed 12-bit word
images for tape or ROM loading.

Usage:
    ue14500asm asm input.asm output.bin
    ue14500asm asm input.asm output.hex --format hex
    ue14500asm asm input.asm output.mem --format mem
    ue14500asm list output.bin
"""

import argparse
import logging
import os
import sys
from typing import Iterable, List, Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ue14500_assembly import binary
from ue14500_assembly.errors import ParseError
from ue14500_assembly.parser import AssemblyParser
from ue14500_assembly.words import Comment, Node, Word

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = 'UE14500ASM_LOG_LEVEL'

LOG_LEVELS = {
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'warning': logging.WARNING,
    'error': logging.ERROR,
}


# =============================================================================
# Assembler
# =============================================================================

class UE14500Assembler:
    """Single-pass assembler for UE14500 programs."""

    def __init__(self):
        self.nodes: List[Node] = []
        self.words: List[Word] = []
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def error(self, line_num: int, msg: str):
        """Record an error."""
        self.errors.append(f"Line {line_num}: {msg}")

    def warning(self, line_num: int, msg: str):
        """Record a warning."""
        self.warnings.append(f"Line {line_num}: {msg}")

    def assemble(self, source: str) -> bool:
        """Assemble source code. Returns True on success."""
        self.nodes = []
        self.words = []
        self.errors = []
        self.warnings = []

        parser = AssemblyParser(source)
        try:
            self.nodes = parser.parse()
        except ParseError as e:
            self.error(e.line, f"{e.describe()} at column {e.column}")
            return False

        for line_num, msg in parser.warnings:
            self.warning(line_num, msg)

        self.words = [node for node in self.nodes if isinstance(node, Word)]
        if not self.words:
            self.warnings.append("Program contains no words")

        return True

    @property
    def comments(self) -> List[Comment]:
        return [node for node in self.nodes if isinstance(node, Comment)]

    def get_binary(self) -> bytes:
        """Get binary output."""
        return binary.encode_binary(self.words)

    def get_hex(self) -> str:
        """Get hex output (one word per line with word index)."""
        return '\n'.join(f"{index:04X}: {word.to_bits():03X}"
                         for index, word in enumerate(self.words))

    def get_mem(self) -> str:
        """Get mem output (suitable for $readmemh)."""
        return '\n'.join(f"@{index:04X} {word.to_bits():03X}"
                         for index, word in enumerate(self.words))

    def listing(self, title: Optional[str] = None) -> Table:
        return listing_table(self.words, title)


def listing_table(words: Iterable[Word], title: Optional[str] = None) -> Table:
    """Build a table of words with each field in fixed-width binary."""
    table = Table(title=title, box=box.MINIMAL_DOUBLE_HEAD)
    table.add_column('#', justify='right')
    table.add_column('inst')
    table.add_column('addr')
    table.add_column('ctrl')
    table.add_column('mnemonic')
    table.add_column('mode')

    for index, word in enumerate(words):
        table.add_row(
            str(index),
            f"{word.instruction:b}",
            f"{word.address:b}",
            f"{word.control:b}",
            word.instruction.mnemonic,
            word.address.name,
        )

    return table


# =============================================================================
# Main
# =============================================================================

def configure_logging(level: int):
    logging.basicConfig(
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    logging.getLogger('ue14500_assembly').setLevel(level)


def default_log_level() -> str:
    level = os.environ.get(LOG_LEVEL_ENV, 'warning').lower()
    return level if level in LOG_LEVELS else 'warning'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='ue14500asm',
        description='UE14500 Assembler',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Output formats:
  bin     Packed 12-bit words (default)
  hex     Hex dump with word indexes
  mem     Verilog $readmemh format

Examples:
  %(prog)s asm input.asm output.bin
  %(prog)s asm input.asm output.mem --format mem
  %(prog)s list output.bin
'''
    )

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Verbose output')
    parser.add_argument('--log-level', choices=list(LOG_LEVELS),
                        default=default_log_level(),
                        help=f'Log level (default: ${LOG_LEVEL_ENV} or warning)')

    commands = parser.add_subparsers(dest='command', required=True)

    asm = commands.add_parser('asm', help='assemble binary')
    asm.add_argument('input', help='Input assembly file')
    asm.add_argument('output', help='Output file')
    asm.add_argument('-f', '--format', choices=['bin', 'hex', 'mem'],
                     default='bin', help='Output format (default: bin)')
    asm.add_argument('-q', '--quiet', action='store_true',
                     help='Do not print the listing')

    lst = commands.add_parser('list', help='list binary contents')
    lst.add_argument('input', help='Input binary file')

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    level = LOG_LEVELS[args.log_level]
    if args.verbose:
        level = min(level, logging.INFO)
    configure_logging(level)

    console = Console()

    if args.command == 'list':
        try:
            words = binary.read_file(args.input)
        except FileNotFoundError:
            print(f"Error: File not found: {args.input}", file=sys.stderr)
            sys.exit(1)
        except OSError as e:
            print(f"Error reading {args.input}: {e}", file=sys.stderr)
            sys.exit(1)

        console.print(listing_table(words, title=args.input))
        return

    # Read input
    try:
        with open(args.input, 'r', encoding='utf-8') as f:
            source = f.read()
    except FileNotFoundError:
        print(f"Error: File not found: {args.input}", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print(f"Error reading {args.input}: {e}", file=sys.stderr)
        sys.exit(1)

    # Assemble
    asm = UE14500Assembler()
    success = asm.assemble(source)

    for warning in asm.warnings:
        print(f"Warning: {warning}", file=sys.stderr)

    if not success:
        for error in asm.errors:
            print(f"Error: {error}", file=sys.stderr)
        sys.exit(1)

    if not args.quiet:
        console.print(asm.listing(title=args.input))

    if args.format == 'bin':
        output = asm.get_binary()
    elif args.format == 'hex':
        output = asm.get_hex()
    elif args.format == 'mem':
        output = asm.get_mem()

    # Write output
    try:
        if args.format == 'bin':
            with open(args.output, 'wb') as f:
                f.write(output)
        else:
            with open(args.output, 'w') as f:
                f.write(output)
                f.write('\n')
    except OSError as e:
        print(f"Error writing {args.output}: {e}", file=sys.stderr)
        sys.exit(1)

    logger.info(f"Assembled {len(asm.words)} words ({len(asm.comments)} comments) "
                f"into {args.output}")


if __name__ == '__main__':
    main()
