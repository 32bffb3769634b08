# =============================================================================
# test_ue14500asm.py - Assembler Facade and CLI Tests
# =============================================================================

import pytest

from ue14500_assembly.ue14500asm import (
    LOG_LEVEL_ENV,
    UE14500Assembler,
    build_parser,
    listing_table,
    main,
)
from ue14500_assembly.words import Comment, Word


PROGRAM = """\
; blink the output once
ONE 0o77 0b0
STOC 0o50 0b0
NOP0 0o77 0b1
"""

PROGRAM_IMAGE = bytes([0x4F, 0xC9, 0xA0, 0x0F, 0xD0])


@pytest.fixture
def source(tmp_path):
    path = tmp_path / 'blink.asm'
    path.write_text(PROGRAM, encoding='utf-8')
    return path


# =============================================================================
# Assembler
# =============================================================================

class TestAssembler:

    def test_assemble(self):
        asm = UE14500Assembler()
        assert asm.assemble(PROGRAM)
        assert asm.errors == []
        assert len(asm.words) == 3
        assert asm.comments == [Comment(' blink the output once')]
        assert asm.get_binary() == PROGRAM_IMAGE

    def test_syntax_error(self):
        asm = UE14500Assembler()
        assert not asm.assemble("ONE 0o77 0b0\nFOO 0o1 0b0\n")
        assert asm.errors == ["Line 2: expected instruction at column 1"]
        assert asm.words == []

    def test_eoi_error(self):
        asm = UE14500Assembler()
        assert not asm.assemble("ONE 0o77")
        assert asm.errors == ["Line 1: unexpected end of input at column 9"]

    def test_reassemble_resets_state(self):
        asm = UE14500Assembler()
        asm.assemble("BAD")
        assert asm.assemble(PROGRAM)
        assert asm.errors == []

    def test_truncation_warnings(self):
        asm = UE14500Assembler()
        assert asm.assemble("ONE 0o177 0b111\n")
        assert asm.warnings == [
            "Line 1: address 127 does not fit its field, truncated to 63",
            "Line 1: control 7 does not fit its field, truncated to 3",
        ]
        assert asm.get_hex() == "0000: 4FF"

    def test_empty_program_warns(self):
        asm = UE14500Assembler()
        assert asm.assemble("; nothing here\n")
        assert asm.warnings == ["Program contains no words"]
        assert asm.get_binary() == b''

    def test_hex_output(self):
        asm = UE14500Assembler()
        asm.assemble(PROGRAM)
        assert asm.get_hex() == "0000: 4FC\n0001: 9A0\n0002: 0FD"

    def test_mem_output(self):
        asm = UE14500Assembler()
        asm.assemble(PROGRAM)
        assert asm.get_mem() == "@0000 4FC\n@0001 9A0\n@0002 0FD"

    def test_listing(self):
        asm = UE14500Assembler()
        asm.assemble(PROGRAM)
        table = asm.listing()
        assert table.row_count == 3
        assert [column.header for column in table.columns] == [
            '#', 'inst', 'addr', 'ctrl', 'mnemonic', 'mode',
        ]

    def test_listing_fields(self):
        table = listing_table([Word.from_bits(0b1001_101000_00)])
        cells = [list(column.cells)[0] for column in table.columns]
        assert cells == ['0', '1001', '101000', '00', 'stoc', 'parallel read']


# =============================================================================
# Command Line
# =============================================================================

class TestCommandLine:

    def test_asm_writes_binary(self, source, tmp_path, capsys):
        output = tmp_path / 'blink.bin'
        main(['asm', str(source), str(output)])
        assert output.read_bytes() == PROGRAM_IMAGE
        out = capsys.readouterr().out
        assert '111111' in out
        assert 'stoc' in out

    def test_asm_quiet(self, source, tmp_path, capsys):
        output = tmp_path / 'blink.bin'
        main(['asm', '-q', str(source), str(output)])
        assert capsys.readouterr().out == ''
        assert output.exists()

    def test_asm_hex_format(self, source, tmp_path):
        output = tmp_path / 'blink.hex'
        main(['asm', '-q', '--format', 'hex', str(source), str(output)])
        assert output.read_text() == "0000: 4FC\n0001: 9A0\n0002: 0FD\n"

    def test_asm_mem_format(self, source, tmp_path):
        output = tmp_path / 'blink.mem'
        main(['asm', '-q', '-f', 'mem', str(source), str(output)])
        assert output.read_text() == "@0000 4FC\n@0001 9A0\n@0002 0FD\n"

    def test_asm_missing_input(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as info:
            main(['asm', str(tmp_path / 'missing.asm'), str(tmp_path / 'out.bin')])
        assert info.value.code == 1
        assert 'File not found' in capsys.readouterr().err

    def test_asm_syntax_error(self, tmp_path, capsys):
        path = tmp_path / 'bad.asm'
        path.write_text("ONE 99 0b0\n")
        output = tmp_path / 'bad.bin'
        with pytest.raises(SystemExit) as info:
            main(['asm', str(path), str(output)])
        assert info.value.code == 1
        assert "Error: Line 1: expected address at column 5" in capsys.readouterr().err
        assert not output.exists()

    def test_asm_truncation_warning(self, tmp_path, capsys):
        path = tmp_path / 'wide.asm'
        path.write_text("ONE 0o1 0b0\nSTO 0o100 0b0\n")
        main(['asm', '-q', str(path), str(tmp_path / 'wide.bin')])
        assert ("Warning: Line 2: address 64 does not fit its field, truncated to 0"
                in capsys.readouterr().err)

    def test_asm_empty_program_warning(self, tmp_path, capsys):
        path = tmp_path / 'empty.asm'
        path.write_text("; nothing\n")
        output = tmp_path / 'empty.bin'
        main(['asm', '-q', str(path), str(output)])
        assert 'Warning: Program contains no words' in capsys.readouterr().err
        assert output.read_bytes() == b''

    def test_list(self, tmp_path, capsys):
        path = tmp_path / 'blink.bin'
        path.write_bytes(PROGRAM_IMAGE)
        main(['list', str(path)])
        out = capsys.readouterr().out
        assert '1001' in out
        assert 'parallel read' in out

    def test_list_missing_input(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as info:
            main(['list', str(tmp_path / 'missing.bin')])
        assert info.value.code == 1

    def test_command_required(self):
        with pytest.raises(SystemExit) as info:
            main([])
        assert info.value.code == 2

    def test_no_disassembler(self):
        with pytest.raises(SystemExit):
            main(['dsm', 'a.bin', 'b.asm'])


class TestConfiguration:

    def test_default_log_level(self, monkeypatch):
        monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
        assert build_parser().parse_args(['list', 'x.bin']).log_level == 'warning'

    def test_log_level_from_environment(self, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV, 'DEBUG')
        assert build_parser().parse_args(['list', 'x.bin']).log_level == 'debug'

    def test_invalid_environment_level(self, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV, 'chatty')
        assert build_parser().parse_args(['list', 'x.bin']).log_level == 'warning'

    def test_log_level_option(self):
        args = build_parser().parse_args(['--log-level', 'info', 'list', 'x.bin'])
        assert args.log_level == 'info'
