# Instruction decoding. Cowgod's CHIP-8 technical reference
# http://devernay.free.fr/hacks/chip8/C8TECH10.HTM#3.0
#
# x = bits 8-11, y = bits 4-7, kk = low byte, nnn = low 12 bits, n = low nibble

from collections import namedtuple

from chip8vm.errors import UnknownOpcode

Instruction = namedtuple("Instruction", "op word x y n kk nnn")

# (mask, pattern, op), checked top to bottom
opcodes = [
    (0xFFFF, 0x00E0, "CLS"),
    (0xFFFF, 0x00EE, "RET"),

    (0xF000, 0x1000, "JP"),
    (0xF000, 0x2000, "CALL"),
    (0xF000, 0x3000, "SE_Vx_kk"),
    (0xF000, 0x4000, "SNE_Vx_kk"),
    (0xF00F, 0x5000, "SE_Vx_Vy"),
    (0xF000, 0x6000, "LD_Vx_kk"),
    (0xF000, 0x7000, "ADD_Vx_kk"),

    (0xF00F, 0x8000, "LD_Vx_Vy"),
    (0xF00F, 0x8001, "OR"),
    (0xF00F, 0x8002, "AND"),
    (0xF00F, 0x8003, "XOR"),
    (0xF00F, 0x8004, "ADD"),
    (0xF00F, 0x8005, "SUB"),
    (0xF00F, 0x8006, "SHR"),
    (0xF00F, 0x8007, "SUBN"),
    (0xF00F, 0x800E, "SHL"),

    (0xF00F, 0x9000, "SNE_Vx_Vy"),
    (0xF000, 0xA000, "LD_I"),
    (0xF000, 0xB000, "JP_V0"),
    (0xF000, 0xC000, "RND"),
    (0xF000, 0xD000, "DRW"),

    (0xF0FF, 0xE09E, "SKP"),
    (0xF0FF, 0xE0A1, "SKNP"),

    (0xF0FF, 0xF007, "LD_Vx_DT"),
    (0xF0FF, 0xF00A, "WAITKEY"),
    (0xF0FF, 0xF015, "LD_DT_Vx"),
    (0xF0FF, 0xF018, "LD_ST_Vx"),
    (0xF0FF, 0xF01E, "ADD_I_Vx"),
    (0xF0FF, 0xF029, "FONT"),
    (0xF0FF, 0xF033, "BCD"),
    (0xF0FF, 0xF055, "STORE"),
    (0xF0FF, 0xF065, "LOAD"),
]

# Assembly text per op, filled in from the instruction fields
_syntax = {
    "CLS": "CLS",
    "RET": "RET",
    "JP": "JP 0x{nnn:03X}",
    "CALL": "CALL 0x{nnn:03X}",
    "SE_Vx_kk": "SE V{x:X}, 0x{kk:02X}",
    "SNE_Vx_kk": "SNE V{x:X}, 0x{kk:02X}",
    "SE_Vx_Vy": "SE V{x:X}, V{y:X}",
    "LD_Vx_kk": "LD V{x:X}, 0x{kk:02X}",
    "ADD_Vx_kk": "ADD V{x:X}, 0x{kk:02X}",
    "LD_Vx_Vy": "LD V{x:X}, V{y:X}",
    "OR": "OR V{x:X}, V{y:X}",
    "AND": "AND V{x:X}, V{y:X}",
    "XOR": "XOR V{x:X}, V{y:X}",
    "ADD": "ADD V{x:X}, V{y:X}",
    "SUB": "SUB V{x:X}, V{y:X}",
    "SHR": "SHR V{x:X}",
    "SUBN": "SUBN V{x:X}, V{y:X}",
    "SHL": "SHL V{x:X}",
    "SNE_Vx_Vy": "SNE V{x:X}, V{y:X}",
    "LD_I": "LD I, 0x{nnn:03X}",
    "JP_V0": "JP V0, 0x{nnn:03X}",
    "RND": "RND V{x:X}, 0x{kk:02X}",
    "DRW": "DRW V{x:X}, V{y:X}, {n}",
    "SKP": "SKP V{x:X}",
    "SKNP": "SKNP V{x:X}",
    "LD_Vx_DT": "LD V{x:X}, DT",
    "WAITKEY": "LD V{x:X}, K",
    "LD_DT_Vx": "LD DT, V{x:X}",
    "LD_ST_Vx": "LD ST, V{x:X}",
    "ADD_I_Vx": "ADD I, V{x:X}",
    "FONT": "LD F, V{x:X}",
    "BCD": "LD B, V{x:X}",
    "STORE": "LD [I], V{x:X}",
    "LOAD": "LD V{x:X}, [I]",
}


def decode(word, pc=None):
    """Split a 16-bit instruction word into an Instruction.

    Raises UnknownOpcode when no table entry matches; pc only goes into
    the error message.
    """
    word &= 0xFFFF
    for mask, pattern, op in opcodes:
        if (word & mask) == pattern:
            return Instruction(
                op=op,
                word=word,
                x=(word >> 8) & 0xF,
                y=(word >> 4) & 0xF,
                n=word & 0xF,
                kk=word & 0xFF,
                nnn=word & 0x0FFF,
            )
    raise UnknownOpcode(word, pc)


def mnemonic(ins):
    return _syntax[ins.op].format(**ins._asdict())
