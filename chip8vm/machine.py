# CHIP8 Virtual Machine:
# Input - 16 key states, written by the frontend and checked per cycle.
# Output - 64x32 display (array of pixels in the on or off state (0 || 1)).
# CPU - Cowgod's CHIP8 Technical reference http://devernay.free.fr/hacks/chip8/C8TECH10.HTM#0.0
# Memory - 4096 bytes: fonts at 0x000, the loaded ROM from 0x200.
#----------------------------------------------------------------------------------------------
# Registers are 16 bytes, plus the I pointer and the program counter. Two timers count
# down at 60Hz and the stack holds 16 return addresses.
#----------------------------------------------------------------------------------------------

import random

import numpy as np

from chip8vm import config
from chip8vm.config import width, height, memory_size, program_start
from chip8vm.decode import decode, mnemonic
from chip8vm.errors import (
    Chip8Error,
    StackOverflow,
    StackUnderflow,
    PCOutOfBounds,
    AddressOutOfBounds,
)
from chip8vm.fontset import fontset, glyph_size
from chip8vm.log import log
from chip8vm import rom

stack_depth = 16


def _random_byte():
    return random.getrandbits(8)


class Machine:
    """The whole CHIP-8 state plus the fetch/decode/execute loop.

    random_byte is a zero-argument callable returning 0..255, used by
    Cxkk. Tests pass a fixed one.
    """

    def __init__(self, random_byte=None):
        self.random_byte = random_byte or _random_byte
        self.keys = np.zeros(16, dtype=np.uint8)
        self.cycle_count = 0

        # Prepare opcode function map
        self.setup_funcmap()
        self.initialize()

    def initialize(self):
        """Zero everything and put the fontset back at 0x000."""
        self.memory = bytearray(memory_size)
        self.V = [0] * 16
        self.I = 0
        self.pc = program_start
        self.stack = np.zeros(stack_depth, dtype=np.uint16)
        self.sp = 0
        self.delay_timer = 0
        self.sound_timer = 0
        self.vram = np.zeros(width * height, dtype=np.uint8)
        self.should_draw = True
        self.fault = None

        # Load fontset into memory
        self.memory[:len(fontset)] = bytes(fontset)

    # ---- Load ROM ----
    def load_program(self, data):
        """Copy data to 0x200. Whatever doesn't fit is dropped.

        Returns the number of bytes written.
        """
        room = memory_size - program_start
        count = min(len(data), room)
        self.memory[program_start:program_start + count] = bytes(data[:count])
        if count < len(data):
            log("ROM truncated: %d of %d bytes loaded" % (count, len(data)))
        return count

    def load_rom(self, path):
        log("Loading ROM:", path)
        return self.load_program(rom.read_rom(path))

    # ---- Input ----
    def press(self, key):
        self.keys[key & 0xF] = 1

    def release(self, key):
        self.keys[key & 0xF] = 0

    # ---- Output ----
    def framebuffer(self):
        """Copy of the 2048 pixels, row-major (index = x + y * 64)."""
        return self.vram.copy()

    # ---- Cycle ----
    def fetch(self):
        if self.pc > memory_size - 2:
            raise PCOutOfBounds(self.pc)
        word = (self.memory[self.pc] << 8) | self.memory[self.pc + 1]
        return decode(word, self.pc)

    def step(self):
        """Run one instruction and return it.

        On a Chip8Error pc is put back, the error is kept in self.fault,
        and every later step raises it again until initialize().
        """
        if self.fault is not None:
            raise self.fault.with_traceback(None)

        pc = self.pc
        try:
            ins = self.fetch()
            if config.logsOn:
                log("%03X: %04X  %s" % (pc, ins.word, mnemonic(ins)))
            # Default PC increment, handlers jump or skip from here
            self.pc = pc + 2
            self.funcmap[ins.op](ins)
        except Chip8Error as e:
            self.pc = pc
            self.fault = e
            log("Emulation error:", e)
            raise

        self.cycle_count += 1
        return ins

    def timer_tick(self):
        if self.delay_timer > 0:
            self.delay_timer -= 1
        if self.sound_timer > 0:
            self.sound_timer -= 1

    def run_frame(self, cycles=None):
        """What the frame driver does every 1/60 s: N steps, then one timer tick."""
        if cycles is None:
            cycles = config.cycles_per_frame
        for _ in range(cycles):
            self.step()
        self.timer_tick()

    # ---- Opcode function map ----
    def setup_funcmap(self):
        self.funcmap = {
            "CLS": self.op_CLS,              # 00E0 - Clear the display
            "RET": self.op_RET,              # 00EE - Return from a subroutine
            "JP": self.op_JP,                # 1nnn - Jump to nnn
            "CALL": self.op_CALL,            # 2nnn - Call subroutine at nnn
            "SE_Vx_kk": self.op_SE_Vx_kk,    # 3xkk - Skip if Vx == kk
            "SNE_Vx_kk": self.op_SNE_Vx_kk,  # 4xkk - Skip if Vx != kk
            "SE_Vx_Vy": self.op_SE_Vx_Vy,    # 5xy0 - Skip if Vx == Vy
            "LD_Vx_kk": self.op_LD_Vx_kk,    # 6xkk - Vx = kk
            "ADD_Vx_kk": self.op_ADD_Vx_kk,  # 7xkk - Vx += kk, no carry
            "LD_Vx_Vy": self.op_LD_Vx_Vy,    # 8xy0..8xyE - register math and logic
            "OR": self.op_OR,
            "AND": self.op_AND,
            "XOR": self.op_XOR,
            "ADD": self.op_ADD,
            "SUB": self.op_SUB,
            "SHR": self.op_SHR,
            "SUBN": self.op_SUBN,
            "SHL": self.op_SHL,
            "SNE_Vx_Vy": self.op_SNE_Vx_Vy,  # 9xy0 - Skip if Vx != Vy
            "LD_I": self.op_LD_I,            # Annn - I = nnn
            "JP_V0": self.op_JP_V0,          # Bnnn - Jump to nnn + V0
            "RND": self.op_RND,              # Cxkk - Vx = random byte & kk
            "DRW": self.op_DRW,              # Dxyn - Draw n-byte sprite at (Vx, Vy)
            "SKP": self.op_SKP,              # Ex9E - Skip if key Vx is down
            "SKNP": self.op_SKNP,            # ExA1 - Skip if key Vx is up
            "LD_Vx_DT": self.op_LD_Vx_DT,    # Fx07..Fx65 - timers, memory, I and key input
            "WAITKEY": self.op_WAITKEY,
            "LD_DT_Vx": self.op_LD_DT_Vx,
            "LD_ST_Vx": self.op_LD_ST_Vx,
            "ADD_I_Vx": self.op_ADD_I_Vx,
            "FONT": self.op_FONT,
            "BCD": self.op_BCD,
            "STORE": self.op_STORE,
            "LOAD": self.op_LOAD,
        }

    def _check_range(self, count):
        # count bytes from I must fit in memory
        if count and self.I + count > memory_size:
            raise AddressOutOfBounds(self.I, self.pc - 2)

    # ---- Opcode Handlers ----
    def op_CLS(self, ins):
        self.vram[:] = 0
        self.should_draw = True

    def op_RET(self, ins):
        if self.sp == 0:
            raise StackUnderflow(self.pc - 2)
        self.sp -= 1
        self.pc = int(self.stack[self.sp]) + 2

    def op_JP(self, ins):
        self.pc = ins.nnn

    def op_CALL(self, ins):
        if self.sp >= stack_depth:
            raise StackOverflow(self.pc - 2)
        # push the address of the CALL itself, RET skips over it
        self.stack[self.sp] = self.pc - 2
        self.sp += 1
        self.pc = ins.nnn

    def op_SE_Vx_kk(self, ins):
        if self.V[ins.x] == ins.kk:
            self.pc += 2

    def op_SNE_Vx_kk(self, ins):
        if self.V[ins.x] != ins.kk:
            self.pc += 2

    def op_SE_Vx_Vy(self, ins):
        if self.V[ins.x] == self.V[ins.y]:
            self.pc += 2

    def op_LD_Vx_kk(self, ins):
        self.V[ins.x] = ins.kk

    def op_ADD_Vx_kk(self, ins):
        self.V[ins.x] = (self.V[ins.x] + ins.kk) & 0xFF

    def op_LD_Vx_Vy(self, ins):
        self.V[ins.x] = self.V[ins.y]

    def op_OR(self, ins):
        self.V[ins.x] |= self.V[ins.y]

    def op_AND(self, ins):
        self.V[ins.x] &= self.V[ins.y]

    def op_XOR(self, ins):
        self.V[ins.x] ^= self.V[ins.y]

    # VF is written before Vx in all the flag ops, so with x == F the result wins
    def op_ADD(self, ins):
        total = self.V[ins.x] + self.V[ins.y]
        self.V[0xF] = 1 if total > 0xFF else 0
        self.V[ins.x] = total & 0xFF

    def op_SUB(self, ins):
        vx, vy = self.V[ins.x], self.V[ins.y]
        self.V[0xF] = 1 if vx > vy else 0
        self.V[ins.x] = (vx - vy) & 0xFF

    def op_SHR(self, ins):
        vx = self.V[ins.x]
        self.V[0xF] = vx & 1
        self.V[ins.x] = vx >> 1

    def op_SUBN(self, ins):
        vx, vy = self.V[ins.x], self.V[ins.y]
        self.V[0xF] = 1 if vy > vx else 0
        self.V[ins.x] = (vy - vx) & 0xFF

    def op_SHL(self, ins):
        vx = self.V[ins.x]
        self.V[0xF] = (vx >> 7) & 1
        self.V[ins.x] = (vx << 1) & 0xFF

    def op_SNE_Vx_Vy(self, ins):
        if self.V[ins.x] != self.V[ins.y]:
            self.pc += 2

    def op_LD_I(self, ins):
        self.I = ins.nnn

    def op_JP_V0(self, ins):
        # may land past 0xFFE, the next fetch reports it
        self.pc = ins.nnn + self.V[0]

    def op_RND(self, ins):
        self.V[ins.x] = (self.random_byte() & 0xFF) & ins.kk

    def op_DRW(self, ins):
        self._check_range(ins.n)
        px = self.V[ins.x] % width
        py = self.V[ins.y] % height
        vram = self.vram
        collision = 0
        for row in range(ins.n):
            sprite = self.memory[self.I + row]
            if sprite == 0:
                continue
            # each pixel wraps on its own, not the sprite as a whole
            base = ((py + row) % height) * width
            for bit in range(8):
                if sprite & (0x80 >> bit):
                    index = base + (px + bit) % width
                    collision |= int(vram[index])
                    vram[index] ^= 1
        self.V[0xF] = collision
        self.should_draw = True

    def op_SKP(self, ins):
        if self.keys[self.V[ins.x] & 0xF]:
            self.pc += 2

    def op_SKNP(self, ins):
        if not self.keys[self.V[ins.x] & 0xF]:
            self.pc += 2

    def op_LD_Vx_DT(self, ins):
        self.V[ins.x] = self.delay_timer

    def op_WAITKEY(self, ins):
        pressed = np.flatnonzero(self.keys)
        if len(pressed) == 0:
            # stall, this instruction runs again next step
            self.pc -= 2
            return
        self.V[ins.x] = int(pressed[0])
        log("Key pressed:", self.V[ins.x])

    def op_LD_DT_Vx(self, ins):
        self.delay_timer = self.V[ins.x]

    def op_LD_ST_Vx(self, ins):
        self.sound_timer = self.V[ins.x]

    def op_ADD_I_Vx(self, ins):
        self.V[0xF] = 1 if self.I + self.V[ins.x] > 0xFFF else 0
        self.I = (self.I + self.V[ins.x]) & 0xFFFF

    def op_FONT(self, ins):
        self.I = self.V[ins.x] * glyph_size

    def op_BCD(self, ins):
        self._check_range(3)
        v = self.V[ins.x]
        self.memory[self.I] = v // 100
        self.memory[self.I + 1] = (v // 10) % 10
        self.memory[self.I + 2] = v % 10

    def op_STORE(self, ins):
        self._check_range(ins.x + 1)
        self.memory[self.I:self.I + ins.x + 1] = bytes(self.V[:ins.x + 1])

    def op_LOAD(self, ins):
        self._check_range(ins.x + 1)
        self.V[:ins.x + 1] = list(self.memory[self.I:self.I + ins.x + 1])
