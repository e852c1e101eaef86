# CHIP-8 virtual machine: a 4096 byte memory, 16 registers, a 64x32 monochrome
# display and a 16 key hex keypad. The Machine runs headless; app.py puts it in
# a pyglet window.

from chip8vm.machine import Machine
from chip8vm.decode import Instruction, decode, mnemonic
from chip8vm.errors import (
    Chip8Error,
    UnknownOpcode,
    StackOverflow,
    StackUnderflow,
    PCOutOfBounds,
    AddressOutOfBounds,
    RomError,
)

__version__ = "0.3.0"
