"""Everything a Step can fail with.

A fault is terminal for the Machine that raised it: the state is left as it
was before the faulting instruction and the next step() raises the same
error again until initialize() is called.
"""


class Chip8Error(Exception):
    pass


class UnknownOpcode(Chip8Error):
    def __init__(self, word, pc=None):
        self.word = word
        self.pc = pc
        where = "" if pc is None else " at 0x%03X" % pc
        super().__init__("Unknown opcode: %04X%s" % (word, where))


class StackOverflow(Chip8Error):
    def __init__(self, pc):
        self.pc = pc
        super().__init__("Stack overflow on CALL at 0x%03X" % pc)


class StackUnderflow(Chip8Error):
    def __init__(self, pc):
        self.pc = pc
        super().__init__("Stack underflow on RET at 0x%03X" % pc)


class PCOutOfBounds(Chip8Error):
    def __init__(self, pc):
        self.pc = pc
        super().__init__("PC out of bounds: 0x%03X" % pc)


class AddressOutOfBounds(Chip8Error):
    def __init__(self, address, pc):
        self.address = address
        self.pc = pc
        super().__init__("Memory access out of bounds: I=0x%04X at 0x%03X" % (address, pc))


class RomError(Chip8Error):
    pass
