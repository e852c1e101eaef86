import sys
import os

# Add project root to path so chip8vm imports without installing
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from chip8vm.machine import Machine


def assemble(*words):
    """Instruction words -> big-endian ROM bytes."""
    data = bytearray()
    for word in words:
        data += bytes([(word >> 8) & 0xFF, word & 0xFF])
    return bytes(data)


@pytest.fixture
def machine():
    return Machine(random_byte=lambda: 0xAB)


@pytest.fixture
def run():
    """Load words at 0x200 and step the machine once per instruction given in steps."""
    def _run(m, words, steps=1):
        m.load_program(assemble(*words))
        for _ in range(steps):
            m.step()
        return m
    return _run
