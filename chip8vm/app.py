# pyglet frontend for the Machine: handles the window, keyboard and drawing,
# and drives the CPU at cycles_per_frame steps per 60Hz frame.

import logging
import os
import sys

import numpy as np
import pyglet
from pyglet.window import key

from chip8vm import config
from chip8vm import log as chip8_log
from chip8vm.config import width, height, scale, window_width, window_height
from chip8vm.errors import Chip8Error, RomError
from chip8vm.machine import Machine
from chip8vm import rom

logger = logging.getLogger("chip8vm")

#map binding keys
keymap = {
    key._1: 0x1, key._2: 0x2, key._3: 0x3, key._4: 0xC,
    key.Q: 0x4, key.W: 0x5, key.E: 0x6, key.R: 0xD,
    key.A: 0x7, key.S: 0x8, key.D: 0x9, key.F: 0xE,
    key.Z: 0xA, key.X: 0x0, key.C: 0xB, key.V: 0xF,
}

# Control scheme for a few games, keyed by ROM name
controls = {
    "PONG": ["PONG CONTROLS:", "Player 1: 1 / Q", "Player 2: 4 / R"],
    "PONG2": ["PONG CONTROLS:", "Player 1: 1 / Q", "Player 2: 4 / R"],
    "TANK": ["TANK CONTROLS:", "Up: S", "Down: 2", "Left: Q", "Right: E", "Shoot: W"],
    "TETRIS": ["TETRIS CONTROLS:", "Rotate: Q", "Left: W", "Right: E", "Drop: A"],
    "BRIX": ["BRIX CONTROLS:", "Left: Q", "Right: E"],
    "INVADERS": ["INVADERS CONTROLS:", "Left: Q", "Right: E", "Shoot: W"],
}

white = (255, 255, 255, 255)


class Chip8Window(pyglet.window.Window):

    def __init__(self, roms, cycles_per_frame=None):
        super().__init__(
            width=window_width,
            height=window_height,
            caption="CHIP-8 Emulator",
            resizable=False
        )
        self.machine = Machine()
        self.roms = roms
        self.rom_index = 0
        self.cycles_per_frame = cycles_per_frame or config.cycles_per_frame
        self.control_labels = []

        # 64x32 RGBA, upscaled with numpy.repeat on every redraw
        self._small_framebuf = np.zeros((height, width, 4), dtype=np.uint8)
        self._small_framebuf[..., 3] = 255
        self._color = np.array(config.pixel_color, dtype=np.uint8)
        self.image = pyglet.image.ImageData(
            window_width,
            window_height,
            'RGBA',
            bytes(window_width * window_height * 4)
        )

        self.load_current()

        # One frame = N cpu steps + one timer tick
        pyglet.clock.schedule_interval(self.frame, 1.0 / config.timer_HZ)

    # ---- ROM selection ----
    def load_current(self):
        path = self.roms[self.rom_index]
        name = rom.rom_name(path)
        logger.info("Loading ROM: %s", path)
        self.machine.initialize()
        self.machine.load_rom(path)
        self.set_caption("CHIP-8 Emulator - %s" % name)
        self.set_controls(name)

    def switch_rom(self, delta):
        if delta and len(self.roms) < 2:
            return
        self.rom_index = (self.rom_index + delta) % len(self.roms)
        try:
            self.load_current()
        except RomError as e:
            logger.error("%s", e)

    def set_controls(self, game_name):
        x_pos = window_width - 150
        lines = controls.get(game_name.upper(), [])
        self.control_labels = [
            pyglet.text.Label(text, font_size=12, x=x_pos, y=window_height - 15 - 15 * i,
                              anchor_x='left', anchor_y='center', color=white)
            for i, text in enumerate(lines)
        ]

    # ---- frame driver ----
    def frame(self, dt):
        if self.machine.fault is not None:
            return
        try:
            self.machine.run_frame(self.cycles_per_frame)
        except Chip8Error as e:
            # keep the window open on the last frame, PageUp/PageDown still work
            logger.error("Emulation error: %s", e)

    # ---- Drawing ----
    def refresh_image(self):
        # pyglet's origin is bottom-left, CHIP-8 row 0 is the top
        pixels = self.machine.vram.reshape(height, width)[::-1]
        self._small_framebuf[..., :3] = pixels[..., None] * self._color
        if scale != 1:
            scaled = np.repeat(np.repeat(self._small_framebuf, scale, axis=0), scale, axis=1)
        else:
            scaled = self._small_framebuf
        #updates existing image without creating new object
        self.image.set_data('RGBA', window_width * 4, scaled.tobytes())

    def on_draw(self):
        self.clear()
        if self.machine.should_draw:
            self.refresh_image()
            self.machine.should_draw = False
        self.image.blit(0, 0)
        for label in self.control_labels:
            label.draw()

    # ---- Input ----
    def on_key_press(self, symbol, modifiers):
        if symbol == key.ESCAPE:
            self.close()
        elif symbol == key.F1:
            chip8_log.toggle()
        elif symbol == key.F5:
            self.switch_rom(0)
        elif symbol == key.PAGEDOWN:
            self.switch_rom(1)
        elif symbol == key.PAGEUP:
            self.switch_rom(-1)
        elif symbol in keymap:
            self.machine.press(keymap[symbol])

    def on_key_release(self, symbol, modifiers):
        if symbol in keymap:
            self.machine.release(keymap[symbol])


# ---- Entry point ----
def main(argv=None):
    argv = sys.argv if argv is None else argv
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    if config.logsOn:
        logger.setLevel(logging.DEBUG)

    if len(argv) < 2:
        print("Usage: chip8vm <rom-file | rom-directory> [cycles-per-frame]")
        sys.exit(1)

    target = argv[1]
    cycles = None
    if len(argv) > 2:
        try:
            cycles = int(argv[2])
        except ValueError:
            print("cycles-per-frame must be a number, got %r" % argv[2])
            sys.exit(1)

    try:
        roms = rom.list_roms(target) if os.path.isdir(target) else [target]
        if not roms:
            raise RomError("No ROMs found in %s" % target)
        Chip8Window(roms, cycles)
    except RomError as e:
        print(e)
        sys.exit(1)

    pyglet.app.run()


if __name__ == "__main__":
    main()
