import os

from chip8vm.errors import RomError

# Files that are never ROMs when browsing a directory
_skip_ext = {".txt", ".md", ".py", ".doc", ".pdf", ".png", ".jpg"}


def read_rom(path):
    """Raw bytes of a ROM file. No header, loaded as-is at 0x200."""
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise RomError("Cannot read ROM %s: %s" % (path, e)) from e
    if not data:
        raise RomError("ROM is empty: %s" % path)
    return data


def list_roms(directory):
    """Sorted ROM paths in a directory, for the PageUp/PageDown switcher."""
    try:
        names = sorted(os.listdir(directory), key=str.upper)
    except OSError as e:
        raise RomError("Cannot list ROM directory %s: %s" % (directory, e)) from e
    roms = []
    for name in names:
        path = os.path.join(directory, name)
        if name.startswith(".") or not os.path.isfile(path):
            continue
        if os.path.splitext(name)[1].lower() in _skip_ext:
            continue
        roms.append(path)
    return roms


def rom_name(path):
    return os.path.splitext(os.path.basename(path))[0]
