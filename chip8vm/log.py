import logging

from chip8vm import config

logger = logging.getLogger("chip8vm")


def log(*args):
    if config.logsOn:
        logger.debug(" ".join(str(a) for a in args))


def toggle():
    config.logsOn = not config.logsOn
    logger.setLevel(logging.DEBUG if config.logsOn else logging.INFO)
    logger.info("logsOn: %s", config.logsOn)
    return config.logsOn
