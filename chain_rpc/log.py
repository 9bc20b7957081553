import logging
import os
import sys

ROOT_LOGGER = "chain_rpc"

_handler = None


def get_logger(name: str) -> logging.Logger:
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def configure(verbose: bool = False) -> logging.Logger:
    """Attach a stderr handler to the package logger.

    Verbose runs log everything down to DEBUG; otherwise only warnings get
    through. LOG_LEVEL in the environment overrides both. Stdout stays clean
    for command output.
    """
    global _handler
    level = os.getenv("LOG_LEVEL", "DEBUG" if verbose else "WARNING").upper()
    logger = logging.getLogger(ROOT_LOGGER)
    if _handler is None:
        _handler = logging.StreamHandler(sys.stderr)
        _handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(_handler)
    else:
        _handler.setStream(sys.stderr)
    logger.setLevel(level)
    return logger
