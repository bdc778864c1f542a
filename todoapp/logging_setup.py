import logging
import sys

_HANDLER_NAME = "todoapp-console"


def setup_logging(level="INFO") -> logging.Logger:
    """Attach a stderr handler to the ``todoapp`` logger.

    Safe to call more than once: the handler is only added the first time,
    later calls just adjust the level.
    """
    logger = logging.getLogger("todoapp")
    logger.setLevel(level)

    if not any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)

    return logger
