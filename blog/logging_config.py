"""Logging setup, called once from the application lifespan."""
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_HANDLER_NAME = "blog"


def setup_logging(level: str = "INFO") -> None:
    """
    Attach a single stream handler to the root logger.

    Safe to call repeatedly (tests create the app lifespan many times);
    the handler is only installed once.
    """
    root = logging.getLogger()
    if not any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        handler = logging.StreamHandler()
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
