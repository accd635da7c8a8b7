import logging
import sys

_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
_LIBRARY_LOGGERS = ("httpx", "httpcore", "werkzeug")


def configure_logging(*, verbose: bool = False) -> None:
    """Send log records to stderr; ``--verbose`` turns on debug and library chatter.

    Safe to call more than once: the root logger always ends up with one handler.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, handlers=[handler], force=True)

    library_level = logging.NOTSET if verbose else logging.WARNING
    for name in _LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)
