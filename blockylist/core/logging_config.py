import logging
import sys


def configure_logging(level: int = logging.INFO) -> None:
    """
    Configure root logging for the API and the CLI.

    Logs go to stdout as "time [LEVEL] logger - message". When a handler is
    already installed (uvicorn, pytest) only the level is adjusted.
    """
    root = logging.getLogger()

    if root.handlers:
        root.setLevel(level)
        return

    handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(formatter)

    root.addHandler(handler)
    root.setLevel(level)

    # requests/urllib3 are chatty at DEBUG and add nothing per call here
    logging.getLogger("urllib3").setLevel(max(level, logging.WARNING))
