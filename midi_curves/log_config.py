"""Configure logging for midi_curves to stderr."""

import logging
import sys


def setup_logging(level: int = logging.INFO) -> None:
    """Configure the midi_curves logger: stderr at level."""
    root = logging.getLogger("midi_curves")
    root.setLevel(level)
    root.handlers.clear()

    fmt = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    eh = logging.StreamHandler(sys.stderr)
    eh.setLevel(level)
    eh.setFormatter(fmt)
    root.addHandler(eh)

    root.debug("Logging started at level %s", logging.getLevelName(level))
