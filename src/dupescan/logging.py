"""Logging configuration for dupescan."""

from __future__ import annotations

from tqdm import tqdm

import logging


class TqdmHandler(logging.StreamHandler):
    """Write records through tqdm so they don't tear an active progress bar."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            tqdm.write(self.format(record), file=self.stream)
            self.flush()
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure the dupescan root logger.

    Records go to stderr, leaving stdout for the duplicate report.
    """
    if verbose:
        level = logging.DEBUG
        fmt = "%(levelname)s: %(message)s"
    elif quiet:
        level = logging.WARNING
        fmt = "%(levelname)s: %(message)s"
    else:
        level = logging.INFO
        fmt = "%(message)s"

    root_logger = logging.getLogger("dupescan")
    root_logger.handlers.clear()
    handler = TqdmHandler()
    handler.setFormatter(logging.Formatter(fmt))
    root_logger.setLevel(level)
    root_logger.addHandler(handler)
