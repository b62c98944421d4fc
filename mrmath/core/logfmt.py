from __future__ import annotations

import logging
from typing import Optional

from mrmath.core.progress import set_progress_enabled


# Custom verbosity levels used to implement MRmath output modes.
# STATUS: minimal milestones (quiet mode)
# INFO: standard user-facing output
# DETAIL/VERBOSE: extra user-facing detail, including line-search traces
STATUS = 25
DETAIL = 15
VERBOSE = 12


OUTPUT_MODE_LEVELS = {
    'quiet': STATUS,
    'standard': logging.INFO,
    'verbose': VERBOSE,
    'debug': logging.DEBUG,
}


_LEVELS_REGISTERED = False


def ensure_custom_levels_registered() -> None:
    global _LEVELS_REGISTERED
    if _LEVELS_REGISTERED:
        return

    logging.addLevelName(STATUS, "STATUS")
    logging.addLevelName(DETAIL, "DETAIL")
    logging.addLevelName(VERBOSE, "VERBOSE")

    def _status(self: logging.Logger, msg, *args, **kwargs):
        if self.isEnabledFor(STATUS):
            self._log(STATUS, msg, args, **kwargs)

    def _detail(self: logging.Logger, msg, *args, **kwargs):
        if self.isEnabledFor(DETAIL):
            self._log(DETAIL, msg, args, **kwargs)

    def _verbose(self: logging.Logger, msg, *args, **kwargs):
        if self.isEnabledFor(VERBOSE):
            self._log(VERBOSE, msg, args, **kwargs)

    if not hasattr(logging.Logger, "status"):
        setattr(logging.Logger, "status", _status)
    if not hasattr(logging.Logger, "detail"):
        setattr(logging.Logger, "detail", _detail)
    if not hasattr(logging.Logger, "verbose"):
        setattr(logging.Logger, "verbose", _verbose)

    _LEVELS_REGISTERED = True


class MRmathFormatter(logging.Formatter):
    """Consistent, readable console formatting.

    - INFO:    "MRmath: <message>"
    - WARNING: "MRmath [WARNING]: <message>"
    - ERROR:   "MRmath [ERROR]: <message>"
    """

    def format(self, record: logging.LogRecord) -> str:
        prefix = "MRmath"
        if record.levelno == logging.INFO:
            return f"{prefix}: {record.getMessage()}"
        return f"{prefix} [{record.levelname}]: {record.getMessage()}"


def configure_logging(output_mode: str = 'standard', stream=None) -> int:
    """Configure root logging for an output mode and return the chosen level.

    Quiet mode also switches progress bars off globally.
    """
    ensure_custom_levels_registered()
    try:
        level = OUTPUT_MODE_LEVELS[output_mode]
    except KeyError:
        raise ValueError(
            f"Unknown output mode: {output_mode!r}\n"
            f"Valid options: {' | '.join(OUTPUT_MODE_LEVELS)}"
        ) from None

    console_handler = logging.StreamHandler(stream)
    console_handler.setLevel(level)
    console_handler.setFormatter(MRmathFormatter())

    logging.basicConfig(
        level=level,
        handlers=[console_handler],
        force=True,
    )

    set_progress_enabled(False if output_mode == 'quiet' else None)
    return level


def log_banner(
    title: str,
    *,
    logger: Optional[logging.Logger] = None,
    level: int = logging.INFO,
) -> None:
    """Log a formatted banner."""
    ensure_custom_levels_registered()
    lg = logger or logging.getLogger()
    border = "# " + ("-" * 59) + " #"
    lg.log(level, border)
    lg.log(level, f"# {str(title).center(59)} #")
    lg.log(level, border)
