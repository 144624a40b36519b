"""
Logging setup for salesman runs.
"""
import logging
import sys
from pathlib import Path
from typing import Optional, Union

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Marker attribute so repeated setup calls replace our handlers only.
_HANDLER_FLAG = "_salesman_handler"


def setup_logging(
    run_dir: Optional[Union[str, Path]] = None,
    log_file: str = "salesman.log",
    level: int = logging.INFO,
) -> Optional[Path]:
    """
    Configure console logging and an optional per-run log file.

    Args:
        run_dir: Directory for the log file (console only when None)
        log_file: Log file name inside ``run_dir``
        level: Logging level for the ``salesman`` logger tree

    Returns:
        Path to the log file, or None when only console logging is set up.
    """
    root = logging.getLogger("salesman")
    root.setLevel(level)

    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_FLAG, False):
            root.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    setattr(console, _HANDLER_FLAG, True)
    root.addHandler(console)

    log_path = None
    if run_dir is not None:
        run_dir = Path(run_dir)
        run_dir.mkdir(parents=True, exist_ok=True)
        log_path = run_dir / log_file
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        setattr(file_handler, _HANDLER_FLAG, True)
        root.addHandler(file_handler)

    root.debug(f"Logging configured (level={logging.getLevelName(level)}, file={log_path})")
    return log_path
