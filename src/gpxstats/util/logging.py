# gpxstats/util/logging.py
from __future__ import annotations

import datetime
import sys


def log(msg: str) -> None:
    """Print a timestamped log line (local time with timezone) to stderr.

    stdout is reserved for the report itself, so TSV output stays pipeable.
    """
    ts = datetime.datetime.now().astimezone().isoformat(timespec="seconds")
    print(f"{ts}  {msg}", file=sys.stderr)


def log_verbose(msg: str, verbose: bool) -> None:
    """Log only when --verbose was given."""
    if verbose:
        log(msg)
