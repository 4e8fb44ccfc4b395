# gpxstats/errors

"""
gpxstats.errors

Central exception hierarchy for gpxstats.

  - Modules raise specific, meaningful errors.
  - Callers can catch GpxStatsError (broad) or specific subclasses (narrow).

Per-point anomalies (missing elevation, missing timestamps, empty segments)
are NOT errors; they show up as undefined fields in the summary.
"""


class GpxStatsError(RuntimeError):
    """Base class for all gpxstats runtime errors."""


# ---- Configuration errors ----------------------

class ConfigError(GpxStatsError):
    """Configuration could not be loaded or holds an invalid value."""


# ---- Input errors ------------------------------

class InputError(GpxStatsError):
    """Errors in the data handed to the statistics engine."""

class InvalidGpxError(InputError):
    """GPX file could not be read, parsed, or held malformed trackpoints."""

class InvalidPointError(InputError):
    """A trackpoint has coordinates no distance can be computed from."""


# ---- Grouping errors ---------------------------

class GroupingError(GpxStatsError):
    """Input hierarchy could not be resolved into point groups."""
