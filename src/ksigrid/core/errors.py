"""Exception hierarchy for the casualty grid pipeline."""


class KsiGridError(Exception):
    """Base class for all ksigrid errors."""


class ConfigError(KsiGridError, ValueError):
    """Configuration file could not be parsed into a valid config."""


class RecordSourceError(KsiGridError):
    """The casualty record source could not be obtained.

    Raised once to the caller; the aggregation pipeline does not run
    and no partial cell table is exposed.
    """


class UnknownMetricError(KsiGridError, KeyError):
    """A metric name that is not registered was selected."""

    def __init__(self, name: str, available: list[str] | None = None):
        self.name = name
        self.available = list(available or [])
        super().__init__(name)

    def __str__(self) -> str:
        if self.available:
            return f"Unknown metric '{self.name}'. Available: {', '.join(self.available)}"
        return f"Unknown metric '{self.name}'"


class SessionNotReadyError(KsiGridError):
    """A grid command was issued before records were loaded."""
