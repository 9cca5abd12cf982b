"""Exception hierarchy for modsweep.

Configuration errors are fatal and raised before the filesystem is touched.
Filesystem errors are normally recorded by the cleanup engine and only
escalate when the engine is configured to halt on error.
"""


class ModsweepError(Exception):
    """Base exception for modsweep errors."""


class ConfigurationError(ModsweepError):
    """Raised when rules or settings cannot be resolved into a usable run."""


class RuleSourceNotFoundError(ConfigurationError):
    """Raised when a rule source cannot be located."""


class RuleSourceParseError(ConfigurationError):
    """Raised when a rule source cannot be read or has an invalid shape."""


class RulesetNotFoundError(ConfigurationError):
    """Raised when a loaded rule source does not define a requested ruleset."""


class EmptyPatternsError(ConfigurationError):
    """Raised when resolution produces no allow patterns."""


class ConfigFileError(ConfigurationError):
    """Raised when the settings file cannot be parsed or validated."""


class FilesystemError(ModsweepError):
    """Raised when a filesystem operation fails during a run.

    Attributes:
        path: Path the failing operation was working on, if known.
    """

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path
