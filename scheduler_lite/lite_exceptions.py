"""Custom exception hierarchy for Scheduler Lite.

The recurrence core never raises for bad data content (malformed intervals,
orphan rules); those are skipped. These exceptions cover the layers around
it: configuration, the CSV event store and backup files.
"""


class SchedulerError(Exception):
    """Base exception for all Scheduler Lite errors.

    The command-line entry point catches this base class, logs the message
    and exits with a non-zero status.
    """


class ConfigError(SchedulerError):
    """Configuration could not be loaded.

    Raised when:
    - The config file exists but its top level is not a mapping
    - The config file is neither valid YAML nor valid JSON
    """


class SchedulerDataError(SchedulerError):
    """Reading or writing scheduler data failed."""


class StoreError(SchedulerDataError):
    """CSV event store access failed.

    Raised when:
    - A data file cannot be written
    - A data file exists but cannot be read
    """


class BackupError(SchedulerDataError):
    """Backup or restore failed.

    Raised when:
    - The backup file cannot be written
    - The backup file is missing or unreadable
    """
