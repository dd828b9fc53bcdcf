"""
Failure taxonomy of the target-audit reminder job.

None of these ever escape the per-auditor unit of work; they decide
whether an auditor is skipped for the cycle and at which log level.
"""


class ReminderError(Exception):
    """Base class for reminder job failures."""


class DataUnavailable(ReminderError):
    """A store or query failed. Skip the auditor, retry next cycle."""


class TransportFailure(ReminderError):
    """Email or broadcast delivery failed. Logged, not retried today."""

    def __init__(self, channel, message):
        super().__init__(f"{channel}: {message}")
        self.channel = channel


class ConfigurationError(ReminderError):
    """A target record is malformed (bad reminder time, inverted window)."""
