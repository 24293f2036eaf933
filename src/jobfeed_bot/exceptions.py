"""Exceptions raised by jobfeed-bot."""


class JobFeedError(Exception):
    """Base class for jobfeed-bot errors."""


class EmailNotConfiguredError(JobFeedError):
    """Raised before any send attempt when no email provider key is set."""
