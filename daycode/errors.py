from __future__ import annotations


class DayCodeError(Exception):
    """Base class for every input, configuration and generation failure."""


class MissingSecretError(DayCodeError):
    pass


class InvalidSecretError(DayCodeError):
    pass


class InvalidTimezoneError(DayCodeError):
    pass


class InvalidDigitsError(DayCodeError):
    pass
