"""Exceptions raised by the client for expected error conditions."""


class OtsError(Exception):
    """Raised when the client encounters an expected error condition."""


class MissingArgumentError(OtsError):
    """A required metadata or secret key was not supplied."""


class AuthenticationRequiredError(OtsError):
    """An authenticated endpoint was requested without credentials."""


class FormatError(OtsError):
    """A response could not be formatted in the requested output mode."""
