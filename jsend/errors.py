"""Exceptions raised while building, encoding and decoding JSend responses."""


class JSendError(Exception):
    """Base class for every failure raised by this package."""


class InvalidEnvelopeError(JSendError, ValueError):
    """The fields of a response break the JSend rules.

    Raised by the constructor and by decoding once the JSON text itself parsed.
    """


class MalformedTextError(JSendError, ValueError):
    """The text handed to decode is not valid JSON."""


class PreconditionViolationError(JSendError, RuntimeError):
    """An error-only accessor was used on a success or fail response."""


class SerializationError(JSendError):
    """A response could not be encoded to JSON text."""


class ConfigurationError(JSendError):
    """JSEND_* environment variables hold values that cannot be used."""
