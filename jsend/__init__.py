from jsend.errors import (ConfigurationError, InvalidEnvelopeError, JSendError,
                          MalformedTextError, PreconditionViolationError,
                          SerializationError)
from jsend.response import (DecodeOption, EncodingOption, JSendResponse,
                            ResponseSink, Status)

__all__ = [
    "ConfigurationError",
    "DecodeOption",
    "EncodingOption",
    "InvalidEnvelopeError",
    "JSendError",
    "JSendResponse",
    "MalformedTextError",
    "PreconditionViolationError",
    "ResponseSink",
    "SerializationError",
    "Status",
]
