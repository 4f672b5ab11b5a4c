"""
Custom exception classes for the aIgrOT uplink relay.
"""
from typing import Any, Dict, Optional


class AigrotException(Exception):
    """Base exception class for the relay application."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class PacketValidationError(AigrotException):
    """Base class for client input that cannot be extracted or decoded."""

    def __init__(
        self,
        message: str = "Invalid uplink",
        code: str = "VALIDATION_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, code=code, status_code=400, details=details)


class InvalidEnvelope(PacketValidationError):
    """Raised when the webhook body has no string "Data" field."""

    def __init__(
        self,
        message: str = 'Missing "Data" (must be a JSON string).',
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, code="INVALID_ENVELOPE", details=details)


class MalformedJSON(PacketValidationError):
    """Raised when "Data" is not valid JSON."""

    def __init__(
        self,
        message: str = '"Data" is not valid JSON.',
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, code="MALFORMED_JSON", details=details)


class MissingField(PacketValidationError):
    """Raised when the first packet lacks a required field."""

    def __init__(
        self,
        field: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.field = field
        super().__init__(
            message=f"Missing Packets[0].{field}.",
            code="MISSING_FIELD",
            details=details,
        )


class InvalidHex(PacketValidationError):
    """Raised when the packet value is not an even-length hex string."""

    def __init__(
        self,
        message: str = "Invalid hex string in Packets[0].Value.",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, code="INVALID_HEX", details=details)


class UnknownPacketSize(PacketValidationError):
    """Raised when the decoded byte count matches no known layout."""

    def __init__(
        self,
        size: int,
        expected: tuple = (),
        details: Optional[Dict[str, Any]] = None,
    ):
        self.size = size
        self.expected = expected
        message = f"Unknown packet size: {size} bytes (expected {' or '.join(str(e) for e in expected)})"
        super().__init__(message=message, code="UNKNOWN_PACKET_SIZE", details=details)


class MethodNotAllowed(AigrotException):
    """Raised for requests using an unsupported HTTP method."""

    def __init__(
        self,
        message: str = "Method Not Allowed",
        allow: str = "POST",
        details: Optional[Dict[str, Any]] = None,
    ):
        self.allow = allow
        super().__init__(message=message, code="METHOD_NOT_ALLOWED", status_code=405, details=details)


class ConfigurationMissing(AigrotException):
    """Raised when required relay configuration is absent."""

    def __init__(
        self,
        message: str = "Missing Resend API keys",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, code="CONFIGURATION_MISSING", status_code=500, details=details)


class RelayError(AigrotException):
    """Raised when the email provider rejects or fails a send."""

    def __init__(
        self,
        message: str = "Email relay error",
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 502,
    ):
        super().__init__(message=message, code="RELAY_ERROR", status_code=status_code, details=details)
