"""
Data Mapping System Exceptions

Custom exception classes for schema mapping, filter building and payload
shaping.
"""


class DataMappingError(Exception):
    """Base exception for data mapping operations."""

    pass


class FilterParseError(DataMappingError):
    """Exception raised when a filter cannot be built from its input."""

    pass


class FilterValidationError(DataMappingError):
    """Exception raised when a filter references a field that cannot be filtered on."""

    pass


class PayloadValidationError(DataMappingError):
    """Exception raised when a write payload is not acceptable."""

    pass
