"""Exception hierarchy for the conversion engine."""

from __future__ import annotations


class ConverterError(Exception):
    """Base class for all conversion engine errors."""


class UnsupportedConversion(ConverterError):
    """Raised when the (source, target) pair is absent from the capability matrix."""

    def __init__(self, source: str, target: str) -> None:
        super().__init__(f"Conversion from {source} to {target} is not supported")
        self.source = source
        self.target = target


class UnsupportedCategory(ConverterError):
    """Raised when a source format belongs to no known category."""

    def __init__(self, fmt: str) -> None:
        super().__init__(f"Unsupported file category for {fmt}")
        self.format = fmt


class UnimplementedFeature(ConverterError):
    """Raised for conversions that are listed but intentionally not implemented."""


class ConversionIOError(ConverterError):
    """Raised when a source cannot be read or an output cannot be written."""


class EncodingError(ConverterError):
    """Raised when a codec or serializer fails on otherwise readable data."""


class ConversionFailed(ConverterError):
    """Single error shape surfaced by the dispatcher for any pipeline failure."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Conversion failed: {cause}")
        self.cause = cause
