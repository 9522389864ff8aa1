"""File conversion engine package."""

from .base import BaseConverter, ConversionOptions, ConversionRequest, ConversionResult
from .errors import (
    ConversionFailed,
    ConversionIOError,
    ConverterError,
    EncodingError,
    UnimplementedFeature,
    UnsupportedCategory,
    UnsupportedConversion,
)
from .layout import PageLayout
from .registry import FORMAT_CAPABILITIES, FormatCategory, classify, is_supported
from .universal_converter import UniversalConverter

__all__ = [
    "BaseConverter",
    "ConversionOptions",
    "ConversionRequest",
    "ConversionResult",
    "ConversionFailed",
    "ConversionIOError",
    "ConverterError",
    "EncodingError",
    "UnimplementedFeature",
    "UnsupportedCategory",
    "UnsupportedConversion",
    "PageLayout",
    "FORMAT_CAPABILITIES",
    "FormatCategory",
    "classify",
    "is_supported",
    "UniversalConverter",
]
