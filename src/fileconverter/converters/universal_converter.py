"""Universal file converter: validates the format pair and dispatches to a pipeline."""

from __future__ import annotations

import logging

from fileconverter.models.config import AppConfig

from .base import BaseConverter, ConversionRequest, ConversionResult, Handler, execute
from .document_converter import DocumentConverter
from .errors import ConversionFailed, ConversionIOError, UnsupportedCategory, UnsupportedConversion
from .image_converter import ImageConverter
from .layout import PageLayout
from .registry import FormatCategory, classify, is_supported, supported_extensions
from .spreadsheet_converter import SpreadsheetConverter

logger = logging.getLogger(__name__)


class UniversalConverter:
    """Orchestrator: routes each request through a (category, source, target) handler table."""

    def __init__(self, text_layout: PageLayout | None = None, table_layout: PageLayout | None = None) -> None:
        pipelines: list[BaseConverter] = [
            ImageConverter(),
            DocumentConverter(text_layout),
            SpreadsheetConverter(table_layout),
        ]
        self._handlers: dict[tuple[FormatCategory, str, str], Handler] = {
            (pipeline.category, source, target): handler
            for pipeline in pipelines
            for (source, target), handler in pipeline.handlers().items()
        }

    @classmethod
    def from_config(cls, config: AppConfig) -> UniversalConverter:
        """Build a converter whose PDF page layouts follow the app settings."""
        return cls(
            text_layout=PageLayout(margin=config.page_margin, font_size=config.text_font_size),
            table_layout=PageLayout(margin=config.page_margin, font_size=config.table_font_size),
        )

    is_supported = staticmethod(is_supported)
    classify = staticmethod(classify)
    supported_extensions = staticmethod(supported_extensions)

    def handler_for(self, category: FormatCategory, source: str, target: str) -> Handler | None:
        return self._handlers.get((category, source, target))

    def convert(self, request: ConversionRequest) -> ConversionResult:
        """
        Convert one file.

        Raises UnsupportedConversion or UnsupportedCategory before any work is
        done; every failure after that surfaces as ConversionFailed.
        """
        source, target = request.source_format, request.target_format
        if not is_supported(source, target):
            raise UnsupportedConversion(source, target)

        category = classify(source)
        if category is FormatCategory.UNKNOWN:
            raise UnsupportedCategory(source)

        handler = self.handler_for(category, source, target)
        if handler is None:
            raise AssertionError(f"No handler registered for supported pair {source} -> {target}")

        try:
            if request.output_path.resolve() == request.source_path.resolve():
                raise ConversionIOError(f"Refusing to overwrite source file {request.source_path}")
            result = execute(handler, request)
        except Exception as e:
            logger.debug("Pipeline %s failed for %s: %s", category.value, request.source_path.name, e)
            raise ConversionFailed(e) from e

        logger.info("Converted %s -> %s", request.source_path.name, request.output_path.name)
        return result
