"""Structural extractors for Solidity, Cairo and Vyper, plus dialect detection."""

from chainaudit.parsers.base import ContractStructure, Dialect, StructuralExtractor
from chainaudit.parsers.language import (
    LanguageDetection,
    detect_language,
    language_display_name,
    language_file_extension,
)
from chainaudit.parsers.line_extractor import CairoExtractor, VyperExtractor
from chainaudit.parsers.registry import ExtractorRegistry, default_registry, extractor_for
from chainaudit.parsers.solidity import SolidityExtractor

__all__ = [
    "CairoExtractor",
    "ContractStructure",
    "Dialect",
    "ExtractorRegistry",
    "LanguageDetection",
    "SolidityExtractor",
    "StructuralExtractor",
    "VyperExtractor",
    "default_registry",
    "detect_language",
    "extractor_for",
    "language_display_name",
    "language_file_extension",
]
