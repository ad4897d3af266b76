"""Importers for bringing external data into memkit."""

from memkit.importers.json_importer import (
    IMPORT_MODES,
    JsonImporter,
    load_payload,
    load_sample_data,
    parse_memory_json,
)

__all__ = [
    "IMPORT_MODES",
    "JsonImporter",
    "load_payload",
    "load_sample_data",
    "parse_memory_json",
]
