"""Shared utilities for FRESIM.

Modules:
    - fire_util: Enumerated constants and geometry helpers.
    - data_classes: Dataclasses for simulation parameters and element definitions.
    - file_io: JSON configuration readers.
    - logger: Simulation logging with Parquet output.
    - logger_schemas: Data schemas for logged entries.
    - parquet_writer: Parquet file writing utilities.
    - unit_conversions: Length and time unit conversion functions.
"""
