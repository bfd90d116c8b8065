"""Shared utilities for the firegrid simulation package.

This package provides common utilities used across the simulation, including
constants, parameter dataclasses and run logging.

Modules:
    - fire_util: Cell and simulation states, grid neighbourhoods, validators.
    - data_classes: Simulation parameters and the ``.cfg`` reader.
    - logger: Run logging with Parquet output.
    - logger_schemas: Data schemas for logged entries.
    - parquet_writer: Parquet file writing utilities.
"""
