"""
Transforms sub-package for jhu-dumps.

Contains the cleaning steps that turn raw CSV cells into typed columns
before rows are placed in the location tree. Every step is lenient: a
malformed cell becomes a missing value (or 0 for required counts), never
an exception.

Design: Pipeline Pattern
- pipeline.py orchestrates the steps for one layout.
- Individual steps live in separate modules for testability:
  - numbers.py: case counts and coordinates.
  - timestamps.py: the feed's several last-update formats.
  - text.py: location names and identifiers.
"""
