"""
Utility Bill Extractor - Source Package.

Turns water and electricity bill PDFs into invoice records that a user
reviews before storing.

Modules:
    - input_handler: File validation and PDF text extraction
    - extraction: Field heuristics, known accounts and record assembly
    - postprocessor: Normalization and validation
    - output_handler: SQLite storage

Architecture:
    Input → PDF text → Field extraction → Post-processing → Storage
"""

__version__ = "1.0.0"

__all__ = [
    'input_handler',
    'extraction',
    'postprocessor',
    'output_handler',
    'utils'
]
