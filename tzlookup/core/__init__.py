"""Core extraction, parsing, normalization, and ordering stages.

WHY: These modules are the only part of the project with real state and
sequencing logic. They take a binary stream in and hand an ordered list
of strings out, with no network or filesystem access of their own.

HOW: models.py defines the data passed between stages, extractor.py
walks the tar/gzip stream, parser.py tracks the current zone across
continuation lines, normalizer.py reformats offsets, and ordering.py
keeps the table sorted as records arrive.

RULES:
- Stages communicate only through the dataclasses in models.py
- No stage reads configuration; everything arrives as arguments
"""
