"""Evaluator helper modules for the treelox interpreter."""

__all__ = [
    "blocks",
    "control",
    "expr",
    "fn",
    "helpers",
    "objects",
]
