"""Inference layer - Musical understanding of the live note stream.

- Hand separation (which stave a note belongs on)
"""

from .hands import HandSeparator

__all__ = [
    "HandSeparator",
]
