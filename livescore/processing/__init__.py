"""Processing layer - Live note quantization.

This layer turns buffered note onsets into notation:
- Grid quantization between consecutive beats
- Measure and bar-line bookkeeping
"""

from .quantize import OnsetQuantizer, NotationSink

__all__ = [
    "OnsetQuantizer",
    "NotationSink",
]
