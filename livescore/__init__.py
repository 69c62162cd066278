"""livescore - Real-time onset quantization and bar tracking.

Architecture Layers:
    1. core/       - Event types, constants and configuration
    2. input/      - Beat tracker interface and recorded performances
    3. analysis/   - Beat grouping, tempo smoothing, missed-beat inference
    4. inference/  - Hand (stave) separation
    5. processing/ - Onset quantization and measure tracking
    6. output/     - Score layout, MIDI and MusicXML export
"""

__version__ = "0.1.0"

# Core types
from .core import (
    Stave,
    ColorHint,
    NoteEvent,
    BeatDetection,
    BeatGroup,
    NotationEvent,
    ScorifyConfig,
    HandConfig,
)

# Input layer
from .input import (
    BeatTracker,
    BeatPrediction,
    BeatThresholds,
    ScriptedBeatTracker,
    Performance,
    PerformedNote,
)

# Analysis layer
from .analysis import BeatGrouper, TempoEstimator

# Inference layer
from .inference import HandSeparator

# Processing layer
from .processing import OnsetQuantizer

# Output layer
from .output import ScoreLayout, MIDIExporter, MusicXMLExporter

# Session
from .session import LiveSession

__all__ = [
    # Core
    "Stave",
    "ColorHint",
    "NoteEvent",
    "BeatDetection",
    "BeatGroup",
    "NotationEvent",
    "ScorifyConfig",
    "HandConfig",
    # Input
    "BeatTracker",
    "BeatPrediction",
    "BeatThresholds",
    "ScriptedBeatTracker",
    "Performance",
    "PerformedNote",
    # Analysis
    "BeatGrouper",
    "TempoEstimator",
    # Inference
    "HandSeparator",
    # Processing
    "OnsetQuantizer",
    # Output
    "ScoreLayout",
    "MIDIExporter",
    "MusicXMLExporter",
    # Session
    "LiveSession",
]
