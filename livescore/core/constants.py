"""Global constants for livescore.

All times are in milliseconds unless stated otherwise.
"""

# Pitch names
PITCH_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# Beat grouping
GROUP_WINDOW_MS = 250.0

# Tempo tracking
DEFAULT_TEMPO = 120.0
DEFAULT_INTERVAL_MS = 60000.0 / DEFAULT_TEMPO
MAX_TEMPO_JUMP = 1.5
TEMPO_SMOOTHING = 0.3
DEBOUNCE_FLOOR_MS = 150.0
MIN_BEAT_DURATION_MS = 1.0

# Quantization
ON_BEAT_TOLERANCE_MS = 70.0
DEFAULT_TATUM = 2  # 8th notes in 4/4
DEFAULT_DURATION_UNIT = 8  # eighth note
DEFAULT_MIN_BEAT_LEVEL = 8
DEFAULT_BEATS_PER_MEASURE = 4
NOTE_TYPES = (2, 4, 8, 16, 32)

# Hand separation (MIDI pitches)
LEFT_HAND_INITIAL = 48.0  # C3
RIGHT_HAND_INITIAL = 72.0  # C5
HARD_UPPER_FLOOR = 84  # above C6 is always treble
HARD_LOWER_CEILING = 36  # below C2 is always bass
HAND_LEARNING_RATE = 0.1
MIDDLE_C = 60

# Beat tracker output thresholds
BEAT_THRESHOLD = 0.5
DOWNBEAT_THRESHOLD = 0.5

# MIDI ranges
MIDI_MIN = 0
MIDI_MAX = 127
