"""Note velocity constants.

Velocity is normalised to 0.0-1.0 and scaled to the 0-127 MIDI range only
when a renderer needs it.
"""

# Primary default
DEFAULT_VELOCITY = 0.8

# Beat-position accents
DOWNBEAT_VELOCITY = 1.0
MIDBEAT_VELOCITY = 1.0
PICKUP_VELOCITY = 0.9
OTHER_VELOCITY_HIGH = 0.8
OTHER_VELOCITY_LOW = 0.7

# Range
MIN_VELOCITY = 0.0
MAX_VELOCITY = 1.0
MIDI_MAX_VELOCITY = 127
