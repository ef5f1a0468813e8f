"""Beat units for sample playback.

A beat unit is stored as the number of seconds a note lasts at 1 BPM divided
by 4, so that ``value / bpm`` gives the note duration in seconds:

    import scalesampler.constants.durations as dur

    # a quarter note at 60 BPM
    dur.QUARTER / 60       # 1.0 seconds

    # an eighth note at 120 BPM
    dur.EIGHTH / 120       # 0.25 seconds

The matching note value (4 for a quarter, 8 for an eighth) is
``WHOLE_NOTE_UNITS // value``.
"""

SIXTEENTH = 15
EIGHTH = 30
QUARTER = 60
HALF = 120

WHOLE_NOTE_UNITS = 240

# Duration multipliers for dotted pairs.
DOT_RATIO = 1.5
DEDOT_RATIO = 0.5
