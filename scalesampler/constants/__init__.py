"""Constants for scalesampler.

This package contains three sets of constants:

- ``scalesampler.constants.timing`` - Lookahead and stop-delay margins used by the scheduler
- ``scalesampler.constants.durations`` - Beat units and note values for sample rhythm
- ``scalesampler.constants.velocity`` - Normalised (0.0-1.0) velocity defaults and accents

The scheduler margins are re-exported here so ``scalesampler.constants.LOOKAHEAD``
works without importing the submodule.
"""

from scalesampler.constants.timing import LOOKAHEAD, LOOKAHEAD_MS, STOP_DELAY
