"""Scheduler timing margins.

All values are in **seconds** unless the name says otherwise.

- `LOOKAHEAD` - how far ahead of real time each batch of notes is queued.
  The next scheduling pass is armed this much before the current batch
  runs out, which absorbs host-timer jitter.
- `STOP_DELAY` - how long after the last note of a non-looping sample the
  sampler stops itself, so cleanup happens even if the renderer never
  calls back.
"""

LOOKAHEAD_MS = 25.0
LOOKAHEAD = LOOKAHEAD_MS / 1000
STOP_DELAY = LOOKAHEAD * 10
