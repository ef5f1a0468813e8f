"""
scalesampler - generated scales played through a lookahead scheduler.

scalesampler builds scales and arpeggios in any of eighteen tonalities,
spells every note for its key signature, and plays the result as a
rhythmic sample. Each time the sample is rebuilt it passes through a
three-stage transform pipeline, so a looping scale can evolve from plain
scale practice into a melodic phrase.

What it does:

- **Scales and arpeggios.** Diatonic modes, harmonic and melodic minor,
  symmetric scales (diminished, whole tone, augmented), pentatonics,
  blues, Prometheus, tritone and Japanese, ascending, descending or
  both, over one or more octaves.
- **Key-aware spelling.** Notes know their key signature: ``F`` is
  written ``E♯`` in F♯ major, black keys are flats in flat keys.
- **Transform pipeline.** Named shufflers (``RANDY``, ``TONAK``,
  ``SOFA``, ``BIMOM``, ``JARD``, ``CHUNE``, ``TONIK``, ``SOFO``),
  dotters (``CRIM``, ``DROF``) and velociters (``TURNT``, ``DAWN``), or
  your own callables.
- **Lookahead scheduling.** Notes are queued slightly ahead of time on a
  host clock, with tempo and key changes taking effect from the next
  unqueued note.
- **MIDI and OSC output.** Play through any MIDI port (and record to a
  standard MIDI file) or send triggers to an OSC synth.

Minimal example:

    ```python
    import asyncio
    import scalesampler

    async def main ():
        host = scalesampler.AsyncioHost()
        sampler = scalesampler.Sampler(host, degree=2, tonality="DORIAN", beat="1/8", bpm=120)
        sampler.connect(my_instrument)
        sampler.play()
        await asyncio.sleep(5)

    asyncio.run(main())
    ```

Package-level exports: ``Sampler``, ``SamplerConfig``, ``AsyncioHost``,
``Tonality``, ``Direction``, ``generate``.
"""

import scalesampler.config
import scalesampler.host
import scalesampler.sampler
import scalesampler.scales
import scalesampler.tonality


Sampler = scalesampler.sampler.Sampler
SamplerConfig = scalesampler.config.SamplerConfig
AsyncioHost = scalesampler.host.AsyncioHost
Tonality = scalesampler.tonality.Tonality
Direction = scalesampler.tonality.Direction
generate = scalesampler.scales.generate
