"""Command-line entry point for the recorder.

- ``python -m radiorecall.cli <stream_url>`` (or the ``radiorecall``
  console script) — poll a live HLS stream and record new audio.

argparse is used for the single positional argument; everything else is
configured through environment variables.
"""
