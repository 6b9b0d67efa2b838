"""Recorder orchestration: the manifest poll loop."""

from radiorecall.pipeline.poll_loop import PollLoop

__all__ = ["PollLoop"]
