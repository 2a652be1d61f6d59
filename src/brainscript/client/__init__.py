"""Client-side helpers for talking to the BrainScript API."""

from .reading_time import HttpReadTimeSender, ReadTimeAccumulator, ReadTimeFlusher

__all__ = ["HttpReadTimeSender", "ReadTimeAccumulator", "ReadTimeFlusher"]
