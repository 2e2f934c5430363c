"""Testing utilities for DazzleWalk consumers."""

from .fixtures import Recorder, Visit

__all__ = ['Recorder', 'Visit']
