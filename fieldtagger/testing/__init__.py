"""Testing utilities for FieldTagger consumers."""

from .fixtures import HandlerCall, RecordingHandler, make_recording_tag

__all__ = ['HandlerCall', 'RecordingHandler', 'make_recording_tag']
