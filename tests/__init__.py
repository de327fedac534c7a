"""
Expose common test utilities so tests can import directly:
    from tests import Coffee, StubTransport
"""

from .utils import Coffee, RecordingCompletion, StubTransport

__all__ = ["Coffee", "StubTransport", "RecordingCompletion"]
