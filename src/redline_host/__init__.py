"""
redline_host
============

Native messaging host for the Redline screenshot annotation extension.

The extension captures an annotated screenshot and sends it to this
process over the browser's native messaging channel. The host writes
the PNG to the feedback directory and points latest.json at it.

Components:
    - stream: Length-prefixed framing and the stdin/stdout request loop
    - storage: Artifact + latest.json persistence
    - models: Request/response schemas and error kinds
    - client: The sending side of the channel, for scripts and tests

Example:
    from redline_host.storage import FeedbackStore
    from redline_host.stream import StreamDispatcher

    StreamDispatcher(FeedbackStore()).run(sys.stdin.buffer, sys.stdout.buffer)
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
