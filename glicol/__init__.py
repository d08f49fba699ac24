"""A graph-oriented live-coding language for audio: parser, audio graph and engine."""

__version__ = "0.1.0"

__all__ = [
    "ast",
    "buffer",
    "context",
    "diff",
    "engine",
    "errors",
    "grammar",
    "graph",
    "messages",
    "parser",
]