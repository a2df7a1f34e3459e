"""Discussion-forum content engine: posts, threaded comments, votes and moderation."""

__version__ = "0.1.0"
