"""ContextScore: context-aware re-scoring of candidate places."""

__version__ = "0.1.0"
