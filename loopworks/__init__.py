"""A thread-pool event loop with chainable futures, delayed tasks and demos."""

__version__ = "1.0.0"
__all__ = ["futures", "loop", "examples"]