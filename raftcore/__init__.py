"""Raft consensus core: configuration, log types, messages and quorum rules."""

__version__ = "0.0.1"

__all__ = ["conf", "log", "messages", "quorum"]