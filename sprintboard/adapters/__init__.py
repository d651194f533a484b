from .memory import InMemoryBoardStore

__all__ = ["InMemoryBoardStore"]
