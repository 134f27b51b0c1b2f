from .directory import get_actor

__all__ = [
    "get_actor",
]
