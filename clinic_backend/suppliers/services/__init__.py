from .directory import get_supplier

__all__ = [
    "get_supplier",
]
