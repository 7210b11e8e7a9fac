from .unique import Unique, UniqueSequence, unique

__all__ = [
    "Unique",
    "UniqueSequence",
    "unique",
]
