from verbdrill.models.kv import KeyValueEntry

__all__ = [
    "KeyValueEntry",
]
