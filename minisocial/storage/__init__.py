from .json_storage import JsonStorage

__all__ = ["JsonStorage"]
