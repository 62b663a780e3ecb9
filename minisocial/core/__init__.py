from .feed_query import SortMode, query

__all__ = ["SortMode", "query"]
