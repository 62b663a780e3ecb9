"""MiniSocial: a local social feed with users, posts, likes and comments."""

__version__ = "1.0.0"
