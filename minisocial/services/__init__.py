from .identity_store import IdentityStore
from .post_store import PostStore

__all__ = ["IdentityStore", "PostStore"]
