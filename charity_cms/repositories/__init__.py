from charity_cms.repositories.base import BaseRepository
from charity_cms.repositories.post import PostRepository, PostRow, post_filters

__all__ = ["BaseRepository", "PostRepository", "PostRow", "post_filters"]
