from charity_cms.models.author import AuthorDB
from charity_cms.models.post import POST_STATUSES, PostDB

__all__ = ["POST_STATUSES", "AuthorDB", "PostDB"]
