from charity_cms.routes.posts import router as posts_router

__all__ = ["posts_router"]
