from charity_cms.dependencies.dependencies import (
    AssetManagerDep,
    CurrentUserDep,
    PostRepoDep,
    PostServiceDep,
    get_asset_manager,
    get_current_user,
    get_post_repository,
    get_post_service,
    oauth2_scheme,
)

__all__ = [
    "AssetManagerDep",
    "CurrentUserDep",
    "PostRepoDep",
    "PostServiceDep",
    "get_asset_manager",
    "get_current_user",
    "get_post_repository",
    "get_post_service",
    "oauth2_scheme",
]
