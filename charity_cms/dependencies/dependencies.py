"""Application dependencies: caller identity, repositories and services."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from charity_cms.db import get_session
from charity_cms.errors import AuthenticationError
from charity_cms.managers.token_manager import decode_access_token
from charity_cms.repositories import PostRepository
from charity_cms.schemas import CurrentUser
from charity_cms.services import ImageAssetManager, PostService, get_storage_service
from charity_cms.services.storage import StorageService

# Tokens are issued by the account service, not by this API
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


async def get_current_user(
    token: Annotated[str | None, Depends(oauth2_scheme)],
) -> CurrentUser:
    """
    Resolve the caller's identity from the bearer token.

    Parameters
    ----------
    token : str | None
        Bearer token, if the request carried one.

    Returns
    -------
    CurrentUser
        Caller id and role.

    Raises
    ------
    AuthenticationError
        If the token is missing or invalid.
    """
    if not token:
        raise AuthenticationError("Not authenticated")

    user = decode_access_token(token)
    if user is None:
        raise AuthenticationError
    return user


CurrentUserDep = Annotated[CurrentUser, Depends(get_current_user)]


def get_post_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> PostRepository:
    """Resolve a `PostRepository` bound to the request's session."""
    return PostRepository(session)


PostRepoDep = Annotated[PostRepository, Depends(get_post_repository)]
StorageDep = Annotated[StorageService, Depends(get_storage_service)]


def get_asset_manager(storage: StorageDep) -> ImageAssetManager:
    """Asset manager for image routes that do not touch posts."""
    return ImageAssetManager(storage)


def get_post_service(repo: PostRepoDep, storage: StorageDep) -> PostService:
    """
    Resolve the `PostService` for a request.

    The asset manager checks remaining references through the same
    repository, so reconciliation sees the just-committed state.
    """
    assets = ImageAssetManager(storage, is_referenced=repo.image_in_use)
    return PostService(repo, assets)


AssetManagerDep = Annotated[ImageAssetManager, Depends(get_asset_manager)]
PostServiceDep = Annotated[PostService, Depends(get_post_service)]
