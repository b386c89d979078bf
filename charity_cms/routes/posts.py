# charity_cms/routes/posts.py

"""
Post Routes.

Public reading and admin management of posts, plus the featured image
upload/serve/delete endpoints.

Summary
-------
Endpoints include:
  - List published posts (public)
  - Get published post by slug (public)
  - List all posts (admin)
  - Get post by id (admin)
  - Create, update and delete posts (admin)
  - Upload, fetch and delete post images

Dependencies
------------
  - `PostServiceDep`: Post service bound to the request's database session.
  - `AdminUserDep`: Authenticated caller with the `admin` role.
  - `AssetManagerDep`: Image asset manager for the image endpoints.

Rate Limiting
-------------
All endpoints define explicit limits. Tiered limits apply when `X-API-Key`
is present, offering higher throughput for identified clients.
"""

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import Annotated

from fastapi import APIRouter, Body, Depends, File, Query, Request, UploadFile
from fastapi.responses import ORJSONResponse
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED

from charity_cms.auth import AdminUserDep
from charity_cms.configs import file_logger
from charity_cms.configs.settings import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from charity_cms.dependencies import AssetManagerDep, PostServiceDep
from charity_cms.errors import NoFileProvidedError
from charity_cms.managers import limiter
from charity_cms.schemas import (
    ImageUploadResponse,
    MessageResponse,
    PostCreate,
    PostListResponse,
    PostResponse,
    PostStatus,
    PostUpdate,
)
from charity_cms.utils.helpers import host

router = APIRouter(prefix="/posts", tags=["📝 Posts"])

logger = file_logger(getLogger(__name__))

RATE_LIMIT_EXAMPLE = {
    "description": "Rate limit exceeded",
    "content": {"application/json": {"example": {"detail": "Rate limit exceeded"}}},
}
NOT_FOUND_EXAMPLE = {
    "description": "Not found",
    "content": {"application/json": {"example": {"kind": "not_found", "detail": "Post not found"}}},
}
FORBIDDEN_EXAMPLE = {
    "description": "Caller is not an admin",
    "content": {
        "application/json": {
            "example": {
                "kind": "forbidden",
                "detail": "Insufficient permissions. Required role: admin",
            },
        },
    },
}
POST_EXAMPLE = {
    "id": 1,
    "title": "Spring Food Drive Results",
    "slug": "spring-food-drive-results",
    "content": "Thanks to 120 volunteers we collected four tonnes of food...",
    "excerpt": "We collected four tonnes of food.",
    "featuredImage": "/posts/images/0b6f7d1e-1714000000000.jpg",
    "tags": ["events", "food-drive"],
    "status": "published",
    "metaDescription": "Results of the spring food drive",
    "authorId": 1,
    "author": {"name": "Amara Okafor", "email": "amara@example.org"},
    "createdAt": "2025-04-25T10:00:00Z",
    "updatedAt": "2025-04-25T10:00:00Z",
}
LIST_EXAMPLE = {
    "items": [
        {
            **{k: v for k, v in POST_EXAMPLE.items() if k != "content"},
            "author": "Amara Okafor",
        },
    ],
    "pagination": {"currentPage": 1, "totalPages": 1, "total": 1, "limit": 10},
}


def tiered(authenticated: str, anonymous: str) -> Callable[[str], str]:
    """Limit that is higher for clients identified by `X-API-Key`."""
    return lambda key: authenticated if "apikey" in key else anonymous


@dataclass(frozen=True)
class PostListQuery:
    """
    Query container for post listing.

    Parameters
    ----------
    page : int
        1-based page number.
    limit : int
        Page size.
    search : str
        Search term matched in title, content or excerpt.
    status : PostStatus | None
        Status filter; always `published` for public listings.
    """

    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    search: str = ""
    status: PostStatus | None = None


PageParam = Annotated[int, Query(ge=1, description="1-based page number")]
LimitParam = Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE, description="Page size")]
SearchParam = Annotated[
    str,
    Query(max_length=200, description="Match title, content or excerpt (case-insensitive)"),
]


def get_public_list_query(
    page: PageParam = 1,
    limit: LimitParam = DEFAULT_PAGE_SIZE,
    search: SearchParam = "",
) -> PostListQuery:
    """
    Dependency to construct a `PostListQuery` pinned to published posts.

    Returns
    -------
    PostListQuery
        Aggregated query parameters object.
    """
    return PostListQuery(page=page, limit=limit, search=search, status="published")


def get_admin_list_query(
    page: PageParam = 1,
    limit: LimitParam = DEFAULT_PAGE_SIZE,
    search: SearchParam = "",
    status: Annotated[PostStatus | None, Query(description="Optional status filter")] = None,
) -> PostListQuery:
    """
    Dependency to construct a `PostListQuery` for the admin dashboard.

    Returns
    -------
    PostListQuery
        Aggregated query parameters object.
    """
    return PostListQuery(page=page, limit=limit, search=search, status=status)


@router.get(
    "",
    response_class=ORJSONResponse,
    response_model=PostListResponse,
    summary="List published posts",
    description="List published posts newest first, with optional search and pagination.",
    responses={
        200: {"content": {"application/json": {"example": LIST_EXAMPLE}}},
        429: RATE_LIMIT_EXAMPLE,
    },
    operation_id="posts_list_published",
)
@limiter.limit(tiered("120/minute", "60/minute"))
async def list_published_posts(
    request: Request,
    response: Response,
    query: Annotated[PostListQuery, Depends(get_public_list_query)],
    service: PostServiceDep,
) -> PostListResponse:
    """
    List published posts.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response object for middleware/decorators.
    query : PostListQuery
        Pagination and search parameters.
    service : PostService
        Post service dependency.

    Returns
    -------
    PostListResponse
        Page of posts (without bodies) and pagination metadata.
    """
    return await service.list_posts(
        status=query.status,
        search=query.search,
        page=query.page,
        limit=query.limit,
    )


@router.get(
    "/admin",
    response_class=ORJSONResponse,
    response_model=PostListResponse,
    summary="List all posts",
    description="List posts of every status for the admin dashboard.",
    responses={
        200: {"content": {"application/json": {"example": LIST_EXAMPLE}}},
        403: FORBIDDEN_EXAMPLE,
        429: RATE_LIMIT_EXAMPLE,
    },
    operation_id="posts_list_admin",
)
@limiter.limit("60/minute")
async def list_all_posts(
    request: Request,
    response: Response,
    admin: AdminUserDep,
    query: Annotated[PostListQuery, Depends(get_admin_list_query)],
    service: PostServiceDep,
) -> PostListResponse:
    """
    List posts regardless of status, optionally filtered by `status`.

    Returns
    -------
    PostListResponse
        Page of posts and pagination metadata.
    """
    return await service.list_posts(
        status=query.status,
        search=query.search,
        page=query.page,
        limit=query.limit,
    )


@router.get(
    "/admin/{post_id}",
    response_class=ORJSONResponse,
    response_model=PostResponse,
    summary="Get post by ID",
    description="Retrieve a post of any status by its numeric id.",
    responses={
        200: {"content": {"application/json": {"example": POST_EXAMPLE}}},
        403: FORBIDDEN_EXAMPLE,
        404: NOT_FOUND_EXAMPLE,
        429: RATE_LIMIT_EXAMPLE,
    },
    operation_id="posts_get_by_id",
)
@limiter.limit("60/minute")
async def get_post_by_id(
    request: Request,
    response: Response,
    post_id: int,
    admin: AdminUserDep,
    service: PostServiceDep,
) -> PostResponse:
    """
    Get a post by id, drafts included.

    Parameters
    ----------
    post_id : int
        Post identifier.

    Returns
    -------
    PostResponse
        Full post with author.

    Raises
    ------
    RecordNotFoundError
        If no post has this id.
    """
    return await service.get_admin(post_id)


@router.post(
    "/upload-image",
    response_class=ORJSONResponse,
    response_model=ImageUploadResponse,
    summary="Upload a post image",
    description=(
        "Upload an image (multipart field `image`). The returned `url` is what "
        "a post's `featuredImage` should be set to."
    ),
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "url": "/posts/images/0b6f7d1e-1714000000000.jpg",
                        "filename": "0b6f7d1e-1714000000000.jpg",
                        "originalName": "volunteers.jpg",
                        "size": 245123,
                    },
                },
            },
        },
        400: {
            "description": "No file or not a decodable image",
            "content": {
                "application/json": {
                    "example": {"kind": "validation_error", "detail": "No file uploaded"},
                },
            },
        },
        413: {
            "description": "Image too large",
            "content": {
                "application/json": {
                    "example": {
                        "kind": "payload_too_large",
                        "detail": "Your image is too large. Please use an image smaller than 10MB.",
                    },
                },
            },
        },
        415: {
            "description": "Not an allowed image type",
            "content": {
                "application/json": {
                    "example": {
                        "kind": "unsupported_media_type",
                        "detail": "Only image files are allowed.",
                    },
                },
            },
        },
        429: RATE_LIMIT_EXAMPLE,
    },
    operation_id="posts_upload_image",
)
@limiter.limit("10/minute")
async def upload_image(
    request: Request,
    response: Response,
    admin: AdminUserDep,
    assets: AssetManagerDep,
    image: Annotated[UploadFile | None, File(description="Image file")] = None,
) -> ImageUploadResponse:
    """
    Upload a featured image.

    Parameters
    ----------
    image : UploadFile | None
        Uploaded file from the `image` multipart field.

    Returns
    -------
    ImageUploadResponse
        Reference and metadata of the stored file.

    Raises
    ------
    NoFileProvidedError
        If the request carried no file.
    UnsupportedImageTypeError, ImageTooLargeError, InvalidImageError
        If the file fails validation.
    """
    if image is None:
        raise NoFileProvidedError

    uploaded = await assets.accept_upload(image)
    logger.info(
        f"Image {uploaded.filename} uploaded by author {admin.id} from ip: {host(request)}",
    )
    return ImageUploadResponse(
        url=uploaded.url,
        filename=uploaded.filename,
        original_name=uploaded.original_name,
        size=uploaded.size,
    )


@router.get(
    "/images/{filename}",
    summary="Fetch a post image",
    description="Serve a stored post image.",
    response_class=Response,
    responses={
        200: {"content": {"image/*": {}}, "description": "Image bytes"},
        404: NOT_FOUND_EXAMPLE,
        429: RATE_LIMIT_EXAMPLE,
    },
    operation_id="posts_get_image",
)
@limiter.limit(tiered("600/minute", "300/minute"))
async def get_image(
    request: Request,
    response: Response,
    filename: str,
    assets: AssetManagerDep,
) -> Response:
    """
    Serve an image by file name.

    Raises
    ------
    ImageNotFoundError
        If the file does not exist.
    """
    data, media_type = await assets.read_image(filename)
    return Response(
        content=data,
        media_type=media_type,
        headers={"Cache-Control": "public, max-age=86400"},
    )


@router.delete(
    "/images/{filename}",
    response_class=ORJSONResponse,
    response_model=MessageResponse,
    summary="Delete a post image",
    description="Delete a stored image directly, whether or not a post references it.",
    responses={
        200: {
            "content": {
                "application/json": {"example": {"message": "Image deleted successfully"}},
            },
        },
        403: FORBIDDEN_EXAMPLE,
        404: NOT_FOUND_EXAMPLE,
        429: RATE_LIMIT_EXAMPLE,
    },
    operation_id="posts_delete_image",
)
@limiter.limit("20/minute")
async def delete_image(
    request: Request,
    response: Response,
    filename: str,
    admin: AdminUserDep,
    assets: AssetManagerDep,
) -> MessageResponse:
    """
    Delete an image by file name.

    Raises
    ------
    ImageNotFoundError
        If the file does not exist.
    """
    await assets.delete_image(filename)
    logger.info(f"Image {filename} deleted by author {admin.id}")
    return MessageResponse(message="Image deleted successfully")


@router.get(
    "/{slug}",
    response_class=ORJSONResponse,
    response_model=PostResponse,
    summary="Get published post by slug",
    description="Retrieve a published post by slug. Drafts are reported as not found.",
    responses={
        200: {"content": {"application/json": {"example": POST_EXAMPLE}}},
        404: NOT_FOUND_EXAMPLE,
        429: RATE_LIMIT_EXAMPLE,
    },
    operation_id="posts_get_by_slug",
)
@limiter.limit(tiered("120/minute", "60/minute"))
async def get_post_by_slug(
    request: Request,
    response: Response,
    slug: str,
    service: PostServiceDep,
) -> PostResponse:
    """
    Get a published post by slug.

    Parameters
    ----------
    slug : str
        Post slug.

    Returns
    -------
    PostResponse
        Full post with author.

    Raises
    ------
    RecordNotFoundError
        If no published post has this slug.
    """
    return await service.get_published(slug)


@router.post(
    "",
    response_class=ORJSONResponse,
    response_model=PostResponse,
    status_code=HTTP_201_CREATED,
    summary="Create a post",
    description="Create a post. The slug is derived from the title and made unique.",
    responses={
        201: {"content": {"application/json": {"example": POST_EXAMPLE}}},
        400: {
            "description": "Invalid payload",
            "content": {
                "application/json": {
                    "example": {"kind": "validation_error", "detail": "Validation failed"},
                },
            },
        },
        403: FORBIDDEN_EXAMPLE,
        409: {
            "description": "Slug conflict persisted after retrying",
            "content": {
                "application/json": {
                    "example": {
                        "kind": "conflict",
                        "detail": "A record with this value already exists",
                    },
                },
            },
        },
        429: RATE_LIMIT_EXAMPLE,
    },
    operation_id="posts_create",
)
@limiter.limit("20/minute")
async def create_post(
    request: Request,
    response: Response,
    post: Annotated[
        PostCreate,
        Body(
            examples=[
                {
                    "title": "Spring Food Drive Results",
                    "content": "Thanks to 120 volunteers we collected four tonnes of food...",
                    "excerpt": "We collected four tonnes of food.",
                    "tags": ["events", "food-drive"],
                    "status": "draft",
                },
            ],
        ),
    ],
    admin: AdminUserDep,
    service: PostServiceDep,
) -> PostResponse:
    """
    Create a new post authored by the caller.

    Parameters
    ----------
    post : PostCreate
        Post input payload.

    Returns
    -------
    PostResponse
        Created post.
    """
    return await service.create(post, author_id=admin.id)


@router.put(
    "/{post_id}",
    response_class=ORJSONResponse,
    response_model=PostResponse,
    summary="Update a post",
    description=(
        "Partially update a post. Omitted fields are left untouched; `null` clears "
        "optional fields. Changing the title re-derives the slug."
    ),
    responses={
        200: {"content": {"application/json": {"example": POST_EXAMPLE}}},
        400: {
            "description": "Invalid payload or nothing to update",
            "content": {
                "application/json": {
                    "example": {"kind": "no_fields_to_update", "detail": "No fields to update"},
                },
            },
        },
        403: FORBIDDEN_EXAMPLE,
        404: NOT_FOUND_EXAMPLE,
        409: {
            "description": "Slug conflict persisted after retrying",
            "content": {
                "application/json": {
                    "example": {
                        "kind": "conflict",
                        "detail": "A record with this value already exists",
                    },
                },
            },
        },
        429: RATE_LIMIT_EXAMPLE,
    },
    operation_id="posts_update",
)
@limiter.limit("30/minute")
async def update_post(
    request: Request,
    response: Response,
    post_id: int,
    patch: Annotated[
        PostUpdate,
        Body(examples=[{"status": "published"}, {"featuredImage": None}]),
    ],
    admin: AdminUserDep,
    service: PostServiceDep,
) -> PostResponse:
    """
    Apply a partial update to a post.

    Parameters
    ----------
    post_id : int
        Post identifier.
    patch : PostUpdate
        Fields to change.

    Returns
    -------
    PostResponse
        Updated post.
    """
    return await service.update(post_id, patch)


@router.delete(
    "/{post_id}",
    response_class=ORJSONResponse,
    response_model=MessageResponse,
    summary="Delete a post",
    description="Delete a post and release its locally stored featured image.",
    responses={
        200: {
            "content": {
                "application/json": {"example": {"message": "Post deleted successfully"}},
            },
        },
        403: FORBIDDEN_EXAMPLE,
        404: NOT_FOUND_EXAMPLE,
        429: RATE_LIMIT_EXAMPLE,
    },
    operation_id="posts_delete",
)
@limiter.limit("20/minute")
async def delete_post(
    request: Request,
    response: Response,
    post_id: int,
    admin: AdminUserDep,
    service: PostServiceDep,
) -> MessageResponse:
    """
    Delete a post.

    Raises
    ------
    RecordNotFoundError
        If no post has this id.
    """
    await service.delete(post_id)
    return MessageResponse(message="Post deleted successfully")
