"""User API routes.

Registration, profile management, channel profiles and watch history.
"""

from io import BytesIO
from typing import Annotated

from fastapi import APIRouter, File, Form, UploadFile, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.logging import get_logger
from vidtube.domain.exceptions import ConflictError, NotFoundError, ValidationError
from vidtube.infrastructure.api.dependencies import CurrentUser, DbSession, Storage
from vidtube.infrastructure.api.schemas import (
    ApiResponse,
    ChannelProfileResponse,
    ErrorResponse,
    UpdateAccountRequest,
    UserPublic,
    WatchedVideoResponse,
)
from vidtube.infrastructure.auth import hash_password
from vidtube.infrastructure.persistence.models import UserModel
from vidtube.infrastructure.persistence.repositories import (
    SubscriptionRepository,
    UserRepository,
    WatchHistoryRepository,
)
from vidtube.infrastructure.storage import StorageProvider, StoredMedia

logger = get_logger(__name__)

router = APIRouter()


async def _store_upload(storage: StorageProvider, folder: str, upload: UploadFile) -> StoredMedia:
    content = await upload.read()
    return await storage.save_file(
        folder=folder,
        file_content=BytesIO(content),
        filename=upload.filename or "upload",
        mime_type=upload.content_type or "application/octet-stream",
        size=len(content),
    )


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[UserPublic],
    responses={
        400: {"model": ErrorResponse, "description": "Validation error"},
        409: {"model": ErrorResponse, "description": "Username or email already exists"},
    },
)
async def register(
    session: DbSession,
    storage: Storage,
    full_name: Annotated[str, Form(alias="fullName")],
    email: Annotated[str, Form()],
    username: Annotated[str, Form()],
    password: Annotated[str, Form()],
    avatar: Annotated[UploadFile | None, File()] = None,
    cover_image: Annotated[UploadFile | None, File(alias="coverImage")] = None,
) -> ApiResponse[UserPublic]:
    """Register a new user.

    Flow:
    1. Check that no field is blank
    2. Check username/email uniqueness
    3. Store avatar (required) and cover image (optional)
    4. Create the user with a hashed password
    5. Return the user without secrets
    """
    # 1. Check that no field is blank
    if any(not value.strip() for value in (full_name, email, username, password)):
        raise ValidationError("All fields are required")
    if avatar is None or not avatar.filename:
        raise ValidationError("Avatar file is required")

    user_repo = UserRepository(session)

    # 2. Check username/email uniqueness
    if await user_repo.username_or_email_exists(username, email):
        logger.info("Registration failed: user exists", username=username, email=email)
        raise ConflictError("User with the username or email already exists")

    # 3. Store images
    stored_avatar = await _store_upload(storage, "avatars", avatar)
    stored_cover = None
    if cover_image is not None and cover_image.filename:
        stored_cover = await _store_upload(storage, "covers", cover_image)

    # 4. Create the user
    user = UserModel(
        full_name=full_name.strip(),
        email=email.strip().lower(),
        username=username.strip().lower(),
        password_hash=hash_password(password),
        avatar=stored_avatar.url,
        cover_image=stored_cover.url if stored_cover else None,
    )
    try:
        await user_repo.create(user)
        await session.commit()
    except IntegrityError:
        await session.rollback()
        for stored in (stored_avatar, stored_cover):
            if stored is not None:
                await storage.delete_file(stored.path)
        logger.info("Registration failed: concurrent duplicate", username=username)
        raise ConflictError("User with the username or email already exists")

    await session.refresh(user)
    logger.info("User registered successfully", user_id=user.id, username=user.username)

    # 5. Return the user without secrets
    return ApiResponse[UserPublic](
        status_code=status.HTTP_201_CREATED,
        data=UserPublic.model_validate(user),
        message="User registered successfully",
    )


@router.get("/current-user", response_model=ApiResponse[UserPublic])
async def get_current_user_profile(current_user: CurrentUser) -> ApiResponse[UserPublic]:
    """Return the authenticated user."""
    return ApiResponse[UserPublic](
        data=UserPublic.model_validate(current_user),
        message="Current user fetched successfully",
    )


@router.patch(
    "/update-account",
    response_model=ApiResponse[UserPublic],
    responses={409: {"model": ErrorResponse, "description": "Email already in use"}},
)
async def update_account(
    request: UpdateAccountRequest,
    current_user: CurrentUser,
    session: DbSession,
) -> ApiResponse[UserPublic]:
    """Update the full name and email of the current user."""
    user_repo = UserRepository(session)
    user_id = current_user.id
    email = str(request.email).lower()

    if await user_repo.email_taken_by_other(email, user_id):
        raise ConflictError("Email is already in use")

    try:
        user = await user_repo.update_fields(user_id, full_name=request.full_name, email=email)
        await session.commit()
    except IntegrityError:
        await session.rollback()
        logger.info("Account update failed: concurrent duplicate email", user_id=user_id)
        raise ConflictError("Email is already in use")

    logger.info("Account details updated", user_id=user_id)
    return ApiResponse[UserPublic](
        data=UserPublic.model_validate(user),
        message="Account details updated successfully",
    )


async def _replace_image(
    session: AsyncSession,
    storage: StorageProvider,
    current_user: UserModel,
    upload: UploadFile | None,
    folder: str,
    column: str,
    label: str,
) -> UserModel:
    if upload is None or not upload.filename:
        raise ValidationError(f"{label} file is missing")

    user_id = current_user.id
    previous_path = storage.path_for_url(getattr(current_user, column))
    stored = await _store_upload(storage, folder, upload)
    try:
        user = await UserRepository(session).update_fields(user_id, **{column: stored.url})
        await session.commit()
    except Exception:
        await session.rollback()
        await storage.delete_file(stored.path)
        raise
    if previous_path is not None:
        await storage.delete_file(previous_path)
    logger.info("Profile image updated", user_id=user_id, column=column)
    return user


@router.patch("/avatar", response_model=ApiResponse[UserPublic])
async def update_avatar(
    current_user: CurrentUser,
    session: DbSession,
    storage: Storage,
    avatar: Annotated[UploadFile | None, File()] = None,
) -> ApiResponse[UserPublic]:
    """Replace the current user's avatar."""
    user = await _replace_image(session, storage, current_user, avatar, "avatars", "avatar", "Avatar")
    return ApiResponse[UserPublic](
        data=UserPublic.model_validate(user),
        message="Avatar updated successfully",
    )


@router.patch("/cover-image", response_model=ApiResponse[UserPublic])
async def update_cover_image(
    current_user: CurrentUser,
    session: DbSession,
    storage: Storage,
    cover_image: Annotated[UploadFile | None, File(alias="coverImage")] = None,
) -> ApiResponse[UserPublic]:
    """Replace the current user's cover image."""
    user = await _replace_image(
        session, storage, current_user, cover_image, "covers", "cover_image", "Cover image"
    )
    return ApiResponse[UserPublic](
        data=UserPublic.model_validate(user),
        message="Cover image updated successfully",
    )


@router.get(
    "/c/{username}",
    response_model=ApiResponse[ChannelProfileResponse],
    responses={404: {"model": ErrorResponse, "description": "Channel does not exist"}},
)
async def get_channel_profile(
    username: str,
    current_user: CurrentUser,
    session: DbSession,
) -> ApiResponse[ChannelProfileResponse]:
    """Return a channel's public profile with subscription counts."""
    if not username.strip():
        raise ValidationError("Username is missing")

    channel = await UserRepository(session).get_by_username(username)
    if channel is None:
        raise NotFoundError("Channel does not exist")

    subscriptions = SubscriptionRepository(session)
    profile = ChannelProfileResponse(
        id=channel.id,
        username=channel.username,
        full_name=channel.full_name,
        email=channel.email,
        avatar=channel.avatar,
        cover_image=channel.cover_image,
        subscribers_count=await subscriptions.count_subscribers(channel.id),
        channels_subscribed_to_count=await subscriptions.count_subscribed_to(channel.id),
        is_subscribed=await subscriptions.is_subscribed(current_user.id, channel.id),
    )
    return ApiResponse[ChannelProfileResponse](
        data=profile,
        message="User channel fetched successfully",
    )


@router.get("/history", response_model=ApiResponse[list[WatchedVideoResponse]])
async def get_watch_history(
    current_user: CurrentUser,
    session: DbSession,
) -> ApiResponse[list[WatchedVideoResponse]]:
    """Return the current user's watch history, most recent first."""
    videos = await WatchHistoryRepository(session).list_videos(current_user.id)
    return ApiResponse[list[WatchedVideoResponse]](
        data=[WatchedVideoResponse.model_validate(video) for video in videos],
        message="Watch history fetched successfully",
    )
