"""Recipe photo endpoints."""

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.db import get_db
from app.auth import get_current_user, AuthUser
from app.config import get_settings
from app.models.schemas import MessageResponse, PhotoResponse
from app.services.photos import PhotoUpload, photo_service

router = APIRouter(prefix="/api/recipes", tags=["photos"])


@router.post("/{recipe_id}/photos", response_model=List[PhotoResponse], status_code=201)
async def add_recipe_photos(
    recipe_id: int,
    photo: Optional[List[UploadFile]] = File(None, description="One or more image files"),
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    """
    Upload photos for a recipe (multipart, field name `photo`).

    Accepts JPEG, PNG, GIF and WEBP up to the configured size limit.
    """
    # One byte past the limit is enough to reject an oversized file
    read_limit = get_settings().max_upload_size + 1
    uploads = [
        PhotoUpload(
            filename=f.filename or "",
            content_type=f.content_type or "",
            data=await f.read(read_limit),
        )
        for f in photo or []
        if f.filename
    ]
    return await photo_service.add_photos(db, recipe_id, uploads)


@router.get("/{recipe_id}/photos", response_model=List[PhotoResponse])
async def get_recipe_photos(recipe_id: int, db: AsyncSession = Depends(get_db)):
    return await photo_service.list_photos(db, recipe_id)


@router.delete("/photos/{photo_id}", response_model=MessageResponse)
async def delete_recipe_photo(
    photo_id: int,
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
):
    await photo_service.delete_photo(db, photo_id)
    return MessageResponse(message="Photo deleted successfully")
