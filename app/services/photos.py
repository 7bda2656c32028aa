"""Recipe photos: upload validation, storage and rows."""

from dataclasses import dataclass
from typing import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.errors import NotFoundError, ValidationError
from app.models.recipe import RecipePhoto
from app.services.recipes import recipe_service
from app.services.storage import PHOTO_EXTENSIONS, storage_service


@dataclass
class PhotoUpload:
    """An uploaded file already read into memory."""
    filename: str
    content_type: str
    data: bytes


class PhotoService:
    """Attaches photos to recipes; every file in a batch is checked before any is stored."""

    def validate(self, files: Sequence[PhotoUpload]) -> None:
        if not files:
            raise ValidationError("No files uploaded")

        max_size = get_settings().max_upload_size
        for upload in files:
            if (upload.content_type or "").lower() not in PHOTO_EXTENSIONS:
                raise ValidationError(
                    f"Invalid file type for {upload.filename}. "
                    "Only JPEG, JPG, PNG, GIF and WEBP are allowed."
                )
            if len(upload.data) > max_size:
                raise ValidationError(
                    f"{upload.filename} exceeds the {max_size // (1024 * 1024)} MB limit"
                )

    async def add_photos(
        self,
        db: AsyncSession,
        recipe_id: int,
        files: Sequence[PhotoUpload],
    ) -> list[RecipePhoto]:
        """
        Store each file and record a photo row pointing at it.

        Raises:
            ValidationError: no files, or a file of the wrong type or too large
            NotFoundError: the recipe does not exist
        """
        self.validate(files)
        await recipe_service.ensure_exists(db, recipe_id)

        photos = []
        stored = []
        try:
            for upload in files:
                content_type = upload.content_type.lower()
                filename = storage_service.generate_filename(content_type)
                photo_url = await storage_service.save_photo(upload.data, filename, content_type)
                stored.append(filename)
                photo = RecipePhoto(recipe_id=recipe_id, photo_url=photo_url)
                db.add(photo)
                photos.append(photo)

            await db.commit()
        except Exception:
            await db.rollback()
            # No row points at these files any more
            for filename in stored:
                await storage_service.delete_photo(filename)
            raise
        for photo in photos:
            await db.refresh(photo)
        return photos

    async def list_photos(self, db: AsyncSession, recipe_id: int) -> list[RecipePhoto]:
        result = await db.execute(
            select(RecipePhoto).where(RecipePhoto.recipe_id == recipe_id).order_by(RecipePhoto.id)
        )
        return list(result.scalars().all())

    async def delete_photo(self, db: AsyncSession, photo_id: int) -> None:
        """Delete the photo row. The stored file is kept."""
        result = await db.execute(
            delete(RecipePhoto)
            .where(RecipePhoto.id == photo_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await db.rollback()
            raise NotFoundError("Photo not found")
        await db.commit()


# Singleton instance
photo_service = PhotoService()
