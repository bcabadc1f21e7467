"""Image upload endpoint used for listing previews."""
from __future__ import annotations

from fastapi import APIRouter, File, Request, UploadFile

from ..schemas.marketplace import ImageUploadResponse
from ..services.images import to_data_url

router = APIRouter()


@router.post("/images", response_model=ImageUploadResponse)
async def upload_image(request: Request, image: UploadFile = File(...)) -> ImageUploadResponse:
    """Convert the selected image into a displayable data URL."""

    settings = request.app.state.settings
    content = await image.read(settings.max_image_bytes + 1)
    data_url = to_data_url(
        content,
        content_type=image.content_type,
        filename=image.filename,
        placeholder=settings.placeholder_image,
        max_bytes=settings.max_image_bytes,
    )
    return ImageUploadResponse(image=data_url)
