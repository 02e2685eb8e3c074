"""Image upload endpoint."""

from fastapi import APIRouter, UploadFile, status

from niche_communities.schemas.upload import UploadResponse

from ..dependencies import CurrentUserDep, UploaderDep

router = APIRouter(prefix="/uploads", tags=["uploads"])


@router.post("/images", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_image(
    file: UploadFile,
    _current_user: CurrentUserDep,
    uploader: UploaderDep,
) -> UploadResponse:
    """Upload an image (max 5MB) and return its public URL."""
    data = await file.read()
    url = await uploader.upload(
        data,
        filename=file.filename or "upload",
        content_type=file.content_type,
    )
    return UploadResponse(url=url)
