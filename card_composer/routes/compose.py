"""
Handles card composition requests.

Responsibilities:
- Parse the multipart upload (one "photo" file plus six text fields)
- Enforce the photo upload limit without truncating
- Discard unexpected file parts and unknown fields
- Run the compositor off the event loop and stream back the JPEG
"""

from fastapi import APIRouter, HTTPException, Request, Response
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from card_composer.core.config import Settings
from card_composer.core.errors import ComposeError, MissingPhotoError, PayloadTooLargeError
from card_composer.core.logger import logger
from card_composer.models.layout import FIELD_NAMES
from card_composer.models.request_models import CardFields
from card_composer.models.response_models import ErrorResponse
from card_composer.services.compositor import compose_card

router = APIRouter(tags=["Compose"])

PHOTO_FIELD = "photo"
READ_CHUNK_SIZE = 1024 * 1024
# Room for the text fields and multipart framing on top of the photo limit.
FORM_OVERHEAD_BYTES = 1024 * 1024
# The photo plus a few stray attachments; more file parts are refused.
MAX_FILE_PARTS = 4


async def read_limited(upload: UploadFile, limit: int) -> bytes:
    """
    Read an uploaded file into memory, refusing anything over ``limit`` bytes.

    Raises:
        PayloadTooLargeError: As soon as more than ``limit`` bytes were read
    """
    chunks = []
    total = 0
    while True:
        chunk = await upload.read(READ_CHUNK_SIZE)
        if not chunk:
            break
        total += len(chunk)
        if total > limit:
            raise PayloadTooLargeError(limit)
        chunks.append(chunk)
    return b"".join(chunks)


@router.post(
    "/compose",
    response_class=Response,
    responses={
        200: {"content": {"image/jpeg": {}}, "description": "Composed card"},
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def compose(request: Request):
    """
    Composes the card from a multipart/form-data upload.

    Expected fields:
    - name, agentNumber, city, eyeColor, cover, recruitmentDate (strings)
    - photo (file)
    """
    settings: Settings = request.app.state.settings

    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit():
        if int(content_length) > settings.max_upload_bytes + FORM_OVERHEAD_BYTES:
            logger.warning(f"Compose request rejected: body of {content_length} bytes")
            raise PayloadTooLargeError(settings.max_upload_bytes)

    photo = None
    values = {}
    form = await request.form(max_files=MAX_FILE_PARTS)
    try:
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                if key == PHOTO_FIELD and photo is None:
                    photo = await read_limited(value, settings.max_upload_bytes)
                # any other file part is dropped with the form
            elif key in FIELD_NAMES:
                values[key] = value
    finally:
        await form.close()

    if not photo:
        logger.warning("Compose request without a photo")
        raise MissingPhotoError()

    fields = CardFields.model_validate(values)
    logger.info(f"Compose request: photo={len(photo)} bytes, fields={sorted(values)}")

    try:
        output = await run_in_threadpool(
            compose_card, photo, fields.as_layout_fields(), settings
        )
    except ComposeError as e:
        logger.error(f"Compose failed: {e.message}")
        raise
    except Exception as e:
        logger.exception(f"Compose failed: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e) or "Internal Server Error")

    return Response(
        content=output,
        media_type="image/jpeg",
        headers={"Content-Disposition": 'inline; filename="composed.jpg"'},
    )
