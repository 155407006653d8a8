"""
Registration endpoints
"""
import logging

from fastapi import APIRouter, Request
from starlette.datastructures import UploadFile

from founders_cup.models import ScreenshotUpload
from founders_cup.services.registration import get_registration_status, register_team


router = APIRouter(prefix="/registration", tags=["registration"])
logger = logging.getLogger(__name__)


async def _read_form(request: Request) -> dict:
    """Flatten the multipart form; the screenshot becomes a ScreenshotUpload"""
    form = await request.form()
    fields = {}
    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            fields[key] = ScreenshotUpload(
                filename=value.filename or "screenshot",
                content_type=value.content_type or "",
                content=await value.read(),
            )
        else:
            fields[key] = value
    return fields


@router.get("/status")
async def registration_status():
    """Slots filled / total and whether registration is open"""
    return get_registration_status().model_dump(by_alias=True)


@router.post("")
async def submit_registration(request: Request):
    """
    Register a team (multipart/form-data)

    Fields:
        teamName, players.0.id .. players.3.id, players.0.level .. players.3.level,
        contactEmail, contactPhone, utrNumber, screenshot (image file)

    Response (accepted):
        {"success": true, "message": "Registration Submitted!", "data": {...}}

    Response (rejected):
        {"success": false, "error": "<reason>"}
    """
    client_ip = request.client.host if request.client else "unknown"
    fields = await _read_form(request)
    logger.info(f"📥 Registration from {client_ip} | Team: {fields.get('teamName')!r}")

    result = await register_team(fields)
    return result.model_dump(mode="json", by_alias=True, exclude_none=True)
