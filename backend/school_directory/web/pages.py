"""
School Directory — Server-Rendered Views
==========================================

What:  The three pages a browser visits: landing, listing and submission.
How:   Each handler calls the REST API through DirectoryClient and renders a
       Jinja2 template. API failures never surface as error pages; the view
       falls back (stats of "0", the sample listing) or shows a notification.

Pages:
    GET  /             Landing: stat cards + navigation
    GET  /schools      Listing: cards, ?q= filter, sample fallback
    GET  /add-school   Submission form
    POST /add-school   Validate → POST /api/schools → re-render with result
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from school_directory.config import Settings
from school_directory.dependencies import get_directory_client, get_settings
from school_directory.exceptions import ApiClientError
from school_directory.services.upload_service import ImageUpload
from school_directory.web.client import DirectoryClient
from school_directory.web.forms import FORM_FIELDS, image_preview, validate_form
from school_directory.web.listing import SAMPLE_SCHOOLS, card_image, matches_term

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"
STATIC_DIR = Path(__file__).parent / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter(tags=["Pages"], include_in_schema=False)

EMPTY_STATS = {"totalSchools": "0", "totalStudents": "0", "totalCities": "0"}

SAVE_FAILED = "Failed to save school. Please try again."
SAVE_SUCCEEDED = "School added successfully!"
SAMPLE_WARNING = "Could not load schools from the server. Showing sample data."


@router.get("/", response_class=HTMLResponse)
async def landing_page(
    request: Request,
    client: DirectoryClient = Depends(get_directory_client),
):
    try:
        raw = await client.get_stats()
        stats = {key: str(raw.get(key, "0")) for key in EMPTY_STATS}
    except ApiClientError as e:
        logger.warning("Stats unavailable, showing zeros: %s", e.message)
        stats = dict(EMPTY_STATS)

    return templates.TemplateResponse(request, "index.html", {"stats": stats})


@router.get("/schools", response_class=HTMLResponse)
async def schools_page(
    request: Request,
    q: Optional[str] = None,
    client: DirectoryClient = Depends(get_directory_client),
    settings: Settings = Depends(get_settings),
):
    warning = None
    try:
        schools = await client.list_schools()
    except ApiClientError as e:
        logger.warning("Listing unavailable, showing sample data: %s", e.message)
        schools = SAMPLE_SCHOOLS
        warning = SAMPLE_WARNING

    # Every card is rendered; ?q= only sets which start hidden, so the
    # in-page filter can widen the search again.
    cards = [
        {
            **school,
            "image_url": card_image(school, settings.api_base_url),
            "visible": matches_term(school, q),
        }
        for school in schools
    ]
    return templates.TemplateResponse(
        request,
        "schools.html",
        {
            "schools": cards,
            "visible_count": sum(1 for card in cards if card["visible"]),
            "total": len(cards),
            "query": q or "",
            "warning": warning,
        },
    )


@router.get("/add-school", response_class=HTMLResponse)
async def add_school_form(request: Request):
    return _render_form(request, values={}, errors={})


@router.post("/add-school", response_class=HTMLResponse)
async def add_school_submit(
    request: Request,
    name: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    city: Optional[str] = Form(None),
    state: Optional[str] = Form(None),
    contact: Optional[str] = Form(None),
    email_id: Optional[str] = Form(None),
    students: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    client: DirectoryClient = Depends(get_directory_client),
    settings: Settings = Depends(get_settings),
):
    values = {
        "name": name,
        "address": address,
        "city": city,
        "state": state,
        "contact": contact,
        "email_id": email_id,
        "students": students,
    }

    upload = None
    if image is not None and image.filename:
        try:
            content = await image.read(settings.max_upload_size + 1)
            upload = ImageUpload(
                filename=image.filename,
                content_type=image.content_type,
                content=content,
            )
        finally:
            await image.close()

    form, errors = validate_form(values)
    if form is None:
        return _render_form(
            request,
            values=values,
            errors=errors,
            preview=image_preview(upload),
            status_code=400,
        )

    try:
        await client.create_school(form.as_form_data(), upload)
    except ApiClientError as e:
        logger.warning("Submission of '%s' failed: %s", form.name, e.message)
        return _render_form(
            request,
            values=values,
            errors={},
            preview=image_preview(upload),
            notification={"kind": "error", "text": SAVE_FAILED},
            status_code=502,
        )

    return _render_form(
        request,
        values={},
        errors={},
        notification={"kind": "success", "text": SAVE_SUCCEEDED},
    )


def _render_form(
    request: Request,
    values: Dict[str, Any],
    errors: Dict[str, str],
    preview: Optional[str] = None,
    notification: Optional[Dict[str, str]] = None,
    status_code: int = 200,
):
    return templates.TemplateResponse(
        request,
        "add_school.html",
        {
            "values": {field: values.get(field) or "" for field in FORM_FIELDS},
            "errors": errors,
            "preview": preview,
            "notification": notification,
        },
        status_code=status_code,
    )
