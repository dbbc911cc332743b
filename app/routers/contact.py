# =============================================================================
# app/routers/contact.py - Contact Form Endpoint (public)
# =============================================================================

from fastapi import APIRouter, status
from pydantic import BaseModel

from core.models.contact import ContactCreate
from core.services.contact_service import ContactService

router = APIRouter()


class ContactSubmitResponse(BaseModel):
    """Acknowledgement for a contact form submission."""
    id: str
    message: str = "Thanks for reaching out! We'll get back to you soon."


@router.post("", response_model=ContactSubmitResponse, status_code=status.HTTP_201_CREATED)
async def submit_contact_form(payload: ContactCreate):
    """Send a message to the site administrators."""
    submission = ContactService.submit(payload)
    return ContactSubmitResponse(id=str(submission["id"]))
