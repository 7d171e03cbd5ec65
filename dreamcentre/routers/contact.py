"""Contact form endpoint"""
from fastapi import APIRouter
from fastapi.concurrency import run_in_threadpool
import logging

from dreamcentre.models.contact import ContactFormRequest, SubmissionResult
from dreamcentre.services.form_relay import send_contact_email
from dreamcentre.database import get_supabase_admin

logger = logging.getLogger(__name__)
router = APIRouter()

ARCHIVE_DEFAULT_SUBJECT = "New contact form submission"


def relay_responded(result: SubmissionResult) -> bool:
    """True when Web3Forms answered with JSON, whether it accepted the message or not"""
    # Only raised errors (network, bad body) carry details
    return result.success or not result.details


def archive_contact_message(form: ContactFormRequest) -> bool:
    """Save the message to contact_messages for the admin inbox; failures are logged only"""
    supabase_admin = get_supabase_admin()
    if supabase_admin is None:
        return False

    try:
        supabase_admin.table("contact_messages").insert({
            "name": form.name,
            "email": form.email,
            "subject": form.subject or ARCHIVE_DEFAULT_SUBJECT,
            "message": form.message,
            "status": "new"
        }).execute()
        return True
    except Exception as e:
        logger.error(f"Failed to save contact message to database: {e}")
        return False


@router.post("", response_model=SubmissionResult, response_model_exclude_none=True)
async def submit_contact_form(form: ContactFormRequest):
    """Handle contact form submissions (PUBLIC endpoint)"""
    result = await send_contact_email(form)
    if relay_responded(result):
        # supabase-py is synchronous
        await run_in_threadpool(archive_contact_message, form)
    else:
        logger.warning(f"Relay unreachable, contact message from {form.name} not archived")
    return result
