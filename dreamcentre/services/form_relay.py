"""Web3Forms relay for contact form submissions"""
import logging
import traceback
from typing import Any, Dict, Mapping, Optional, Union

import httpx

from dreamcentre.config import Settings, get_settings
from dreamcentre.models.contact import FormSubmission, SubmissionResult

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "New contact form submission from Abbaquar-San Dream Centre"
REJECTED_MESSAGE = "Failed to send email"
UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"
NETWORK_ERROR_MESSAGE = "Network error. Please check your internet connection and try again."

# Browser fetch wording, for errors that reach us from outside httpx
NETWORK_ERROR_INDICATORS = ("NetworkError", "Failed to fetch")


def build_payload(form: FormSubmission, settings: Settings) -> Dict[str, Any]:
    """Form fields plus the access key and the fixed Web3Forms metadata"""
    payload = form.model_dump()
    payload.update({
        "access_key": settings.web3forms_access_key,
        "from_name": form.name,
        "subject": form.subject or DEFAULT_SUBJECT,
        "website": settings.website_name,
        "botcheck": "",  # honeypot, must stay empty
    })
    return payload


def is_network_error(error: BaseException) -> bool:
    """True for transport level failures (connect, read, timeout, protocol...)"""
    if isinstance(error, httpx.TransportError):
        return True
    text = str(error)
    return any(indicator in text for indicator in NETWORK_ERROR_INDICATORS)


def failure_from_exception(error: BaseException) -> SubmissionResult:
    """Convert a caught exception into a failed SubmissionResult"""
    message = str(error) or UNKNOWN_ERROR_MESSAGE
    if is_network_error(error):
        message = NETWORK_ERROR_MESSAGE

    details = {
        "name": type(error).__name__,
        "stack": "".join(traceback.format_exception(type(error), error, error.__traceback__)),
    }
    return SubmissionResult.failure(message, details)


async def _post(client: httpx.AsyncClient, endpoint: str, payload: Dict[str, Any]) -> httpx.Response:
    return await client.post(
        endpoint,
        headers={
            "Content-Type": "application/json",
            "Accept": "application/json"
        },
        json=payload
    )


async def send_contact_email(
    form: Union[FormSubmission, Mapping[str, Any]],
    client: Optional[httpx.AsyncClient] = None,
    settings: Optional[Settings] = None
) -> SubmissionResult:
    """
    Relay a contact form submission to Web3Forms

    Never raises: relay rejections, network failures and unexpected errors
    all come back as a failed SubmissionResult.

    Args:
        form: The form data (name required, subject optional, extra fields passed through)
        client: Optional httpx client; a short-lived one is created otherwise
        settings: Optional settings override

    Returns:
        SubmissionResult with the confirmation text or a readable error
    """
    try:
        settings = settings or get_settings()
        if not isinstance(form, FormSubmission):
            form = FormSubmission.model_validate(form)

        payload = build_payload(form, settings)

        if client is None:
            async with httpx.AsyncClient() as own_client:
                response = await _post(own_client, settings.web3forms_endpoint, payload)
        else:
            response = await _post(client, settings.web3forms_endpoint, payload)

        data = response.json()
    except Exception as e:
        logger.error(f"Web3Forms submission error: {e!r}")
        return failure_from_exception(e)

    if not isinstance(data, dict):
        data = {}

    if data.get("success"):
        logger.info(f"Contact form from {form.name} relayed to Web3Forms")
        return SubmissionResult.ok()

    message = data.get("message") or REJECTED_MESSAGE
    logger.error(f"Web3Forms rejected submission ({response.status_code}): {message}")
    return SubmissionResult.failure(str(message))
