"""Contact form Pydantic models"""
from pydantic import BaseModel, ConfigDict, EmailStr, field_validator
from typing import Dict, Any, Optional


CONFIRMATION_MESSAGE = "Thank you for your message. We will get back to you soon!"


class FormSubmission(BaseModel):
    """Form payload relayed to Web3Forms; unknown fields are passed through"""
    model_config = ConfigDict(extra="allow", frozen=True)

    name: str
    subject: Optional[str] = None


class ContactFormRequest(FormSubmission):
    """Contact form submission received from the website"""
    email: EmailStr
    message: str

    @field_validator("name", "message")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("This field is required")
        return value


class SubmissionResult(BaseModel):
    """Outcome of a relay submission"""
    success: bool
    message: str
    details: Optional[Dict[str, Any]] = None

    @classmethod
    def ok(cls) -> "SubmissionResult":
        return cls(success=True, message=CONFIRMATION_MESSAGE)

    @classmethod
    def failure(cls, message: str, details: Optional[Dict[str, Any]] = None) -> "SubmissionResult":
        return cls(success=False, message=message, details=details)
