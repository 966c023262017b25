"""Submission response schema."""

from pydantic import BaseModel, Field


class SubmissionResponse(BaseModel):
    success: bool = True
    filename: str = Field(description="Name of the delivered report attachment")
    message: str = Field(default="Vielen Dank! Ihre Angaben wurden erfolgreich übermittelt.")
