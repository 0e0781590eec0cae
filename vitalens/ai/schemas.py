"""
AI Schemas - Pydantic models for the analysis flows.

Input models are validated before any model call. The *Report models are
the structured payloads requested from the text model; the *Output models
are what the flows return, tagged with an explicit `kind`.
"""
import re
from enum import Enum
from typing import Annotated, List, Literal, Tuple, Union
from pydantic import Field, field_validator

from ..core.schemas import CamelModel

DATA_URI_PATTERN = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>[A-Za-z0-9+/=\s]+)$"
)


def parse_data_uri(uri: str) -> Tuple[str, str]:
    """
    Split a base64 data URI into its MIME type and payload.

    Args:
        uri: Data URI of the form data:<mimetype>;base64,<encoded_data>

    Returns:
        Tuple of (mime type, base64 payload)

    Raises:
        ValueError: If the URI is not a base64 data URI
    """
    match = DATA_URI_PATTERN.match(uri or "")
    if not match:
        raise ValueError("Expected a data URI of the form 'data:<mimetype>;base64,<encoded_data>'")
    return match.group("mime"), re.sub(r"\s", "", match.group("data"))


def _check_data_uri(value: str) -> str:
    parse_data_uri(value)
    return value


class ConfidenceScore(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


# Dental X-ray flow

class DentalXrayAnalysisInput(CamelModel):
    photo_data_uri: str = Field(
        ...,
        description="A dental X-ray, as a data URI that must include a MIME type and use "
                    "Base64 encoding. Expected format: 'data:<mimetype>;base64,<encoded_data>'.",
    )
    patient_details: str = Field(..., min_length=1, description="The description of the patient.")

    validate_photo = field_validator("photo_data_uri")(_check_data_uri)


class DentalFinding(CamelModel):
    description: str = Field(..., description="A detailed description of the finding for this area.")


class DentalFindingsReport(CamelModel):
    summary: str = Field(..., description="A summary of the findings.")
    confidence_score: ConfidenceScore = Field(
        ..., description="The confidence level of the analysis (High, Medium, or Low)."
    )
    findings: List[DentalFinding] = Field(
        default_factory=list, description="An array of specific dental findings."
    )


class DentalXrayAnalysisOutput(DentalFindingsReport):
    kind: Literal["dental"] = "dental"
    highlighted_image_data_uri: str = Field(
        ...,
        description="The highlighted dental X-ray, as a data URI that must include a MIME "
                    "type and use Base64 encoding.",
    )


# Standard diagnosis flow

class DiagnosisSummaryInput(CamelModel):
    medical_image_data_uri: str = Field(
        ...,
        description="A medical image, as a data URI that must include a MIME type and use "
                    "Base64 encoding. Expected format: 'data:<mimetype>;base64,<encoded_data>'.",
    )
    patient_details: str = Field(..., min_length=1, description="Relevant patient details and symptoms.")
    imaging_modality: str = Field(..., min_length=1, description="The imaging modality (e.g., X-ray, MRI, CT scan).")

    validate_image = field_validator("medical_image_data_uri")(_check_data_uri)


class DiagnosisSummaryReport(CamelModel):
    diagnosis_summary: str = Field(..., description="A concise summary of the likely diagnosis.")
    potential_conditions: str = Field(..., description="Potential conditions suggested by the image.")
    relevant_findings: str = Field(..., description="Relevant findings observed in the image.")


class DiagnosisSummaryOutput(DiagnosisSummaryReport):
    kind: Literal["standard"] = "standard"


AnalysisOutput = Annotated[
    Union[DentalXrayAnalysisOutput, DiagnosisSummaryOutput],
    Field(discriminator="kind"),
]


# Prompt enhancement flow

class PromptEnhancementInput(CamelModel):
    image_type: str = Field(..., min_length=1, description="The type of the image (e.g., X-ray, MRI, CT scan).")
    ai_model_capabilities: str = Field(..., min_length=1, description="The capabilities of the AI model being used.")
    user_prompt: str = Field(..., min_length=1, description="The user-provided prompt for image detection.")


class PromptEnhancementOutput(CamelModel):
    suggested_keywords: List[str] = Field(..., description="An array of suggested keywords for the prompt.")
    suggested_phrases: List[str] = Field(..., description="An array of suggested phrases for the prompt.")
    enhanced_prompt: str = Field(
        ..., description="An enhanced prompt incorporating the suggested keywords and phrases."
    )


class ImageAnalysisRequest(CamelModel):
    """Request to analyze an image with the flow matching its modality."""
    image_data_uri: str
    patient_details: str = Field(..., min_length=1)
    imaging_modality: str = Field(..., min_length=1)

    validate_image = field_validator("image_data_uri")(_check_data_uri)
