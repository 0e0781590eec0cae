"""
Standard diagnosis flow: one structured call summarizing a medical image.
"""
from typing import Any, Mapping, Optional, Union
import logging

from ...config import settings
from ..client import GenerativeModelClient, PromptPart, get_generative_client
from ..schemas import DiagnosisSummaryInput, DiagnosisSummaryOutput, DiagnosisSummaryReport
from . import require_structured_output, run_leg

# Set up logging
logger = logging.getLogger(__name__)

DIAGNOSIS_PROMPT = """You are an expert radiologist assisting a doctor.

Analyze the provided {imaging_modality} image for a patient with the following details: {patient_details}

Provide:
- diagnosisSummary: a concise summary of the most likely diagnosis.
- potentialConditions: the potential conditions suggested by the image, most likely first.
- relevantFindings: the findings in the image that support your assessment.

Your answer assists a qualified clinician and is not a final diagnosis."""


async def generate_diagnosis_summary(
    payload: Union[DiagnosisSummaryInput, Mapping[str, Any]],
    client: Optional[GenerativeModelClient] = None,
) -> DiagnosisSummaryOutput:
    """
    Summarize a medical image for the given modality and patient details.

    Args:
        payload: medicalImageDataUri, patientDetails and imagingModality
        client: Generative model client (defaults to the configured Gemini client)

    Returns:
        DiagnosisSummaryOutput: Diagnosis summary tagged as a standard result

    Raises:
        ValidationError: If the input is malformed
        ModelResponseException: If the model returns no usable output
    """
    request = DiagnosisSummaryInput.model_validate(payload)
    client = client or get_generative_client()

    logger.info(f"Generating diagnosis summary for a {request.imaging_modality} image")
    result = await run_leg(client.generate(
        model=settings.text_model,
        parts=[
            PromptPart(text=DIAGNOSIS_PROMPT.format(
                imaging_modality=request.imaging_modality,
                patient_details=request.patient_details,
            )),
            PromptPart(media_url=request.medical_image_data_uri),
        ],
        output_schema=DiagnosisSummaryReport,
    ), leg="text")
    report = require_structured_output(result, DiagnosisSummaryReport, leg="text")
    return DiagnosisSummaryOutput(**report.model_dump())
