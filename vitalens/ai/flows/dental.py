"""
Dental X-ray flow.

Runs a structured findings call and an image highlighting call at the same
time and merges them. Both must succeed; there is no partial result.
"""
from typing import Any, Mapping, Optional, Union
import asyncio
import logging

from ...config import settings
from ..client import GenerativeModelClient, PromptPart, get_generative_client
from ..schemas import DentalFindingsReport, DentalXrayAnalysisInput, DentalXrayAnalysisOutput
from . import require_media, require_structured_output, run_leg

# Set up logging
logger = logging.getLogger(__name__)

ANALYSIS_PROMPT = """You are an expert dental radiologist. Analyze the provided dental X-ray for a patient with the following details: {patient_details}.

Identify all potential issues, such as cavities, decay, impaction, infections, or other anomalies.

Provide a concise summary, a detailed list of findings, and a confidence score (High, Medium, or Low) for your analysis."""

HIGHLIGHT_PROMPT = (
    "You are an expert dental radiologist. Analyze the provided dental X-ray. "
    "Identify only the abnormal parts, such as cavities, decay, impaction, or infections. "
    "Highlight only these identified problematic areas on the image using thin, subtle, "
    "translucent red circles or outlines. Do not highlight normal, healthy areas. "
    "The highlighting should be minimal and precise. Return the modified image."
)


async def dental_xray_analysis(
    payload: Union[DentalXrayAnalysisInput, Mapping[str, Any]],
    client: Optional[GenerativeModelClient] = None,
) -> DentalXrayAnalysisOutput:
    """
    Analyze a dental X-ray and return findings with a highlighted copy of the image.

    Args:
        payload: photoDataUri and patientDetails
        client: Generative model client (defaults to the configured Gemini client)

    Returns:
        DentalXrayAnalysisOutput: Findings merged with the highlighted image

    Raises:
        ValidationError: If the input is malformed
        ModelResponseException: If either call returns no usable output;
            its leg is "text" or "image"
        ModelTransportException: If either call fails in transport; its leg
            names the failed call
    """
    request = DentalXrayAnalysisInput.model_validate(payload)
    client = client or get_generative_client()

    logger.info("Running dental X-ray analysis")
    analysis_result, image_result = await asyncio.gather(
        run_leg(client.generate(
            model=settings.text_model,
            parts=[
                PromptPart(text=ANALYSIS_PROMPT.format(patient_details=request.patient_details)),
                PromptPart(media_url=request.photo_data_uri),
            ],
            output_schema=DentalFindingsReport,
        ), leg="text"),
        run_leg(client.generate(
            model=settings.image_model,
            parts=[
                PromptPart(media_url=request.photo_data_uri),
                PromptPart(text=HIGHLIGHT_PROMPT),
            ],
            response_modalities=["TEXT", "IMAGE"],
        ), leg="image"),
    )

    report = require_structured_output(analysis_result, DentalFindingsReport, leg="text")
    highlighted_image = require_media(image_result, leg="image")

    return DentalXrayAnalysisOutput(
        **report.model_dump(),
        highlighted_image_data_uri=highlighted_image,
    )
