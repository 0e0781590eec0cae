"""
AI Service - Chooses the analysis flow for an imaging modality.
"""
from typing import Optional, Union
import logging

from .client import GenerativeModelClient
from .flows.dental import dental_xray_analysis
from .flows.diagnosis import generate_diagnosis_summary
from .schemas import (
    DentalXrayAnalysisInput,
    DentalXrayAnalysisOutput,
    DiagnosisSummaryInput,
    DiagnosisSummaryOutput,
    ImageAnalysisRequest,
)

# Set up logging
logger = logging.getLogger(__name__)

DENTAL_XRAY_MODALITY = "Dental X-ray"


def is_dental_modality(imaging_modality: str) -> bool:
    return imaging_modality.strip().lower() == DENTAL_XRAY_MODALITY.lower()


async def analyze_medical_image(
    request: ImageAnalysisRequest,
    client: Optional[GenerativeModelClient] = None,
) -> Union[DentalXrayAnalysisOutput, DiagnosisSummaryOutput]:
    """
    Run the dental X-ray flow for dental X-rays and the diagnosis flow otherwise.

    Args:
        request: Image, patient details and imaging modality
        client: Generative model client

    Returns:
        The flow's result, tagged with its kind
    """
    if is_dental_modality(request.imaging_modality):
        return await dental_xray_analysis(
            DentalXrayAnalysisInput(
                photo_data_uri=request.image_data_uri,
                patient_details=request.patient_details,
            ),
            client=client,
        )
    return await generate_diagnosis_summary(
        DiagnosisSummaryInput(
            medical_image_data_uri=request.image_data_uri,
            patient_details=request.patient_details,
            imaging_modality=request.imaging_modality,
        ),
        client=client,
    )
