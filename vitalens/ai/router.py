"""
AI Router - Endpoints running the analysis flows.

Results are returned to the caller; saving one to a patient record goes
through the analyses endpoints.
"""
from fastapi import APIRouter, Depends

from ..auth.dependencies import get_current_user
from ..records.schemas import StoredUser
from .client import GenerativeModelClient, get_generative_client
from .flows.dental import dental_xray_analysis
from .flows.diagnosis import generate_diagnosis_summary
from .flows.prompt_enhancement import enhance_image_detection_prompt
from .schemas import (
    AnalysisOutput,
    DentalXrayAnalysisInput,
    DentalXrayAnalysisOutput,
    DiagnosisSummaryInput,
    DiagnosisSummaryOutput,
    ImageAnalysisRequest,
    PromptEnhancementInput,
    PromptEnhancementOutput,
)
from .service import analyze_medical_image

router = APIRouter()

@router.post("/analyze", response_model=AnalysisOutput)
async def analyze_route(
    request: ImageAnalysisRequest,
    client: GenerativeModelClient = Depends(get_generative_client),
    current_user: StoredUser = Depends(get_current_user)
):
    """
    Analyze a medical image with the flow matching its imaging modality.
    """
    return await analyze_medical_image(request, client=client)

@router.post("/diagnosis", response_model=DiagnosisSummaryOutput)
async def diagnosis_route(
    request: DiagnosisSummaryInput,
    client: GenerativeModelClient = Depends(get_generative_client),
    current_user: StoredUser = Depends(get_current_user)
):
    return await generate_diagnosis_summary(request, client=client)

@router.post("/dental-xray", response_model=DentalXrayAnalysisOutput)
async def dental_xray_route(
    request: DentalXrayAnalysisInput,
    client: GenerativeModelClient = Depends(get_generative_client),
    current_user: StoredUser = Depends(get_current_user)
):
    return await dental_xray_analysis(request, client=client)

@router.post("/enhance-prompt", response_model=PromptEnhancementOutput)
async def enhance_prompt_route(
    request: PromptEnhancementInput,
    client: GenerativeModelClient = Depends(get_generative_client),
    current_user: StoredUser = Depends(get_current_user)
):
    return await enhance_image_detection_prompt(request, client=client)
