"""
Prompt enhancement flow: suggests keywords and phrases for image detection prompts.
"""
from typing import Any, Mapping, Optional, Union

from ...config import settings
from ..client import GenerativeModelClient, PromptPart, get_generative_client
from ..schemas import PromptEnhancementInput, PromptEnhancementOutput
from . import require_structured_output, run_leg

ENHANCEMENT_PROMPT = """You are an AI prompt enhancement tool for medical image detection.

You will receive the following information:
- Image Type: {image_type}
- AI Model Capabilities: {ai_model_capabilities}
- User Prompt: {user_prompt}

Based on this information, suggest relevant keywords and phrases that can improve the image detection prompt.
Also, generate an enhanced prompt incorporating the suggested keywords and phrases.

Output the suggested keywords in a JSON array under the key "suggestedKeywords".
Output the suggested phrases in a JSON array under the key "suggestedPhrases".
Output the enhanced prompt under the key "enhancedPrompt"."""


async def enhance_image_detection_prompt(
    payload: Union[PromptEnhancementInput, Mapping[str, Any]],
    client: Optional[GenerativeModelClient] = None,
) -> PromptEnhancementOutput:
    request = PromptEnhancementInput.model_validate(payload)
    client = client or get_generative_client()

    result = await run_leg(client.generate(
        model=settings.text_model,
        parts=[PromptPart(text=ENHANCEMENT_PROMPT.format(
            image_type=request.image_type,
            ai_model_capabilities=request.ai_model_capabilities,
            user_prompt=request.user_prompt,
        ))],
        output_schema=PromptEnhancementOutput,
    ), leg="text")
    return require_structured_output(result, PromptEnhancementOutput, leg="text")
