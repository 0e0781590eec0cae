"""
Analysis flows.

Each flow validates its input, builds the prompt, calls the model and
validates the response before returning a typed result.
"""
from typing import Awaitable, Type, TypeVar
import logging

from pydantic import BaseModel, ValidationError

from ..client import GenerationResult
from ..exceptions import ModelResponseException, ModelTransportException

# Set up logging
logger = logging.getLogger(__name__)

ReportT = TypeVar("ReportT", bound=BaseModel)

LEG_NAMES = {
    "text": "text analysis model",
    "image": "image generation model",
}


def require_structured_output(result: GenerationResult, schema: Type[ReportT], leg: str = "text") -> ReportT:
    """
    Validate the structured payload of a model call.

    Raises:
        ModelResponseException: If there is no payload or it does not match the schema
    """
    if result.output is None:
        logger.error(f"No structured output from the {LEG_NAMES[leg]}")
        raise ModelResponseException(leg, f"Failed to get a response from the {LEG_NAMES[leg]}.")
    try:
        return schema.model_validate(result.output)
    except ValidationError as e:
        logger.error(f"Output of the {LEG_NAMES[leg]} does not match {schema.__name__}: {str(e)}")
        raise ModelResponseException(
            leg, f"The {LEG_NAMES[leg]} returned output that does not match the expected format."
        ) from e


def require_media(result: GenerationResult, leg: str = "image") -> str:
    """
    Return the image produced by a model call.

    Raises:
        ModelResponseException: If the call returned no image
    """
    if not result.media_url:
        logger.error(f"No image returned by the {LEG_NAMES[leg]}")
        raise ModelResponseException(leg, f"Failed to get a response from the {LEG_NAMES[leg]}.")
    return result.media_url


async def run_leg(call: Awaitable[GenerationResult], leg: str) -> GenerationResult:
    """
    Await one model call, attributing transport failures to its leg.

    Raises:
        ModelTransportException: With leg set and a detail naming the failed model
    """
    try:
        return await call
    except ModelTransportException as e:
        logger.error(f"The {LEG_NAMES[leg]} call failed: {e.detail}")
        raise ModelTransportException(
            f"Failed to get a response from the {LEG_NAMES[leg]}: {e.detail}", leg=leg
        ) from e
