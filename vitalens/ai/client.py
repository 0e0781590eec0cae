"""
Generative model client.

The flows talk to the model through GenerativeModelClient; GeminiClient
implements it over the Gemini REST API with httpx. Every call uses its own
HTTP client and is never retried.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Type
import json
import logging
import re

import httpx
from pydantic import BaseModel

from ..config import settings
from .exceptions import ModelConfigurationException, ModelTransportException
from .schemas import parse_data_uri

# Set up logging
logger = logging.getLogger(__name__)

RESPONSE_SCHEMA_KEYS = {"description", "enum", "format", "nullable", "required"}
JSON_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class PromptPart(BaseModel):
    """One part of a prompt: either text or a media data URI."""
    text: Optional[str] = None
    media_url: Optional[str] = None


class GenerationResult(BaseModel):
    """
    What a model call produced.

    Fields:
    - text: Concatenated text parts, if any
    - output: Parsed JSON object, when structured output was requested
    - media_url: First returned image as a data URI, if any
    """
    text: Optional[str] = None
    output: Optional[Any] = None
    media_url: Optional[str] = None


class GenerativeModelClient(ABC):
    """Async client for a text/image generative model."""

    @abstractmethod
    async def generate(
        self,
        model: str,
        parts: List[PromptPart],
        output_schema: Optional[Type[BaseModel]] = None,
        response_modalities: Optional[List[str]] = None,
    ) -> GenerationResult:
        """
        Submit a prompt and wait for the model's response.

        Args:
            model: Model name
            parts: Prompt parts in order
            output_schema: Schema the response must follow, for structured output
            response_modalities: Requested output modalities, e.g. ["TEXT", "IMAGE"]
        """


def to_response_schema(model: Type[BaseModel]) -> Dict[str, Any]:
    """
    Convert a pydantic model to the OpenAPI subset Gemini accepts as responseSchema.

    References are inlined, types are upper-cased and unsupported keywords dropped.
    """
    schema = model.model_json_schema(by_alias=True)
    definitions = schema.pop("$defs", {})
    return _convert_schema(schema, definitions)


def _convert_schema(node: Dict[str, Any], definitions: Dict[str, Any]) -> Dict[str, Any]:
    if "$ref" in node:
        target = definitions[node["$ref"].split("/")[-1]]
        siblings = {key: value for key, value in node.items() if key != "$ref"}
        return _convert_schema({**target, **siblings}, definitions)
    if "allOf" in node and len(node["allOf"]) == 1:
        siblings = {key: value for key, value in node.items() if key != "allOf"}
        return _convert_schema({**node["allOf"][0], **siblings}, definitions)
    if "anyOf" in node:
        options = [option for option in node["anyOf"] if option.get("type") != "null"]
        siblings = {key: value for key, value in node.items() if key != "anyOf"}
        converted = _convert_schema({**options[0], **siblings}, definitions)
        if len(options) < len(node["anyOf"]):
            converted["nullable"] = True
        return converted

    result: Dict[str, Any] = {}
    for key, value in node.items():
        if key == "type" and isinstance(value, str):
            result["type"] = value.upper()
        elif key == "properties":
            result["properties"] = {
                name: _convert_schema(child, definitions) for name, child in value.items()
            }
        elif key == "items":
            result["items"] = _convert_schema(value, definitions)
        elif key in RESPONSE_SCHEMA_KEYS:
            result[key] = value
    if "enum" in result and "type" not in result:
        result["type"] = "STRING"
    return result


def _parse_json_text(text: str) -> Optional[Any]:
    text = text.strip()
    fenced = JSON_FENCE.match(text)
    if fenced:
        text = fenced.group(1)
    try:
        return json.loads(text)
    except ValueError:
        return None


class GeminiClient(GenerativeModelClient):
    """
    Gemini REST API client.

    Args:
        api_key: Gemini API key
        base_url: API base URL
        timeout: Transport timeout per call, in seconds
        transport: Optional httpx transport (used by tests)
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def generate(
        self,
        model: str,
        parts: List[PromptPart],
        output_schema: Optional[Type[BaseModel]] = None,
        response_modalities: Optional[List[str]] = None,
    ) -> GenerationResult:
        if not self.api_key:
            raise ModelConfigurationException()

        body: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [self._encode_part(part) for part in parts]}]
        }
        generation_config: Dict[str, Any] = {}
        if output_schema is not None:
            generation_config["responseMimeType"] = "application/json"
            generation_config["responseSchema"] = to_response_schema(output_schema)
        if response_modalities:
            generation_config["responseModalities"] = response_modalities
        if generation_config:
            body["generationConfig"] = generation_config

        url = f"{self.base_url}/models/{model}:generateContent"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(url, json=body, headers={"x-goog-api-key": self.api_key})
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Model {model} returned HTTP {e.response.status_code}: {e.response.text[:500]}")
            raise ModelTransportException(
                f"Model {model} returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Error calling model {model}: {str(e)}")
            raise ModelTransportException(f"Error calling model {model}: {str(e)}") from e
        except ValueError as e:
            logger.error(f"Model {model} returned a non-JSON response: {str(e)}")
            raise ModelTransportException(f"Model {model} returned a non-JSON response") from e

        return self._decode_response(payload, structured=output_schema is not None)

    @staticmethod
    def _encode_part(part: PromptPart) -> Dict[str, Any]:
        if part.media_url:
            mime_type, data = parse_data_uri(part.media_url)
            return {"inlineData": {"mimeType": mime_type, "data": data}}
        return {"text": part.text or ""}

    @staticmethod
    def _decode_response(payload: Dict[str, Any], structured: bool) -> GenerationResult:
        candidates = payload.get("candidates") or []
        if not candidates:
            feedback = payload.get("promptFeedback")
            if feedback:
                logger.warning(f"Model returned no candidates: {feedback}")
            return GenerationResult()

        parts = (candidates[0].get("content") or {}).get("parts") or []
        texts = [part["text"] for part in parts if part.get("text")]
        media_url = None
        for part in parts:
            inline = part.get("inlineData") or part.get("inline_data")
            if inline and inline.get("data"):
                mime_type = inline.get("mimeType") or inline.get("mime_type") or "image/png"
                media_url = f"data:{mime_type};base64,{inline['data']}"
                break

        text = "".join(texts) or None
        output = _parse_json_text(text) if structured and text else None
        return GenerationResult(text=text, output=output, media_url=media_url)


def get_generative_client() -> GenerativeModelClient:
    """
    Generative client dependency - Builds a Gemini client from settings.
    """
    return GeminiClient(
        api_key=settings.gemini_api_key,
        base_url=settings.gemini_base_url,
        timeout=settings.ai_request_timeout,
    )
