"""
AI orchestration exceptions.
"""
from typing import Optional
from fastapi import status
from ..exceptions import AppException

class ModelException(AppException):
    """Base class for generative model failures."""
    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)

class ModelResponseException(ModelException):
    """
    Exception raised when a model call returns no usable payload.

    Attributes:
        leg: Which call failed, "text" or "image"
    """
    def __init__(self, leg: str, detail: str):
        self.leg = leg
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)

class ModelTransportException(ModelException):
    """
    Exception raised when the request to the model service fails.

    Attributes:
        leg: Which call failed, "text" or "image"; None until a flow assigns it
    """
    def __init__(self, detail: str = "Error contacting the generative model service", leg: Optional[str] = None):
        self.leg = leg
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)

class ModelConfigurationException(ModelException):
    """Exception raised when the model client is not configured."""
    def __init__(self, detail: str = "No API key configured for the generative model service"):
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)
