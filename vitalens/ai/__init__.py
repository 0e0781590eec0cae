"""
AI analysis orchestration.

This module provides:
- A generative model client abstraction with a Gemini REST implementation
- The standard diagnosis, dental X-ray and prompt enhancement flows
- Dispatch from an imaging modality to the matching flow
"""
