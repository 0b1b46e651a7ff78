"""
Processing Dependencies.

Provides singleton instances of the ProcessingService and the LLM client
factory for API endpoints.
"""

from typing import Annotated, Optional

from fastapi import Depends

from toolflow_ai.agent_core.abstraction import LLMClientFactory
from toolflow_ai.agent_core.factory import build_service
from toolflow_ai.agent_core.service import ProcessingService

# Global singletons
_service: Optional[ProcessingService] = None
_llm_factory: Optional[LLMClientFactory] = None


def get_service() -> ProcessingService:
    global _service
    if _service is None:
        _service = build_service()
    return _service


def get_llm_factory() -> LLMClientFactory:
    global _llm_factory
    if _llm_factory is None:
        _llm_factory = LLMClientFactory()
    return _llm_factory


ServiceDep = Annotated[ProcessingService, Depends(get_service)]
LLMFactoryDep = Annotated[LLMClientFactory, Depends(get_llm_factory)]
