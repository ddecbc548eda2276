"""
Factory modules for creating Ragraph components.

Provides factories for LLM providers, embedders and the wired pipeline.
"""

from src.core.factory.embedder_factory import EmbedderFactory
from src.core.factory.llm_factory import LLMFactory
from src.core.factory.pipeline_factory import PipelineFactory

__all__ = [
    "LLMFactory",
    "EmbedderFactory",
    "PipelineFactory",
]
