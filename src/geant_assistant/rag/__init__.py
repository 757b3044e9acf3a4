from .context import assemble_context, extract_sources
from .generator import AnswerGenerator, GeneratedAnswer
from .pipeline import PipelineFailure, RAGPipeline, validate_query

__all__ = [
    "assemble_context",
    "extract_sources",
    "AnswerGenerator",
    "GeneratedAnswer",
    "PipelineFailure",
    "RAGPipeline",
    "validate_query",
]
