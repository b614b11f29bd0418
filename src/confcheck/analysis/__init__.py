"""Analysis layer: analyzers, contexts and the diagnostic message catalog."""

from . import msg
from .analyzer import Analyzer, AnalyzerMetadata, CombinedAnalyzer
from .context import AnalysisContext, ListContext, StoreContext
from .msg import Level, Message, MessageType
from .schema_analyzer import ValidationAnalyzer, all_validation_analyzers

__all__ = [
    "msg",
    "Analyzer",
    "AnalyzerMetadata",
    "CombinedAnalyzer",
    "AnalysisContext",
    "ListContext",
    "StoreContext",
    "Level",
    "Message",
    "MessageType",
    "ValidationAnalyzer",
    "all_validation_analyzers",
]
