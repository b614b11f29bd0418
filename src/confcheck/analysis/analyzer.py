"""Analyzer interface and composition."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from confcheck.resource.instance import GroupVersionKind

if TYPE_CHECKING:
    from confcheck.analysis.context import AnalysisContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalyzerMetadata:
    """Static description of an analyzer.

    ``inputs`` tells an orchestrator which kinds to load before running it.
    """
    name: str
    description: str
    inputs: tuple[GroupVersionKind, ...] = ()


class Analyzer(ABC):
    """Base class for analyzers."""

    @abstractmethod
    def metadata(self) -> AnalyzerMetadata:
        """Analyzer name, description and input kinds."""
        pass

    @abstractmethod
    def analyze(self, context: "AnalysisContext") -> None:
        """Inspect resources from the context and report findings into it."""
        pass


class CombinedAnalyzer(Analyzer):
    """Runs a sequence of analyzers as one."""

    def __init__(self, name: str, analyzers: Iterable[Analyzer]):
        self.name = name
        self.analyzers: list[Analyzer] = list(analyzers)

    def metadata(self) -> AnalyzerMetadata:
        inputs: list[GroupVersionKind] = []
        for analyzer in self.analyzers:
            for kind in analyzer.metadata().inputs:
                if kind not in inputs:
                    inputs.append(kind)
        return AnalyzerMetadata(
            name=self.name,
            description=f"Combined analyzer of {len(self.analyzers)} analyzers",
            inputs=tuple(inputs),
        )

    def analyze(self, context: "AnalysisContext") -> None:
        for analyzer in self.analyzers:
            logger.debug(f"Running analyzer: {analyzer.metadata().name}")
            analyzer.analyze(context)

    def without_missing_inputs(self, available: Iterable[GroupVersionKind]) -> tuple["CombinedAnalyzer", list[str]]:
        """Split off analyzers that need a kind that is not available.

        Returns:
            The analyzers that can run, and the names of those skipped
        """
        available = set(available)
        kept: list[Analyzer] = []
        skipped: list[str] = []
        for analyzer in self.analyzers:
            meta = analyzer.metadata()
            if all(kind in available for kind in meta.inputs):
                kept.append(analyzer)
            else:
                skipped.append(meta.name)
        return CombinedAnalyzer(self.name, kept), skipped
