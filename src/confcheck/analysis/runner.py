"""Run analyzers over a resource store and collect their messages."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from confcheck.analysis import msg
from confcheck.analysis.analyzer import Analyzer, CombinedAnalyzer
from confcheck.analysis.context import StoreContext
from confcheck.config import AnalysisConfig
from confcheck.resource.store import ResourceStore

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Messages from one analysis run."""
    messages: list[msg.Message] = field(default_factory=list)
    analyzers_run: list[str] = field(default_factory=list)
    analyzers_skipped: list[str] = field(default_factory=list)
    fail_threshold: msg.Level = msg.Level.ERROR

    @property
    def exit_code(self) -> int:
        """Exit code for CI: 1 when any message reaches the fail threshold."""
        return 1 if any(m.level.at_least(self.fail_threshold) for m in self.messages) else 0

    def counts(self) -> dict[str, int]:
        counts = {level.value: 0 for level in msg.Level}
        for m in self.messages:
            counts[m.level.value] += 1
        return counts

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON/YAML output."""
        return {
            "exit_code": self.exit_code,
            "counts": self.counts(),
            "analyzers": self.analyzers_run,
            "messages": [m.to_dict() for m in self.messages],
        }


def run_analysis(store: ResourceStore, analyzers: Iterable[Analyzer],
                 config: AnalysisConfig | None = None) -> AnalysisResult:
    """Run analyzers whose inputs are present in ``store``.

    Resources of kinds no analyzer consumes are reported as unknown. Output
    threshold and suppressions from ``config`` are applied to the result.
    """
    config = config or AnalysisConfig()
    combined = CombinedAnalyzer("confcheck", analyzers)
    consumed = set(combined.metadata().inputs)

    runnable, skipped = combined.without_missing_inputs(store.kinds())
    for name in skipped:
        logger.debug(f"Skipping analyzer {name}: no input resources")

    context = StoreContext(store)
    logger.info(f"Running {len(runnable.analyzers)} analyzers over {len(store)} resources")
    runnable.analyze(context)

    messages = list(context.reports)
    for kind in store.kinds():
        if kind in consumed:
            continue
        for instance in store.instances(kind):
            messages.append(msg.new_message(msg.UNKNOWN_KIND, instance.origin, kind))

    messages = msg.filter_messages(messages, config.output_threshold, config.suppress)

    result = AnalysisResult(
        messages=msg.sort_messages(messages),
        analyzers_run=[a.metadata().name for a in runnable.analyzers],
        analyzers_skipped=skipped,
        fail_threshold=config.fail_threshold,
    )
    logger.info(f"Analysis completed with {len(result.messages)} messages")
    return result
