import os
import time
import logging
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

import psutil
from tqdm import tqdm

from traitscore.aggregation.gate import stop_check
from traitscore.config.resolvers import resolve_evidence_inputs
from traitscore.domain.exceptions import (
    ConfigurationError,
    ProcessingError,
    ResourceError,
    ValidationError,
)
from traitscore.domain.models import (
    AggregatorConfig,
    AllTraitState,
    DEFAULT_CONFIG,
    Observation,
    TRAITS,
    TraitKey,
)
from traitscore.processing import BatchAggregator, InputValidator
from traitscore.results import assemblers
from traitscore.scoring.composer import calculate_score
from traitscore.scoring.models import (
    CalculatedScore,
    RawScores,
    ScoringConfiguration,
    WorkstyleMetrics,
)
from traitscore.utils.timing import timeit

logger = logging.getLogger(__name__)
summary_logger = logging.getLogger("traitscore.summary")

@dataclass
class CodingScores:
    """Raw 0-100 coding dimension scores from the separate coding evaluator."""
    code_quality: float
    problem_solving: float
    independence: float

@dataclass
class PipelineConfig:
    """Everything one evidence replay needs."""
    input: Optional[List[str]] = None
    input_dir: Optional[str] = None
    recursive: bool = False
    coverage: Dict[TraitKey, bool] = field(default_factory=dict)
    coding_scores: Optional[CodingScores] = None
    workstyle: WorkstyleMetrics = field(default_factory=WorkstyleMetrics)
    scoring: ScoringConfiguration = field(default_factory=ScoringConfiguration)
    aggregator: AggregatorConfig = DEFAULT_CONFIG
    output_path: Optional[str] = None
    skip_invalid: bool = False
    chunk_size: int = 500
    max_workers: int = 1
    memory_threshold_mb: int = 2000
    show_progress: bool = True

@dataclass
class PipelineResult:
    """Pipeline execution result."""
    n_sources: int
    n_observations: int
    ready: bool
    state: AllTraitState
    score: Optional[CalculatedScore] = None
    report: Dict[str, Any] = field(default_factory=dict)
    output_path: Optional[str] = None
    processing_time: float = 0.0

class TraitScorePipeline:
    """
    Replays evidence files through the aggregator and composes the final score.

    Each evidence file is an independent writer: it is aggregated into its own
    partial state, and the partial states are merged. The stop gate is checked
    on the merged state and, when coding scores are supplied, the score
    composer runs once on a frozen copy of it.
    """

    def __init__(self, config: PipelineConfig):
        self.config = config
        self.start_time = None
        self.process = psutil.Process(os.getpid())
        self.validator = InputValidator(w_max=config.aggregator.w_max)
        self.aggregator = BatchAggregator(
            config.aggregator,
            chunk_size=config.chunk_size,
            max_workers=config.max_workers,
        )
        self.metrics = {
            'sources_loaded': 0,
            'observations_loaded': 0,
            'processing_time': 0.0,
        }

    def run(self) -> PipelineResult:
        """Execute the complete pipeline."""
        self.start_time = time.time()
        try:
            files = self._resolve_inputs()
            sources = self._load_sources(files)
            batch = self.aggregator.aggregate_sources(sources)

            ready = stop_check(batch.state, self.config.coverage, self.config.aggregator)
            score = self._compose_score(batch.state)

            report = assemblers.build_report(
                batch.state,
                self.config.coverage,
                self.config.aggregator,
                ready=ready,
                score=score,
                partial_states=batch.partial_states,
                n_observations=batch.n_observations,
            )

            output_path = None
            if self.config.output_path:
                output_path = str(assemblers.write_report(report, Path(self.config.output_path)))

            self.metrics['processing_time'] = time.time() - self.start_time
            self._log_final_metrics(ready, score)
            return PipelineResult(
                n_sources=len(sources),
                n_observations=batch.n_observations,
                ready=ready,
                state=batch.state,
                score=score,
                report=report,
                output_path=output_path,
                processing_time=self.metrics['processing_time'],
            )

        except (ProcessingError, ValidationError, ConfigurationError, ResourceError):
            raise
        except Exception as e:
            exc = ProcessingError(
                f"Unexpected pipeline error: {str(e)}",
                stage="pipeline_execution"
            )
            exc.add_context('elapsed_time', time.time() - self.start_time)
            raise exc from e

    def _resolve_inputs(self) -> Tuple[str, ...]:
        try:
            return resolve_evidence_inputs(
                self.config.input,
                self.config.input_dir,
                recursive=self.config.recursive,
            )
        except ValueError as e:
            raise ConfigurationError(str(e), config_field="input_sources") from e

    def _load_sources(self, files: Tuple[str, ...]) -> Dict[str, List[Observation]]:
        """Load each evidence file as its own source, keyed by file name."""
        show_progress = self.config.show_progress and os.getenv('NO_PROGRESS', '').lower() not in ['1', 'true', 'yes']
        sources: Dict[str, List[Observation]] = {}
        for path in tqdm(files, desc="Evidence", unit="file", disable=not show_progress, leave=False):
            name = self._source_name(path, sources)
            sources[name] = self.validator.load_observations(path, skip_invalid=self.config.skip_invalid)
            self.metrics['sources_loaded'] += 1
            self.metrics['observations_loaded'] += len(sources[name])
        self._memory_report("After loading evidence")
        return sources

    @staticmethod
    def _source_name(path: str, taken: Mapping[str, Any]) -> str:
        name = Path(path).stem
        if name not in taken:
            return name
        return path

    def _compose_score(self, state: AllTraitState) -> Optional[CalculatedScore]:
        coding = self.config.coding_scores
        if coding is None:
            logger.info("No coding scores supplied; skipping score composition")
            return None
        raw = RawScores.from_trait_state(
            state,
            code_quality=coding.code_quality,
            problem_solving=coding.problem_solving,
            independence=coding.independence,
        )
        return calculate_score(raw, self.config.workstyle, self.config.scoring)

    def _memory_report(self, label: str) -> None:
        """Log resident memory; warn above the configured threshold."""
        try:
            rss = self.process.memory_info().rss / 1e6  # MB
            logger.debug("[mem] %s: RSS=%.1fMB", label, rss)
            if rss > self.config.memory_threshold_mb:
                logger.warning(
                    "[mem] High memory usage: %.1fMB (threshold: %sMB)",
                    rss, self.config.memory_threshold_mb,
                )
        except psutil.Error as e:
            logger.debug("[mem] Could not get memory info: %s", e)

    def _log_final_metrics(self, ready: bool, score: Optional[CalculatedScore]) -> None:
        summary_logger.info(
            "Aggregated %s observations from %s sources in %.3f s",
            self.metrics['observations_loaded'],
            self.metrics['sources_loaded'],
            self.metrics['processing_time'],
        )
        summary_logger.info("Stop gate: %s", "ready" if ready else "collecting")
        if score is not None:
            summary_logger.info(
                "Final score %s (experience %s, coding %s)",
                score.final_score, score.experience_score, score.coding_score,
            )

@timeit(logger, "run_pipeline")
def run_pipeline(cfg: PipelineConfig) -> PipelineResult:
    """Run the evidence replay pipeline for ``cfg``."""
    return TraitScorePipeline(cfg).run()

def full_coverage() -> Dict[TraitKey, bool]:
    return {trait: True for trait in TRAITS}
