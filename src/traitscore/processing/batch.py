"""Multi-writer batch aggregation of trait evidence"""
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Sequence

from traitscore.aggregation.aggregator import apply_all, init_state, merge, merge_all
from traitscore.domain.exceptions import (
    BatchProcessingError,
    ParameterValidationError,
    ValidationError,
)
from traitscore.domain.models import AggregatorConfig, AllTraitState, DEFAULT_CONFIG, Observation
from traitscore.utils.itertools import chunked
from traitscore.utils.timing import section_timer

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class BatchResult:
    """Merged state plus the per-source partial states it was built from."""
    state: AllTraitState
    partial_states: Dict[str, AllTraitState] = field(default_factory=dict)
    n_observations: int = 0
    n_chunks: int = 0

class BatchAggregator:
    """
    Aggregates evidence the way independent writers would.

    Each chunk of observations is folded into its own local state, and the
    coordinator combines local states with ``merge`` only. Since merge is
    associative and commutative, chunk boundaries, worker count and the order
    in which workers finish do not change the result.
    """

    def __init__(
        self,
        config: AggregatorConfig = DEFAULT_CONFIG,
        *,
        chunk_size: int = 500,
        max_workers: int = 1,
    ):
        if chunk_size <= 0:
            raise ParameterValidationError(
                "chunk_size must be positive",
                parameter_name="chunk_size",
                parameter_value=chunk_size,
                expected_type="positive integer"
            )
        if max_workers <= 0:
            raise ParameterValidationError(
                "max_workers must be positive",
                parameter_name="max_workers",
                parameter_value=max_workers,
                expected_type="positive integer"
            )
        self.config = config
        self.chunk_size = chunk_size
        self.max_workers = max_workers

    def aggregate(self, observations: Sequence[Observation]) -> AllTraitState:
        """Aggregate one writer's observations chunk by chunk."""
        chunks = list(chunked(observations, self.chunk_size))
        if not chunks:
            return init_state(self.config)

        try:
            if self.max_workers == 1 or len(chunks) == 1:
                partials = [apply_all(chunk, self.config) for chunk in chunks]
            else:
                partials = self._aggregate_parallel(chunks)
            return merge_all(partials, self.config)
        except ValidationError:
            # caller-correctable, surface unchanged
            raise
        except Exception as e:
            raise BatchProcessingError(
                f"Unexpected error during batch aggregation: {str(e)}",
                batch_size=len(observations)
            ) from e

    def _aggregate_parallel(self, chunks: List[List[Observation]]) -> List[AllTraitState]:
        partials: List[AllTraitState] = []
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = [pool.submit(apply_all, chunk, self.config) for chunk in chunks]
            for future in as_completed(futures):
                partials.append(future.result())
        return partials

    def aggregate_sources(self, sources: Mapping[str, Sequence[Observation]]) -> BatchResult:
        """
        Aggregate each source (modality) into its own partial state and merge.
        """
        partial_states: Dict[str, AllTraitState] = {}
        n_observations = 0
        n_chunks = 0
        merged = init_state(self.config)

        with section_timer(f"Aggregating {len(sources)} evidence sources", logger):
            for name, observations in sources.items():
                partial = self.aggregate(observations)
                partial_states[name] = partial
                merged = merge(merged, partial, self.config)
                n_observations += len(observations)
                n_chunks += -(-len(observations) // self.chunk_size)
                logger.debug(
                    "Source %s: %s observations aggregated", name, len(observations)
                )

        return BatchResult(
            state=merged,
            partial_states=partial_states,
            n_observations=n_observations,
            n_chunks=n_chunks,
        )
