"""Evidence record validation and loading."""

import json
import logging
from pathlib import Path
from typing import Any, Iterator, List, Mapping, Optional, Tuple, Union

from traitscore.aggregation.weights import compute_weight, require_number
from traitscore.domain.exceptions import EvidenceRecordError, FileSystemError, InvalidInputError
from traitscore.domain.models import DEFAULT_CONFIG, Observation, TraitKey

logger = logging.getLogger(__name__)

WEIGHT_FACTORS = ("decay", "quality", "independence", "recency")


class InputValidator:
    """Turns raw evidence records into observations.

    A record carries ``trait`` and ``rating`` plus either an explicit
    ``weight`` or the four factors the weight is composed from.
    """

    def __init__(self, w_max: float = DEFAULT_CONFIG.w_max):
        self.w_max = w_max

    def to_observation(
        self,
        record: Mapping[str, Any],
        *,
        source: Optional[str] = None,
        record_index: Optional[int] = None,
    ) -> Observation:
        if not isinstance(record, Mapping):
            raise EvidenceRecordError(
                f"Evidence record must be an object, got {type(record).__name__}",
                source=source, record_index=record_index,
            )

        if "trait" not in record:
            raise EvidenceRecordError(
                "Evidence record has no trait",
                source=source, record_index=record_index,
            )
        try:
            trait = TraitKey.parse(record["trait"])
        except ValueError as e:
            raise EvidenceRecordError(
                str(e), field_name="trait", field_value=record["trait"],
                source=source, record_index=record_index,
            ) from e

        if "rating" not in record:
            raise EvidenceRecordError(
                "Evidence record has no rating",
                source=source, record_index=record_index,
            )

        if "weight" in record:
            weight = record["weight"]
        elif all(f in record for f in WEIGHT_FACTORS):
            weight = compute_weight(
                record["decay"],
                record["quality"],
                record["independence"],
                record["recency"],
                self.w_max,
            )
        else:
            missing = [f for f in WEIGHT_FACTORS if f not in record]
            raise EvidenceRecordError(
                f"Evidence record has neither weight nor factors ({', '.join(missing)} missing)",
                source=source, record_index=record_index,
            )

        rating = require_number(record["rating"], "r")
        weight = require_number(weight, "w")
        return Observation(trait=trait, rating=rating, weight=weight)

    def read_records(
        self, path: Union[str, Path]
    ) -> Iterator[Tuple[Optional[int], Optional[Any], Optional[EvidenceRecordError]]]:
        """
        Yield ``(line_number, record, error)`` from a JSON array file or a
        JSON Lines file.

        A JSON Lines line that does not parse yields ``(line_number, None,
        error)`` and reading continues with the next line. A JSON array file
        is parsed as a whole, so a decode error there raises. Array records
        carry no line number.
        """
        p = Path(path)
        if not p.is_file():
            raise FileSystemError(f"Evidence file not found: {p}", path=str(p))

        text = p.read_text(encoding="utf-8")
        if p.suffix.lower() == ".json":
            try:
                data = json.loads(text)
            except json.JSONDecodeError as e:
                raise EvidenceRecordError(f"Invalid JSON: {e}", source=str(p)) from e
            if not isinstance(data, list):
                raise EvidenceRecordError("JSON evidence file must hold an array of records", source=str(p))
            for record in data:
                yield None, record, None
            return

        for i, line in enumerate(text.splitlines(), start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as e:
                err = EvidenceRecordError(f"Invalid JSON: {e}", source=str(p), line_number=i)
                err.__cause__ = e
                yield i, None, err
                continue
            yield i, record, None

    def load_observations(
        self,
        path: Union[str, Path],
        *,
        skip_invalid: bool = False,
    ) -> List[Observation]:
        """
        Read every observation in one evidence file.

        With ``skip_invalid`` malformed records, unparseable JSON Lines
        included, are logged and dropped; otherwise the first one raises.
        """
        observations: List[Observation] = []
        skipped = 0
        for i, (line_number, record, error) in enumerate(self.read_records(path), start=1):
            try:
                if error is not None:
                    raise error
                observations.append(self.to_observation(record, source=str(path), record_index=i))
            except (EvidenceRecordError, InvalidInputError) as e:
                if not skip_invalid:
                    raise
                skipped += 1
                where = f"line {line_number}" if line_number is not None else f"record {i}"
                logger.warning("Skipping %s in %s: %s", where, path, e.message)
        if skipped:
            logger.info("Skipped %s invalid records in %s", skipped, path)
        return observations
