# src/dcmna_core/trace.py
"""
The derivation trace: an ordered, append-only log of human-readable steps.

Every arithmetic decision made while assembling and solving a circuit (the
conductance of each resistor, each pivot swap, each row operation and its exact
factor) is recorded here as a ``StepRecord``. Records carry a ``TracePhase`` and
are accepted only in non-decreasing phase order, so a finished trace always
reads identification -> conductances -> equations -> matrix -> elimination ->
interpretation -> component calculations -> verification.

A record's optional payload is one of three frozen variants:

- ``EquationLines``: a list of equation (or result) strings.
- ``MatrixBlock``: a rendered matrix, one tuple of formatted cells per row.
- ``PlainText``: a single free-text block.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

logger = logging.getLogger(__name__)


class TracePhase(Enum):
    """The fixed sequence of phases a successful analysis passes through."""
    IDENTIFICATION = 1
    CONDUCTANCES = 2
    EQUATIONS = 3
    MATRIX = 4
    ELIMINATION = 5
    INTERPRETATION = 6
    COMPONENT_CALCULATIONS = 7
    VERIFICATION = 8


@dataclass(frozen=True)
class EquationLines:
    lines: Tuple[str, ...]

    def render_lines(self) -> List[str]:
        return list(self.lines)


@dataclass(frozen=True)
class MatrixBlock:
    """
    A rendered matrix. When ``augmented`` is set, the last cell of every row is
    the right-hand side and is rendered after a ``|`` separator. ``annotations``,
    if given, holds one suffix per row (e.g. ``"[V1] = [12.0000]"``).
    """
    rows: Tuple[Tuple[str, ...], ...]
    augmented: bool = False
    annotations: Tuple[str, ...] = ()

    def render_lines(self) -> List[str]:
        lines = []
        for idx, row in enumerate(self.rows):
            if self.augmented and row:
                text = "[" + " ".join(row[:-1]) + " | " + row[-1] + "]"
            else:
                text = "[" + " ".join(row) + "]"
            if idx < len(self.annotations):
                text = f"{text} {self.annotations[idx]}"
            lines.append(text)
        return lines


@dataclass(frozen=True)
class PlainText:
    text: str

    def render_lines(self) -> List[str]:
        return self.text.splitlines()


StepPayload = Union[EquationLines, MatrixBlock, PlainText]


@dataclass(frozen=True)
class StepRecord:
    """A single, immutable entry of the derivation trace."""
    phase: TracePhase
    title: str
    description: str
    payload: Optional[StepPayload] = None

    def render_lines(self) -> List[str]:
        """The payload as display lines (empty when there is no payload)."""
        return self.payload.render_lines() if self.payload is not None else []


class StepTrace:
    """
    Append-only builder for a sequence of ``StepRecord``s.

    A trace instance belongs to exactly one analysis call and is frozen into a
    tuple (``records``) when handed to the caller.
    """
    def __init__(self):
        self._records: List[StepRecord] = []

    def append(self, record: StepRecord) -> StepRecord:
        if self._records and record.phase.value < self._records[-1].phase.value:
            raise ValueError(
                f"Step '{record.title}' belongs to phase {record.phase.name}, which precedes "
                f"the phase of the last recorded step ({self._records[-1].phase.name})."
            )
        self._records.append(record)
        logger.debug(f"[{record.phase.name}] {record.title}")
        return record

    def record(
        self,
        phase: TracePhase,
        title: str,
        description: str,
        payload: Optional[StepPayload] = None,
    ) -> StepRecord:
        return self.append(StepRecord(phase=phase, title=title, description=description, payload=payload))

    def extend(self, records: Sequence[StepRecord]):
        for record in records:
            self.append(record)

    @property
    def records(self) -> Tuple[StepRecord, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[StepRecord]:
        return iter(self.records)


# --- Number formatting shared by every trace producer ---

def format_cell(value: float) -> str:
    """Formats a matrix entry: 4 decimals, right-aligned in 10 characters."""
    # Adding 0.0 folds a negative zero into +0.0.
    return f"{float(value) + 0.0:10.4f}"


def matrix_block(matrix: np.ndarray, augmented: bool = False, annotations: Sequence[str] = ()) -> MatrixBlock:
    """Snapshots a 2-D numpy array into an immutable ``MatrixBlock``."""
    rows = tuple(tuple(format_cell(v) for v in row) for row in np.asarray(matrix, dtype=float))
    return MatrixBlock(rows=rows, augmented=augmented, annotations=tuple(annotations))
