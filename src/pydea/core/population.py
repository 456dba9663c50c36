"""Core data structures for DEA scoring.

This module provides the immutable containers the efficiency engine works on.

    - EntityRecord: One decision-making unit (page, depot, ...) with its
      output and input measurement vectors
    - Population: A validated, immutable mapping of id -> EntityRecord in
      which every record has the same number of inputs and outputs
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pydea.core.exceptions import (
    DataValidationError,
    DegenerateInputError,
    NaNInfError,
    ValueRangeError,
)


def _as_measurements(values: Any, name: str, entity_id: str) -> NDArray[np.float64]:
    """Convert a measurement vector to a read-only 1D float64 array."""
    try:
        arr = np.array(values if values is not None else [], dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise DataValidationError(
            f"{name} of entity '{entity_id}' must be numeric, got {values!r}."
        ) from e

    if arr.ndim != 1:
        raise DataValidationError(
            f"{name} of entity '{entity_id}' must be a 1D vector, got {arr.ndim}D "
            f"with shape {arr.shape}. "
            f"Hint: Pass one row per entity, e.g. [likes, shares, mentions]."
        )
    if not np.all(np.isfinite(arr)):
        invalid_count = int(np.sum(~np.isfinite(arr)))
        raise NaNInfError(
            f"Found {invalid_count} NaN/Inf {name} for entity '{entity_id}'. "
            f"All measurements must be finite numbers."
        )
    if np.any(arr < 0):
        positions = np.flatnonzero(arr < 0).tolist()
        raise ValueRangeError(
            f"Found {len(positions)} negative {name} for entity '{entity_id}' "
            f"at positions {positions}. "
            f"All measurements must be non-negative (>= 0)."
        )

    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class EntityRecord:
    """
    One entity (decision-making unit) with its measurement vectors.

    Attributes:
        id: Identifier, unique within a population
        outputs: Non-negative output measurements (e.g. likes, shares, mentions)
        inputs: Non-negative input measurements; may be empty, in which case
            the efficiency engine uses a constant synthetic input of 1

    The vectors are copied on construction and made read-only, so a record
    can be shared between populations without being changed by any of them.

    Example:
        >>> depot = EntityRecord("Depot1", outputs=[40, 55, 30], inputs=[3, 5])
        >>> depot.num_outputs, depot.num_inputs
        (3, 2)
    """

    id: str
    outputs: NDArray[np.float64]
    inputs: NDArray[np.float64] = ()  # type: ignore[assignment]

    def __post_init__(self) -> None:
        """Validate and freeze the measurement vectors."""
        object.__setattr__(self, "id", str(self.id))
        object.__setattr__(
            self, "outputs", _as_measurements(self.outputs, "outputs", self.id)
        )
        object.__setattr__(
            self, "inputs", _as_measurements(self.inputs, "inputs", self.id)
        )

    @property
    def num_outputs(self) -> int:
        """Number of output measures."""
        return len(self.outputs)

    @property
    def num_inputs(self) -> int:
        """Number of input measures."""
        return len(self.inputs)

    @property
    def shape(self) -> tuple[int, int]:
        """(num_outputs, num_inputs)."""
        return (self.num_outputs, self.num_inputs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EntityRecord):
            return NotImplemented
        return (
            self.id == other.id
            and np.array_equal(self.outputs, other.outputs)
            and np.array_equal(self.inputs, other.inputs)
        )

    def __hash__(self) -> int:
        # + 0.0 folds -0.0 into 0.0, which __eq__ treats as equal
        return hash((self.id, (self.outputs + 0.0).tobytes(), (self.inputs + 0.0).tobytes()))

    def __repr__(self) -> str:
        return (
            f"EntityRecord(id={self.id!r}, outputs={self.outputs.tolist()}, "
            f"inputs={self.inputs.tolist()})"
        )


class Population(Mapping):
    """
    Immutable mapping of entity id -> EntityRecord.

    Every record must share the same number of outputs and the same number
    of inputs (inputs may be empty for all of them). Iteration is always in
    sorted id order, which makes every derived matrix and serialized result
    deterministic.

    A Population is never modified in place. Use with_record() to build an
    augmented copy, e.g. to score a candidate against a reference set.

    Properties:
        ids: Sorted tuple of entity ids
        output_matrix: N x K_out matrix of outputs (rows in id order)
        input_matrix: N x K_in matrix of inputs (rows in id order)
        num_entities, num_outputs, num_inputs

    Example:
        >>> population = Population.from_vectors([[10], [20], [30]])
        >>> population.ids
        ('0', '1', '2')
        >>> population.num_inputs
        0
    """

    def __init__(
        self,
        records: Mapping[str, EntityRecord] | Iterable[EntityRecord] = (),
    ) -> None:
        if isinstance(records, Mapping):
            items = list(records.items())
            for key, record in items:
                if str(key) != record.id:
                    raise DataValidationError(
                        f"Key {key!r} does not match record id {record.id!r}. "
                        f"Hint: Build the mapping as {{record.id: record}}."
                    )
            record_list = [record for _, record in items]
        else:
            record_list = list(records)

        self._records: dict[str, EntityRecord] = {}
        for record in record_list:
            if not isinstance(record, EntityRecord):
                raise DataValidationError(
                    f"Population members must be EntityRecord, got {type(record).__name__}."
                )
            if record.id in self._records:
                raise DataValidationError(
                    f"Duplicate entity id {record.id!r}. Ids must be unique within a population."
                )
            self._records[record.id] = record

        self._ids = tuple(sorted(self._records))
        self._validate_shapes()
        self._output_matrix, self._input_matrix = self._build_matrices()

    def _validate_shapes(self) -> None:
        """Check that every record has the same number of inputs and outputs."""
        shapes: dict[tuple[int, int], list[str]] = {}
        for entity_id in self._ids:
            shapes.setdefault(self._records[entity_id].shape, []).append(entity_id)

        if len(shapes) > 1:
            preview = ", ".join(
                f"{ids[0]!r} has {n_out} outputs/{n_in} inputs"
                for (n_out, n_in), ids in sorted(shapes.items())
            )
            raise DegenerateInputError(
                f"Records have inconsistent vector shapes: {preview}. "
                f"All entities in one DEA run must share the same number of "
                f"outputs and the same number of inputs."
            )

    def _build_matrices(self) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Stack the vectors into read-only matrices in id order."""
        n_out, n_in = self.num_outputs, self.num_inputs
        if not self._ids:
            outputs = np.zeros((0, 0))
            inputs = np.zeros((0, 0))
        else:
            outputs = np.vstack([self._records[i].outputs for i in self._ids]).reshape(
                len(self._ids), n_out
            )
            inputs = np.vstack([self._records[i].inputs for i in self._ids]).reshape(
                len(self._ids), n_in
            )
        outputs.setflags(write=False)
        inputs.setflags(write=False)
        return outputs, inputs

    # -- Mapping protocol -----------------------------------------------------

    def __getitem__(self, entity_id: str) -> EntityRecord:
        return self._records[entity_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._ids)

    def __len__(self) -> int:
        return len(self._ids)

    def __repr__(self) -> str:
        return (
            f"Population(num_entities={self.num_entities}, "
            f"num_outputs={self.num_outputs}, num_inputs={self.num_inputs})"
        )

    # -- Properties -----------------------------------------------------------

    @property
    def ids(self) -> tuple[str, ...]:
        """Entity ids in sorted order."""
        return self._ids

    @property
    def num_entities(self) -> int:
        """Number of entities N."""
        return len(self._ids)

    @property
    def num_outputs(self) -> int:
        """Number of output measures (0 for an empty population)."""
        if not self._ids:
            return 0
        return self._records[self._ids[0]].num_outputs

    @property
    def num_inputs(self) -> int:
        """Number of input measures (0 for an empty population)."""
        if not self._ids:
            return 0
        return self._records[self._ids[0]].num_inputs

    @property
    def output_matrix(self) -> NDArray[np.float64]:
        """N x K_out output matrix, rows ordered like ids."""
        return self._output_matrix

    @property
    def input_matrix(self) -> NDArray[np.float64]:
        """N x K_in input matrix, rows ordered like ids."""
        return self._input_matrix

    # -- Derived populations --------------------------------------------------

    def with_record(self, record: EntityRecord) -> Population:
        """
        Return a new population containing every record plus `record`.

        The current population is left untouched.

        Raises:
            DataValidationError: If the id is already taken
            DegenerateInputError: If the record's shape differs from the others
        """
        if record.id in self._records:
            raise DataValidationError(
                f"Entity id {record.id!r} already exists in the population."
            )
        return Population([*self._records.values(), record])

    # -- Constructors ---------------------------------------------------------

    @classmethod
    def from_vectors(
        cls,
        outputs: Any,
        inputs: Any | None = None,
        ids: Iterable[Any] | None = None,
    ) -> Population:
        """
        Build a population from row-aligned output (and input) matrices.

        Args:
            outputs: N x K_out array-like of outputs
            inputs: Optional N x K_in array-like of inputs
            ids: Optional ids; defaults to "0", "1", ..., "N-1"

        Returns:
            Population instance
        """
        output_rows = [list(row) for row in outputs]
        n = len(output_rows)
        input_rows = [list(row) for row in inputs] if inputs is not None else [[]] * n
        id_list = [str(i) for i in ids] if ids is not None else [str(i) for i in range(n)]

        if len(input_rows) != n or len(id_list) != n:
            raise DegenerateInputError(
                f"Got {n} output rows, {len(input_rows)} input rows and "
                f"{len(id_list)} ids. Hint: All three must describe the same entities."
            )

        return cls(
            EntityRecord(entity_id, outputs=out_row, inputs=in_row)
            for entity_id, out_row, in_row in zip(id_list, output_rows, input_rows)
        )

    @classmethod
    def from_dataframe(
        cls,
        df: Any,  # pandas.DataFrame
        output_cols: list[str],
        input_cols: list[str] | None = None,
        id_col: str | None = None,
    ) -> Population:
        """
        Create a Population from a pandas DataFrame.

        Args:
            df: DataFrame with one row per entity
            output_cols: Column names holding outputs
            input_cols: Column names holding inputs (optional)
            id_col: Column holding entity ids; the index is used if omitted

        Returns:
            Population instance

        Example:
            >>> import pandas as pd
            >>> df = pd.DataFrame({
            ...     'depot': ['D1', 'D2'],
            ...     'issues': [40.0, 45.0], 'receipts': [55.0, 50.0],
            ...     'stock': [3.0, 2.5],
            ... })
            >>> population = Population.from_dataframe(
            ...     df, output_cols=['issues', 'receipts'],
            ...     input_cols=['stock'], id_col='depot'
            ... )
        """
        if not output_cols:
            raise DegenerateInputError(
                "Must provide at least one output column. "
                "Hint: DEA needs at least one output measure."
            )

        ids = df[id_col].astype(str).tolist() if id_col else df.index.astype(str).tolist()
        outputs = df[output_cols].to_numpy(dtype=np.float64)
        inputs = df[input_cols].to_numpy(dtype=np.float64) if input_cols else None
        return cls.from_vectors(outputs, inputs, ids=ids)
