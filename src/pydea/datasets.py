"""Loading reference populations from tab-separated measurement files.

File format: one entity per line, tab-separated numeric fields, no header.
For the popularity application every field is an output (e.g. likes,
shares, mentions). Entities get sequential ids "0", "1", ... in file order.

Loading is all-or-nothing: any malformed field raises ParseError and no
population is returned.
"""

from __future__ import annotations

import io
import logging
import os
import urllib.request
from typing import Any

import numpy as np
import pandas as pd

from pydea.config import CANDIDATE_ID_PREFIX
from pydea.core.exceptions import DataValidationError, ParseError
from pydea.core.population import EntityRecord, Population

logger = logging.getLogger(__name__)

_URL_SCHEMES = ("http://", "https://", "ftp://", "file://")


def _read_text(source: Any) -> str:
    """Return the whole dataset as text from a path, URL or file-like object."""
    if hasattr(source, "read"):
        data = source.read()
    elif isinstance(source, str) and source.startswith(_URL_SCHEMES):
        with urllib.request.urlopen(source) as response:
            data = response.read()
    else:
        with open(os.fspath(source), "rb") as f:
            data = f.read()
    return data.decode("utf-8") if isinstance(data, bytes) else data


def read_measurements(source: Any) -> np.ndarray:
    """
    Read a tab-separated measurement file into an N x K float matrix.

    Args:
        source: Path, URL or file-like object

    Returns:
        N x K float64 array, one row per non-blank line

    Raises:
        ParseError: Empty file, ragged rows, or a non-numeric field
        FileNotFoundError: If `source` is a path that does not exist
    """
    # Lines are trimmed before splitting, so a trailing tab adds no field.
    # Leading blank lines are dropped so the first record sets the width.
    lines = [line.strip() for line in _read_text(source).splitlines()]
    offset = 0
    while offset < len(lines) and not lines[offset]:
        offset += 1
    text = "\n".join(lines[offset:])
    try:
        raw = pd.read_csv(
            io.StringIO(text),
            sep="\t",
            header=None,
            dtype=str,
            keep_default_na=False,
            na_values=[],
            skip_blank_lines=False,
        )
    except pd.errors.EmptyDataError as e:
        raise ParseError(f"Dataset {source!r} is empty.") from e
    except pd.errors.ParserError as e:
        raise ParseError(
            f"Dataset {source!r} has rows with inconsistent field counts: {e}"
        ) from e

    # Blank lines come back as rows of NaN; row i is line i + offset + 1
    stripped = raw.apply(lambda col: col.map(lambda v: v.strip() if isinstance(v, str) else v))
    blank = stripped.isna().all(axis=1) | (stripped.fillna("") == "").all(axis=1)

    values = stripped.apply(pd.to_numeric, errors="coerce")
    for row_idx in np.flatnonzero(~blank.to_numpy()):
        row = values.iloc[row_idx]
        bad = np.flatnonzero(row.isna().to_numpy())
        if len(bad) > 0:
            col = int(bad[0])
            field = stripped.iat[row_idx, col]
            shown = "<missing>" if pd.isna(field) or field == "" else repr(field)
            raise ParseError(
                f"Non-numeric value {shown} at line {row_idx + offset + 1}, field {col + 1} "
                f"of {source!r}. No records were loaded.",
                line=row_idx + offset + 1,
                column=col,
            )

    matrix = values[~blank].to_numpy(dtype=np.float64)
    if matrix.shape[0] == 0:
        raise ParseError(f"Dataset {source!r} contains no records.")
    return matrix


def load_population(
    source: Any,
    id_prefix: str = "",
    num_inputs: int = 0,
) -> Population:
    """
    Load a reference population from a tab-separated file.

    Args:
        source: Path, URL or file-like object
        id_prefix: Prefix for the generated sequential ids
        num_inputs: Number of leading columns to treat as inputs; the
            remaining columns are outputs (default: all outputs)

    Returns:
        Population with one record per line

    Raises:
        ParseError: If any line is malformed; nothing is loaded

    Example:
        >>> population = load_population("socialcounts.txt")
        >>> population.num_outputs
        3
    """
    if id_prefix.startswith(CANDIDATE_ID_PREFIX):
        raise ValueError(
            f"id_prefix must not start with the reserved prefix {CANDIDATE_ID_PREFIX!r}."
        )

    matrix = read_measurements(source)
    if not 0 <= num_inputs < matrix.shape[1]:
        raise ParseError(
            f"num_inputs={num_inputs} leaves no output columns in a dataset "
            f"with {matrix.shape[1]} fields."
        )

    try:
        population = Population(
            EntityRecord(
                f"{id_prefix}{n}",
                outputs=row[num_inputs:],
                inputs=row[:num_inputs],
            )
            for n, row in enumerate(matrix)
        )
    except DataValidationError as e:
        raise ParseError(f"Invalid measurements in {source!r}: {e}") from e

    logger.info(
        "Loaded %d records with %d outputs and %d inputs from %r",
        population.num_entities, population.num_outputs, population.num_inputs, source,
    )
    return population
