from __future__ import annotations

import math
from collections.abc import Sequence

from .model import ExcludedFile, FileRecord, TokenAnomaly

# The filter only runs once the whole inclusion set is this large.
TOTAL_TOKEN_THRESHOLD = 50_000
# A file must exceed this absolute count to be an anomaly.
TOKEN_ANOMALY_THRESHOLD = 10_000


def mean_and_stddev(counts: Sequence[int]) -> tuple[float, float]:
    """Arithmetic mean and population standard deviation."""
    if not counts:
        return 0.0, 0.0
    mean = sum(counts) / len(counts)
    variance = sum((c - mean) ** 2 for c in counts) / len(counts)
    return mean, math.sqrt(variance)


def filter_token_anomalies(
    included: list[FileRecord],
) -> tuple[list[FileRecord], list[ExcludedFile]]:
    """Split ``included`` into kept files and token-count outliers.

    An outlier exceeds both ``mean + 2*stddev`` and ``TOKEN_ANOMALY_THRESHOLD``.
    Nothing is filtered unless the total exceeds ``TOTAL_TOKEN_THRESHOLD``.
    """
    counts = [f.token_count for f in included]
    if sum(counts) <= TOTAL_TOKEN_THRESHOLD:
        return included, []

    mean, stddev = mean_and_stddev(counts)
    threshold = int(mean + 2 * stddev)

    kept: list[FileRecord] = []
    anomalies: list[ExcludedFile] = []
    for record in included:
        count = record.token_count
        if count > threshold and count > TOKEN_ANOMALY_THRESHOLD:
            anomalies.append(
                ExcludedFile(
                    path=record.path,
                    file_type=record.file_type,
                    reason=TokenAnomaly(
                        count=count, threshold=threshold, mean=mean, stddev=stddev
                    ),
                    token_count=count,
                    line_count=record.line_count,
                )
            )
        else:
            kept.append(record)
    return kept, anomalies
