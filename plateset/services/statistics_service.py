"""Descriptive statistics over wells, sets, plates and stacks."""
import logging
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np

from plateset.models import Plate, Stack, Well, WellSet

logger = logging.getLogger(__name__)


def _geometric_mean(values: np.ndarray) -> float:
    if np.any(values <= 0):
        raise ValueError("Geometric mean requires positive values.")
    return float(np.exp(np.mean(np.log(values))))


def _interquartile_range(values: np.ndarray) -> float:
    """Spread between the medians of the lower and upper halves."""
    if values.size < 2:
        return 0.0
    ordered = np.sort(values)
    half = ordered.size // 2
    return float(np.median(ordered[half + ordered.size % 2:]) - np.median(ordered[:half]))


def _equal_bins(values: np.ndarray, count: int) -> List[List[float]]:
    """Split sorted values into ``count`` bins of equal value range."""
    ordered = np.sort(values)
    width = (ordered[-1] - ordered[0]) / count
    if width == 0:
        indices = np.zeros(ordered.size, dtype=int)
    else:
        indices = np.minimum(((ordered - ordered[0]) // width).astype(int), count - 1)
    return [ordered[indices == i].tolist() for i in range(count)]


# Statistic name -> function over a non-empty float array
STATISTICS: Dict[str, Callable[[np.ndarray], float]] = {
    "mean": lambda values: float(np.mean(values)),
    "median": lambda values: float(np.median(values)),
    "sum": lambda values: float(np.sum(values)),
    "min": lambda values: float(np.min(values)),
    "max": lambda values: float(np.max(values)),
    "std": lambda values: float(np.std(values, ddof=1)) if values.size > 1 else 0.0,
    "variance": lambda values: float(np.var(values, ddof=1)) if values.size > 1 else 0.0,
    "n": lambda values: float(values.size),
    "geometric_mean": _geometric_mean,
    "range": lambda values: float(np.max(values) - np.min(values)),
    "iqr": _interquartile_range,
}


class StatisticsService:
    """
    Apply a named statistic to plate data.

    Per-well results are returned as ``{Well: value}`` keyed by the source
    wells, so results can be joined back to positions. ``begin`` and
    ``length`` restrict the computation to a slice of each well's data.
    Empty wells are skipped.

    ``q`` is the rank for ``percentile`` (0 to 100) and ``quantile`` (0 to
    1). When ``weights`` are given, the i-th value of every well (or slice)
    is multiplied by the i-th weight before the statistic is computed.
    """

    def __init__(
        self,
        statistic: str = "mean",
        q: Optional[float] = None,
        weights: Optional[Sequence[float]] = None
    ):
        self.statistic = statistic
        self.q = q
        self.weights = None if weights is None else np.asarray(weights, dtype=np.float64)
        self._function = self._resolve(statistic, q)

    @staticmethod
    def available() -> List[str]:
        return sorted(list(STATISTICS) + ["percentile", "quantile"])

    @staticmethod
    def _resolve(statistic: str, q: Optional[float]) -> Callable[[np.ndarray], float]:
        if statistic == "percentile":
            if q is None or not 0 <= q <= 100:
                raise ValueError(f"Percentile must be between 0 and 100, got {q}")
            return lambda values: float(np.percentile(values, q))
        if statistic == "quantile":
            if q is None or not 0 <= q <= 1:
                raise ValueError(f"Quantile must be between 0 and 1, got {q}")
            # Rank p(n + 1), clamped to the first and last value
            return lambda values: float(np.quantile(values, q, method="weibull"))
        if statistic not in STATISTICS:
            raise ValueError(f"Unknown statistic: {statistic}")
        return STATISTICS[statistic]

    def _values(self, well: Well, begin: Optional[int], length: Optional[int]) -> np.ndarray:
        if begin is None:
            values = well.to_double_array()
        else:
            length = well.size() - begin if length is None else length
            values = well.sub_list(begin, length).to_double_array()
        if self.weights is None:
            return values
        if self.weights.size < values.size:
            raise ValueError(
                f"Well {well.index} holds {values.size} values but only "
                f"{self.weights.size} weights were given."
            )
        return values * self.weights[:values.size]

    def _compute(self, values: np.ndarray) -> float:
        return self._function(values)

    # Per-well results

    def well(self, well: Well, begin: Optional[int] = None, length: Optional[int] = None) -> float:
        """
        Statistic of a single well.

        Raises:
            ValueError: If the selected data is empty
            IndexError: If the slice lies outside the well data
        """
        values = self._values(well, begin, length)
        if values.size == 0:
            raise ValueError(f"Well {well.index} holds no data.")
        return self._compute(values)

    def set(
        self,
        well_set: WellSet,
        begin: Optional[int] = None,
        length: Optional[int] = None
    ) -> Dict[Well, float]:
        results = {}
        for well in well_set:
            if well.is_empty():
                logger.debug(f"Skipping empty well {well.index}")
                continue
            results[well] = self.well(well, begin, length)
        return results

    def plate(
        self,
        plate: Plate,
        begin: Optional[int] = None,
        length: Optional[int] = None
    ) -> Dict[Well, float]:
        return self.set(plate.data_set(), begin, length)

    def stack(
        self,
        stack: Stack,
        begin: Optional[int] = None,
        length: Optional[int] = None
    ) -> Dict[str, Dict[Well, float]]:
        """Per-well results for every plate, keyed by plate label."""
        return {plate.label: self.plate(plate, begin, length) for plate in stack}

    # Aggregated results

    def _pool(self, wells, begin: Optional[int], length: Optional[int]) -> float:
        arrays = [self._values(well, begin, length) for well in wells if not well.is_empty()]
        if not arrays:
            raise ValueError("No data to aggregate.")
        return self._compute(np.concatenate(arrays))

    def set_aggregated(
        self,
        well_set: WellSet,
        begin: Optional[int] = None,
        length: Optional[int] = None
    ) -> float:
        """Statistic of every value in the set pooled together."""
        return self._pool(well_set, begin, length)

    def plate_aggregated(
        self,
        plate: Plate,
        begin: Optional[int] = None,
        length: Optional[int] = None
    ) -> float:
        return self._pool(plate, begin, length)

    def stack_aggregated(
        self,
        stack: Stack,
        begin: Optional[int] = None,
        length: Optional[int] = None
    ) -> Dict[str, float]:
        """Pooled statistic for each plate, keyed by plate label."""
        return {plate.label: self._pool(plate, begin, length) for plate in stack}

    # Equal bins

    def well_bins(
        self,
        well: Well,
        count: int,
        begin: Optional[int] = None,
        length: Optional[int] = None
    ) -> List[List[float]]:
        """
        Sorted well values split into ``count`` bins spanning equal value ranges.

        The maximum always falls in the last bin. When every value is equal
        they all fall in the first bin.

        Raises:
            ValueError: If ``count`` is below one or the selected data is empty
        """
        if count < 1:
            raise ValueError(f"Bin count must be at least 1, got {count}")
        values = self._values(well, begin, length)
        if values.size == 0:
            raise ValueError(f"Well {well.index} holds no data.")
        return _equal_bins(values, count)

    def set_bins(
        self,
        well_set: WellSet,
        count: int,
        begin: Optional[int] = None,
        length: Optional[int] = None
    ) -> Dict[Well, List[List[float]]]:
        return {
            well: self.well_bins(well, count, begin, length)
            for well in well_set if not well.is_empty()
        }

    def plate_bins(
        self,
        plate: Plate,
        count: int,
        begin: Optional[int] = None,
        length: Optional[int] = None
    ) -> Dict[Well, List[List[float]]]:
        return self.set_bins(plate.data_set(), count, begin, length)
