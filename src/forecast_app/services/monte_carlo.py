"""Risk sweep over perturbed forecasts.

Despite the name, sampling is a deterministic linear sweep: run ``i`` of
``n`` uses ``variation = (i / n - 0.5) * 2`` scaled by fixed bands, so two
batches over the same configuration are identical.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

from ..errors import SimulationCancelled
from ..models.configuration import BusinessConfiguration
from ..models.scenario import HistogramBucket, MonteCarloSample, MonteCarloSummary, SensitivityParams
from .calculator import ForecastCalculator
from .sensitivity import rerun_with_delta, simplified_projection

logger = logging.getLogger(__name__)

HISTOGRAM_BUCKETS = 10


def variation_factor(index: int, runs: int) -> float:
    return (index / runs - 0.5) * 2


class MonteCarloSampler:
    def __init__(self, calculator: Optional[ForecastCalculator] = None, workers: int = 1) -> None:
        self.calculator = calculator or ForecastCalculator()
        self.workers = max(1, workers)

    def run_samples(
        self,
        config: BusinessConfiguration,
        runs: int,
        rerun: bool = True,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[MonteCarloSample]:
        if runs <= 0:
            return []
        logger.debug("Running %d risk samples for %r with %d workers", runs, config.name, self.workers)
        if self.workers == 1:
            samples: List[MonteCarloSample] = []
            for index in range(runs):
                if cancel_event is not None and cancel_event.is_set():
                    raise SimulationCancelled(len(samples), runs)
                samples.append(self._sample(config, index, runs, rerun))
            return samples

        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            futures = [executor.submit(self._sample, config, index, runs, rerun) for index in range(runs)]
            samples = []
            for future in futures:
                if cancel_event is not None and cancel_event.is_set():
                    for pending in futures:
                        pending.cancel()
                    raise SimulationCancelled(len(samples), runs)
                samples.append(future.result())
            return samples

    def _sample(self, config: BusinessConfiguration, index: int, runs: int, rerun: bool) -> MonteCarloSample:
        params = SensitivityParams.from_variation(variation_factor(index, runs))
        if rerun:
            model = rerun_with_delta(config, params, self.calculator)
        else:
            model = simplified_projection(config, params)
        final = model.final_projection()
        return MonteCarloSample(
            run=index + 1,
            final_revenue=final.total_revenue,
            final_profit=final.profit,
            final_users=final.users,
            ltv=final.ltv,
            params=params,
        )


def risk_level(profitability_rate: float) -> str:
    if profitability_rate >= 0.8:
        return "Low"
    if profitability_rate >= 0.6:
        return "Medium"
    return "High"


def revenue_histogram(revenues: Sequence[float], buckets: int = HISTOGRAM_BUCKETS) -> List[HistogramBucket]:
    if not revenues:
        return []
    low, high = min(revenues), max(revenues)
    size = (high - low) / buckets
    counts = [0] * buckets
    for revenue in revenues:
        index = int((revenue - low) // size) if size > 0 else 0
        counts[min(index, buckets - 1)] += 1
    return [
        HistogramBucket(lower=low + i * size, upper=low + (i + 1) * size, count=count)
        for i, count in enumerate(counts)
    ]


def summarize(samples: Sequence[MonteCarloSample]) -> MonteCarloSummary:
    if not samples:
        return MonteCarloSummary(
            runs=0,
            mean_revenue=0.0,
            mean_profit=0.0,
            profitable_runs=0,
            profitability_rate=0.0,
            risk_level=risk_level(0.0),
            histogram=[],
        )
    revenues = [sample.final_revenue for sample in samples]
    profits = [sample.final_profit for sample in samples]
    profitable = sum(1 for profit in profits if profit > 0)
    rate = profitable / len(samples)
    return MonteCarloSummary(
        runs=len(samples),
        mean_revenue=sum(revenues) / len(revenues),
        mean_profit=sum(profits) / len(profits),
        profitable_runs=profitable,
        profitability_rate=rate,
        risk_level=risk_level(rate),
        histogram=revenue_histogram(revenues),
    )
