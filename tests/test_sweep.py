"""Tests for parameter sweeps over one weight draw."""

import math

import numpy as np
import pytest

from girgs.calibration.degree import calibrate
from girgs.config.generation import GirgConfig, SweepConfig
from girgs.sampling.weights import sample_weights
from girgs.sweep import run_sweep


@pytest.fixture(scope="module")
def sweep_config() -> GirgConfig:
    return GirgConfig(
        n=300,
        avg_degree=8.0,
        sweep=SweepConfig(
            d_values=(1, 2),
            alpha_values=(math.inf, 2.0),
            position_seeds=(1, 2),
        ),
    )


class TestRunSweep:
    """run_sweep covers the grid in order and calibrates once per cell."""

    def test_grid_order(self, sweep_config: GirgConfig) -> None:
        rows = run_sweep(sweep_config)
        cells = [(row.d, row.alpha, row.position_seed) for row in rows]
        assert cells == [
            (1, math.inf, 1),
            (1, math.inf, 2),
            (1, 2.0, 1),
            (1, 2.0, 2),
            (2, math.inf, 1),
            (2, math.inf, 2),
            (2, 2.0, 1),
            (2, 2.0, 2),
        ]

    def test_scaling_shared_within_cell(self, sweep_config: GirgConfig) -> None:
        rows = run_sweep(sweep_config)
        weights = sample_weights(300, sweep_config.ple, sweep_config.weight_seed)
        for row in rows:
            assert row.n == 300
            assert row.scaling == pytest.approx(calibrate(weights, row.d, row.alpha, 8.0))

    def test_average_degree_near_target(self, sweep_config: GirgConfig) -> None:
        rows = run_sweep(sweep_config)
        mean_degree = np.mean([row.average_degree for row in rows])
        assert abs(mean_degree - 8.0) < 1.0
        for row in rows:
            assert row.average_degree == pytest.approx(2.0 * row.edge_count / 300)

    def test_reproducible(self, sweep_config: GirgConfig) -> None:
        assert run_sweep(sweep_config) == run_sweep(sweep_config)

    def test_default_grid(self) -> None:
        rows = run_sweep(GirgConfig(n=100, avg_degree=5.0))
        assert len(rows) == 9
        assert {row.d for row in rows} == {1, 2, 3}
