"""Parameter sweeps that reuse a single weight draw.

Weights are sampled once from the config's weight seed; every (d, alpha)
cell of the sweep grid is calibrated against those same weights and
generated once per position seed.
"""

import logging
from dataclasses import dataclass

from girgs.config.generation import GirgConfig, SweepConfig
from girgs.graph.generator import Generator

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SweepRow:
    """Summary of one generated graph in a sweep."""

    n: int
    d: int
    alpha: float
    scaling: float
    position_seed: int
    edge_count: int
    average_degree: float


def run_sweep(config: GirgConfig) -> list[SweepRow]:
    """Generate one graph per (d, alpha, position seed) of the sweep grid.

    Args:
        config: Generation config; config.sweep defaults to SweepConfig().

    Returns:
        One SweepRow per generated graph, in grid order.
    """
    sweep = config.sweep if config.sweep is not None else SweepConfig()
    generator = Generator(metric=config.metric)
    generator.sample_weights(config.n, config.ple, config.weight_seed)

    rows: list[SweepRow] = []
    for d in sweep.d_values:
        for alpha in sweep.alpha_values:
            c = generator.calibrate(config.avg_degree, d, alpha)
            for position_seed in sweep.position_seeds:
                generator.sample_positions(config.n, d, position_seed)
                graph = generator.generate(alpha, config.sampling_seed)
                rows.append(
                    SweepRow(
                        n=config.n,
                        d=d,
                        alpha=alpha,
                        scaling=c,
                        position_seed=position_seed,
                        edge_count=graph.edge_count,
                        average_degree=graph.average_degree(),
                    )
                )
            log.info(
                "Sweep cell d=%d alpha=%s: c=%.6g over %d position seeds",
                d,
                alpha,
                c,
                len(sweep.position_seeds),
            )
    return rows
