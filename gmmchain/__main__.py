"""
Description:
    Command-line interface to run one headless chain from a YAML config.
    USE THE CORRECT ENVIRONMENT:  gmmchain

Author: John Gallagher
Created: 2026-10-19
Last Modified: 2026-10-19
Version: 0.1
"""

import argparse
import logging
from pathlib import Path

from .chain import Chain, sample
from .config import AppConfig, load_app_config
from .logs import setup_logging
from .metrics import summarize_chain
from .rng import JaxRandomSource

logger = logging.getLogger("gmmchain")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="gmmchain", description="Run one headless gmmchain sampler from a YAML config.")
    parser.add_argument("--config", type=Path, default=None)
    parser.add_argument("--algorithm", type=str, default=None, help="mh, gibbs, hmc or nuts")
    parser.add_argument("--samples", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    cfg = AppConfig() if args.config is None else load_app_config(args.config)
    setup_logging(cfg.logging.level, cfg.logging.rich_tracebacks)

    algorithm = args.algorithm or cfg.run.algorithm
    n = cfg.run.samples if args.samples is None else args.samples
    seed = cfg.run.seed if args.seed is None else args.seed

    chain = Chain(current=cfg.run.start)
    sample(chain, n, algorithm, cfg.sampler, cfg.components, JaxRandomSource(seed))
    if chain.total >= 1:
        summary = summarize_chain(chain)
        logger.info("mean = %s", summary.mean)
        logger.info("cov =\n%s", summary.cov)


if __name__ == "__main__":
    main()
