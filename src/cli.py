from __future__ import annotations

import logging
import sys
from typing import List, Optional

from arguments import flush_arguments, parse_arguments
from config import LocusKind, OneSampConfig
from errors import OneSampError
from io_utils import iteration_draws_frame
from rng import DEFAULT_GFSR_STATE_PATH

logger = logging.getLogger(__name__)

SUMMARY_ROWS = 5


def _print_summary(config: OneSampConfig) -> None:
    if config.is_syntax_check():
        print(f"{config.get_program_name()}: syntax check passed.")
        return

    print(f"\nMode: {config.mode.value}")
    print(f"Random source: {config.random_source.value if config.random_source else 'none'}")
    print(f"Loci: {config.n_loci} ({config.locus_kind.value})")
    print(f"Input individuals: {config.input_individuals}")
    print(f"Iterations: {len(config.draws)}")
    if config.locus_kind is LocusKind.MICROSATELLITE and config.motif_lengths:
        print(f"Motif lengths: {','.join(str(m) for m in config.motif_lengths)}")
    if config.draws:
        table = iteration_draws_frame(config.draws).dropna(axis="columns", how="all")
        print(f"\nDraws (first {min(SUMMARY_ROWS, len(table))} of {len(table)}):")
        print(table.head(SUMMARY_ROWS).to_string(index=False))


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    if argv is None:
        argv = sys.argv

    config = OneSampConfig()
    try:
        parse_arguments(argv, config, state_path=DEFAULT_GFSR_STATE_PATH)
        if not config.is_syntax_check() and config.locus_kind is LocusKind.MICROSATELLITE:
            config.check_motif_lengths()
    except OneSampError as err:
        sys.stderr.write(err.format_report())
        sys.stderr.flush()
        return 1

    _print_summary(config)
    flush_arguments(config, state_path=DEFAULT_GFSR_STATE_PATH)
    return 0


if __name__ == "__main__":
    sys.exit(main())
