import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from arguments import parse_arguments


@pytest.fixture
def gfsr_state_path(tmp_path: Path) -> Path:
    return tmp_path / "INTEGER_GFSR.json"


@pytest.fixture
def parse(gfsr_state_path: Path):
    """Parse a flag string (program name prepended) with a pinned seed."""

    def _parse(flags: str, seed: int = 7):
        argv = ["onesamp"] + flags.split()
        return parse_arguments(argv, seed=seed, state_path=str(gfsr_state_path))

    return _parse


@pytest.fixture
def coalescent_flags() -> str:
    return "-rC -l50 -i30 -b10,20 -d1,5 -s -t100 -u1e-6,1e-5 -v0.04,4.0 -f0.05 -o0.8 -e"


@pytest.fixture
def raw_stats_flags() -> str:
    return "-rGFSR -l10 -i20 -s -o1.0 -w"


@pytest.fixture
def single_generation_flags() -> str:
    return "-rRESET -l5 -i4 -b4,4 -d0,0 -m2,3 -t10 -u0,0 -v0.01,0.01 -f0 -o0.5 -g"


@pytest.fixture
def microsat_genotypes() -> np.ndarray:
    # 4 individuals x 2 loci x 2 alleles (lengths in motif units)
    return np.array(
        [
            [[10, 12], [20, 20]],
            [[11, 11], [21, 19]],
            [[10, 13], [20, 22]],
            [[12, 12], [18, 20]],
        ],
        dtype=int,
    )
