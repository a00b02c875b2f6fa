from __future__ import annotations

import enum
import logging
from typing import Optional

import numpy as np

from errors import OneSampGeneralError
from io_utils import load_gfsr_state, save_gfsr_state

logger = logging.getLogger(__name__)

# Reference seed of the MT19937 register; used whenever the register is reset.
DEFAULT_GFSR_SEED = 5489
DEFAULT_GFSR_STATE_PATH = "INTEGER_GFSR.json"

MSG_GFSR_STATE = "{program}: cannot restore the GFSR register from {path}: {reason}"


class RandomSource(enum.Enum):
    C = "C"
    GFSR = "GFSR"
    GFSR_RESET = "RESET"

    @property
    def uses_gfsr(self) -> bool:
        return self is not RandomSource.C


def open_random_source(
    source: RandomSource,
    seed: Optional[int] = None,
    state_path: Optional[str] = DEFAULT_GFSR_STATE_PATH,
    program_name: Optional[str] = None,
) -> np.random.Generator:
    """
    Build the generator behind a `-r` selection.

    C      -> numpy's default generator, seeded from the OS unless `seed` is given.
    GFSR   -> MT19937, continuing from the register stored at `state_path`.
    RESET  -> MT19937, reseeded and ignoring any stored register.
    """
    if not source.uses_gfsr:
        return np.random.default_rng(seed)

    if source is RandomSource.GFSR and seed is None and state_path is not None:
        try:
            state = load_gfsr_state(state_path)
            if state is not None:
                bit_generator = np.random.MT19937()
                bit_generator.state = state
        except (TypeError, ValueError) as exc:
            raise OneSampGeneralError(
                MSG_GFSR_STATE, program_name, path=state_path, reason=exc
            ) from exc
        if state is not None:
            logger.debug("restored GFSR register from %s", state_path)
            return np.random.Generator(bit_generator)

    register_seed = DEFAULT_GFSR_SEED if seed is None else seed
    logger.debug("seeding GFSR register with %d", register_seed)
    return np.random.Generator(np.random.MT19937(register_seed))


def close_random_source(
    rng: np.random.Generator,
    source: RandomSource,
    state_path: Optional[str] = DEFAULT_GFSR_STATE_PATH,
) -> None:
    if not source.uses_gfsr or state_path is None:
        return
    save_gfsr_state(state_path, rng.bit_generator.state)
    logger.debug("stored GFSR register in %s", state_path)
