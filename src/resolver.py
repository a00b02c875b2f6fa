from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

import numpy as np

from config import UNUSED, IterationParams, Mode, OneSampConfig, Range
from errors import OneSampArgumentError, OneSampGeneralError
from sampling import INTEGER_QUANTUM, RATE_QUANTUM, draw_many, quantized_steps

logger = logging.getLogger(__name__)

MSG_MISSING_OPERATION = (
    "{program}: missing an operation to perform on the input file: -x (syntax check operation), "
    "-w (compute statistics of input sample), -g (simulate a single generation from an input "
    "population and display to standard out), -p (dump out an example population with known "
    "effective population size), or -e (compute stats of coalescent sample after a few "
    "generations have passed)"
)

MODE_FLAGS: Dict[str, Mode] = {
    "x": Mode.SYNTAX_CHECK,
    "e": Mode.COALESCENT_EXAMPLE,
    "w": Mode.RAW_STATS,
    "g": Mode.SINGLE_GENERATION,
    "p": Mode.EXAMPLE_POPULATION,
}

MSG_RANGE_TOO_WIDE = (
    "{program}: argument -{flag}, range {lo:g},{hi:g} holds more than {limit} draws at a "
    "step of {quantum:g}; narrow the range"
)

# Largest step count rng.integers can sample from as int64.
MAX_STEPS = int(np.iinfo(np.int64).max) - 1

# Drawn parameters, in the order their vectors are filled:
# name -> (range accessors on the config, quantum, flag letter)
DRAWN_PARAMETERS: Dict[str, Tuple[str, str, float, str]] = {
    "bottleneck_size": ("get_bottleneck_min", "get_bottleneck_max", INTEGER_QUANTUM, "b"),
    "bottleneck_length": ("get_bottleneck_length_min", "get_bottleneck_length_max", INTEGER_QUANTUM, "d"),
    "theta": ("get_theta_min", "get_theta_max", RATE_QUANTUM, "v"),
    "mutation_rate": ("get_mutation_rate_min", "get_mutation_rate_max", RATE_QUANTUM, "u"),
}

CHECKS: Dict[str, Callable[[OneSampConfig], object]] = {
    "locus_kind": lambda c: c.get_locus_kind(),
    "iterations": lambda c: c.get_iterations(),
    "n_loci": lambda c: c.get_n_loci(),
    "input_individuals": lambda c: c.get_input_individuals(),
    "omit_threshold": lambda c: c.get_omit_locus_threshold(),
    "bottleneck": lambda c: c.get_bottleneck(0),
    "bottleneck_length": lambda c: c.get_bottleneck_length(0),
    "mutation_rate": lambda c: c.get_mutation_rate(0),
    "random_source": lambda c: c.get_random_source(),
    "theta": lambda c: c.get_theta(0),
}


@dataclass(frozen=True)
class ModeDescriptor:
    mode: Mode
    draws: Tuple[str, ...] = ()
    checks: Tuple[str, ...] = ()
    needs_random_source: bool = True
    forced_iterations: Optional[int] = None
    # Raw statistics keep the input sample as is: two bottleneck individuals, no duration.
    degenerate_bottleneck: bool = False


_SIMULATING_DRAWS = ("bottleneck_size", "bottleneck_length", "theta", "mutation_rate")
_SIMULATING_CHECKS = (
    "locus_kind",
    "iterations",
    "n_loci",
    "input_individuals",
    "omit_threshold",
    "bottleneck",
    "bottleneck_length",
    "mutation_rate",
    "random_source",
    "theta",
)

MODE_DESCRIPTORS: Dict[Mode, ModeDescriptor] = {
    Mode.SYNTAX_CHECK: ModeDescriptor(Mode.SYNTAX_CHECK, needs_random_source=False),
    Mode.RAW_STATS: ModeDescriptor(
        Mode.RAW_STATS,
        draws=("bottleneck_size",),
        checks=("locus_kind", "n_loci", "input_individuals", "omit_threshold"),
        needs_random_source=False,
        forced_iterations=1,
        degenerate_bottleneck=True,
    ),
    Mode.SINGLE_GENERATION: ModeDescriptor(
        Mode.SINGLE_GENERATION,
        draws=("bottleneck_size", "mutation_rate"),
        checks=("n_loci", "input_individuals", "mutation_rate", "bottleneck", "locus_kind", "random_source"),
        forced_iterations=1,
    ),
    Mode.COALESCENT_EXAMPLE: ModeDescriptor(
        Mode.COALESCENT_EXAMPLE, draws=_SIMULATING_DRAWS, checks=_SIMULATING_CHECKS
    ),
    Mode.EXAMPLE_POPULATION: ModeDescriptor(
        Mode.EXAMPLE_POPULATION, draws=_SIMULATING_DRAWS, checks=_SIMULATING_CHECKS
    ),
}


def draw_parameter(
    config: OneSampConfig,
    name: str,
    size: int,
    rng: Optional[np.random.Generator],
) -> np.ndarray:
    min_accessor, max_accessor, quantum, flag = DRAWN_PARAMETERS[name]
    lo = getattr(config, min_accessor)()
    hi = getattr(config, max_accessor)()
    if hi > MAX_STEPS or quantized_steps(lo, hi, quantum) > MAX_STEPS:
        raise OneSampArgumentError(
            MSG_RANGE_TOO_WIDE,
            config.program_name,
            flag=flag,
            lo=lo,
            hi=hi,
            limit=MAX_STEPS,
            quantum=quantum,
        )
    return draw_many(lo, hi, quantum, size, rng)


def _apply_overrides(config: OneSampConfig, descriptor: ModeDescriptor) -> None:
    if descriptor.forced_iterations is not None:
        config.iterations = descriptor.forced_iterations
    if descriptor.degenerate_bottleneck:
        config.final_individuals = config.input_individuals
        config.bottleneck_length_range = UNUSED
        config.bottleneck_range = Range(2, 2).halved()


def resolve_mode(config: OneSampConfig) -> ModeDescriptor:
    if config.mode is Mode.FULL:
        raise OneSampGeneralError(MSG_MISSING_OPERATION, config.program_name)
    return MODE_DESCRIPTORS[config.mode]


def resolve(config: OneSampConfig, rng: Optional[np.random.Generator] = None) -> ModeDescriptor:
    """
    Expand the parsed ranges into per-iteration draws for the selected mode,
    then run the mode's checks.

    `rng` defaults to `config.rng`. Modes that need a random source check for
    one before drawing anything.
    """
    descriptor = resolve_mode(config)
    if descriptor.mode is Mode.SYNTAX_CHECK:
        logger.info("syntax check only: no parameters drawn")
        return descriptor

    if descriptor.needs_random_source:
        config.get_random_source()
    if rng is None:
        rng = config.rng

    _apply_overrides(config, descriptor)
    iterations = config.get_iterations()

    vectors = {
        name: draw_parameter(config, name, iterations, rng)
        for name in DRAWN_PARAMETERS
        if name in descriptor.draws
    }

    draws = []
    for i in range(iterations):
        values = {name: vec[i].item() for name, vec in vectors.items()}
        draws.append(IterationParams(**values))
        logger.debug("iteration %d: %s", i, draws[-1])
    config.draws = draws

    for check in descriptor.checks:
        CHECKS[check](config)

    logger.info(
        "%s mode: %d iteration(s), drew %s",
        descriptor.mode.value,
        iterations,
        ", ".join(descriptor.draws),
    )
    return descriptor
