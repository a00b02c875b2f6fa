from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass, field
from typing import Generic, List, Optional, Tuple, TypeVar, Union

import numpy as np

from errors import OneSampArgumentError, OneSampGeneralError
from rng import RandomSource

T = TypeVar("T", int, float)

ALLOWED_MOTIF_LENGTHS = (2, 3, 4, 6)

# Recommended theta range is [THETA_LOW_FACTOR * mu_min, THETA_HIGH_FACTOR * mu_max].
THETA_LOW_FACTOR = 4000
THETA_HIGH_FACTOR = 400000


@dataclass(frozen=True)
class Range(Generic[T]):
    lo: Optional[T]
    hi: Optional[T]

    @property
    def is_complete(self) -> bool:
        return self.lo is not None and self.hi is not None

    def halved(self) -> "Range":
        return Range(self.lo // 2, self.hi // 2)


class Unused(enum.Enum):
    UNUSED = "unused"


UNUSED = Unused.UNUSED


class LocusKind(enum.Enum):
    SNP = "snp"
    MICROSATELLITE = "microsatellite"


class Mode(enum.Enum):
    FULL = "full"
    SYNTAX_CHECK = "syntax-check"
    COALESCENT_EXAMPLE = "coalescent-example"
    RAW_STATS = "raw-stats"
    SINGLE_GENERATION = "single-generation"
    EXAMPLE_POPULATION = "example-population"


@dataclass(frozen=True)
class IterationParams:
    bottleneck_size: int
    bottleneck_length: Optional[int] = None
    theta: Optional[float] = None
    mutation_rate: Optional[float] = None


MSG_RANDOM_SOURCE = (
    "{program}: argument -r, flag to determine source of random numbers, must be -rGFSR "
    "(for GFSR values), -rRESET (for GFSR values with a reset of the GFSR register), "
    "or -rC (for values from C's random number generator)"
)
MSG_N_LOCI = "{program}: argument -l, num of unlinked polymorphic loci, must be a positive integer."
MSG_INPUT_INDIVIDUALS = "{program}: argument -i, num of input samples, must be a positive integer."
MSG_BOTTLENECK = (
    "{program}: argument -b, num of individuals in bottleneck generation, "
    "must be a positive even integer at least 2"
)
MSG_BOTTLENECK_LENGTH = (
    "{program}: argument -d, duration of bottleneck generations, must be a nonnegative integer"
)
MSG_MUTATION_RATE = (
    "{program}: argument -u, mutation rate during simulation, must be a nonnegative real number"
)
MSG_THETA = (
    "{program}: argument -v, theta value, must be a positive real number. Recommended input "
    "based on choices of mutation rate and bottleneck min and max: -v{theta_min:e},{theta_max:e}"
)
MSG_LOCUS_KIND = "{program}: argument -s or -m, SNPs or microsatellites loci, not specified."
MSG_ITERATIONS = "{program}: argument -t, number of repetitions, must be a positive integer."
MSG_MIN_ALLELE_FREQUENCY = (
    "{program}: argument -f, minimum proportion of mutated alleles, is either missing or not "
    "a floating point number between 0 and 0.5"
)
MSG_OMIT_THRESHOLD = (
    "{program}: argument -o, minimum proportion of individuals with completely specified "
    "genotypes for loci to be included in computation, is either missing or not a floating "
    "point number between 0 and 1"
)
MSG_MOTIF_LENGTHS = (
    "{program}: argument -m, microsatellite motif lengths, must be a comma separated list "
    "of 2, 3, 4 or 6"
)


@dataclass
class OneSampConfig:
    """
    Settings read from the command line, plus the per-iteration draws made
    from them.

    Raw fields hold None while unset. The `get_*` accessors are the checked
    way to read them: each returns a valid value or raises
    OneSampArgumentError naming the flag to fix.
    """

    program_name: Optional[str] = None
    random_source: Optional[RandomSource] = None
    n_loci: Optional[int] = None
    n_loci_allocation: Optional[int] = None
    input_individuals: Optional[int] = None
    input_individuals_allocation: Optional[int] = None
    final_individuals: Optional[int] = None
    # Stored halved: -b10,20 is kept as (5, 10).
    bottleneck_range: Optional[Range] = None
    bottleneck_length_range: Union[Range, Unused, None] = None
    mutation_rate_range: Optional[Range] = None
    theta_range: Optional[Range] = None
    locus_kind: Optional[LocusKind] = None
    iterations: Optional[int] = None
    min_allele_frequency: Optional[float] = None
    omit_threshold: Optional[float] = None
    extrapolate_absent_data: bool = False
    mode: Mode = Mode.FULL
    motif_lengths: List[int] = field(default_factory=list)
    motif_lengths_valid: bool = True
    draws: List[IterationParams] = field(default_factory=list)
    proportion_missing_data: float = 0.0
    rng: Optional[np.random.Generator] = field(default=None, repr=False, compare=False)

    def reset(self) -> None:
        for f in dataclasses.fields(self):
            if f.default_factory is not dataclasses.MISSING:
                setattr(self, f.name, f.default_factory())
            else:
                setattr(self, f.name, f.default)

    def _fail(self, template: str, **values) -> OneSampArgumentError:
        return OneSampArgumentError(template, self.program_name, **values)

    # Scalars

    def get_program_name(self) -> str:
        return self.program_name

    def get_random_source(self) -> RandomSource:
        if self.random_source is None:
            raise self._fail(MSG_RANDOM_SOURCE)
        return self.random_source

    def get_n_loci(self) -> int:
        if self.n_loci is None or self.n_loci <= 0:
            raise self._fail(MSG_N_LOCI)
        return self.n_loci

    def get_n_loci_allocation(self) -> Optional[int]:
        return self.n_loci_allocation

    def get_input_individuals(self) -> int:
        if self.input_individuals is None or self.input_individuals <= 0:
            raise self._fail(MSG_INPUT_INDIVIDUALS)
        return self.input_individuals

    def get_input_individuals_allocation(self) -> Optional[int]:
        return self.input_individuals_allocation

    def get_final_individuals(self) -> Optional[int]:
        return self.final_individuals

    def get_locus_kind(self) -> LocusKind:
        if self.locus_kind is None:
            raise self._fail(MSG_LOCUS_KIND)
        return self.locus_kind

    def get_iterations(self) -> int:
        if self.iterations is None or self.iterations <= 0:
            raise self._fail(MSG_ITERATIONS)
        return self.iterations

    def get_min_allele_frequency(self) -> float:
        value = self.min_allele_frequency
        if value is None or not (0 <= value <= 0.5):
            raise self._fail(MSG_MIN_ALLELE_FREQUENCY)
        return value

    def get_omit_locus_threshold(self) -> float:
        value = self.omit_threshold
        if value is None or not (0 <= value <= 1):
            raise self._fail(MSG_OMIT_THRESHOLD)
        return value

    def get_fill_in_absent_data(self) -> bool:
        return self.extrapolate_absent_data

    # Ranges and per-iteration draws

    def _checked_bottleneck(self) -> Range:
        if self.bottleneck_range is None or not self.bottleneck_range.is_complete:
            raise self._fail(MSG_BOTTLENECK)
        return self.bottleneck_range

    def _checked_bottleneck_length(self) -> Range:
        r = self.bottleneck_length_range
        if not isinstance(r, Range) or not r.is_complete:
            raise self._fail(MSG_BOTTLENECK_LENGTH)
        return r

    def _checked_mutation_rate(self) -> Range:
        r = self.mutation_rate_range
        if r is None or not r.is_complete:
            raise self._fail(MSG_MUTATION_RATE)
        return r

    def _checked_theta(self) -> Range:
        # Fetch the ranges the recommendation depends on first, so their own
        # errors are reported before the theta one.
        self._checked_mutation_rate()
        self._checked_bottleneck()
        r = self.theta_range
        if r is None or not r.is_complete or r.lo <= 0 or r.hi <= 0:
            recommended = self.recommended_theta_range()
            raise OneSampArgumentError(
                MSG_THETA,
                self.program_name,
                recommended=recommended,
                theta_min=recommended[0],
                theta_max=recommended[1],
            )
        return r

    def recommended_theta_range(self) -> Tuple[float, float]:
        mutation_rate = self._checked_mutation_rate()
        return THETA_LOW_FACTOR * mutation_rate.lo, THETA_HIGH_FACTOR * mutation_rate.hi

    def _draw(self, sample: int, name: str):
        if not self.draws:
            raise OneSampGeneralError(
                "{program}: no per-iteration parameters have been drawn ({mode} mode).",
                self.program_name,
                mode=self.mode.value,
            )
        if not 0 <= sample < len(self.draws):
            raise OneSampGeneralError(
                "{program}: iteration {sample} is outside 0..{last}.",
                self.program_name,
                sample=sample,
                last=len(self.draws) - 1,
            )
        value = getattr(self.draws[sample], name)
        if value is None:
            raise OneSampGeneralError(
                "{program}: {name} is not drawn in {mode} mode.",
                self.program_name,
                name=name,
                mode=self.mode.value,
            )
        return value

    def get_bottleneck_min(self) -> int:
        return self._checked_bottleneck().lo

    def get_bottleneck_max(self) -> int:
        return self._checked_bottleneck().hi

    def get_bottleneck(self, sample: int) -> int:
        self._checked_bottleneck()
        return self._draw(sample, "bottleneck_size")

    def get_bottleneck_length_min(self) -> int:
        return self._checked_bottleneck_length().lo

    def get_bottleneck_length_max(self) -> int:
        return self._checked_bottleneck_length().hi

    def get_bottleneck_length(self, sample: int) -> int:
        self._checked_bottleneck_length()
        return self._draw(sample, "bottleneck_length")

    def get_mutation_rate_min(self) -> float:
        return self._checked_mutation_rate().lo

    def get_mutation_rate_max(self) -> float:
        return self._checked_mutation_rate().hi

    def get_mutation_rate(self, sample: int) -> float:
        self._checked_mutation_rate()
        return self._draw(sample, "mutation_rate")

    def get_theta_min(self) -> float:
        return self._checked_theta().lo

    def get_theta_max(self) -> float:
        return self._checked_theta().hi

    def get_theta(self, sample: int) -> float:
        self._checked_theta()
        return self._draw(sample, "theta")

    # Modes

    def is_syntax_check(self) -> bool:
        return self.mode is Mode.SYNTAX_CHECK

    def is_example(self) -> bool:
        return self.mode is Mode.COALESCENT_EXAMPLE

    def is_raw_stats(self) -> bool:
        return self.mode is Mode.RAW_STATS

    def is_single_generation(self) -> bool:
        return self.mode is Mode.SINGLE_GENERATION

    def is_example_population(self) -> bool:
        return self.mode is Mode.EXAMPLE_POPULATION

    # State changes made after the empirical data is read

    def set_n_loci(self, size: int) -> None:
        """Record the locus count left after filtering; never above the parsed count."""
        allocation = self.n_loci_allocation
        if size <= 0 or (allocation is not None and size > allocation):
            raise OneSampGeneralError(
                "{program}: locus count {size} must be between 1 and {allocation}.",
                self.program_name,
                size=size,
                allocation=allocation,
            )
        self.n_loci = size

    def set_input_individuals(self, size: int) -> None:
        if size <= 0:
            raise OneSampGeneralError(
                "{program}: input individual count {size} must be positive.",
                self.program_name,
                size=size,
            )
        self.input_individuals = size
        self.final_individuals = size

    def get_motif_lengths(self) -> List[int]:
        return self.motif_lengths

    def set_motif_lengths(self, motif_lengths: List[int]) -> None:
        motif_lengths = [int(m) for m in motif_lengths]
        self.motif_lengths_valid = all(m in ALLOWED_MOTIF_LENGTHS for m in motif_lengths)
        self.motif_lengths = motif_lengths

    def check_motif_lengths(self) -> List[int]:
        if not self.motif_lengths_valid:
            raise self._fail(MSG_MOTIF_LENGTHS)
        return self.motif_lengths

    def get_motif_length(self, locus: int) -> int:
        idx = locus % self.get_n_loci()
        if idx >= len(self.motif_lengths):
            raise self._fail(MSG_MOTIF_LENGTHS)
        return self.motif_lengths[idx]

    def get_proportion_missing_data(self) -> float:
        return self.proportion_missing_data

    def set_proportion_missing_data(self, value: float) -> None:
        if not (0 <= value <= 1):
            raise OneSampGeneralError(
                "{program}: proportion of missing data {value} must be between 0 and 1.",
                self.program_name,
                value=value,
            )
        self.proportion_missing_data = float(value)
