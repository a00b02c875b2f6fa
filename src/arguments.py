from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Sequence, Set

from config import MSG_BOTTLENECK, LocusKind, OneSampConfig
from errors import (
    DEFAULT_PROGRAM_NAME,
    OneSampArgumentError,
    OneSampGeneralError,
    OneSampParseError,
    duplicate_flag_error,
)
from resolver import MODE_FLAGS, resolve
from rng import DEFAULT_GFSR_STATE_PATH, RandomSource, close_random_source, open_random_source
from tokens import (
    flag_letter,
    parse_keyword,
    parse_motif_lengths,
    parse_positive_double,
    parse_positive_double_pair,
    parse_positive_int,
    parse_positive_int_pair,
    payload,
)

logger = logging.getLogger(__name__)

RANDOM_SOURCES = {source.value: source for source in RandomSource}

# Flags sharing one entry in the seen set, and how a repeat is reported.
_LOCUS_KIND_KEY = "locus-kind"
_MODE_KEY = "mode"
_SHARED_KEYS = {
    "s": (_LOCUS_KIND_KEY, "-m and/or -s"),
    "m": (_LOCUS_KIND_KEY, "-m and/or -s"),
}
for _letter in MODE_FLAGS:
    _SHARED_KEYS[_letter] = (_MODE_KEY, "-x and/or -e and/or -w and/or -g and/or -p")


def _set_random_source(config: OneSampConfig, token: str, row: int) -> None:
    word = parse_keyword(token, RANDOM_SOURCES, row=row)
    config.random_source = RANDOM_SOURCES[word]


def _set_n_loci(config: OneSampConfig, token: str, row: int) -> None:
    config.n_loci = parse_positive_int(token)
    config.n_loci_allocation = config.n_loci


def _set_input_individuals(config: OneSampConfig, token: str, row: int) -> None:
    config.input_individuals = parse_positive_int(token)
    config.input_individuals_allocation = config.input_individuals
    config.final_individuals = config.input_individuals


def _is_even_at_least_two(value: Optional[int]) -> bool:
    return value is not None and value >= 2 and (value & 1) == 0


def _set_bottleneck(config: OneSampConfig, token: str, row: int) -> None:
    r = parse_positive_int_pair(token)
    if not (_is_even_at_least_two(r.lo) and _is_even_at_least_two(r.hi)):
        raise OneSampArgumentError(MSG_BOTTLENECK, config.program_name, flag="b")
    config.bottleneck_range = r.halved()


def _set_bottleneck_length(config: OneSampConfig, token: str, row: int) -> None:
    config.bottleneck_length_range = parse_positive_int_pair(token)


def _set_snp(config: OneSampConfig, token: str, row: int) -> None:
    config.locus_kind = LocusKind.SNP


def _set_microsatellite(config: OneSampConfig, token: str, row: int) -> None:
    config.locus_kind = LocusKind.MICROSATELLITE
    motif_lengths = parse_motif_lengths(token)
    if motif_lengths is not None:
        config.set_motif_lengths(motif_lengths)
        if not config.motif_lengths_valid:
            logger.warning("motif lengths %s include values other than 2, 3, 4, 6", motif_lengths)
    elif payload(token):
        logger.debug("ignoring non-numeric -m payload %r", payload(token))


def _set_iterations(config: OneSampConfig, token: str, row: int) -> None:
    config.iterations = parse_positive_int(token)


def _set_mutation_rate(config: OneSampConfig, token: str, row: int) -> None:
    config.mutation_rate_range = parse_positive_double_pair(token)


def _set_theta(config: OneSampConfig, token: str, row: int) -> None:
    config.theta_range = parse_positive_double_pair(token)


def _set_min_allele_frequency(config: OneSampConfig, token: str, row: int) -> None:
    config.min_allele_frequency = parse_positive_double(token)


def _set_omit_threshold(config: OneSampConfig, token: str, row: int) -> None:
    config.omit_threshold = parse_positive_double(token)


def _set_extrapolate(config: OneSampConfig, token: str, row: int) -> None:
    config.extrapolate_absent_data = True


def _set_mode(config: OneSampConfig, token: str, row: int) -> None:
    config.mode = MODE_FLAGS[flag_letter(token)]


FLAG_HANDLERS: Dict[str, Callable[[OneSampConfig, str, int], None]] = {
    "r": _set_random_source,
    "l": _set_n_loci,
    "i": _set_input_individuals,
    "b": _set_bottleneck,
    "d": _set_bottleneck_length,
    "s": _set_snp,
    "m": _set_microsatellite,
    "t": _set_iterations,
    "u": _set_mutation_rate,
    "v": _set_theta,
    "f": _set_min_allele_frequency,
    "o": _set_omit_threshold,
    "a": _set_extrapolate,
}
FLAG_HANDLERS.update({letter: _set_mode for letter in MODE_FLAGS})


def read_flags(config: OneSampConfig, args: Sequence[str]) -> None:
    """Apply each `-X<payload>` token to `config`; rows count from 1 like argv."""
    seen: Set[str] = set()
    for row, token in enumerate(args, start=1):
        if not token.startswith("-"):
            raise OneSampParseError(
                "Arguments to OneSamp must start with hyphens (got '{token}').",
                row=row,
                column=0,
                program_name=config.program_name,
                token=token,
            )
        letter = flag_letter(token)
        handler = FLAG_HANDLERS.get(letter)
        if handler is None:
            raise OneSampGeneralError(
                "Unknown flag passed in to OneSamp: {token}",
                config.program_name,
                token=token,
            )

        key, label = _SHARED_KEYS.get(letter, (letter, f"-{letter}"))
        if key in seen:
            raise duplicate_flag_error(letter, label, config.program_name)
        seen.add(key)

        handler(config, token, row)


def parse_arguments(
    argv: Sequence[str],
    config: Optional[OneSampConfig] = None,
    seed: Optional[int] = None,
    state_path: Optional[str] = DEFAULT_GFSR_STATE_PATH,
) -> OneSampConfig:
    """
    Build a resolved configuration from a full argv (program name first).

    The random source is opened after all flags are read; `seed` pins it for
    reproducible draws and `state_path` is where the GFSR register lives
    between runs.
    """
    if config is None:
        config = OneSampConfig()
    config.reset()
    config.program_name = argv[0] if argv else DEFAULT_PROGRAM_NAME

    read_flags(config, argv[1:])

    if config.random_source is not None:
        config.rng = open_random_source(
            config.random_source, seed=seed, state_path=state_path, program_name=config.program_name
        )
    resolve(config)
    return config


def flush_arguments(
    config: OneSampConfig,
    state_path: Optional[str] = DEFAULT_GFSR_STATE_PATH,
) -> None:
    """Release the parsed configuration; safe to call more than once."""
    if config.rng is not None and config.random_source is not None:
        close_random_source(config.rng, config.random_source, state_path=state_path)
    config.reset()
