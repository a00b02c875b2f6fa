from __future__ import annotations

from typing import Callable, Tuple

import numpy as np

from config import OneSampConfig

# Starting allele length used when dumping an example population.
EXAMPLE_POPULATION_ALLELE_LENGTH = 192

GenotypeLoader = Callable[[int, int], Tuple[int, int]]


def genotype_loader(genotypes: np.ndarray) -> GenotypeLoader:
    """
    Adapt an (individuals, loci, 2) allele-length array to the
    `load_initial_genotype(individual, locus)` interface.
    """
    genotypes = np.asarray(genotypes)
    if genotypes.ndim != 3 or genotypes.shape[2] != 2:
        raise ValueError(f"Expected an (individuals, loci, 2) genotype array, got shape {genotypes.shape}.")

    def load_initial_genotype(individual: int, locus: int) -> Tuple[int, int]:
        a1, a2 = genotypes[individual, locus]
        return int(a1), int(a2)

    return load_initial_genotype


def init_microsat_a(config: OneSampConfig, locus: int, load_initial_genotype: GenotypeLoader) -> int:
    """Mean allele length at `locus` over the input sample, rounded to the nearest integer."""
    if config.is_example_population():
        return EXAMPLE_POPULATION_ALLELE_LENGTH

    idx = locus % config.get_n_loci()
    n = config.get_input_individuals()
    total = 0
    for individual in range(n):
        a1, a2 = load_initial_genotype(individual, idx)
        total += a1 + a2
    # Halves round up: floor(mean + 1/2) in exact integer arithmetic. No motif-scaled
    # offset is added, so the result can differ by one from older simulator builds.
    return (total + n) // (2 * n)


def init_microsat_b(config: OneSampConfig, locus: int, load_initial_genotype: GenotypeLoader) -> int:
    """A second, distinct starting allele: one motif longer than `init_microsat_a`."""
    return init_microsat_a(config, locus, load_initial_genotype) + config.get_motif_length(locus)
