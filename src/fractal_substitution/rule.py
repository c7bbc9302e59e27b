"""
Substitution Rule
Flat gene encoding of a conditional 3x3x3 rewrite over a color palette
"""

import numpy as np
from typing import Iterable, List, Tuple

from .exceptions import InvalidRepresentationError
from .palette import ColorPalette, EMPTY_COLOR, FULL_INTENSITY_COLOR

SUBCUBES = 27


class SubstitutionRule:
    """
    Immutable chromosome of len(palette) * 27 color genes.

    Gene `color_index * 27 + offset` is the color painted into sub-cube
    `offset` when the parent cube's nearest palette color is
    `palette[color_index]`.
    """

    def __init__(self, genes: Iterable[int], palette: ColorPalette):
        """
        Initialize rule.

        Args:
            genes: Gene values in flat order
            palette: Palette the rule is encoded against
        """
        genes = tuple(int(gene) for gene in genes)
        expected = len(palette) * SUBCUBES

        if len(genes) != expected:
            raise InvalidRepresentationError(
                f"Rule for a {len(palette)}-color palette needs {expected} genes, got {len(genes)}"
            )

        out_of_range = [gene for gene in genes if not EMPTY_COLOR <= gene <= FULL_INTENSITY_COLOR]
        if out_of_range:
            raise InvalidRepresentationError(
                f"Genes must be 24-bit colors, got {out_of_range[0]:#x}"
            )

        self._genes = genes
        self._palette = palette

    @classmethod
    def random(cls, palette: ColorPalette, rng: np.random.Generator) -> 'SubstitutionRule':
        """Rule with every gene drawn independently and uniformly from the palette."""
        indices = rng.integers(len(palette), size=len(palette) * SUBCUBES)
        return cls([palette[int(i)] for i in indices], palette)

    @classmethod
    def uniform(cls, palette: ColorPalette, color: int) -> 'SubstitutionRule':
        """Rule that paints every sub-cube with one color."""
        return cls([color] * (len(palette) * SUBCUBES), palette)

    @property
    def genes(self) -> Tuple[int, ...]:
        return self._genes

    @property
    def palette(self) -> ColorPalette:
        return self._palette

    def genes_for(self, color_index: int) -> Tuple[int, ...]:
        """The 27 genes applied when the parent maps to `color_index`."""
        start = color_index * SUBCUBES
        return self._genes[start:start + SUBCUBES]

    def with_gene(self, index: int, color: int) -> 'SubstitutionRule':
        """New rule with one gene replaced."""
        genes = list(self._genes)
        genes[index] = int(color)
        return SubstitutionRule(genes, self._palette)

    def with_genes(self, genes: Iterable[int]) -> 'SubstitutionRule':
        """New rule over the same palette."""
        return SubstitutionRule(genes, self._palette)

    def differing_positions(self, other: 'SubstitutionRule') -> List[int]:
        """Gene indices whose values differ between two rules."""
        if len(other) != len(self):
            raise InvalidRepresentationError("Cannot compare rules of different lengths")
        return [i for i, (a, b) in enumerate(zip(self._genes, other._genes)) if a != b]

    def to_list(self) -> List[int]:
        return list(self._genes)

    def __len__(self) -> int:
        return len(self._genes)

    def __getitem__(self, index):
        return self._genes[index]

    def __iter__(self):
        return iter(self._genes)

    def __eq__(self, other) -> bool:
        if not isinstance(other, SubstitutionRule):
            return NotImplemented
        return self._genes == other._genes and self._palette == other._palette

    def __hash__(self) -> int:
        return hash((self._genes, self._palette))

    def __repr__(self) -> str:
        return f"SubstitutionRule(genes={len(self._genes)}, palette={len(self._palette)})"
