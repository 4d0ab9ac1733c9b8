"""Per-species admissible value sets."""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from .errors import InfeasibleModelError


def bits_to_values(bits: int) -> Tuple[int, ...]:
    """Expand a value bitmask into the sorted tuple of values it contains."""

    out: List[int] = []
    value = 0
    while bits:
        if bits & 1:
            out.append(value)
        bits >>= 1
        value += 1
    return tuple(out)


class BoundManager:
    """Admissible values for every species, stored as bitmasks.

    Bit ``v`` of ``masks[i]`` is set when species ``i`` may take value ``v``.
    Every species starts on ``[0, max_value]`` where ``max_value`` is the
    global maximum of the model; :meth:`bound_species` narrows that down to
    each species' own ceiling.
    """

    def __init__(self, species_count: int, max_value: int, *, names: Sequence[str] | None = None) -> None:
        if species_count < 0:
            raise ValueError(f"species_count must be >= 0, got {species_count!r}")
        if max_value < 0:
            raise ValueError(f"max_value must be >= 0, got {max_value!r}")
        if names is not None and len(names) != species_count:
            raise ValueError("names must list every species")
        self.species_count = species_count
        self.max_value = max_value
        self._full = (1 << (max_value + 1)) - 1
        self._masks: List[int] = [self._full] * species_count
        self._names: Tuple[str, ...] | None = tuple(names) if names is not None else None

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.species_count:
            raise IndexError(f"species index {index} out of range [0, {self.species_count})")

    def _name(self, index: int) -> str | None:
        return None if self._names is None else self._names[index]

    def name_species(self, names: Sequence[str]) -> None:
        """Attach species names used in error messages."""

        if len(names) != self.species_count:
            raise ValueError("names must list every species")
        self._names = tuple(names)

    def _narrow(self, index: int, mask: int, detail: str) -> None:
        narrowed = self._masks[index] & mask
        if not narrowed:
            raise InfeasibleModelError(index, detail, name=self._name(index))
        self._masks[index] = narrowed

    def bound_species(self, index: int, ceiling: int) -> None:
        """Restrict species ``index`` to values ``<= ceiling``."""

        self._check_index(index)
        if ceiling < 0:
            raise InfeasibleModelError(index, f"bound {ceiling} leaves no admissible value", name=self._name(index))
        self._narrow(index, (1 << (ceiling + 1)) - 1, f"bound {ceiling} leaves no admissible value")

    def restrict_species(self, index: int, values: Iterable[int]) -> None:
        """Intersect the admissible set of species ``index`` with ``values``."""

        self._check_index(index)
        mask = 0
        for value in values:
            if 0 <= value <= self.max_value:
                mask |= 1 << value
        self._narrow(index, mask, "restriction leaves no admissible value")

    def mask(self, index: int) -> int:
        return self._masks[index]

    def masks(self) -> Tuple[int, ...]:
        return tuple(self._masks)

    def admissible(self, index: int) -> Tuple[int, ...]:
        self._check_index(index)
        return bits_to_values(self._masks[index])

    def contains(self, index: int, value: int) -> bool:
        return value >= 0 and bool(self._masks[index] >> value & 1)

    def ceiling(self, index: int) -> int:
        self._check_index(index)
        return self._masks[index].bit_length() - 1

    def space_size(self) -> int:
        """Number of configurations in the product of the admissible sets."""

        size = 1
        for mask in self._masks:
            size *= mask.bit_count()
        return size


__all__ = ["BoundManager", "bits_to_values"]
