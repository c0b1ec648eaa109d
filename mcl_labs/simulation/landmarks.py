"""Point landmarks and the map that holds them."""

from dataclasses import dataclass
from typing import Tuple

import numpy as np


@dataclass(frozen=True)
class Landmark:
    position: Tuple[float, float]
    id: int


class Map:
    """
    Ordered, append-only collection of landmarks.

    Landmark ids are assigned as the landmark count at insertion time, so they
    are dense, zero-based and equal to the insertion rank. Once the map is
    handed to a sensor it is frozen and shared by reference; further appends
    raise ``RuntimeError``.

    Examples
    --------
    >>> m = Map()
    >>> for position in [(-4.0, 2.0), (2.0, -3.0), (3.0, 3.0)]:
    ...     m.append_landmark(position)
    >>> [lm.id for lm in m.landmarks]
    [0, 1, 2]
    """

    def __init__(self, positions=()):
        self._landmarks = []
        self._frozen = False
        for position in positions:
            self.append_landmark(position)

    def append_landmark(self, position):
        if self._frozen:
            raise RuntimeError("Map is frozen: landmarks cannot be added after setup")
        x, y = (float(p) for p in position)
        landmark = Landmark(position=(x, y), id=len(self._landmarks))
        self._landmarks.append(landmark)
        return landmark

    def freeze(self):
        self._frozen = True
        return self

    @property
    def frozen(self):
        return self._frozen

    @property
    def landmarks(self):
        return tuple(self._landmarks)

    @property
    def positions(self):
        """Landmark positions as an array of shape (N, 2)."""
        return np.array([lm.position for lm in self._landmarks], dtype=float).reshape(
            -1, 2
        )

    def __len__(self):
        return len(self._landmarks)

    def __iter__(self):
        return iter(self._landmarks)
