"""Protocol for embedded-resource signature detectors."""

from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

import numpy as np

from modforge.models import CarvedKind


@dataclass(frozen=True)
class DetectorMatch:
    """A signature hit at a given offset.

    ``size`` is None when the detector cannot tell where the resource ends.
    """

    kind: CarvedKind
    size: Optional[int] = None


@runtime_checkable
class SignatureDetector(Protocol):
    """Protocol for signature detectors used by the carver.

    Detectors are tried in a fixed order at every candidate offset and the
    first match wins. Uses structural subtyping - no inheritance required.
    """

    @property
    def kind(self) -> CarvedKind:
        """Return the kind of resource this detector reports."""
        ...

    @property
    def lead_byte(self) -> int:
        """Return the first byte every match must start with."""
        ...

    def probe(self, data: np.ndarray, offset: int) -> Optional[DetectorMatch]:
        """Check for a match starting at ``offset``.

        The carver guarantees at least 16 readable bytes from ``offset``.
        Returns None when there is no match.
        """
        ...
