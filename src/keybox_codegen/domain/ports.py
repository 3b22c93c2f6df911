"""
Ports: Protocol interfaces for the pipeline's two I/O boundaries.

  Domain ← Ports (protocols) ← Adapters (implementations)

The pipeline depends only on these contracts, so tests can inject fakes
and the composition root chooses the concrete adapters.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from keybox_codegen.domain.models import ConstantSlot, ManifestEntries
from keybox_codegen.domain.result import Result


@runtime_checkable
class ManifestScanner(Protocol):
    """
    Port: extract EC certificate and private-key text from a manifest file.

    A manifest that cannot be opened is an expected state and yields
    Success(ManifestEntries()). Malformed XML yields Failure(PARSE_ERROR).
    """

    def scan(self, manifest_path: Path) -> Result[ManifestEntries]: ...


@runtime_checkable
class ConstantWriter(Protocol):
    """
    Port: render the four constant slots and persist the artifact.

    Returns the written path, or Failure(IO_ERROR) when the write fails.
    """

    def write(self, slots: Sequence[ConstantSlot]) -> Result[Path]: ...
