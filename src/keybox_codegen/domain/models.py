"""
Domain models: immutable values flowing through the extraction pipeline.

  keybox.xml → ManifestEntries (raw PEM text) → ConstantSlot × 4 → artifact

All models are frozen dataclasses. Slot naming lives here so the scanner,
the pipeline and the emitter agree on the fixed constant names.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from keybox_codegen.domain.result import Result

MANIFEST_FILENAME = "keybox.xml"
EC_ALGORITHM = "ecdsa"

CERTIFICATE_SLOT_COUNT = 3
PRIVATE_KEY_SLOT = "EC_PRIVATE_KEY"


def certificate_slot_name(ordinal: int) -> str:
    """Constant name for the 1-based certificate ordinal."""
    if not 1 <= ordinal <= CERTIFICATE_SLOT_COUNT:
        raise ValueError(f"Certificate ordinal must be 1..{CERTIFICATE_SLOT_COUNT}, got {ordinal}")
    return f"EC_CERTIFICATE_{ordinal}"


SLOT_NAMES: tuple[str, ...] = tuple(
    certificate_slot_name(i) for i in range(1, CERTIFICATE_SLOT_COUNT + 1)
) + (PRIVATE_KEY_SLOT,)


@dataclass(frozen=True, slots=True)
class ManifestEntries:
    """
    Raw text captured from EC-flagged Key elements of the manifest.

    `certificates` keeps every captured Certificate in document order;
    only the first CERTIFICATE_SLOT_COUNT are emitted. `private_key` is the
    last PrivateKey seen, or None when the manifest had none.
    """

    certificates: tuple[str, ...] = ()
    private_key: str | None = field(default=None, repr=False)

    def certificate(self, ordinal: int) -> str | None:
        """Captured text for the 1-based ordinal, or None when absent."""
        if 1 <= ordinal <= len(self.certificates):
            return self.certificates[ordinal - 1]
        return None

    @property
    def is_empty(self) -> bool:
        return not self.certificates and self.private_key is None


@dataclass(frozen=True, slots=True)
class ConstantSlot:
    """
    One named output constant and the outcome of decoding its entry.

    A failed `decoded` (missing entry or malformed base64) renders as an
    empty array; the failure stays inspectable for logging and tests.
    """

    name: str
    decoded: Result[bytes] = field(repr=False)

    @property
    def payload(self) -> bytes:
        return self.decoded.get_or_else(b"")

    @property
    def is_populated(self) -> bool:
        return len(self.payload) > 0
