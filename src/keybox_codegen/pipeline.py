"""
Pipeline: orchestrates manifest → slots → generated artifact.

All I/O is injected via ports (Protocol interfaces). The stages are joined
with flat_map, so the first fatal failure short-circuits the rest:

  resolve_manifest_path(keybox_dir)
    → scanner.scan(path)
      → build_slots(entries)        (per-entry decode, never fails)
        → writer.write(slots)

Fatal outcomes: missing or non-UTF-8 location, malformed XML, write failure.
Per-slot decode failures are recovered as empty constants.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from keybox_codegen.adapters.pem import decode_pem, describe_certificate
from keybox_codegen.domain.models import (
    CERTIFICATE_SLOT_COUNT,
    MANIFEST_FILENAME,
    PRIVATE_KEY_SLOT,
    ConstantSlot,
    ManifestEntries,
    certificate_slot_name,
)
from keybox_codegen.domain.ports import ConstantWriter, ManifestScanner
from keybox_codegen.domain.result import ErrorCode, Result

log = structlog.get_logger()


def resolve_manifest_path(keybox_dir: Path | None) -> Result[Path]:
    """
    Locate keybox.xml inside the configured directory.

    Fails with CONFIGURATION_ERROR when no directory was given or when the
    resulting path cannot be represented as UTF-8 text. No I/O happens here.
    """

    def _join(directory: Path) -> Result[Path]:
        path = Path(directory) / MANIFEST_FILENAME
        try:
            str(path).encode("utf-8")
        except UnicodeEncodeError as e:
            return Result.failure(
                ErrorCode.CONFIGURATION_ERROR,
                f"Manifest path is not valid UTF-8: {path!r}",
                e,
            )
        return Result.success(path)

    return Result.from_optional(
        keybox_dir,
        "Keybox location is not configured (KEYBOX_PATH)",
        ErrorCode.CONFIGURATION_ERROR,
    ).flat_map(_join)


def _decode_entry(name: str, text: str | None) -> Result[bytes]:
    return Result.from_optional(text, f"No manifest entry for {name}").flat_map(decode_pem)


def _log_slot(slot: ConstantSlot, inspect: bool) -> None:
    if slot.decoded.is_success():
        subject = describe_certificate(slot.payload) if inspect and slot.is_populated else None
        log.info("slot.decoded", slot=slot.name, size=len(slot.payload), subject=subject)
        return
    err = slot.decoded.error()
    if err.code is ErrorCode.DECODE_ERROR:
        log.warning("slot.decode_failed", slot=slot.name, error=err.message)
    else:
        log.debug("slot.empty", slot=slot.name, reason=err.message)


def build_slots(entries: ManifestEntries) -> list[ConstantSlot]:
    """
    Decode captured entries into the four fixed slots.

    Each entry is decoded independently; certificates beyond the third are
    dropped. The private key is never inspected or logged beyond its size.
    """
    slots = []
    for ordinal in range(1, CERTIFICATE_SLOT_COUNT + 1):
        name = certificate_slot_name(ordinal)
        slot = ConstantSlot(name=name, decoded=_decode_entry(name, entries.certificate(ordinal)))
        _log_slot(slot, inspect=True)
        slots.append(slot)

    if len(entries.certificates) > CERTIFICATE_SLOT_COUNT:
        log.info(
            "slot.certificates_dropped",
            captured=len(entries.certificates),
            emitted=CERTIFICATE_SLOT_COUNT,
        )

    private_key = ConstantSlot(
        name=PRIVATE_KEY_SLOT,
        decoded=_decode_entry(PRIVATE_KEY_SLOT, entries.private_key),
    )
    _log_slot(private_key, inspect=False)
    slots.append(private_key)
    return slots


def run_pipeline(
    keybox_dir: Path | None,
    scanner: ManifestScanner,
    writer: ConstantWriter,
) -> Result[Path]:
    """
    Regenerate the constants artifact from the manifest in `keybox_dir`.

    Returns Success(path of the written artifact), or the Failure from the
    first fatal stage.
    """
    return (
        resolve_manifest_path(keybox_dir)
        .flat_map(scanner.scan)
        .map(build_slots)
        .flat_map(writer.write)
    )
