"""
Constant emitter adapter: render slots as Rust byte-array constants.

Implements the ConstantWriter port. Output shape (stable across runs):

    // Auto-generated constants

    pub const EC_CERTIFICATE_1: &[u8] = &[
        0x30, 0x82, 0x01, 0x0a, 0x02, 0x82, 0x01, 0x01, 0x00, 0xc4,
        0x5e,
    ];

    pub const EC_CERTIFICATE_2: &[u8] = &[];
    ...

The whole artifact is rendered in memory before the file is opened, so a
rendering problem never leaves a truncated file behind.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import structlog

from keybox_codegen.domain.models import ConstantSlot
from keybox_codegen.domain.result import ErrorCode, Result

log = structlog.get_logger()

GENERATED_FILE_PATH = Path("src/ec_constants.rs")
GENERATED_HEADER = "// Auto-generated constants"
BYTES_PER_ROW = 10
_INDENT = "    "


def format_bytes(data: bytes, per_row: int = BYTES_PER_ROW) -> list[str]:
    """Lay out bytes as indented rows of `0xNN,` values, `per_row` per line."""
    return [
        _INDENT + " ".join(f"0x{byte:02x}," for byte in data[start : start + per_row])
        for start in range(0, len(data), per_row)
    ]


def render_declaration(slot: ConstantSlot) -> str:
    """One `pub const` declaration; empty payloads render as `&[]`."""
    payload = slot.payload
    if not payload:
        return f"pub const {slot.name}: &[u8] = &[];"
    rows = "\n".join(format_bytes(payload))
    return f"pub const {slot.name}: &[u8] = &[\n{rows}\n];"


def render_constants(slots: Sequence[ConstantSlot]) -> str:
    """Header comment, then each declaration followed by a blank line."""
    lines = [GENERATED_HEADER, ""]
    for slot in slots:
        lines.append(render_declaration(slot))
        lines.append("")
    return "\n".join(lines)


class RustConstantWriter:
    """
    Write rendered constants to a fixed output path.

    The file is truncated and rewritten on every run; there is no merge with
    previous content.
    """

    def __init__(self, output_path: Path = GENERATED_FILE_PATH) -> None:
        self._output_path = Path(output_path)

    @property
    def output_path(self) -> Path:
        return self._output_path

    def write(self, slots: Sequence[ConstantSlot]) -> Result[Path]:
        """
        Render and write the artifact.

        Returns Success(output_path), or Failure(IO_ERROR) when the file
        cannot be written.
        """
        content = render_constants(slots)
        return (
            Result.from_computation(
                lambda: self._write_text(content),
                ErrorCode.IO_ERROR,
                f"Failed to write generated constants to {self._output_path}",
            )
            .peek(
                lambda path: log.info(
                    "emitter.written",
                    path=str(path),
                    populated=[slot.name for slot in slots if slot.is_populated],
                )
            )
            .peek_failure(lambda err: log.error("emitter.write_failed", error=err.message))
        )

    def _write_text(self, content: str) -> Path:
        with open(self._output_path, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)
        return self._output_path
