"""
Test helpers: Result assertions, manifest builders and an artifact reader.
"""

from __future__ import annotations

import re
import textwrap
from collections.abc import Sequence
from pathlib import Path
from typing import Any, TypeVar

from keybox_codegen.domain.result import ErrorCode, FailureDescription, Result

T = TypeVar("T")


class ResultAssertions:
    """Expressive test assertions for Result values."""

    @staticmethod
    def assert_success(result: Result[T], message: str = "") -> T:
        """Assert the Result is a Success and return the value."""
        context = f" ({message})" if message else ""
        assert result.is_success(), (
            f"Expected Success but got Failure("
            f"{result.error().code.value}: {result.error().message!r}){context}"
        )
        return result.value()

    @staticmethod
    def assert_failure(
        result: Result[T],
        expected_code: ErrorCode | None = None,
    ) -> FailureDescription:
        """Assert the Result is a Failure, optionally checking the error code."""
        assert result.is_failure(), f"Expected Failure but got Success({result.value()!r})"
        error = result.error()
        if expected_code is not None:
            assert error.code == expected_code, (
                f"Expected error code {expected_code.value} "
                f"but got {error.code.value}: {error.message!r}"
            )
        return error

    @staticmethod
    def assert_success_value(result: Result[T], expected_value: Any) -> None:
        value = ResultAssertions.assert_success(result)
        assert value == expected_value, f"Expected success value {expected_value!r} but got {value!r}"


# ─────────────────────── Manifest builders ───────────────────────


def pem_block(body: str, label: str = "CERTIFICATE") -> str:
    """Wrap a base64 body in BEGIN/END delimiter lines, 64 chars per line."""
    lines = textwrap.wrap(body, 64) or [""]
    return "\n".join([f"-----BEGIN {label}-----", *lines, f"-----END {label}-----"])


def key_element(
    certificates: Sequence[str] = (),
    private_key: str | None = None,
    algorithm: str | None = "ecdsa",
) -> str:
    """Render one <Key> element with PEM text children."""
    attr = f' algorithm="{algorithm}"' if algorithm is not None else ""
    parts = [f"<Key{attr}>"]
    if private_key is not None:
        parts.append(f'<PrivateKey format="pem">\n{private_key}\n</PrivateKey>')
    if certificates:
        parts.append(f"<CertificateChain><NumberOfCertificates>{len(certificates)}</NumberOfCertificates>")
        parts.extend(f'<Certificate format="pem">\n{cert}\n</Certificate>' for cert in certificates)
        parts.append("</CertificateChain>")
    parts.append("</Key>")
    return "\n".join(parts)


def manifest_xml(*keys: str) -> str:
    """Wrap Key elements in the usual AndroidAttestation/Keybox envelope."""
    body = "\n".join(keys)
    return (
        '<?xml version="1.0"?>\n'
        "<AndroidAttestation>\n"
        "<NumberOfKeyboxes>1</NumberOfKeyboxes>\n"
        '<Keybox DeviceID="test-device">\n'
        f"{body}\n"
        "</Keybox>\n"
        "</AndroidAttestation>\n"
    )


def write_manifest(directory: Path, content: str) -> Path:
    path = directory / "keybox.xml"
    path.write_text(content, encoding="utf-8")
    return path


# ─────────────────────── Artifact reader ───────────────────────

_DECLARATION = re.compile(r"pub const (?P<name>\w+): &\[u8\] = &\[(?P<body>.*?)\];", re.DOTALL)


def parse_constants(text: str) -> dict[str, bytes]:
    """Read back the byte constants from a generated artifact, in order."""
    return {
        match["name"]: bytes(int(token, 16) for token in re.findall(r"0x[0-9a-f]{2}", match["body"]))
        for match in _DECLARATION.finditer(text)
    }
