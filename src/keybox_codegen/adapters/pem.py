"""
PEM adapter: turn captured PEM text into raw bytes.

  captured text
    → normalize_pem(): drop -----BEGIN/-----END lines, join the body
    → decode_pem(): strict base64 → Result[bytes]

Decoding never raises. A malformed block becomes Failure(DECODE_ERROR)
so one corrupt credential cannot stop the other slots from being emitted.
"""

from __future__ import annotations

import base64

import structlog
from cryptography import x509

from keybox_codegen.domain.result import ErrorCode, Result

log = structlog.get_logger()

PEM_BEGIN_PREFIX = "-----BEGIN"
PEM_END_PREFIX = "-----END"


def _is_delimiter(line: str) -> bool:
    return line.startswith(PEM_BEGIN_PREFIX) or line.startswith(PEM_END_PREFIX)


def normalize_pem(text: str) -> str:
    """
    Concatenate the non-delimiter lines of a PEM block.

    Only lines that begin with a delimiter prefix are dropped. The remaining
    lines are joined as they are, so indentation survives into the body and
    fails the base64 decode. Empty or delimiter-only input yields "".
    """
    return "".join(line for line in text.splitlines() if not _is_delimiter(line))


def decode_pem(text: str) -> Result[bytes]:
    """
    Decode a captured PEM block to bytes.

    Returns Success(bytes) (possibly empty) or Failure(DECODE_ERROR) when the
    body is not valid standard base64.
    """
    body = normalize_pem(text).strip()
    return Result.from_computation(
        lambda: base64.b64decode(body, validate=True),
        ErrorCode.DECODE_ERROR,
        "Invalid base64 in PEM block",
    )


def describe_certificate(der_bytes: bytes) -> str | None:
    """
    Subject of a DER certificate as an RFC 4514 string, for build logs.

    This does not verify anything. Bytes that do not load as an X.509
    certificate return None.
    """
    try:
        cert = x509.load_der_x509_certificate(der_bytes)
        return cert.subject.rfc4514_string()
    except ValueError:
        log.debug("certificate.unreadable", size=len(der_bytes))
        return None
