"""
Manifest scanner adapter: pull-parse keybox.xml and capture EC credentials.

Implements the ManifestScanner port using defusedxml.pulldom: the manifest
is consumed as one flat forward stream of START_ELEMENT / CHARACTERS /
END_ELEMENT events, and an explicit state machine decides what to keep.

    state            event                      next state
    IDLE             <Key algorithm="ecdsa">    IN_EC_KEY
    IN_EC_KEY        <Certificate>              IN_CERTIFICATE
    IN_EC_KEY        <PrivateKey>               IN_PRIVATE_KEY
    IN_CERTIFICATE   </Certificate>             IN_EC_KEY
    IN_PRIVATE_KEY   </PrivateKey>              IN_EC_KEY
    any              </Key>                     IDLE

Text is only captured in IN_CERTIFICATE / IN_PRIVATE_KEY. Key elements
without the ecdsa marker never enter IN_EC_KEY, so anything nested in
them is ignored.
"""

from __future__ import annotations

from enum import Enum, auto
from pathlib import Path
from typing import BinaryIO
from xml.dom import pulldom
from xml.dom.minidom import Element
from xml.sax import SAXException

import structlog
from defusedxml import pulldom as safe_pulldom
from defusedxml.common import DefusedXmlException

from keybox_codegen.domain.models import EC_ALGORITHM, ManifestEntries
from keybox_codegen.domain.result import ErrorCode, Result

log = structlog.get_logger()

KEY_ELEMENT = "Key"
CERTIFICATE_ELEMENT = "Certificate"
PRIVATE_KEY_ELEMENT = "PrivateKey"
ALGORITHM_ATTRIBUTE = "algorithm"


class ScanState(Enum):
    IDLE = auto()
    IN_EC_KEY = auto()
    IN_CERTIFICATE = auto()
    IN_PRIVATE_KEY = auto()


def _is_ec_key(node: Element) -> bool:
    """True when the Key element carries algorithm="ecdsa"."""
    return any(
        attr.localName == ALGORITHM_ATTRIBUTE and attr.value == EC_ALGORITHM
        for attr in node.attributes.values()
    )


class _ScanMachine:
    """
    Mutable state for a single scan. One instance per manifest pass.

    Certificate text is buffered as a list of fragments per entry because
    the parser may split one text node across several CHARACTERS events.
    """

    def __init__(self) -> None:
        self.state = ScanState.IDLE
        self.elements = 0
        self._certificates: list[list[str]] = []
        self._private_key: list[str] | None = None

    def open(self, node: Element) -> None:
        self.elements += 1
        name = node.localName
        if name == KEY_ELEMENT:
            if _is_ec_key(node):
                self.state = ScanState.IN_EC_KEY
        elif name == CERTIFICATE_ELEMENT and self.state is ScanState.IN_EC_KEY:
            self._certificates.append([])
            self.state = ScanState.IN_CERTIFICATE
        elif name == PRIVATE_KEY_ELEMENT and self.state is ScanState.IN_EC_KEY:
            # Repeated PrivateKey elements overwrite: last one wins.
            self._private_key = []
            self.state = ScanState.IN_PRIVATE_KEY

    def text(self, data: str) -> None:
        if self.state is ScanState.IN_CERTIFICATE:
            self._certificates[-1].append(data)
        elif self.state is ScanState.IN_PRIVATE_KEY:
            assert self._private_key is not None
            self._private_key.append(data)

    def close(self, node: Element) -> None:
        name = node.localName
        if name == KEY_ELEMENT:
            self.state = ScanState.IDLE
        elif name == CERTIFICATE_ELEMENT and self.state is ScanState.IN_CERTIFICATE:
            self.state = ScanState.IN_EC_KEY
        elif name == PRIVATE_KEY_ELEMENT and self.state is ScanState.IN_PRIVATE_KEY:
            self.state = ScanState.IN_EC_KEY

    def entries(self) -> ManifestEntries:
        return ManifestEntries(
            certificates=tuple("".join(parts) for parts in self._certificates),
            private_key="".join(self._private_key) if self._private_key is not None else None,
        )


class KeyboxManifestScanner:
    """
    Scan a keybox manifest for EC certificates and the EC private key.

    Implements the ManifestScanner port.
    """

    def scan(self, manifest_path: Path) -> Result[ManifestEntries]:
        """
        Extract EC entries from the manifest at `manifest_path`.

        A manifest that cannot be opened means "no credentials provisioned"
        and returns Success with empty entries. Malformed XML returns
        Failure(PARSE_ERROR) so the build stops instead of emitting a
        partial artifact.
        """
        try:
            stream = open(manifest_path, "rb")  # noqa: SIM115
        except OSError as e:
            log.info("manifest.missing", path=str(manifest_path), reason=e.strerror)
            return Result.success(ManifestEntries())

        with stream:
            try:
                machine = self._scan_stream(stream)
            except (SAXException, DefusedXmlException) as e:
                log.error("manifest.malformed", path=str(manifest_path), error=str(e))
                return Result.failure(
                    ErrorCode.PARSE_ERROR,
                    f"Malformed manifest {manifest_path}: {e}",
                    e,
                )

        if machine.elements == 0:
            log.error("manifest.malformed", path=str(manifest_path), error="no root element")
            return Result.failure(ErrorCode.PARSE_ERROR, f"Malformed manifest {manifest_path}: no root element")

        entries = machine.entries()
        log.info(
            "scanner.complete",
            path=str(manifest_path),
            certificates=len(entries.certificates),
            private_key=entries.private_key is not None,
        )
        return Result.success(entries)

    def _scan_stream(self, stream: BinaryIO) -> _ScanMachine:
        """Drive the state machine over the event stream. May raise parse errors."""
        machine = _ScanMachine()
        for event, node in safe_pulldom.parse(stream):
            match event:
                case pulldom.START_ELEMENT:
                    machine.open(node)
                case pulldom.END_ELEMENT:
                    machine.close(node)
                case pulldom.CHARACTERS:
                    machine.text(node.data)
        return machine
