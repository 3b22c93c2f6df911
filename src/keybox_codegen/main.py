"""
Application entry point: wires adapters into the pipeline and runs it once.

Composition root: the only place where concrete adapters are created.

Responsibilities:
  1. Load and validate configuration from the environment
  2. Configure structlog
  3. Run the pipeline with the manifest scanner and the Rust constant writer
  4. Map the Result to a process exit code
"""

from __future__ import annotations

import logging
import sys

import structlog
from pydantic import ValidationError

from keybox_codegen import __version__
from keybox_codegen.adapters.emitter import GENERATED_FILE_PATH, RustConstantWriter
from keybox_codegen.adapters.manifest_scanner import KeyboxManifestScanner
from keybox_codegen.config import AppSettings
from keybox_codegen.domain.result import FailureDescription
from keybox_codegen.pipeline import run_pipeline


def configure_structlog(log_level: str = "INFO") -> None:
    """
    Configure structlog for human-readable console output on stderr.

    stdout is left to the invoking build system.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def _report_failure(err: FailureDescription) -> int:
    log = structlog.get_logger()
    log.error("codegen.failed", code=err.code.value, error=err.message)
    if err.exception is not None:
        log.debug("codegen.failed.traceback", traceback=err.full_stack_trace())
    return 1


def main() -> None:
    """Regenerate the EC constants artifact; exit non-zero on any fatal error."""
    try:
        settings = AppSettings()
    except ValidationError as e:
        print(f"FATAL: Configuration error: {e}", file=sys.stderr)  # noqa: T201
        sys.exit(1)

    configure_structlog(settings.log_level)
    log = structlog.get_logger()

    log.info(
        "codegen.starting",
        version=__version__,
        keybox_path=str(settings.keybox_path),
        output=str(GENERATED_FILE_PATH),
    )

    result = run_pipeline(
        keybox_dir=settings.keybox_path,
        scanner=KeyboxManifestScanner(),
        writer=RustConstantWriter(GENERATED_FILE_PATH),
    )

    exit_code = result.either(
        on_success=lambda path: 0,
        on_failure=_report_failure,
    )
    if exit_code:
        sys.exit(exit_code)
    log.info("codegen.complete", output=str(GENERATED_FILE_PATH))


if __name__ == "__main__":
    main()
