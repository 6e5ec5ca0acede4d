"""
Coverage uploader — best-effort post-test step.

Finds the test binaries left in the build-output directory, runs the
instrumentation tool against each one, then hands the collected output
to the upload command. Nothing in here can fail a run: per-artifact
errors are collected on the report and an upload failure is logged as
a warning.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from orchestra.adapters.base import ExecutionContext
from orchestra.adapters.registry import AdapterRegistry
from orchestra.core.errors import UploadError
from orchestra.core.models.workspace import CoverageSettings

logger = logging.getLogger(__name__)


@dataclass
class CoverageReport:
    """Outcome of one coverage pass."""

    artifacts: list[str] = field(default_factory=list)
    instrumented: list[str] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)
    uploaded: bool = False
    upload_error: str | None = None

    def to_dict(self) -> dict:
        return {
            "artifacts": self.artifacts,
            "instrumented": self.instrumented,
            "failures": self.failures,
            "uploaded": self.uploaded,
            "upload_error": self.upload_error,
        }


def is_test_artifact(path: Path) -> bool:
    """Executable, suffix-less regular file (a compiled test binary)."""
    return path.is_file() and not path.suffix and os.access(path, os.X_OK)


class CoverageUploader:
    """Instrument test binaries and upload the result.

    Args:
        registry: Dispatches to the ``shell`` adapter.
        settings: Directories and command templates.
        workspace_root: Base for the relative directories in ``settings``.
        env: Extra environment for the external commands.
    """

    def __init__(
        self,
        registry: AdapterRegistry,
        settings: CoverageSettings,
        workspace_root: Path,
        env: Mapping[str, str] | None = None,
    ):
        self.registry = registry
        self.settings = settings
        self.workspace_root = workspace_root
        self.env = dict(env or {})

    @property
    def artifacts_dir(self) -> Path:
        return self.workspace_root / self.settings.artifacts_dir

    @property
    def output_dir(self) -> Path:
        return self.workspace_root / self.settings.output_dir

    def collect_artifacts(self) -> list[Path]:
        """Test binaries directly inside the artifacts directory, sorted."""
        if not self.artifacts_dir.is_dir():
            logger.warning("No build artifacts at %s", self.artifacts_dir)
            return []
        return sorted(p for p in self.artifacts_dir.iterdir() if is_test_artifact(p))

    def _render(self, template: list[str], artifact: Path | None = None) -> list[str]:
        values = {
            "artifact": str(artifact) if artifact else "",
            "artifact_name": artifact.name if artifact else "",
            "output_dir": str(self.output_dir),
        }
        return [part.format(**values) for part in template]

    def _context(self, action_id: str, command: list[str]) -> ExecutionContext:
        return ExecutionContext(
            action_id=action_id,
            command=command,
            workspace_root=str(self.workspace_root),
            env=self.env,
        )

    def instrument(self, artifacts: list[Path]) -> CoverageReport:
        """Run the instrumentation command once per artifact."""
        report = CoverageReport(artifacts=[a.name for a in artifacts])

        for artifact in artifacts:
            command = self._render(self.settings.command, artifact)
            receipt = self.registry.execute(
                "shell", self._context(f"coverage:{artifact.name}", command)
            )
            if receipt.ok:
                report.instrumented.append(artifact.name)
            else:
                report.failures[artifact.name] = receipt.error or "instrumentation failed"
                logger.warning("Coverage failed for %s: %s", artifact.name, receipt.error)

        return report

    def upload(self, report: CoverageReport) -> None:
        """Upload collected coverage.

        Raises:
            UploadError: if there is nothing to upload or the uploader fails.
        """
        if not report.instrumented:
            raise UploadError("No coverage data to upload")

        command = self._render(self.settings.upload_command)
        receipt = self.registry.execute("shell", self._context("coverage:upload", command))
        if receipt.failed:
            raise UploadError(f"Coverage upload failed: {receipt.error}")
        report.uploaded = True

    def run(self) -> CoverageReport:
        """Collect, instrument and upload. Never raises UploadError."""
        artifacts = self.collect_artifacts()
        report = self.instrument(artifacts)
        logger.info(
            "Coverage: %d/%d artifacts instrumented",
            len(report.instrumented),
            len(report.artifacts),
        )

        try:
            self.upload(report)
        except UploadError as e:
            report.upload_error = str(e)
            logger.warning("%s", e)
        else:
            logger.info("Coverage uploaded from %s", self.output_dir)

        return report
