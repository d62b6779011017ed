"""SchemeValidationReport model and Markdown report generation."""

from __future__ import annotations

import json
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from surveycore.topology.models import CorrectionSuggestion, TopologyError, TopologyOptions


class TopologySummary(BaseModel):
    total_errors: int = 0
    total_warnings: int = 0
    total_notices: int = 0
    total_geometries: int = 0
    total_area: float = 0.0
    """Sum of unit areas in m²."""


class ValidationMetadata(BaseModel):
    validated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    duration_ms: float = 0.0
    options: TopologyOptions = Field(default_factory=TopologyOptions)


class SchemeValidationReport(BaseModel):
    """Topology validation outcome for a whole scheme."""

    is_valid: bool = False
    """True when no error-severity finding exists."""

    errors: list[TopologyError] = Field(default_factory=list)
    warnings: list[TopologyError] = Field(default_factory=list)
    notices: list[TopologyError] = Field(default_factory=list)
    """Informational findings such as permitted shared walls."""

    suggestions: list[CorrectionSuggestion] = Field(default_factory=list)
    summary: TopologySummary = Field(default_factory=TopologySummary)
    validation_metadata: ValidationMetadata = Field(default_factory=ValidationMetadata)

    def findings(self) -> list[TopologyError]:
        return self.errors + self.warnings + self.notices

    def to_markdown(self) -> str:
        """Render the report as a Markdown document."""
        lines: list[str] = []
        meta = self.validation_metadata

        lines.append("# Scheme Topology Report")
        lines.append("")
        lines.append(f"**Status:** {'VALID' if self.is_valid else 'INVALID'}")
        lines.append(f"**Validated:** {meta.validated_at.strftime('%Y-%m-%d %H:%M UTC')}")
        lines.append(f"**Duration:** {meta.duration_ms:.1f} ms")
        lines.append("")

        s = self.summary
        lines.append(
            f"**Summary:** {s.total_geometries} sections, {s.total_area:.4f} m², "
            f"{s.total_errors} errors, {s.total_warnings} warnings, {s.total_notices} notices"
        )
        lines.append("")

        findings = self.findings()
        if findings:
            lines.append("## Findings")
            lines.append("")
            lines.append("| Severity | Type | Sections | Message | Suggestion |")
            lines.append("|----------|------|----------|---------|------------|")
            for f in findings:
                msg = f.message.replace("|", "\\|")
                sug = f.suggestion.description.replace("|", "\\|") if f.suggestion else ""
                sections = ", ".join(f.affected_sections)
                lines.append(
                    f"| {f.severity.upper()} | {f.type.value} | {sections} | {msg} | {sug} |"
                )
            lines.append("")
        else:
            lines.append("No findings. Scheme passes all topology checks.")
            lines.append("")

        return "\n".join(lines)

    def to_json(self) -> str:
        """Return structured JSON report."""
        return json.dumps(self.model_dump(mode="json"), indent=2, default=str)
