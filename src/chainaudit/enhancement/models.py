"""Request/response types exchanged with the AI collaborator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Protocol, runtime_checkable

from chainaudit.core.analyzer.models import Finding


@dataclass(frozen=True)
class EnhancementRequest:
    """What the collaborator is told about one finding.

    Attributes:
        name: Detector name of the finding.
        type: The finding's type code.
        code_snippet: Source excerpt around the finding.
        line_number: 1-based line, 0 when not localized.
    """

    name: str
    type: str
    code_snippet: str
    line_number: int

    @classmethod
    def from_finding(cls, finding: Finding) -> EnhancementRequest:
        return cls(
            name=finding.name,
            type=finding.type,
            code_snippet=finding.code_snippet,
            line_number=finding.line_number,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "codeSnippet": self.code_snippet,
            "lineNumber": self.line_number,
        }


@dataclass(frozen=True)
class EnhancementResponse:
    """Richer descriptive text for one finding. Every field may be absent."""

    enhanced_description: str | None = None
    exploitation_scenario: str | None = None
    recommendation: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> EnhancementResponse:
        """Build from the collaborator's camelCase JSON object.

        Non-string and blank values are treated as missing.
        """

        def text(key: str) -> str | None:
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
            return None

        return cls(
            enhanced_description=text("enhancedDescription"),
            exploitation_scenario=text("exploitationScenario"),
            recommendation=text("recommendation"),
        )

    def apply_to(self, finding: Finding) -> None:
        """Merge into ``finding``; missing fields keep the finding's text."""
        finding.apply_enhancement(
            description=self.enhanced_description,
            exploitation_scenario=self.exploitation_scenario,
            recommendation=self.recommendation,
        )


@runtime_checkable
class VulnerabilityEnhancer(Protocol):
    """Anything that can enrich a finding's text asynchronously.

    Implementations raise ``EnhancementError`` (or any exception) on
    failure; the orchestrator keeps the original text in that case.
    """

    async def enhance(self, request: EnhancementRequest) -> EnhancementResponse:
        ...
