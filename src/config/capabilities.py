# src/config/capabilities.py — v1
"""Catalog of what the host dashboard already provides.

Rendered into the analysis prompt so the model scopes its answer to what is
buildable. The data sources are described only; the pipeline never calls
them.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DataSource:
    """A read API wrapper available to generated service code."""

    name: str
    provides: str


@dataclass(frozen=True)
class HostCapabilities:
    """Frameworks, UI primitives and data sources of the host app."""

    platform: str
    stack: tuple[str, ...]
    data_sources: tuple[DataSource, ...]

    def describe(self) -> str:
        """Bullet list used inside prompts."""
        lines = [f"- {item}" for item in self.stack]
        if self.data_sources:
            sources = ", ".join(f"{s.name} ({s.provides})" for s in self.data_sources)
            lines.append(f"- Financial APIs: {sources}")
        return "\n".join(lines)

    def describe_data_sources(self) -> str:
        return "\n".join(f"- {s.name} API for {s.provides}" for s in self.data_sources)

    @property
    def data_source_names(self) -> list[str]:
        return [s.name for s in self.data_sources]


DEFAULT_CAPABILITIES = HostCapabilities(
    platform="BusinessOS financial dashboard",
    stack=(
        "React 18 + TypeScript",
        "Tailwind CSS + shadcn/ui components",
        "Existing widget system with WidgetProps interface",
        "Chart library: Recharts",
        "State management: React hooks + TanStack Query",
    ),
    data_sources=(
        DataSource("FMP", "company profiles, quotes, financial statements, symbol search"),
        DataSource("Polygon", "real-time snapshots and aggregate bars"),
        DataSource("Benzinga", "analyst ratings and news"),
    ),
)
