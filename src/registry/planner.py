# src/registry/planner.py — v1
"""Declarative registration plans for a generated widget.

Derives, from a widget type and title alone, the edits the host project
needs to expose the new widget: container wiring, the widget-type union and
the widget library catalog. The plans are records to be applied by a human
or a separate tool; host files are never touched here.
"""

from __future__ import annotations

from widgetsmith.core.conventions import widget_component_name
from widgetsmith.core.models import RegistryChange, RegistryUpdatePlan, RegistryUpdateRecord

CONTAINER_FILE = "src/components/WidgetContainer.tsx"
TYPES_FILE = "src/types/widget.ts"
LIBRARY_FILE = "src/components/WidgetLibrary.tsx"

DEFAULT_ICON = "Bot"
DEFAULT_CATEGORY = "AI Generated"


class RegistryPlanner:
    """Pure derivation of RegistryUpdatePlan records."""

    def plan_registration(self, widget_type: str, widget_title: str) -> RegistryUpdatePlan:
        return RegistryUpdatePlan(
            widget_type=widget_type,
            container=self._container_record(widget_type, widget_title),
            types=self._types_record(widget_type),
            library=self._library_record(widget_type, widget_title),
        )

    @staticmethod
    def _container_record(widget_type: str, widget_title: str) -> RegistryUpdateRecord:
        component = widget_component_name(widget_title)
        import_path = f"./widgets/{component}"
        return RegistryUpdateRecord(
            file=CONTAINER_FILE,
            changes=[
                RegistryChange(
                    type="import",
                    line=f"import {{ {component} }} from '{import_path}';",
                ),
                RegistryChange(
                    type="case",
                    line=(
                        f"case '{widget_type}': return <{component} {{...widgetProps}} "
                        "isExpanded={isExpanded} onToggleExpanded={onToggleExpanded} />;"
                    ),
                ),
            ],
        )

    @staticmethod
    def _types_record(widget_type: str) -> RegistryUpdateRecord:
        return RegistryUpdateRecord(
            file=TYPES_FILE,
            changes=[RegistryChange(type="type_addition", line=f"| '{widget_type}'")],
        )

    @staticmethod
    def _library_record(widget_type: str, widget_title: str) -> RegistryUpdateRecord:
        return RegistryUpdateRecord(
            file=LIBRARY_FILE,
            changes=[
                RegistryChange(
                    type="template_addition",
                    data={
                        "type": widget_type,
                        "title": widget_title,
                        "description": f"AI-generated {widget_title.lower()}",
                        "icon": DEFAULT_ICON,
                        "category": DEFAULT_CATEGORY,
                    },
                )
            ],
        )
