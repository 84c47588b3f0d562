# tests/unit/validation/test_unit_content_validator.py — v1
"""Tests for validation/content_validator.py."""

from __future__ import annotations

import pytest

from widgetsmith.validation.content_validator import (
    EMPTY_CONTENT,
    MISSING_EXPORTS,
    MISSING_PROPS,
    MISSING_REACT,
    SERVICE_MARKUP,
    ContentValidator,
)

WIDGET = "src/components/widgets/PriceWidget.tsx"
SERVICE = "src/services/priceService.ts"


@pytest.fixture
def validator() -> ContentValidator:
    return ContentValidator()


class TestRules:
    @pytest.mark.parametrize("content", ["", "   ", "\n\t\n"])
    def test_blank(self, validator, content):
        result = validator.validate(WIDGET, content)
        assert result.valid is False
        assert result.reason == EMPTY_CONTENT

    def test_blank_non_source(self, validator):
        assert validator.validate("README.md", " ").reason == EMPTY_CONTENT

    def test_non_source_passes(self, validator):
        assert validator.validate("src/data/config.json", '{"a": 1}').valid is True

    def test_missing_export(self, validator):
        result = validator.validate("src/utils/format.ts", "const x = 1;")
        assert result.reason == MISSING_EXPORTS

    def test_types_dir_exempt_from_export(self, validator):
        assert validator.validate("src/types/price.ts", "type Price = number;").valid is True

    def test_widget_valid(self, validator, widget_source):
        assert validator.validate(WIDGET, widget_source).valid is True

    def test_widget_interface_is_enough(self, validator):
        content = "import React from 'react';\ninterface Props { a: string }\nexport const W = () => null;"
        assert validator.validate(WIDGET, content).valid is True

    def test_widget_missing_props(self, validator):
        content = "import React from 'react';\nexport const W = () => null;"
        assert validator.validate(WIDGET, content).reason == MISSING_PROPS

    def test_widget_missing_react(self, validator):
        content = "import { WidgetProps } from '../types';\nexport const W = (p: WidgetProps) => null;"
        assert validator.validate(WIDGET, content).reason == MISSING_REACT

    def test_widget_rules_only_for_tsx(self, validator):
        assert validator.validate("src/components/widgets/helpers.ts", "export const a = 1;").valid is True

    def test_service_valid(self, validator, service_source):
        assert validator.validate(SERVICE, service_source).valid is True

    def test_service_markup(self, validator):
        content = "export const render = () => <div />;"
        assert validator.validate(SERVICE, content).reason == SERVICE_MARKUP

    def test_service_generic_angle_bracket_rejected(self, validator):
        content = "export async function load(): Promise<number> { return 1; }"
        assert validator.validate(SERVICE, content).reason == SERVICE_MARKUP

    def test_service_missing_export_hits_export_rule_first(self, validator):
        assert validator.validate(SERVICE, "const a = 1;").reason == MISSING_EXPORTS

    def test_segment_match_not_substring(self, validator):
        content = "export const render = () => <div />;"
        assert validator.validate("src/myservices/view.tsx", content).valid is True

    def test_deterministic(self, validator, widget_source):
        assert validator.validate(WIDGET, widget_source) == validator.validate(WIDGET, widget_source)
