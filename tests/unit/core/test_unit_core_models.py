# tests/unit/core/test_unit_core_models.py — v1
"""Tests for core/models.py — request, model-output and report types."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from widgetsmith.core.models import (
    AIAnalysis,
    FileError,
    GenerationRequest,
    ImplementationPlan,
    RunReport,
    WriteResult,
)


def _analysis(**overrides):
    data = {
        "complexity": "Simple",
        "estimatedTime": "1 hour",
        "requiredAPIs": [],
        "components": ["Card"],
        "risks": [],
        "widgetType": "price-card",
        "widgetTitle": "Price Card",
        "description": "Latest price",
    }
    data.update(overrides)
    return data


def _plan(steps, total=None):
    return {"steps": steps, "totalSteps": len(steps) if total is None else total}


def _step(n, files=("src/a.ts",)):
    return {"step": n, "description": f"step {n}", "files": list(files), "estimated_duration": "5 min"}


class TestGenerationRequest:
    def test_accepts_wire_names(self):
        req = GenerationRequest.model_validate(
            {"userPrompt": "make a chart", "companyContext": {"symbol": "MSFT", "name": "Microsoft", "industry": "Software"}}
        )
        assert req.user_prompt == "make a chart"
        assert req.company_context.symbol == "MSFT"

    def test_blank_prompt_rejected(self):
        with pytest.raises(ValidationError):
            GenerationRequest(user_prompt="   ")

    def test_frozen(self):
        req = GenerationRequest(user_prompt="x")
        with pytest.raises(ValidationError):
            req.user_prompt = "y"


class TestAIAnalysis:
    def test_valid(self):
        a = AIAnalysis.model_validate(_analysis())
        assert a.widget_type == "price-card"
        assert a.required_apis == []

    def test_complexity_enum(self):
        with pytest.raises(ValidationError):
            AIAnalysis.model_validate(_analysis(complexity="Trivial"))

    def test_widget_type_must_be_kebab_case(self):
        with pytest.raises(ValidationError, match="kebab-case"):
            AIAnalysis.model_validate(_analysis(widgetType="PriceCard"))

    def test_extra_field_rejected(self):
        with pytest.raises(ValidationError):
            AIAnalysis.model_validate(_analysis(color="blue"))

    def test_no_type_coercion(self):
        with pytest.raises(ValidationError):
            AIAnalysis.model_validate(_analysis(components="Card"))

    def test_missing_field_rejected(self):
        data = _analysis()
        del data["risks"]
        with pytest.raises(ValidationError):
            AIAnalysis.model_validate(data)


class TestImplementationPlan:
    def test_valid(self):
        plan = ImplementationPlan.model_validate(_plan([_step(1), _step(2, ["src/b.tsx"])]))
        assert plan.total_steps == 2
        assert plan.file_paths() == ["src/a.ts", "src/b.tsx"]

    def test_total_mismatch(self):
        with pytest.raises(ValidationError, match="totalSteps"):
            ImplementationPlan.model_validate(_plan([_step(1)], total=3))

    def test_gap_in_numbering(self):
        with pytest.raises(ValidationError, match="sequential"):
            ImplementationPlan.model_validate(_plan([_step(1), _step(3)]))

    def test_empty_steps(self):
        with pytest.raises(ValidationError):
            ImplementationPlan.model_validate(_plan([]))

    def test_step_without_files(self):
        with pytest.raises(ValidationError):
            ImplementationPlan.model_validate(_plan([_step(1, files=[])]))

    def test_blank_file_path(self):
        with pytest.raises(ValidationError):
            ImplementationPlan.model_validate(_plan([_step(1, files=[" "])]))

    def test_file_paths_distinct(self):
        plan = ImplementationPlan.model_validate(
            _plan([_step(1, ["src/a.ts"]), _step(2, ["src/a.ts", "src/c.ts"])])
        )
        assert plan.file_paths() == ["src/a.ts", "src/c.ts"]

    def test_optional_code(self):
        step = _step(1)
        step["code"] = "const x = 1;"
        plan = ImplementationPlan.model_validate(_plan([step]))
        assert plan.steps[0].code == "const x = 1;"


class TestWriteResult:
    def test_all_written(self):
        result = WriteResult.summarize(["a", "b"], [])
        assert result.success is True
        assert result.message == "Successfully generated 2 files"

    def test_with_errors(self):
        err = FileError(path="b", stage="validation", reason="Empty file content")
        result = WriteResult.summarize(["a"], [err])
        assert result.success is False
        assert result.message == "Generated 1 files with 1 errors"

    def test_nothing_written(self):
        result = WriteResult.summarize([], [])
        assert result.success is False


class TestRunReport:
    def test_defaults(self):
        report = RunReport(request=GenerationRequest(user_prompt="x"))
        assert report.status == "running"
        assert report.stage == "idle"
        assert report.written_files == []
        assert len(report.run_id) == 12

    def test_written_files_from_write_result(self):
        report = RunReport(
            request=GenerationRequest(user_prompt="x"),
            write_result=WriteResult.summarize(["a"], []),
        )
        assert report.written_files == ["a"]
