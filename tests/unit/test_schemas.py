"""
Unit Tests for Schemas
======================

Render request defaults, result models and report shapes.
"""

import re
from datetime import date

import pytest
from pydantic import TypeAdapter, ValidationError

from pdf_harness.models import schemas
from pdf_harness.models.schemas import (
    AdapterFamily,
    AdapterId,
    AssetMode,
    EngineKind,
    GenerateAllResponse,
    GenerationReport,
    RenderFailure,
    RenderRequest,
    RenderResult,
    RenderSuccess,
)


class TestRenderRequest:

    def test_defaults(self):
        request = RenderRequest()

        assert request.patient_name == "John Doe"
        assert request.patient_dob == "01/01/1990"
        assert request.medication_name == "Sample Medication"
        assert request.dosage == "10mg"
        assert request.instructions == "Take once daily"
        assert re.fullmatch(r"\d{2}/\d{2}/\d{4}", request.date)

    def test_default_date_is_zero_padded(self, monkeypatch):
        class FixedDate(date):
            @classmethod
            def today(cls):
                return cls(2024, 3, 5)

        monkeypatch.setattr(schemas, "date", FixedDate)

        assert RenderRequest().date == "03/05/2024"

    def test_camel_case_fields(self):
        request = RenderRequest.model_validate(
            {"patientName": "Test Patient", "medicationName": "Test Medication 100mg"}
        )

        assert request.patient_name == "Test Patient"
        assert request.medication_name == "Test Medication 100mg"

    @pytest.mark.parametrize("blank", [None, "", "   "])
    def test_blank_values_fall_back_to_defaults(self, blank):
        request = RenderRequest.model_validate({"patientName": blank, "dosage": blank})

        assert request.patient_name == "John Doe"
        assert request.dosage == "10mg"

    def test_scalars_become_strings(self):
        request = RenderRequest.model_validate({"dosage": 20})

        assert request.dosage == "20"

    def test_nested_values_rejected(self):
        with pytest.raises(ValidationError):
            RenderRequest.model_validate({"patientName": {"first": "Jane"}})

    def test_extra_fields_reach_templates(self):
        request = RenderRequest.model_validate({"pharmacy": "Main Street"})

        variables = request.template_variables()

        assert variables["pharmacy"] == "Main Street"
        assert variables["patientName"] == "John Doe"

    def test_immutable(self):
        request = RenderRequest()

        with pytest.raises(ValidationError):
            request.patient_name = "Someone Else"


class TestRenderResults:

    def test_success_byte_length(self):
        result = RenderSuccess(library="fpdf2", pdf_bytes=b"%PDF-1.4 body", elapsed_ms=12)

        assert result.byte_length == len(b"%PDF-1.4 body")
        assert result.success is True
        assert "pdf_bytes" not in result.model_dump()

    def test_failure_requires_reason(self):
        with pytest.raises(ValidationError):
            RenderFailure(library="fpdf2", reason="", elapsed_ms=0)

    def test_discriminated_union(self):
        adapter = TypeAdapter(RenderResult)

        failure = adapter.validate_python(
            {"outcome": "failure", "library": "fpdf2", "reason": "boom", "elapsed_ms": 3}
        )

        assert isinstance(failure, RenderFailure)
        assert failure.success is False


class TestReports:

    def test_report_from_success(self):
        result = RenderSuccess(
            library="reportlab-canvas",
            pdf_bytes=b"%PDF-1.4",
            elapsed_ms=40,
            method="programmatic",
            output_path="/tmp/reportlab-canvas-output.pdf",
        )

        report = GenerationReport.from_result(result).model_dump(by_alias=True)

        assert report["success"] is True
        assert report["generationTime"] == 40
        assert report["fileSize"] == 8
        assert report["outputPath"] == "/tmp/reportlab-canvas-output.pdf"
        assert report["error"] is None

    def test_report_from_failure(self):
        result = RenderFailure(library="pyppeteer-base64", reason="no browser", elapsed_ms=7)

        report = GenerationReport.from_result(result)

        assert report.success is False
        assert report.error == "no browser"
        assert report.file_size is None

    def test_summary_counts(self):
        reports = [
            GenerationReport(library="a", success=True, generation_time=1),
            GenerationReport(library="b", success=False, generation_time=2, error="x"),
            GenerationReport(library="c", success=True, generation_time=3),
        ]

        response = GenerateAllResponse.from_reports(reports)

        assert response.summary.total == 3
        assert response.summary.successful == 2
        assert response.summary.failed == 1


class TestAdapterId:

    def test_closed_set(self):
        assert AdapterId.names() == [
            "playwright-base64",
            "playwright-baseurl",
            "pyppeteer-base64",
            "pyppeteer-baseurl",
            "reportlab-canvas",
            "reportlab-platypus",
            "fpdf2",
        ]

    def test_engine_capabilities(self):
        assert AdapterId.PLAYWRIGHT_BASEURL.family is AdapterFamily.ENGINE
        assert AdapterId.PLAYWRIGHT_BASEURL.engine is EngineKind.PLAYWRIGHT
        assert AdapterId.PLAYWRIGHT_BASEURL.asset_mode is AssetMode.BASE_URL
        assert AdapterId.PYPPETEER_BASE64.asset_mode is AssetMode.EMBEDDED

    def test_in_process_capabilities(self):
        for adapter_id in (AdapterId.REPORTLAB_CANVAS, AdapterId.REPORTLAB_PLATYPUS, AdapterId.FPDF2):
            assert adapter_id.family is AdapterFamily.IN_PROCESS
            assert adapter_id.engine is None
            assert adapter_id.asset_mode is None
            assert adapter_id.description
