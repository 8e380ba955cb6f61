"""Unit tests for model output parsing and schema validation."""

import json

import pytest

from appeal_copilot.errors import ErrorKind, MalformedResponseJSON
from appeal_copilot.models import AppealPackage, ExtractedRecord
from appeal_copilot.services.response_parser import (
    Err,
    Ok,
    parse_appeal_package,
    parse_extracted_record,
    parse_json,
    strip_code_fences,
)


# ---------------------------------------------------------------------------
# strip_code_fences / parse_json
# ---------------------------------------------------------------------------

class TestParseJson:
    """Fenced and bare JSON parse to the same value; bad JSON is an Err."""

    @pytest.mark.parametrize(
        "wrapped",
        [
            '```json\n{"a": [1, 2], "b": "x"}\n```',
            '```json{"a": [1, 2], "b": "x"}```',
            '```\n{"a": [1, 2], "b": "x"}\n```',
            '  \n```JSON\n{"a": [1, 2], "b": "x"}\n```\n  ',
        ],
    )
    def test_fenced_equals_bare(self, wrapped: str) -> None:
        bare = '{"a": [1, 2], "b": "x"}'
        assert parse_json(wrapped) == parse_json(bare) == Ok({"a": [1, 2], "b": "x"})

    def test_strip_trims_whitespace(self) -> None:
        assert strip_code_fences('\n  {"a": 1}  \n') == '{"a": 1}'

    def test_strip_keeps_inner_text(self) -> None:
        assert strip_code_fences('```json\n{"letter": "use ``` rarely"}\n```') == (
            '{"letter": "use ``` rarely"}'
        )

    @pytest.mark.parametrize("raw", ["not json", '{"a": 1', "", "Here is the JSON: {}"])
    def test_invalid_json_is_err(self, raw: str) -> None:
        result = parse_json(raw)

        assert isinstance(result, Err)
        assert result.error.kind is ErrorKind.MALFORMED_RESPONSE_JSON
        assert result.error.raw_text == raw


# ---------------------------------------------------------------------------
# parse_extracted_record
# ---------------------------------------------------------------------------

class TestParseExtractedRecord:
    """The record is always fully populated or rejected outright."""

    def test_missing_keys_default_to_empty(self, record_text: str) -> None:
        record = parse_extracted_record(record_text)

        assert record == ExtractedRecord(
            patient_name="Jane Doe",
            denial_reason="not medically necessary",
            required_documents=["MRI report"],
        )
        assert record.insurance_company == ""
        assert record.appeal_deadline == ""

    def test_nulls_become_empty(self) -> None:
        record = parse_extracted_record('{"patientId": null, "requiredDocuments": null}')
        assert record.patient_id == ""
        assert record.required_documents == []

    def test_unknown_keys_ignored(self) -> None:
        record = parse_extracted_record('{"patientName": "A", "confidence": 0.9}')
        assert record.to_wire()["patientName"] == "A"
        assert "confidence" not in record.to_wire()

    def test_wire_names_round_trip(self, record_data) -> None:
        wire = parse_extracted_record(json.dumps(record_data)).to_wire()
        assert set(wire) == {
            "patientName",
            "patientId",
            "insuranceCompany",
            "denialReason",
            "deniedService",
            "denialDate",
            "appealDeadline",
            "requiredDocuments",
            "referenceNumber",
            "additionalNotes",
        }

    @pytest.mark.parametrize(
        "raw",
        [
            '{"requiredDocuments": "MRI report"}',
            '{"requiredDocuments": [1, 2]}',
            '{"patientName": 42}',
            '["Jane Doe"]',
            '"Jane Doe"',
        ],
    )
    def test_wrong_shape_is_malformed(self, raw: str) -> None:
        with pytest.raises(MalformedResponseJSON) as excinfo:
            parse_extracted_record(raw)
        assert excinfo.value.raw_text == raw

    def test_invalid_json_is_malformed(self) -> None:
        with pytest.raises(MalformedResponseJSON):
            parse_extracted_record("I could not read this document.")


# ---------------------------------------------------------------------------
# parse_appeal_package
# ---------------------------------------------------------------------------

class TestParseAppealPackage:
    """Appeal packages need a readable letter; lists default to empty."""

    def test_fenced_package(self, appeal_text: str, appeal_data) -> None:
        package = parse_appeal_package(appeal_text)

        assert isinstance(package, AppealPackage)
        assert package.appeal_letter == appeal_data["appealLetter"]
        assert package.submission_instructions == appeal_data["submissionInstructions"]
        assert package.to_wire() == appeal_data

    def test_missing_lists_default_to_empty(self) -> None:
        package = parse_appeal_package('{"appealLetter": "Dear Sir"}')
        assert package.submission_instructions == []
        assert package.documents_to_include == []
        assert package.additional_tips == []
        assert package.deadline_reminder == ""

    def test_letter_fences_removed(self) -> None:
        raw = json.dumps({"appealLetter": "```text\nDear Sir,\nPlease reconsider.\n```\n"})
        package = parse_appeal_package(raw)
        assert package.appeal_letter == "Dear Sir,\nPlease reconsider."

    @pytest.mark.parametrize(
        "raw",
        [
            "{}",
            '{"appealLetter": ""}',
            '{"appealLetter": "```\\n```"}',
            '{"appealLetter": ["Dear Sir"]}',
            '{"appealLetter": "Dear Sir", "submissionInstructions": "mail it"}',
            '{"appealLetter": "Dear Sir", "deadlineReminder": ["soon"]}',
        ],
    )
    def test_wrong_shape_is_malformed(self, raw: str) -> None:
        with pytest.raises(MalformedResponseJSON):
            parse_appeal_package(raw)
