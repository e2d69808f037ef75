"""Tests for step and scenario definitions."""

from __future__ import annotations

from typing import Any

import pytest


@pytest.mark.unit
class TestParseCardinality:
    """Tests for parse_cardinality."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("one", "One()"),
            (" ALL ", "All()"),
            ("2", "Exact(count=2)"),
            (3, "Exact(count=3)"),
        ],
    )
    def test_valid_forms(self, raw: Any, expected: str) -> None:
        """Test the accepted authored forms."""
        from litestar_signing.core.definition import parse_cardinality

        assert repr(parse_cardinality(raw)) == expected

    def test_none_is_unspecified(self) -> None:
        """Test an absent cardinality stays unspecified."""
        from litestar_signing.core.definition import parse_cardinality

        assert parse_cardinality(None) is None

    def test_parsed_value_passes_through(self) -> None:
        """Test an already parsed cardinality is returned as is."""
        from litestar_signing.core.definition import Exact, parse_cardinality

        cardinality = Exact(2)

        assert parse_cardinality(cardinality) is cardinality

    @pytest.mark.parametrize("raw", [0, -2, "zero", "", "\u00b2", "\uff13", 2.0, False, [1]])
    def test_invalid_forms(self, raw: Any) -> None:
        """Test any other form is a bad request."""
        from litestar_signing.core.definition import parse_cardinality
        from litestar_signing.exceptions import BadRequestError

        with pytest.raises(BadRequestError, match="Bad cardinality"):
            parse_cardinality(raw)

    def test_resolve(self) -> None:
        """Test each variant resolves against a participant count."""
        from litestar_signing.core.definition import All, Exact, One

        assert All().resolve(4) == 4
        assert One().resolve(4) == 1
        assert Exact(3).resolve(4) == 3


@pytest.mark.unit
class TestSignatureTypeCompatibility:
    """Tests for is_signature_type_compatible."""

    @pytest.mark.parametrize(
        ("signature_type", "signature_format", "expected"),
        [
            ("ENVELOPED", "PADES", True),
            ("DETACHED", "PADES", False),
            ("ENVELOPED", "CADES", False),
            ("ENVELOPING", "CADES", True),
            ("ENVELOPED", "XADES", True),
            ("DETACHED", None, True),
        ],
    )
    def test_combinations(self, signature_type: str, signature_format: str | None, expected: bool) -> None:
        """Test PAdES only allows enveloped and CAdES never does."""
        from litestar_signing.core.definition import is_signature_type_compatible
        from litestar_signing.core.types import SignatureFormat, SignatureType

        fmt = SignatureFormat[signature_format] if signature_format else None

        assert is_signature_type_compatible(SignatureType[signature_type], fmt) is expected


@pytest.mark.unit
class TestStepDefinition:
    """Tests for StepDefinition."""

    def test_tag_is_normalized(self) -> None:
        """Test the tag ignores surrounding blanks and case."""
        from litestar_signing.core.definition import StepDefinition

        assert StepDefinition(process=" Ordered-Cosign ").tag == "ordered-cosign"

    def test_missing_process_has_empty_tag(self) -> None:
        """Test a missing process yields an empty tag."""
        from litestar_signing.core.definition import StepDefinition

        assert StepDefinition(process=None).tag == ""  # type: ignore[arg-type]

    @pytest.mark.parametrize(
        ("process", "role_type", "expected"),
        [
            ("cosign", "signature", 1),
            ("countersign", "signature", 3),
            ("individual-sign", "signature", 3),
            ("approval", "approval", 1),
            ("to", "expedition", 1),
        ],
    )
    def test_default_cardinality(self, process: str, role_type: str, expected: int) -> None:
        """Test the default cardinality depends on the process."""
        from litestar_signing.core.definition import StepDefinition
        from litestar_signing.core.types import RoleType

        step = StepDefinition(process=process)

        assert step.resolve_cardinality(RoleType(role_type), 3) == expected

    def test_explicit_cardinality(self) -> None:
        """Test an explicit cardinality overrides the default."""
        from litestar_signing.core.definition import StepDefinition
        from litestar_signing.core.types import RoleType

        assert StepDefinition(process="cosign", cardinality="all").resolve_cardinality(RoleType.SIGNATURE, 3) == 3
        assert StepDefinition(process="approval", cardinality=2).resolve_cardinality(RoleType.APPROVAL, 3) == 2


@pytest.mark.unit
class TestScenarioDefinition:
    """Tests for ScenarioDefinition validation."""

    def _scenario(self, **overrides: Any) -> Any:
        from litestar_signing.core.definition import ScenarioDefinition, StepDefinition
        from litestar_signing.core.types import SignatureFormat, SignatureLevel, SignatureType

        values: dict[str, Any] = {
            "documents": ["documents/1"],
            "steps": [
                StepDefinition(process="approval", participants=["actors/carol"]),
                StepDefinition(
                    process="cosign",
                    participants=["actors/alice", "actors/bob"],
                    signature_type=SignatureType.ENVELOPED,
                ),
            ],
            "format": SignatureFormat.PADES,
            "level": SignatureLevel.LT,
        }
        values.update(overrides)
        return ScenarioDefinition(**values)

    def test_valid_scenario(self, tag_policy) -> None:
        """Test a well-formed scenario reports nothing."""
        scenario = self._scenario()

        assert scenario.validate(tag_policy) == ([], [])
        scenario.check(tag_policy)

    def test_signature_format(self) -> None:
        """Test the format is exposed as an enum member."""
        from litestar_signing.core.types import SignatureFormat

        assert self._scenario(format=3).signature_format() is SignatureFormat.CADES
        assert self._scenario(format=7).signature_format() is None
        assert self._scenario(format=None).signature_format() is None

    def test_missing_header_items(self, tag_policy) -> None:
        """Test bad format, bad level and missing documents are all reported."""
        scenario = self._scenario(format=0, level=True, documents=[])

        bad_request, conflicts = scenario.validate(tag_policy)

        assert bad_request == ["bad signature format", "bad signature level", "documents"]
        assert conflicts == []

    def test_missing_steps(self, tag_policy) -> None:
        """Test an empty step list is reported."""
        bad_request, _ = self._scenario(steps=[]).validate(tag_policy)

        assert bad_request == ["steps"]

    def test_step_errors(self, tag_policy) -> None:
        """Test every malformed step item is reported with its index."""
        from litestar_signing.core.definition import StepDefinition

        steps = [
            "cosign",
            StepDefinition(process="", participants=["actors/alice"]),
            StepDefinition(process="sign", participants=["actors/alice"], signature_type=1),
            StepDefinition(process="review", participants=["actors/alice"]),
            StepDefinition(process="cosign", participants=["actors/alice"], signature_type=8),
            StepDefinition(process="to", cardinality="many"),
            StepDefinition(process="approval", participants=["actors/carol"], cardinality="\u00b2"),
            StepDefinition(process=7, participants=["actors/carol"]),  # type: ignore[arg-type]
        ]

        bad_request, conflicts = self._scenario(steps=steps).validate(tag_policy)

        assert bad_request == [
            "bad step[0] definition",
            "step[1].process",
            "bad step[2].process tag 'sign'",
            "bad step[3].process tag 'review'",
            "bad step[4].signatureType:8",
            "bad step[5].cardinality:'many'",
            "step[5].participants",
            "bad step[6].cardinality:'\u00b2'",
            "bad step[7].process tag '7'",
        ]
        assert conflicts == []

    def test_incompatible_signature_type(self, tag_policy) -> None:
        """Test a signature type the format cannot produce is a conflict."""
        from litestar_signing.core.definition import StepDefinition
        from litestar_signing.core.types import SignatureType

        steps = [StepDefinition(process="cosign", participants=["a"], signature_type=SignatureType.DETACHED)]

        bad_request, conflicts = self._scenario(steps=steps).validate(tag_policy)

        assert bad_request == []
        assert len(conflicts) == 1
        assert conflicts[0].startswith("bad step[0].signatureType/format:3/")

    def test_check_raises_validation_before_conflict(self, tag_policy) -> None:
        """Test malformed items are reported before conflicts."""
        from litestar_signing.core.definition import StepDefinition
        from litestar_signing.core.types import SignatureType
        from litestar_signing.exceptions import BadRequestError, ScenarioValidationError

        steps = [StepDefinition(process="cosign", participants=["a"], signature_type=SignatureType.DETACHED)]

        with pytest.raises(ScenarioValidationError) as exc_info:
            self._scenario(steps=steps, documents=[]).check(tag_policy)

        assert exc_info.value.errors == ["documents"]
        assert isinstance(exc_info.value, BadRequestError)

    def test_check_raises_conflict(self, tag_policy) -> None:
        """Test a scenario with only conflicts raises a conflict."""
        from litestar_signing.core.definition import StepDefinition
        from litestar_signing.core.types import SignatureFormat, SignatureType
        from litestar_signing.exceptions import ConflictError, ScenarioConflictError

        steps = [StepDefinition(process="cosign", participants=["a"], signature_type=SignatureType.ENVELOPED)]

        with pytest.raises(ScenarioConflictError) as exc_info:
            self._scenario(steps=steps, format=SignatureFormat.CADES).check(tag_policy)

        assert isinstance(exc_info.value, ConflictError)
        assert str(exc_info.value).startswith("Conflicted items: bad step[0].signatureType/format")
