"""Tests for the process tag policy."""

from __future__ import annotations

import pytest


@pytest.mark.unit
class TestTagPolicyResolve:
    """Tests for TagPolicy.resolve."""

    @pytest.mark.parametrize(
        ("tag", "expected"),
        [
            ("approval", "approval"),
            ("legal-review", "approval"),
            ("sign", "signature"),
            ("cosign", "signature"),
            ("countersign", "signature"),
            ("ordered-cosign", "signature"),
            ("individual-sign", "signature"),
            ("to", "expedition"),
            ("cc", "expedition"),
            ("  CC ", "expedition"),
        ],
    )
    def test_known_tags(self, tag_policy, tag: str, expected: str) -> None:
        """Test every built-in and configured tag resolves to its role type."""
        from litestar_signing.core.types import RoleType

        assert tag_policy.resolve(tag) == RoleType(expected)

    @pytest.mark.parametrize("tag", [None, "", "   "])
    def test_empty_tag_is_unset(self, tag_policy, tag: str | None) -> None:
        """Test an empty tag is distinguished from an unknown one."""
        from litestar_signing.core.protocols import UNSET

        assert tag_policy.resolve(tag) is UNSET

    def test_unknown_tag(self, tag_policy) -> None:
        """Test an unknown tag resolves to None."""
        assert tag_policy.resolve("hr-review") is None

    @pytest.mark.parametrize("tag", [7, 1.5, ["cosign"]])
    def test_non_string_tag_is_unknown(self, tag_policy, tag: object) -> None:
        """Test a tag of another type than str resolves to None."""
        assert tag_policy.resolve(tag) is None

    def test_default_policy_has_only_generic_approval(self) -> None:
        """Test a policy without categories only knows the approval tag."""
        from litestar_signing.core.policy import TagPolicy

        policy = TagPolicy()

        assert policy.approval_tags == ("approval",)
        assert policy.resolve("legal-review") is None

    def test_policy_satisfies_resolver_protocol(self, tag_policy) -> None:
        """Test TagPolicy can be used wherever a resolver is expected."""
        from litestar_signing.core.protocols import RoleTypeResolver

        assert isinstance(tag_policy, RoleTypeResolver)


@pytest.mark.unit
class TestTagPolicyCategories:
    """Tests for approval category configuration."""

    def test_categories_are_normalized(self) -> None:
        """Test categories are stored trimmed and lowercased."""
        from litestar_signing.core.policy import TagPolicy

        assert TagPolicy([" Legal-Review ", "HR"]).approval_tags == ("approval", "legal-review", "hr")

    @pytest.mark.parametrize(
        "categories",
        [
            ["approval"],
            ["cosign"],
            ["to"],
            ["hr", "HR"],
            [" "],
        ],
    )
    def test_redefining_a_tag_fails(self, categories: list[str]) -> None:
        """Test categories cannot clash with existing tags or each other."""
        from litestar_signing.core.policy import TagPolicy

        with pytest.raises(ValueError, match="cannot redefine existing tags"):
            TagPolicy(categories)


@pytest.mark.unit
class TestTagPolicyEntitlement:
    """Tests for TagPolicy.is_entitled."""

    @pytest.mark.parametrize(
        ("role_type", "tag", "role_tags", "expected"),
        [
            ("approval", "approval", {"approval"}, True),
            ("approval", "legal-review", {"approval"}, True),
            ("approval", "legal-review", {"legal-review"}, True),
            ("approval", "approval", {"legal-review"}, False),
            ("approval", "approval", {"sign"}, False),
            ("signature", "cosign", {"sign"}, True),
            ("signature", "cosign", {"cosign"}, True),
            ("signature", "cosign", {"countersign"}, False),
            ("signature", "cosign", {"approval"}, False),
            ("expedition", "to", {"to"}, True),
            ("expedition", "to", {"cc"}, False),
            ("expedition", "cc", {"sign", "approval"}, False),
        ],
    )
    def test_entitlements(self, tag_policy, role_type: str, tag: str, role_tags: set[str], expected: bool) -> None:
        """Test generic tags cover their role type and specific tags cover their process."""
        from litestar_signing.core.types import RoleType

        assert tag_policy.is_entitled(RoleType(role_type), tag, role_tags) is expected

    def test_repr(self, tag_policy) -> None:
        """Test the representation lists approval tags."""
        assert repr(tag_policy) == "TagPolicy(approval_tags=('approval', 'legal-review'))"
