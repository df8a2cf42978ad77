"""Tests for least-privilege role resolution."""

from rolefit.core.rbac.resolver import (
    calculate_least_privileged_roles,
    check_permission_access,
    has_data_permission,
    has_permission,
    DATA_ACTION,
)

from tests.factories import create_permission_set, create_role


def _names(results):
    return [result.role.role_name for result in results]


class TestHasPermission:
    """Test single-operation grant checks."""

    def test_literal_grant(self):
        role = create_role(actions=["Provider.A/things/read"])
        assert has_permission(role, "provider.a/things/READ")
        assert not has_permission(role, "Provider.A/things/write")

    def test_wildcard_grant(self):
        role = create_role(actions=["Provider.A/*"])
        assert has_permission(role, "Provider.A/things/write")

    def test_deny_overrides_allow(self):
        role = create_role(actions=["*"], not_actions=["Provider.Auth/*/Delete"])
        assert not has_permission(role, "Provider.Auth/roleAssignments/Delete")
        assert has_permission(role, "Provider.Auth/roleAssignments/read")

    def test_literal_deny_of_literal_grant(self):
        role = create_role(actions=["A/x/read"], not_actions=["A/x/read"])
        assert not has_permission(role, "A/x/read")

    def test_deny_only_applies_within_its_permission_set(self):
        role = create_role(
            permissions=[
                create_permission_set(actions=["*"], not_actions=["A/x/delete"]),
                create_permission_set(actions=["A/x/delete"]),
            ]
        )
        assert has_permission(role, "A/x/delete")

    def test_actions_and_data_actions_are_separate(self):
        role = create_role(
            actions=["A/x/read"],
            data_actions=["A/x/blobs/read"],
        )
        assert not has_permission(role, "A/x/blobs/read")
        assert has_data_permission(role, "A/x/blobs/read")
        assert not has_data_permission(role, "A/x/read")

    def test_data_deny(self):
        role = create_role(
            data_actions=["A/x/blobs/*"],
            not_data_actions=["A/x/blobs/delete"],
        )
        assert has_data_permission(role, "A/x/blobs/write")
        assert not check_permission_access(role, "A/x/blobs/delete", DATA_ACTION)

    def test_role_without_permissions(self):
        role = create_role(permissions=[])
        assert not has_permission(role, "A/x/read")


class TestScenarios:
    """Reference scenarios for resolution."""

    def test_reader_wildcard_included(self):
        """A role with '*/read' satisfies a read request."""
        reader = create_role("Reader", actions=["*/read"])
        results = calculate_least_privileged_roles(
            [reader], ["Provider.Storage/accounts/read"]
        )

        assert _names(results) == ["Reader"]
        assert results[0].matching_actions == ["Provider.Storage/accounts/read"]
        assert results[0].matching_data_actions == []

    def test_contributor_excluded_by_not_actions(self):
        """A denied wildcard grant excludes the role."""
        contributor = create_role(
            "Contributor", actions=["*"], not_actions=["Provider.Auth/*/Delete"]
        )
        results = calculate_least_privileged_roles(
            [contributor], ["Provider.Auth/roleAssignments/Delete"]
        )
        assert results == []

    def test_strict_and_across_request(self):
        """A role granting only part of the request is excluded."""
        partial = create_role(actions=["Provider.Storage/accounts/read"])
        results = calculate_least_privileged_roles(
            [partial],
            ["Provider.Storage/accounts/read", "Provider.Storage/accounts/write"],
        )
        assert results == []

    def test_nine_of_ten_is_not_enough(self):
        requested = [f"A/item{i}/read" for i in range(10)]
        role = create_role(actions=requested[:9])
        assert calculate_least_privileged_roles([role], requested) == []

    def test_ordered_by_weight(self):
        """The lower-weight role is ranked first."""
        broad = create_role("Y", actions=["A/x/read", "A/x/write"], permission_count=1000)
        narrow = create_role("X", actions=["A/x/read", "A/x/write", "A/y/read"], permission_count=2)
        results = calculate_least_privileged_roles([broad, narrow], ["A/x/read"])
        assert _names(results) == ["X", "Y"]


class TestExactMatch:
    """Test exact match detection and priority."""

    def test_exact_match_flagged(self):
        actions = ["A/x/read", "A/x/write"]
        data_actions = ["A/x/blobs/read"]
        role = create_role(actions=actions, data_actions=data_actions)

        results = calculate_least_privileged_roles([role], actions, data_actions)

        assert results[0].is_exact_match
        assert results[0].permission_count == 3

    def test_extra_literal_is_not_exact(self):
        role = create_role(actions=["A/x/read", "A/x/write"])
        results = calculate_least_privileged_roles([role], ["A/x/read"])
        assert not results[0].is_exact_match

    def test_wildcard_is_not_exact(self):
        role = create_role(actions=["A/*"])
        results = calculate_least_privileged_roles([role], ["A/x/read"])
        assert not results[0].is_exact_match

    def test_exact_matches_sort_first(self):
        # Denials lower the broad role's weight below the exact role's
        exact = create_role("Exact", actions=["A/x/read", "A/x/write"])
        cheap = create_role(
            "Cheap",
            actions=["A/x/read", "A/x/write"],
            not_actions=["B/1", "B/2", "B/3", "B/4"],
        )
        results = calculate_least_privileged_roles(
            [cheap, exact], ["A/x/read", "A/x/write"]
        )
        assert _names(results) == ["Exact", "Cheap"]
        assert results[1].permission_count == 0

    def test_ties_keep_catalog_order(self):
        first = create_role("First", actions=["A/*"])
        second = create_role("Second", actions=["A/*"])
        results = calculate_least_privileged_roles([first, second], ["A/x/read"])
        assert _names(results) == ["First", "Second"]


class TestResolverBehaviour:
    """Test general resolver behaviour."""

    def test_empty_catalog(self):
        assert calculate_least_privileged_roles([], ["A/x/read"]) == []

    def test_data_actions_only(self):
        role = create_role(data_actions=["A/x/blobs/*"])
        other = create_role(actions=["*"])
        results = calculate_least_privileged_roles([role, other], [], ["A/x/blobs/read"])
        assert [result.role for result in results] == [role]
        assert results[0].matching_data_actions == ["A/x/blobs/read"]

    def test_empty_request_returns_every_role(self):
        roles = [create_role(actions=["*"]), create_role(actions=["A/x/read"])]
        results = calculate_least_privileged_roles(roles, [])
        assert len(results) == 2

    def test_inputs_not_mutated(self, sample_roles):
        before = [role.model_dump() for role in sample_roles]
        request = ["Provider.Storage/storageAccounts/listkeys/action"]
        calculate_least_privileged_roles(sample_roles, request)
        calculate_least_privileged_roles(sample_roles, request)
        assert [role.model_dump() for role in sample_roles] == before
        assert request == ["Provider.Storage/storageAccounts/listkeys/action"]

    def test_sample_catalog_ranking(self, sample_roles):
        results = calculate_least_privileged_roles(
            sample_roles, ["Provider.Storage/storageAccounts/listkeys/action"]
        )
        assert _names(results) == [
            "Storage Account Key Operator",
            "Storage Account Contributor",
            "Contributor",
            "Owner",
        ]

    def test_uses_explicit_matcher(self, matcher, sample_roles):
        calculate_least_privileged_roles(
            sample_roles, ["Provider.Storage/storageAccounts/read"], matcher=matcher
        )
        assert matcher.cache_size > 0

    def test_result_to_dict(self):
        role = create_role("Reader", actions=["*/read"])
        result = calculate_least_privileged_roles([role], ["A/x/read"])[0]
        data = result.to_dict()
        assert data["matchingActions"] == ["A/x/read"]
        assert data["permissionCount"] == 500
        assert data["isExactMatch"] is False
        assert data["role"]["roleName"] == "Reader"
