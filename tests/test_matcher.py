from itertools import permutations

import pytest

from rbac_portal.core.exceptions import ConfigurationError
from rbac_portal.features.default_rules.matcher import (
    matching_rules,
    resolve_default_roles,
    rule_matches,
)
from rbac_portal.features.default_rules.schemas import DefaultAssignmentRule, UserAttributes


RULE_A = DefaultAssignmentRule(id="A", job_title="Captain", ship="ATL", role_ids=["r1"])
RULE_B = DefaultAssignmentRule(id="B", job_title="Captain", role_ids=["r2"])
RULE_C = DefaultAssignmentRule(id="C", job_title="Hotel Manager", role_ids=["r3"])


def test_every_matching_rule_contributes():
    captain_on_atl = UserAttributes(job_title="Captain", ship="ATL")

    assert resolve_default_roles([RULE_A, RULE_B, RULE_C], captain_on_atl) == {"r1", "r2"}


def test_unmet_constraint_excludes_rule():
    captain_on_bld = UserAttributes(job_title="Captain", ship="BLD")
    captain_ashore = UserAttributes(job_title="Captain")

    assert resolve_default_roles([RULE_A, RULE_B], captain_on_bld) == {"r2"}
    assert resolve_default_roles([RULE_A, RULE_B], captain_ashore) == {"r2"}


@pytest.mark.parametrize("ordering", list(permutations([RULE_A, RULE_B, RULE_C])))
def test_result_independent_of_rule_order(ordering):
    captain_on_atl = UserAttributes(job_title="Captain", ship="ATL")

    assert resolve_default_roles(ordering, captain_on_atl) == {"r1", "r2"}


def test_job_title_must_match_exactly():
    assert resolve_default_roles([RULE_A, RULE_B], UserAttributes(job_title="captain")) == set()
    assert resolve_default_roles([RULE_A, RULE_B], UserAttributes()) == set()


def test_blank_constraint_matches_anything():
    rule = DefaultAssignmentRule(id="D", job_title="HR", department="  ", role_ids=["r4"])

    assert rule.department is None
    assert rule.constraints() == {}
    assert rule_matches(rule, UserAttributes(job_title="HR", department="Corporate")) is True


def test_all_constraints_must_hold():
    rule = DefaultAssignmentRule(
        id="E", job_title="Nautic Scheduler", company="CH01", operation="CHO", role_ids=["r5"]
    )

    assert rule_matches(rule, UserAttributes(job_title="Nautic Scheduler", company="CH01", operation="CHO"))
    assert not rule_matches(rule, UserAttributes(job_title="Nautic Scheduler", company="CH01", operation="FR01"))


def test_overlapping_role_ids_are_merged(rules):
    hotel_manager = UserAttributes(job_title="Hotel Manager")
    extra = DefaultAssignmentRule(id="rule-x", job_title="Hotel Manager", role_ids=["role-2"])

    assert resolve_default_roles([*rules, extra], hotel_manager) == {"role-2", "role-6"}


def test_matching_rules_keep_input_order():
    captain_on_atl = UserAttributes(job_title="Captain", ship="ATL")

    assert [rule.id for rule in matching_rules([RULE_B, RULE_C, RULE_A], captain_on_atl)] == ["B", "A"]


@pytest.mark.parametrize(
    "broken",
    [
        DefaultAssignmentRule(id="no-title", role_ids=["r1"]),
        DefaultAssignmentRule(id="blank-title", job_title="   ", role_ids=["r1"]),
        DefaultAssignmentRule(id="no-roles", job_title="Captain", role_ids=[]),
    ],
)
def test_broken_rule_is_a_configuration_error(broken):
    # Also raised when the broken rule would not match the user
    with pytest.raises(ConfigurationError, match=broken.id):
        resolve_default_roles([RULE_C, broken], UserAttributes(job_title="Hotel Manager"))
