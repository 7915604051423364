"""
Matching of default-assignment rules against a user's job profile.

Every matching rule contributes its roles; there is no precedence between
a specific rule and a broader one, so the result does not depend on rule
order.
"""
from typing import Iterable, List, Set

from rbac_portal.core.exceptions import ConfigurationError
from rbac_portal.features.default_rules.schemas import DefaultAssignmentRule, UserAttributes
from rbac_portal.utils import get_logger


log = get_logger(__name__)


def validate_rule(rule: DefaultAssignmentRule) -> None:
    """
    Raises:
        ConfigurationError: the rule has no job title or no roles
    """
    if not rule.job_title or not rule.job_title.strip():
        raise ConfigurationError(f"Default assignment rule {rule.id} has no job title")
    if not rule.role_ids:
        raise ConfigurationError(f"Default assignment rule {rule.id} assigns no roles")


def rule_matches(rule: DefaultAssignmentRule, user_attributes: UserAttributes) -> bool:
    if rule.job_title != user_attributes.job_title:
        return False
    return all(
        getattr(user_attributes, field) == value
        for field, value in rule.constraints().items()
    )


def matching_rules(
    rules: Iterable[DefaultAssignmentRule],
    user_attributes: UserAttributes,
) -> List[DefaultAssignmentRule]:
    """
    Validate all rules and return those matching the user, in input order.
    """
    rules = list(rules)
    for rule in rules:
        validate_rule(rule)
    return [rule for rule in rules if rule_matches(rule, user_attributes)]


def resolve_default_roles(
    rules: Iterable[DefaultAssignmentRule],
    user_attributes: UserAttributes,
) -> Set[str]:
    """
    Role ids a user should hold by default.

    Returns:
        Union of role_ids over every matching rule

    Raises:
        ConfigurationError: any rule is invalid
    """
    role_ids: Set[str] = set()
    for rule in matching_rules(rules, user_attributes):
        log.debug(f"Rule {rule.id} matches job title {user_attributes.job_title!r}: {rule.role_ids}")
        role_ids.update(rule.role_ids)
    return role_ids
