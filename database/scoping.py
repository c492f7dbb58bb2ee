"""
Translate a ScopeFilter into SQLModel query conditions.

Callers must resolve a missing scope (None) to a denial before reaching
these helpers; every function here expects a concrete ScopeFilter.
"""
from typing import Optional

from core.scope import ScopeFilter
from database.models import User, Provider, ProviderGroup, Submission


def scope_users(statement, scope: ScopeFilter):
    if scope.customer_id is not None:
        statement = statement.where(User.customer_id == scope.customer_id)
    if scope.provider_group_id is not None:
        statement = statement.where(User.provider_group_id == scope.provider_group_id)
    return statement


def scope_providers(statement, scope: ScopeFilter):
    if scope.customer_id is not None:
        statement = statement.where(Provider.customer_id == scope.customer_id)
    if scope.provider_group_id is not None:
        statement = statement.where(Provider.provider_group_id == scope.provider_group_id)
    return statement


def scope_provider_groups(statement, scope: ScopeFilter):
    if scope.customer_id is not None:
        statement = statement.where(ProviderGroup.customer_id == scope.customer_id)
    if scope.provider_group_id is not None:
        statement = statement.where(ProviderGroup.id == scope.provider_group_id)
    return statement


def scope_submissions(statement, scope: ScopeFilter):
    """Submissions carry no group of their own; the group comes from the NPI."""
    if scope.customer_id is not None:
        statement = statement.where(Submission.customer_id == scope.customer_id)
    if scope.provider_group_id is not None:
        statement = statement.join(Provider, Provider.id == Submission.provider_id).where(
            Provider.provider_group_id == scope.provider_group_id
        )
    return statement


def is_in_scope(
    scope: ScopeFilter,
    customer_id: Optional[str],
    provider_group_id: Optional[str] = None,
) -> bool:
    """Check a single record's affiliation against a scope."""
    if scope.customer_id is not None and customer_id != scope.customer_id:
        return False
    if scope.provider_group_id is not None and provider_group_id != scope.provider_group_id:
        return False
    return True
