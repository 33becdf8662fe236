"""
Row level security for the AddedEmail table.

The same four policies are installed in PostgreSQL by the
``create_added_email_table_with_rls`` migration. This module evaluates them
in the application so that callers connecting with a privileged role (which
bypasses RLS) still get the same answers.

Evaluation mirrors PostgreSQL:

* RLS is enabled, so an operation no policy grants is denied.
* Policies are permissive and scoped to the ``authenticated`` role.
* ``USING`` is checked against the existing row, ``WITH CHECK`` against the
  proposed row. A policy without ``WITH CHECK`` reuses ``USING`` for it.
* Comparisons with a NULL owner are never true.
* UPDATE and DELETE are denied when the row they would act on is not
  supplied, and UPDATE also when the row it would write is not.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from collections.abc import Mapping
from typing import Any, Callable, Optional, Tuple
from uuid import UUID

from app.core.errors import AuthorizationDenied
from app.logging_config import log_policy_decision
from app.utils.auth import Principal


class Operation(str, Enum):
    READ = "SELECT"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


RowPredicate = Callable[[Principal, Any], bool]

# Operations that act on a row already in the table
TARGETS_STORED_ROW = frozenset({Operation.UPDATE, Operation.DELETE})
# Operations whose outcome depends on the row as it would be written
CHECKS_PROPOSED_ROW = frozenset({Operation.UPDATE})


def _always(principal: Principal, row: Any) -> bool:
    return True


def _owner_of(row: Any) -> Optional[UUID]:
    if isinstance(row, Mapping):
        owner = row.get("created_by")
    else:
        owner = getattr(row, "created_by", None)
    if owner is None or isinstance(owner, UUID):
        return owner
    try:
        return UUID(str(owner))
    except ValueError:
        return None


def is_owner(principal: Principal, row: Any) -> bool:
    """``auth.uid() = created_by``, with SQL NULL semantics."""
    owner = _owner_of(row)
    if principal.user_id is None or owner is None:
        return False
    return owner == principal.user_id


@dataclass(frozen=True)
class Policy:
    name: str
    operation: Operation
    using: Optional[RowPredicate] = None
    with_check: Optional[RowPredicate] = None
    role: str = "authenticated"

    def applies_to(self, operation: Operation, principal: Principal) -> bool:
        if self.operation != operation:
            return False
        # Only the authenticated role is granted anything
        return self.role == "authenticated" and principal.authenticated

    def permits(
        self, principal: Principal, existing: Any = None, proposed: Any = None
    ) -> bool:
        if self.using is not None:
            if existing is None:
                # Nothing to check USING against
                if self.operation in TARGETS_STORED_ROW:
                    return False
            elif not self.using(principal, existing):
                return False
        check = self.with_check or self.using
        if proposed is None:
            if self.operation in CHECKS_PROPOSED_ROW:
                return False
        elif check is not None and not check(principal, proposed):
            return False
        return True


POLICIES: Tuple[Policy, ...] = (
    Policy(
        name="Authenticated users can read all emails",
        operation=Operation.READ,
        using=_always,
    ),
    Policy(
        name="Authenticated users can insert emails",
        operation=Operation.INSERT,
        with_check=_always,
    ),
    Policy(
        name="Users can update their own entries",
        operation=Operation.UPDATE,
        using=is_owner,
        with_check=is_owner,
    ),
    Policy(
        name="Users can delete their own entries",
        operation=Operation.DELETE,
        using=is_owner,
    ),
)


@dataclass(frozen=True)
class Decision:
    operation: Operation
    allowed: bool
    policy: Optional[str] = None

    def __bool__(self) -> bool:
        return self.allowed


def evaluate(
    operation: Operation,
    principal: Principal,
    existing: Any = None,
    proposed: Any = None,
) -> Decision:
    """Decide whether ``principal`` may perform ``operation``.

    ``existing`` is the row as stored (UPDATE, DELETE), ``proposed`` is the
    row as it would be written (INSERT, UPDATE). Rows may be ORM objects or
    mappings; only ``created_by`` is consulted.
    """
    for policy in POLICIES:
        if not policy.applies_to(operation, principal):
            continue
        if policy.permits(principal, existing=existing, proposed=proposed):
            return Decision(operation=operation, allowed=True, policy=policy.name)
    return Decision(operation=operation, allowed=False)


def authorize(
    operation: Operation,
    principal: Principal,
    existing: Any = None,
    proposed: Any = None,
    record_id: Optional[int] = None,
) -> Decision:
    """Evaluate and raise AuthorizationDenied on a deny."""
    decision = evaluate(operation, principal, existing=existing, proposed=proposed)
    log_policy_decision(
        operation.name,
        decision.allowed,
        policy=decision.policy,
        user_id=str(principal.user_id) if principal.user_id else None,
        record_id=record_id,
    )
    if not decision.allowed:
        raise AuthorizationDenied(operation.name, principal.authenticated)
    return decision


def stamp_updated_at(
    previous: Optional[datetime], now: Optional[datetime] = None
) -> datetime:
    """Return the ``updated_at`` value for a row being modified.

    Always the current time, but strictly later than ``previous`` so that two
    updates within one clock tick still move the timestamp forward.
    """
    stamped = now or datetime.now(timezone.utc)
    if stamped.tzinfo is None:
        stamped = stamped.replace(tzinfo=timezone.utc)
    if previous is not None:
        # SQLite hands back naive datetimes
        if previous.tzinfo is None:
            previous = previous.replace(tzinfo=timezone.utc)
        if stamped <= previous:
            stamped = previous + timedelta(microseconds=1)
    return stamped
