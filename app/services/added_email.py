from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.core.errors import NotFound, UniquenessViolation
from app.logging_config import log_database_event
from app.models import AddedEmail, SYSTEM_MANAGED_FIELDS
from app.policies import Operation, authorize, stamp_updated_at
from app.utils.auth import Principal

WRITABLE_FIELDS = frozenset(
    column.name
    for column in AddedEmail.__table__.columns
    if column.name not in SYSTEM_MANAGED_FIELDS
)


class AddedEmailService:
    """CRUD on AddedEmail with the row level security policies applied.

    Every public method is a single transaction: authorization runs before
    anything is written, and a failure at any step leaves no partial state.
    """

    def list_emails(
        self,
        db: Session,
        principal: Principal,
        limit: Optional[int] = None,
        offset: int = 0,
        created_by: Optional[UUID] = None,
    ) -> List[AddedEmail]:
        """Most recently added first, optionally only one owner's entries."""
        authorize(Operation.READ, principal)

        query = db.query(AddedEmail)
        if created_by is not None:
            query = query.filter(AddedEmail.created_by == created_by)
        query = query.order_by(AddedEmail.created_at.desc(), AddedEmail.id.desc())
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def get_email(self, db: Session, principal: Principal, email_id: int) -> AddedEmail:
        authorize(Operation.READ, principal, record_id=email_id)
        return self._load(db, email_id)

    def get_by_address(
        self, db: Session, principal: Principal, email: str
    ) -> AddedEmail:
        authorize(Operation.READ, principal)
        record = db.query(AddedEmail).filter(AddedEmail.email == email).first()
        if record is None:
            raise NotFound(email)
        return record

    def create_email(
        self, db: Session, principal: Principal, data: Dict[str, Any]
    ) -> AddedEmail:
        """Insert a new entry.

        ``created_by`` defaults to the caller when the payload leaves it out.
        """
        values = self._writable(data)
        values.setdefault("created_by", principal.user_id)

        authorize(Operation.INSERT, principal, proposed=values)
        self._ensure_unique(db, values["email"])

        record = AddedEmail(**values)
        db.add(record)
        self._commit(db, values["email"])
        db.refresh(record)

        log_database_event(
            "insert",
            AddedEmail.__tablename__,
            record_id=record.id,
            user_id=str(principal),
        )
        return record

    def update_email(
        self,
        db: Session,
        principal: Principal,
        email_id: int,
        changes: Dict[str, Any],
    ) -> AddedEmail:
        """Apply ``changes`` to an entry the caller owns.

        Ownership is checked on the stored row and again on the row as it
        would be written, so ``created_by`` cannot be handed to someone else
        or cleared. ``updated_at`` is always restamped.
        """
        self._deny_anonymous(Operation.UPDATE, principal)
        record = self._load(db, email_id, for_update=True)
        changes = self._writable(changes)

        proposed = {field: getattr(record, field) for field in WRITABLE_FIELDS}
        proposed.update(changes)
        authorize(
            Operation.UPDATE,
            principal,
            existing=record,
            proposed=proposed,
            record_id=record.id,
        )

        new_email = changes.get("email")
        if new_email is not None and new_email != record.email:
            self._ensure_unique(db, new_email, exclude_id=record.id)

        for field, value in changes.items():
            setattr(record, field, value)
        record.updated_at = stamp_updated_at(record.updated_at)

        self._commit(db, record.email, record_id=email_id)
        db.refresh(record)

        log_database_event(
            "update",
            AddedEmail.__tablename__,
            record_id=record.id,
            user_id=str(principal),
            extra_data={"fields": sorted(changes)},
        )
        return record

    def delete_email(self, db: Session, principal: Principal, email_id: int) -> None:
        self._deny_anonymous(Operation.DELETE, principal)
        record = self._load(db, email_id, for_update=True)
        authorize(Operation.DELETE, principal, existing=record, record_id=record.id)

        db.delete(record)
        self._commit(db, record_id=email_id)

        log_database_event(
            "delete",
            AddedEmail.__tablename__,
            record_id=email_id,
            user_id=str(principal),
        )

    def _deny_anonymous(self, operation: Operation, principal: Principal) -> None:
        # Refuse before the lookup so anonymous callers cannot probe for ids
        if not principal.authenticated:
            authorize(operation, principal)

    def _load(
        self, db: Session, email_id: int, for_update: bool = False
    ) -> AddedEmail:
        query = db.query(AddedEmail).filter(AddedEmail.id == email_id)
        if for_update:
            # Hold the row until commit so the ownership check stays valid
            query = query.with_for_update()
        record = query.first()
        if record is None:
            raise NotFound(email_id)
        return record

    def _writable(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return {key: value for key, value in data.items() if key in WRITABLE_FIELDS}

    def _ensure_unique(
        self, db: Session, email: str, exclude_id: Optional[int] = None
    ) -> None:
        query = db.query(AddedEmail.id).filter(AddedEmail.email == email)
        if exclude_id is not None:
            query = query.filter(AddedEmail.id != exclude_id)
        if query.first() is not None:
            raise UniquenessViolation(email)

    def _commit(
        self,
        db: Session,
        email: Optional[str] = None,
        record_id: Optional[int] = None,
    ) -> None:
        try:
            db.commit()
        except IntegrityError:
            # A concurrent writer won the race on the unique email index
            db.rollback()
            raise UniquenessViolation(email)
        except StaleDataError:
            # The row was deleted after it was loaded
            db.rollback()
            raise NotFound(record_id)
        except Exception:
            db.rollback()
            raise


def get_added_email_service() -> AddedEmailService:
    return AddedEmailService()
