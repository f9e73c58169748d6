"""Identity and event registry.

The registry is the only writer of the ``identities`` and ``events`` tables.
Every write runs as one transaction under a process-wide lock:

- a ``LedgerCommand`` row is appended first, stamped with the ledger time
- invariants are checked and state rows are changed
- notifications are appended to ``ledger_notifications``
- the transaction commits, or rolls back entirely on any error

so an applied write always leaves command, state and notifications together
and a rejected one leaves nothing behind. Reads open their own session and
never wait for the lock.
"""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from threading import Lock
from typing import Any, Callable, Dict, Iterator, List, Tuple

from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker

from app.core.errors import (
    IdentityAlreadyExists,
    IdentityNotFound,
    MatriculaAlreadyInUse,
    RegistryUnavailable,
)
from app.core.wallet_auth import ZERO_ADDRESS, normalize_address
from app.db.base import Base
from app.models.event import MAX_LEDGER_INT, Event
from app.models.identity import Identity
from app.models.ledger import LedgerCommand, LedgerNotification

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True)
class IdentityRecord:
    account: str
    name: str
    matricula: str
    curso: str
    created_at: int


@dataclass(frozen=True)
class EventRecord:
    id: int
    owner: str
    title: str
    description: str
    event_date: int
    created_at: int


@dataclass(frozen=True)
class Notification:
    seq: int
    command_seq: int
    name: str  # IdentityRegistered, IdentityUpdated, EventCreated
    payload: Dict[str, Any]


@dataclass(frozen=True)
class Receipt:
    """Result of a confirmed write."""
    seq: int
    sender: str
    call: str
    timestamp: int
    value: Any = None
    notifications: List[Notification] = field(default_factory=list)


EMPTY_IDENTITY = IdentityRecord(account=ZERO_ADDRESS, name="", matricula="", curso="", created_at=0)
EMPTY_EVENT = EventRecord(id=0, owner=ZERO_ADDRESS, title="", description="", event_date=0, created_at=0)


def init_ledger(engine: Engine) -> None:
    """Create the ledger tables if they do not exist."""
    try:
        Base.metadata.create_all(bind=engine)
    except OperationalError as exc:
        logger.error("cannot initialise ledger store", exc_info=True)
        raise RegistryUnavailable("Ledger store unavailable") from exc


def _identity_record(row: Identity) -> IdentityRecord:
    return IdentityRecord(
        account=row.account,
        name=row.name,
        matricula=row.matricula,
        curso=row.curso,
        created_at=int(row.created_at),
    )


def _event_record(row: Event) -> EventRecord:
    return EventRecord(
        id=int(row.id),
        owner=row.owner,
        title=row.title,
        description=row.description,
        event_date=int(row.event_date or 0),
        created_at=int(row.created_at),
    )


class _Transaction:
    """Handle given to write operations while they hold the writer lock."""

    def __init__(self, db: Session, command: LedgerCommand):
        self.db = db
        self.command = command
        self.notifications: List[Notification] = []

    @property
    def timestamp(self) -> int:
        return int(self.command.timestamp)

    def emit(self, event: str, **payload: Any) -> None:
        row = LedgerNotification(command_seq=self.command.seq, name=event, payload=payload)
        self.db.add(row)
        self.db.flush()
        self.notifications.append(
            Notification(seq=int(row.seq), command_seq=int(row.command_seq), name=event, payload=dict(payload))
        )


class RegistryStateMachine:
    def __init__(self, session_factory: sessionmaker, clock: Clock = time.time):
        self._session_factory = session_factory
        self._clock = clock
        self._write_lock = Lock()

    def now(self) -> int:
        return int(self._clock())

    # writes

    @contextmanager
    def _transaction(self, sender: str, call: str, args: Dict[str, Any]) -> Iterator[_Transaction]:
        with self._write_lock:
            db = self._session_factory()
            try:
                command = LedgerCommand(sender=sender, call=call, args=args, timestamp=self.now())
                db.add(command)
                db.flush()
                yield _Transaction(db, command)
                db.flush()
                db.commit()
            except OperationalError as exc:
                db.rollback()
                logger.error("ledger store failure during %s from %s", call, sender, exc_info=True)
                raise RegistryUnavailable("Ledger store unavailable") from exc
            except Exception as exc:
                db.rollback()
                logger.warning("%s from %s reverted: %s", call, sender, type(exc).__name__)
                raise
            finally:
                db.close()

    def _receipt(self, tx: _Transaction, value: Any = None) -> Receipt:
        command = tx.command
        return Receipt(
            seq=int(command.seq),
            sender=command.sender,
            call=command.call,
            timestamp=int(command.timestamp),
            value=value,
            notifications=list(tx.notifications),
        )

    def register_identity(self, sender: str, name: str, matricula: str, curso: str) -> Receipt:
        account = normalize_address(sender)
        args = {"name": name, "matricula": matricula, "curso": curso}
        with self._transaction(account, "registerIdentity", args) as tx:
            db = tx.db
            if db.query(Identity).filter(Identity.account == account).first() is not None:
                raise IdentityAlreadyExists(f"Identity already exists for {account}")
            if db.query(Identity).filter(Identity.matricula == matricula).first() is not None:
                raise MatriculaAlreadyInUse(f"Matricula {matricula} already in use")

            row = Identity(account=account, name=name, matricula=matricula, curso=curso, created_at=tx.timestamp)
            db.add(row)
            db.flush()
            tx.emit("IdentityRegistered", account=account, matricula=matricula, name=name)
            receipt = self._receipt(tx, _identity_record(row))
        logger.info("identity registered: account=%s seq=%s", account, receipt.seq)
        return receipt

    def update_identity(self, sender: str, name: str, curso: str) -> Receipt:
        account = normalize_address(sender)
        with self._transaction(account, "updateIdentity", {"name": name, "curso": curso}) as tx:
            db = tx.db
            row = db.query(Identity).filter(Identity.account == account).first()
            if row is None:
                raise IdentityNotFound(f"No identity registered for {account}")

            row.name = name
            row.curso = curso
            db.flush()
            tx.emit("IdentityUpdated", account=account, matricula=row.matricula, name=name)
            receipt = self._receipt(tx, _identity_record(row))
        logger.info("identity updated: account=%s seq=%s", account, receipt.seq)
        return receipt

    def create_event(self, sender: str, title: str, description: str, event_date: int = 0) -> Receipt:
        owner = normalize_address(sender)
        event_date = int(event_date or 0)
        args = {"title": title, "description": description, "eventDate": event_date}
        with self._transaction(owner, "createEvent", args) as tx:
            db = tx.db
            # ids are never reused: there is no delete
            event_id = (db.query(func.max(Event.id)).scalar() or 0) + 1
            row = Event(
                id=event_id,
                owner=owner,
                title=title,
                description=description,
                event_date=event_date,
                created_at=tx.timestamp,
            )
            db.add(row)
            db.flush()
            tx.emit("EventCreated", id=event_id, owner=owner, title=title)
            receipt = self._receipt(tx, event_id)
        logger.info("event created: id=%s owner=%s seq=%s", event_id, owner, receipt.seq)
        return receipt

    # reads

    @contextmanager
    def _read_session(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except OperationalError as exc:
            logger.error("ledger store read failed", exc_info=True)
            raise RegistryUnavailable("Ledger store unavailable") from exc
        finally:
            db.close()

    def get_identity(self, account: str) -> Tuple[IdentityRecord, bool]:
        account = normalize_address(account)
        with self._read_session() as db:
            row = db.query(Identity).filter(Identity.account == account).first()
            if row is None:
                return EMPTY_IDENTITY, False
            return _identity_record(row), True

    def get_identity_by_matricula(self, matricula: str) -> Tuple[IdentityRecord, bool]:
        with self._read_session() as db:
            row = db.query(Identity).filter(Identity.matricula == matricula).first()
            if row is None:
                return EMPTY_IDENTITY, False
            return _identity_record(row), True

    def get_all_identities(self) -> List[IdentityRecord]:
        with self._read_session() as db:
            return [_identity_record(row) for row in db.query(Identity).order_by(Identity.seq).all()]

    def get_event(self, event_id: int) -> Tuple[EventRecord, bool]:
        event_id = int(event_id)
        if not 1 <= event_id <= MAX_LEDGER_INT:
            return EMPTY_EVENT, False
        with self._read_session() as db:
            row = db.get(Event, event_id)
            if row is None:
                return EMPTY_EVENT, False
            return _event_record(row), True

    def get_events_by_owner(self, owner: str) -> List[EventRecord]:
        owner = normalize_address(owner)
        with self._read_session() as db:
            rows = db.query(Event).filter(Event.owner == owner).order_by(Event.id).all()
            return [_event_record(row) for row in rows]

    def get_all_events(self) -> List[EventRecord]:
        with self._read_session() as db:
            return [_event_record(row) for row in db.query(Event).order_by(Event.id).all()]

    def get_notifications(self, since: int = 0) -> List[Notification]:
        with self._read_session() as db:
            rows = (
                db.query(LedgerNotification)
                .filter(LedgerNotification.seq > since)
                .order_by(LedgerNotification.seq)
                .all()
            )
            return [
                Notification(seq=int(r.seq), command_seq=int(r.command_seq), name=r.name, payload=dict(r.payload))
                for r in rows
            ]

    def command_count(self) -> int:
        with self._read_session() as db:
            return db.query(func.count(LedgerCommand.seq)).scalar() or 0
