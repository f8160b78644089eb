"""
Inventory — Service Layer

Ledger mutations: intake (into the pool), distribute (pool -> locations),
transfer (location -> location) and sale consumption (location -> nowhere).

Each public operation is one database transaction. Rows are locked with
SELECT ... FOR UPDATE in a fixed order (pool first, then stock rows by
product and location) and every write is conditional on the version read
under that lock. All validation happens before the first write, so a
rejected call leaves no trace.

@file inventory/services.py
"""

import functools
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import NamedTuple

from django.conf import settings
from django.db import DatabaseError, IntegrityError, connection, transaction
from django.db.models import F
from django.utils import timezone

from catalog.services import ProductCatalog
from core.constants import AUDIT_ACTION_CREATE, AUDIT_ACTION_UPDATE, MAX_LEDGER_QUANTITY
from core.exceptions import (
    ConcurrencyConflict,
    InsufficientAvailableError,
    InsufficientStockError,
    InvalidAmountError,
    InvalidTargetError,
    InvalidTransferError,
    ResourceNotFoundError,
    StorageFailure,
)
from core.services import AuditService
from locations.services import LocationDirectory

from .models import PoolRecord, StockRecord, TransferRecord

logger = logging.getLogger('backoffice')

MAX_DISTRIBUTION_TARGETS = 2

# lock_not_available, deadlock_detected, serialization_failure
CONFLICT_SQLSTATES = {'55P03', '40P01', '40001'}
UNIQUE_VIOLATION_SQLSTATE = '23505'


# ---------------------------------------------------------------------------
# Transaction boundary
# ---------------------------------------------------------------------------

def _sqlstate(exc: DatabaseError) -> str | None:
    cause = exc.__cause__
    return getattr(cause, 'sqlstate', None) or getattr(cause, 'pgcode', None)


def _set_lock_timeout() -> None:
    if connection.vendor != 'postgresql':
        return
    timeout_ms = int(getattr(settings, 'LEDGER_LOCK_TIMEOUT_MS', 5000))
    with connection.cursor() as cursor:
        cursor.execute("SELECT set_config('lock_timeout', %s, true)", [f'{timeout_ms}ms'])


def ledger_transaction(func):
    """
    Run ``func`` in one atomic block and translate storage errors.

    Lost races (duplicate first insert, lock timeout, deadlock) become
    ConcurrencyConflict; anything else the database raises becomes
    StorageFailure. Nothing is retried here.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            with transaction.atomic():
                _set_lock_timeout()
                return func(*args, **kwargs)
        except IntegrityError as exc:
            state = _sqlstate(exc)
            if state == UNIQUE_VIOLATION_SQLSTATE or (state is None and 'UNIQUE' in str(exc).upper()):
                logger.warning('%s lost an insert race: %s', func.__qualname__, exc)
                raise ConcurrencyConflict(
                    detail='A concurrent request created the same record. Retry the operation.',
                ) from exc
            logger.error('%s violated a storage constraint: %s', func.__qualname__, exc)
            raise StorageFailure() from exc
        except DatabaseError as exc:
            if _sqlstate(exc) in CONFLICT_SQLSTATES:
                logger.warning('%s could not lock its rows: %s', func.__qualname__, exc)
                raise ConcurrencyConflict() from exc
            logger.error('%s failed to commit: %s', func.__qualname__, exc)
            raise StorageFailure() from exc

    return wrapper


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def _require_int(amount, *, name: str = 'amount') -> int:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmountError(
            detail=f'{name} must be an integer, got {amount!r}.', amount=str(amount),
        )
    if amount > MAX_LEDGER_QUANTITY:
        raise InvalidAmountError(
            detail=f'{name} cannot exceed {MAX_LEDGER_QUANTITY}, got {amount}.',
            amount=str(amount), max_quantity=MAX_LEDGER_QUANTITY,
        )
    return amount


def _require_positive(amount, *, name: str = 'amount') -> int:
    amount = _require_int(amount, name=name)
    if amount <= 0:
        raise InvalidAmountError(
            detail=f'{name} must be greater than zero, got {amount}.', amount=amount,
        )
    return amount


def _require_headroom(current: int, amount: int, **context) -> None:
    """Reject an addition that would push a stored quantity past the column bound."""
    if current + amount > MAX_LEDGER_QUANTITY:
        raise InvalidAmountError(
            detail=(
                f'Adding {amount} to {current} would exceed the maximum quantity '
                f'of {MAX_LEDGER_QUANTITY}.'
            ),
            current=current, amount=amount, max_quantity=MAX_LEDGER_QUANTITY, **context,
        )


def _actor_or_none(actor):
    if actor is None or not getattr(actor, 'is_authenticated', False):
        return None
    return actor


class DistributionTarget(NamedTuple):
    location_id: int
    amount: int


def _normalize_targets(targets) -> list[DistributionTarget]:
    if isinstance(targets, (str, bytes)) or not isinstance(targets, Iterable):
        raise InvalidTargetError(detail='Targets must be a list of (location_id, amount).')
    normalized = []
    for target in targets:
        if isinstance(target, Mapping):
            try:
                location_id, amount = target['location_id'], target['amount']
            except KeyError as exc:
                raise InvalidTargetError(detail=f'Target is missing {exc.args[0]!r}.') from exc
        else:
            try:
                location_id, amount = target
            except (TypeError, ValueError) as exc:
                raise InvalidTargetError(detail=f'Malformed target {target!r}.') from exc
        normalized.append(DistributionTarget(location_id, amount))

    if not 1 <= len(normalized) <= MAX_DISTRIBUTION_TARGETS:
        raise InvalidTargetError(
            detail=f'Between 1 and {MAX_DISTRIBUTION_TARGETS} targets are required, got {len(normalized)}.',
        )
    for target in normalized:
        _require_int(target.amount)
        if target.amount < 0:
            raise InvalidTargetError(
                detail=f'Target amount cannot be negative (location {target.location_id}).',
                location_id=target.location_id, amount=target.amount,
            )
    location_ids = [t.location_id for t in normalized]
    if len(set(location_ids)) != len(location_ids):
        raise InvalidTargetError(
            detail='Each target location may appear only once.', location_ids=location_ids,
        )
    if sum(t.amount for t in normalized) == 0:
        raise InvalidTargetError(detail='At least one target amount must be greater than zero.')
    return normalized


class SaleLine(NamedTuple):
    product_id: int
    amount: int


def _normalize_lines(lines) -> list[SaleLine]:
    if isinstance(lines, (str, bytes, Mapping)) or not isinstance(lines, Iterable):
        raise InvalidTargetError(detail='Sale lines must be a list of {product_id, amount}.')
    normalized = []
    for line in lines:
        if not isinstance(line, Mapping):
            raise InvalidTargetError(detail=f'Malformed sale line {line!r}.')
        try:
            product_id, amount = line['product_id'], line['amount']
        except KeyError as exc:
            raise InvalidTargetError(detail=f'Sale line is missing {exc.args[0]!r}.') from exc
        if isinstance(product_id, bool) or not isinstance(product_id, int):
            raise InvalidTargetError(
                detail=f'Sale line product_id must be an integer, got {product_id!r}.',
            )
        normalized.append(SaleLine(product_id, _require_positive(amount)))

    if not normalized:
        raise InvalidTargetError(detail='A sale must have at least one line.')
    product_ids = [line.product_id for line in normalized]
    if len(set(product_ids)) != len(product_ids):
        raise InvalidTargetError(
            detail='Each product may appear only once per sale.', product_ids=product_ids,
        )
    return normalized


# ---------------------------------------------------------------------------
# Row access under lock
# ---------------------------------------------------------------------------

def _lock_pool(product_id) -> PoolRecord | None:
    return PoolRecord.objects.select_for_update().filter(pk=product_id).first()


def _lock_stock(product_id, location_ids) -> dict[int, StockRecord]:
    rows = (
        StockRecord.objects.select_for_update()
        .filter(product_id=product_id, location_id__in=list(location_ids))
        .order_by('product_id', 'location_id')
    )
    return {row.location_id: row for row in rows}


def _save_pool(pool: PoolRecord) -> None:
    pool.recompute()
    now = timezone.now()
    updated = PoolRecord.objects.filter(pk=pool.pk, version=pool.version).update(
        total_quantity=pool.total_quantity,
        reserved_quantity=pool.reserved_quantity,
        available_quantity=pool.available_quantity,
        version=F('version') + 1,
        updated_at=now,
    )
    if updated != 1:
        raise ConcurrencyConflict(product_id=pool.pk)
    pool.version += 1
    pool.updated_at = now


def _set_stock_quantity(record: StockRecord, quantity: int) -> None:
    now = timezone.now()
    updated = StockRecord.objects.filter(pk=record.pk, version=record.version).update(
        quantity=quantity,
        version=F('version') + 1,
        updated_at=now,
    )
    if updated != 1:
        raise ConcurrencyConflict(product_id=record.product_id, location_id=record.location_id)
    record.quantity = quantity
    record.version += 1
    record.updated_at = now


def _add_stock(records: dict[int, StockRecord], product_id, location_id, amount: int) -> StockRecord:
    """Add ``amount`` to the (product, location) record, creating it if absent."""
    record = records.get(location_id)
    if record is None:
        record = StockRecord.objects.create(
            product_id=product_id, location_id=location_id, quantity=amount,
        )
        records[location_id] = record
        return record
    _set_stock_quantity(record, record.quantity + amount)
    return record


# ---------------------------------------------------------------------------
# Pool Ledger
# ---------------------------------------------------------------------------

class PoolLedgerService:
    """Undistributed per-product stock."""

    @staticmethod
    @ledger_transaction
    def intake(*, product_id, amount: int, actor=None) -> PoolRecord:
        """Add ``amount`` units to the product's pool, creating the pool on first intake."""
        amount = _require_positive(amount)
        ProductCatalog.get_product(product_id)

        pool, created = PoolRecord.objects.get_or_create(
            product_id=product_id,
            defaults={
                'total_quantity': amount,
                'reserved_quantity': 0,
                'available_quantity': amount,
            },
        )
        old_values = None
        if not created:
            pool = _lock_pool(product_id)
            _require_headroom(pool.total_quantity, amount, product_id=product_id)
            old_values = {
                'total_quantity': pool.total_quantity,
                'available_quantity': pool.available_quantity,
            }
            pool.total_quantity += amount
            _save_pool(pool)

        AuditService.log(
            actor=_actor_or_none(actor),
            action=AUDIT_ACTION_CREATE if created else AUDIT_ACTION_UPDATE,
            model_name='PoolRecord',
            object_id=str(pool.pk),
            old_values=old_values,
            new_values={
                'operation': 'intake',
                'amount': amount,
                'total_quantity': pool.total_quantity,
                'available_quantity': pool.available_quantity,
            },
        )
        logger.info(
            'Intake product=%s qty=%s pool_total=%s available=%s',
            product_id, amount, pool.total_quantity, pool.available_quantity,
        )
        return pool


# ---------------------------------------------------------------------------
# Distribution Engine
# ---------------------------------------------------------------------------

@dataclass
class DistributionResult:
    pool: PoolRecord
    stock_records: list[StockRecord] = field(default_factory=list)
    distributed_quantity: int = 0


class DistributionService:
    """Moves units from the pool into one or two locations."""

    @staticmethod
    @ledger_transaction
    def distribute(*, product_id, targets, actor=None) -> DistributionResult:
        """
        Move units from the product's pool into the given locations.

        ``targets`` holds one or two ``{'location_id', 'amount'}`` mappings
        (or ``(location_id, amount)`` pairs). Zero-amount targets are
        accepted but leave their location untouched.
        """
        normalized = _normalize_targets(targets)
        requested = sum(t.amount for t in normalized)

        pool = _lock_pool(product_id)
        if pool is None:
            raise ResourceNotFoundError(
                detail=f'No pool record for product {product_id}.', product_id=product_id,
            )
        for target in normalized:
            LocationDirectory.get_location(target.location_id)

        if requested > pool.available_quantity:
            logger.warning(
                'Distribution rejected product=%s available=%s requested=%s',
                product_id, pool.available_quantity, requested,
            )
            raise InsufficientAvailableError(
                available=pool.available_quantity, requested=requested, product_id=product_id,
            )

        moving = sorted((t for t in normalized if t.amount > 0), key=lambda t: t.location_id)
        records = _lock_stock(product_id, [t.location_id for t in moving])
        for target in moving:
            existing = records.get(target.location_id)
            if existing is not None:
                _require_headroom(
                    existing.quantity, target.amount,
                    product_id=product_id, location_id=target.location_id,
                )
        touched = [_add_stock(records, product_id, t.location_id, t.amount) for t in moving]

        old_values = {
            'total_quantity': pool.total_quantity,
            'available_quantity': pool.available_quantity,
        }
        pool.total_quantity -= requested
        _save_pool(pool)

        AuditService.log(
            actor=_actor_or_none(actor),
            action=AUDIT_ACTION_UPDATE,
            model_name='PoolRecord',
            object_id=str(pool.pk),
            old_values=old_values,
            new_values={
                'operation': 'distribute',
                'targets': [{'location_id': t.location_id, 'amount': t.amount} for t in moving],
                'total_quantity': pool.total_quantity,
                'available_quantity': pool.available_quantity,
            },
        )
        logger.info(
            'Distributed product=%s qty=%s targets=%s pool_total=%s',
            product_id, requested, [(t.location_id, t.amount) for t in moving], pool.total_quantity,
        )
        return DistributionResult(pool=pool, stock_records=touched, distributed_quantity=requested)


# ---------------------------------------------------------------------------
# Transfer Engine
# ---------------------------------------------------------------------------

class TransferService:
    """Moves distributed stock between two locations and journals the move."""

    @staticmethod
    @ledger_transaction
    def transfer(
        *,
        product_id,
        from_location_id,
        to_location_id,
        amount: int,
        actor,
        note: str = '',
    ) -> TransferRecord:
        """
        Move ``amount`` units from one location to another.

        Transfers are permanent; a mistaken one is corrected with a reverse
        transfer.
        """
        if from_location_id == to_location_id:
            raise InvalidTransferError(location_id=from_location_id)
        amount = _require_positive(amount)
        ProductCatalog.get_product(product_id)
        LocationDirectory.get_location(from_location_id)
        LocationDirectory.get_location(to_location_id)

        records = _lock_stock(product_id, [from_location_id, to_location_id])
        source = records.get(from_location_id)
        on_hand = source.quantity if source is not None else 0
        if on_hand < amount:
            logger.warning(
                'Transfer rejected product=%s from=%s available=%s requested=%s',
                product_id, from_location_id, on_hand, amount,
            )
            raise InsufficientStockError(
                available=on_hand, requested=amount,
                product_id=product_id, location_id=from_location_id,
            )
        destination = records.get(to_location_id)
        if destination is not None:
            _require_headroom(
                destination.quantity, amount, product_id=product_id, location_id=to_location_id,
            )

        _set_stock_quantity(source, source.quantity - amount)
        _add_stock(records, product_id, to_location_id, amount)

        record = TransferRecord(
            product_id=product_id,
            from_location_id=from_location_id,
            to_location_id=to_location_id,
            quantity=amount,
            performed_by=_actor_or_none(actor),
            note=note or '',
        )
        record.save()

        logger.info(
            'Transfer %s product=%s %s->%s qty=%s by=%s',
            record.pk, product_id, from_location_id, to_location_id, amount, record.performed_by_id,
        )
        return record


# ---------------------------------------------------------------------------
# Sale Consumption
# ---------------------------------------------------------------------------

class SaleConsumptionService:
    """Removes sold units from a location. Journaled by the owning sale."""

    @staticmethod
    def _consume(product_id, location_id, amount) -> StockRecord:
        amount = _require_positive(amount)
        record = _lock_stock(product_id, [location_id]).get(location_id)
        if record is None:
            raise ResourceNotFoundError(
                detail=f'No stock record for product {product_id} at location {location_id}.',
                product_id=product_id, location_id=location_id,
            )
        if record.quantity < amount:
            logger.warning(
                'Consumption rejected product=%s location=%s available=%s requested=%s',
                product_id, location_id, record.quantity, amount,
            )
            raise InsufficientStockError(
                available=record.quantity, requested=amount,
                product_id=product_id, location_id=location_id,
            )
        _set_stock_quantity(record, record.quantity - amount)
        return record

    @staticmethod
    @ledger_transaction
    def consume(*, product_id, location_id, amount: int) -> StockRecord:
        """Decrement the location's stock for one sold line item."""
        record = SaleConsumptionService._consume(product_id, location_id, amount)
        logger.info(
            'Consumed product=%s location=%s qty=%s remaining=%s',
            product_id, location_id, amount, record.quantity,
        )
        return record

    @staticmethod
    @ledger_transaction
    def consume_lines(*, location_id, lines) -> list[StockRecord]:
        """
        Consume every line of one sale atomically: all lines or none.

        ``lines`` holds ``{'product_id', 'amount'}`` mappings; a product may
        appear only once. Records are returned in line order.
        """
        normalized = _normalize_lines(lines)

        # Locks are taken in product order; results follow the caller's line order.
        consumed = {
            line.product_id: SaleConsumptionService._consume(line.product_id, location_id, line.amount)
            for line in sorted(normalized, key=lambda line: line.product_id)
        }
        logger.info(
            'Consumed sale location=%s lines=%s',
            location_id, [(line.product_id, line.amount) for line in normalized],
        )
        return [consumed[line.product_id] for line in normalized]
