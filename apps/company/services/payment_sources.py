"""Payment source CRUD."""

from typing import Any, Dict, Optional
from uuid import UUID

from django.db import transaction
from django.db.models import ProtectedError, QuerySet

from ..models import IssuingEntity, PaymentSource
from .exceptions import (
    IssuingEntityNotFoundError,
    PaymentSourceNotFoundError,
    PaymentSourceInUseError,
)

SOURCE_FIELDS = [
    'name', 'currency_code', 'issuing_entity', 'bank_name', 'account_holder_name',
    'account_number', 'iban', 'swift_bic', 'routing_number_us', 'sort_code_uk',
    'additional_details', 'is_primary_for_entity',
]


def _clear_other_primaries(source: PaymentSource) -> None:
    (
        PaymentSource.objects
        .filter(issuing_entity_id=source.issuing_entity_id, is_primary_for_entity=True)
        .exclude(id=source.id)
        .update(is_primary_for_entity=False)
    )


def list_payment_sources(*, entity_id: Optional[UUID] = None) -> QuerySet:
    queryset = PaymentSource.objects.select_related('issuing_entity')
    if entity_id:
        queryset = queryset.filter(issuing_entity_id=entity_id)
    return queryset


@transaction.atomic
def create_payment_source(
    *,
    name: str,
    currency_code: str,
    issuing_entity: IssuingEntity,
    is_primary_for_entity: bool = False,
    **fields
) -> PaymentSource:
    """
    Create a payment source for an issuing entity.

    Raises:
        IssuingEntityNotFoundError: If the entity was deleted meanwhile
    """
    if not IssuingEntity.objects.filter(id=issuing_entity.id).exists():
        raise IssuingEntityNotFoundError(f"Issuing entity {issuing_entity.id} not found")

    if not PaymentSource.objects.filter(issuing_entity=issuing_entity).exists():
        is_primary_for_entity = True

    source = PaymentSource(
        name=name,
        currency_code=currency_code,
        issuing_entity=issuing_entity,
        is_primary_for_entity=is_primary_for_entity,
        **{k: v for k, v in fields.items() if k in SOURCE_FIELDS}
    )
    if source.is_primary_for_entity:
        _clear_other_primaries(source)
    source.save()
    return source


@transaction.atomic
def update_payment_source(*, source_id: UUID, data: Dict[str, Any]) -> PaymentSource:
    """
    Update a payment source.

    Moving a source to another entity is only allowed while no quote or
    invoice uses it. The old entity keeps a primary source if it has any left.

    Raises:
        PaymentSourceNotFoundError: If source doesn't exist
        PaymentSourceInUseError: If a referenced source is moved to another entity
    """
    try:
        source = PaymentSource.objects.select_for_update().get(id=source_id)
    except PaymentSource.DoesNotExist:
        raise PaymentSourceNotFoundError(f"Payment source {source_id} not found")

    old_entity_id = source.issuing_entity_id
    new_entity = data.get('issuing_entity')
    moving = new_entity is not None and new_entity.id != old_entity_id
    was_primary = source.is_primary_for_entity

    if moving:
        if source.invoices.exists() or source.quotes.exists():
            raise PaymentSourceInUseError(
                f"'{source.name}' is used by existing quotes or invoices "
                f"and cannot move to another entity"
            )
        if 'is_primary_for_entity' not in data:
            data = {**data, 'is_primary_for_entity': False}

    for field, value in data.items():
        if field in SOURCE_FIELDS:
            setattr(source, field, value)

    if moving and not PaymentSource.objects.filter(issuing_entity_id=source.issuing_entity_id).exists():
        source.is_primary_for_entity = True

    if source.is_primary_for_entity:
        _clear_other_primaries(source)
    source.save()

    if moving and was_primary:
        successor = (
            PaymentSource.objects
            .filter(issuing_entity_id=old_entity_id)
            .order_by('created_at')
            .first()
        )
        if successor:
            successor.is_primary_for_entity = True
            successor.save(update_fields=['is_primary_for_entity', 'updated_at'])
    return source


@transaction.atomic
def delete_payment_source(*, source_id: UUID) -> None:
    """
    Delete a payment source.

    Raises:
        PaymentSourceNotFoundError: If source doesn't exist
        PaymentSourceInUseError: If quotes or invoices reference it
    """
    try:
        source = PaymentSource.objects.get(id=source_id)
    except PaymentSource.DoesNotExist:
        raise PaymentSourceNotFoundError(f"Payment source {source_id} not found")

    try:
        source.delete()
    except ProtectedError:
        raise PaymentSourceInUseError(
            f"'{source.name}' is used by existing quotes or invoices"
        )
