"""Issuing entity CRUD."""

from typing import Any, Dict, Optional
from uuid import UUID

from django.db import transaction
from django.db.models import ProtectedError

from ..models import IssuingEntity
from .exceptions import IssuingEntityNotFoundError, EntityInUseError

ENTITY_FIELDS = [
    'entity_name', 'registration_number', 'address', 'website',
    'email', 'phone', 'logo_url', 'is_primary',
]


def _clear_other_primaries(entity: IssuingEntity) -> None:
    IssuingEntity.objects.filter(is_primary=True).exclude(id=entity.id).update(is_primary=False)


@transaction.atomic
def create_issuing_entity(*, entity_name: str, is_primary: bool = False, **fields) -> IssuingEntity:
    """
    Create an issuing entity.

    Marking it primary demotes whichever entity was primary before. The very
    first entity becomes primary automatically.
    """
    if not IssuingEntity.objects.exists():
        is_primary = True

    entity = IssuingEntity(
        entity_name=entity_name,
        is_primary=is_primary,
        **{k: v for k, v in fields.items() if k in ENTITY_FIELDS}
    )
    if entity.is_primary:
        _clear_other_primaries(entity)
    entity.save()
    return entity


def get_issuing_entity(*, entity_id: UUID) -> IssuingEntity:
    try:
        return IssuingEntity.objects.get(id=entity_id)
    except IssuingEntity.DoesNotExist:
        raise IssuingEntityNotFoundError(f"Issuing entity {entity_id} not found")


def get_primary_issuing_entity() -> Optional[IssuingEntity]:
    return IssuingEntity.objects.filter(is_primary=True).first()


@transaction.atomic
def update_issuing_entity(*, entity_id: UUID, data: Dict[str, Any]) -> IssuingEntity:
    """
    Update an issuing entity.

    Raises:
        IssuingEntityNotFoundError: If entity doesn't exist
    """
    try:
        entity = IssuingEntity.objects.select_for_update().get(id=entity_id)
    except IssuingEntity.DoesNotExist:
        raise IssuingEntityNotFoundError(f"Issuing entity {entity_id} not found")

    for field, value in data.items():
        if field in ENTITY_FIELDS:
            setattr(entity, field, value)

    if entity.is_primary:
        _clear_other_primaries(entity)
    entity.save()
    return entity


@transaction.atomic
def delete_issuing_entity(*, entity_id: UUID) -> None:
    """
    Delete an entity together with its payment sources.

    Raises:
        IssuingEntityNotFoundError: If entity doesn't exist
        EntityInUseError: If quotes or invoices reference it
    """
    entity = get_issuing_entity(entity_id=entity_id)
    try:
        entity.delete()
    except ProtectedError:
        raise EntityInUseError(
            f"'{entity.entity_name}' is used by existing quotes or invoices"
        )
