"""SKU generation."""

import logging
import secrets

from ..models import Product
from .exceptions import SkuGenerationError

logger = logging.getLogger(__name__)

SKU_PREFIX = 'PR-'
SKU_ALPHABET = 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'
SKU_LENGTH = 5
MAX_ATTEMPTS = 10


def _candidate() -> str:
    return SKU_PREFIX + ''.join(secrets.choice(SKU_ALPHABET) for _ in range(SKU_LENGTH))


def generate_sku() -> str:
    """
    Return an unused SKU such as ``PR-7KQ2M``.

    Deleted products keep their SKU, so it is never reissued.

    Raises:
        SkuGenerationError: If every attempt collided
    """
    for attempt in range(1, MAX_ATTEMPTS + 1):
        candidate = _candidate()
        if not Product.objects.filter(sku=candidate).exists():
            return candidate
        logger.debug("SKU collision on attempt %d: %s", attempt, candidate)

    logger.error("Could not generate a unique SKU after %d attempts", MAX_ATTEMPTS)
    raise SkuGenerationError("Could not generate a unique SKU")
