"""Public customer ID generation."""

import logging
import secrets

from ..models import Customer
from .exceptions import CustomerIdGenerationError

logger = logging.getLogger(__name__)

# Digits and letters that cannot be misread (no 0/1, no I/L/O)
ID_DIGITS = '23456789'
ID_LETTERS = 'ABCDEFGHJKMNPQRSTUVWXYZ'
MAX_ATTEMPTS = 20


def _candidate() -> str:
    chars = [secrets.choice(ID_DIGITS) for _ in range(3)]
    chars += [secrets.choice(ID_LETTERS) for _ in range(2)]
    secrets.SystemRandom().shuffle(chars)
    return ''.join(chars)


def generate_public_customer_id() -> str:
    """
    Return an unused 5-character ID (3 digits + 2 letters, shuffled).

    Soft-deleted customers keep their ID, so it is never reissued.

    Raises:
        CustomerIdGenerationError: If every attempt collided
    """
    for attempt in range(1, MAX_ATTEMPTS + 1):
        candidate = _candidate()
        if not Customer.objects.filter(public_customer_id=candidate).exists():
            return candidate
        logger.debug("Customer ID collision on attempt %d: %s", attempt, candidate)

    logger.error("Could not generate a unique customer ID after %d attempts", MAX_ATTEMPTS)
    raise CustomerIdGenerationError("Could not generate a unique customer ID")
