"""Cache invalidation on committed document changes."""

import logging

from django.dispatch import receiver

from sanctuary.cache import invalidate
from sanctuary.stores.interfaces import documents_changed

logger = logging.getLogger(__name__)


@receiver(documents_changed)
def invalidate_document_cache(sender, refs=frozenset(), **kwargs):
    """Drop the list and detail cache entries of every changed document."""
    for ref in refs:
        invalidate(ref.collection, ref.id)
    if refs:
        logger.debug("Invalidated cache for %d documents", len(refs))
