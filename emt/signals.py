# emt/signals.py

import logging
from django.db.models.signals import post_save
from django.dispatch import receiver
from .models import Event

logger = logging.getLogger(__name__)

@receiver(post_save, sender=Event)
def log_event_submission(sender, instance, created, **kwargs):
    """
    Logs a message when a new Event proposal is created.
    """
    if created:
        logger.info(
            "New event proposal '%s' (ID: %s) was submitted by user %s with status %s.",
            instance.title,
            instance.id,
            instance.submitted_by_id,
            instance.status,
        )
