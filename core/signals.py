import logging

from django.contrib.auth.models import User
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Profile

logger = logging.getLogger(__name__)


@receiver(post_save, sender=User)
def create_or_update_user_profile(sender, instance, created, raw=False, **kwargs):
    # Skip during loaddata to avoid duplicate errors
    if raw:
        return

    if created:
        role = Profile.Role.ADMIN if instance.is_superuser else Profile.Role.COORDINATOR
        Profile.objects.create(user=instance, role=role)
        logger.info("Provisioned %s profile for user %s", role, instance.pk)
    elif not Profile.objects.filter(user=instance).exists():
        Profile.objects.create(user=instance)
