import logging

from django.contrib.auth.models import Group, Permission
from django.db.models.signals import post_migrate
from django.dispatch import receiver

logger = logging.getLogger(__name__)

ROLE_PERMISSIONS = {
    "admin": [
        # At the moment the Admin has all the permissions,
        # including queues.reset_queuecounter and shop.change_shopsettings
    ],
    "staff": [
        # Staff runs the counter and the kitchen:
        # 1. Menus App - view only
        ("menus", "view_category"),
        ("menus", "view_menuitem"),
        # 2. Orders App
        ("orders", "add_order"),
        ("orders", "view_order"),
        ("orders", "change_order_status"),
        ("orders", "view_orderitem"),
        # 3. Queues App
        ("queues", "view_queuecounter"),
        # 4. Shop App
        ("shop", "view_shopsettings"),
    ],
}


def _get_permission(app_label: str, codename: str):
    try:
        return Permission.objects.get(content_type__app_label=app_label, codename=codename)
    except Permission.DoesNotExist:
        logger.debug(f"Permission {app_label}.{codename} does not exist!")
        return None


@receiver(post_migrate)
def create_default_groups(sender, **kwargs):
    for role, perm_list in ROLE_PERMISSIONS.items():
        group, created = Group.objects.get_or_create(name=role)

        if role == "admin":
            all_perms = Permission.objects.all()
            group.permissions.set(all_perms)
        else:
            perms = list(filter(None, (_get_permission(app, code) for app, code in perm_list)))
            if not perms:
                logger.debug(f"No permissions found for role '{role}'!")
            group.permissions.set(perms)

        if created:
            logger.info(f"Created group '{role}' with permissions")
        else:
            logger.debug(f"Updated group '{role}' with permissions")
