# Change notifications for the tracked content tables
import logging

from django.db import transaction
from django.db.models.signals import post_save, post_delete
from django.dispatch import Signal, receiver

logger = logging.getLogger(__name__)

# Sent once a change to a tracked table is committed.
# Arguments: table (db table name), event ("INSERT", "UPDATE" or "DELETE")
table_changed = Signal()

# Guest messages are write only and never mirrored
UNTRACKED_TABLES = ('contact_messages',)


def is_tracked(sender):
    meta = getattr(sender, '_meta', None)
    return (
        meta is not None
        and meta.app_label == 'content'
        and meta.db_table not in UNTRACKED_TABLES
    )


@receiver([post_save, post_delete])
def broadcast_table_change(sender, instance, **kwargs):
    """Announce row changes in content tables after the transaction commits"""
    if not is_tracked(sender):
        return
    if kwargs.get('signal') is post_delete:
        event = "DELETE"
    else:
        event = "INSERT" if kwargs.get('created') else "UPDATE"
    table = sender._meta.db_table
    using = kwargs.get('using')
    logger.debug(f"{event} on {table} (pk={instance.pk})")
    transaction.on_commit(
        lambda: table_changed.send(sender=sender, table=table, event=event),
        using=using,
    )
