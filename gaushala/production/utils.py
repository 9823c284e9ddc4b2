"""Persistence of per-user milk table layouts"""
import logging

from .models import TableLayout
from .table import TABLE_KEY, LAYOUT_VERSION, ColumnLayout, load_sort_spec, sort_indicators

logger = logging.getLogger(__name__)


def load_table_layout(user, table_key=TABLE_KEY):
    """
    Load a user's saved layout, creating the default one on first use

    Returns (row, ColumnLayout, sort_spec). A stale or malformed stored layout
    is replaced by the defaults, and a sort spec naming unknown columns is
    dropped; either repair is written back immediately.
    """
    row, created = TableLayout.objects.get_or_create(
        user=user,
        table_key=table_key,
        defaults={
            'version': LAYOUT_VERSION,
            'columns': ColumnLayout.defaults().to_list(),
            'sort_spec': [],
        },
    )
    if created:
        return row, ColumnLayout.defaults(), []

    layout = ColumnLayout.from_stored(row.columns, row.version)
    sort_spec = load_sort_spec(row.sort_spec)
    if layout.fallback or sort_spec != row.sort_spec:
        logger.info(f"Resetting stored {table_key} layout for user {user.pk} (version {row.version!r})")
        save_table_layout(row, layout, sort_spec)
    return row, layout, sort_spec


def save_table_layout(row, layout=None, sort_spec=None):
    """Write layout and/or sort spec back to the stored row"""
    update_fields = ['version', 'updated_at']
    row.version = LAYOUT_VERSION
    if layout is not None:
        row.columns = layout.to_list()
        update_fields.append('columns')
    if sort_spec is not None:
        row.sort_spec = list(sort_spec)
        update_fields.append('sort_spec')
    row.save(update_fields=update_fields)
    return row


def layout_payload(layout, sort_spec):
    """Response body shared by the layout endpoints"""
    return {
        'table_key': TABLE_KEY,
        'version': LAYOUT_VERSION,
        'columns': layout.ordered_columns(),
        'visible_columns': layout.visible_keys(),
        'sort': sort_spec,
        'sort_indicators': sort_indicators(sort_spec),
    }
