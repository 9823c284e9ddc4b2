"""
Sort, search and column-layout engine for the milk production table.

Records are MilkRecord instances or plain dicts with the same attribute names.

Sorting
    A sort spec is an ordered list of ``{'column': ..., 'direction': ...}``
    entries applied as a lexicographic multi-key sort: the first entry decides,
    ties fall through to the next entry, full ties keep their input order.

Searching
    ``field:value`` does a substring match on one field; anything else is split
    into terms and each record is scored across fields, higher weights for
    identifier/status fields and for exact matches. Zero-score records drop out
    and the rest come back by descending score.

Column layout
    Every column has a key, label, visible flag and order integer. The order
    integers always form a permutation of ``0..n-1``; reordering swaps two of
    them.
"""
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django.utils import timezone

TABLE_KEY = 'milk_production'
LAYOUT_VERSION = '1.0'

ASC = 'asc'
DESC = 'desc'
DIRECTIONS = (ASC, DESC)

SORTABLE_COLUMNS = (
    'created_date',
    'shed_number',
    'quantity',
    'fat_percentage',
    'snf',
    'status',
    'notes',
    'created_by',
    'updated_by',
    'updated_at',
    'gaushala_id',
)

DEFAULT_COLUMNS = (
    {'key': 'created_date', 'label': 'Date', 'visible': True, 'order': 0},
    {'key': 'shed_number', 'label': 'Shed Number', 'visible': True, 'order': 1},
    {'key': 'quantity', 'label': 'Quantity (L)', 'visible': True, 'order': 2},
    {'key': 'fat_percentage', 'label': 'Fat %', 'visible': True, 'order': 3},
    {'key': 'snf', 'label': 'SNF', 'visible': True, 'order': 4},
    {'key': 'status', 'label': 'Status', 'visible': True, 'order': 5},
    {'key': 'notes', 'label': 'Notes', 'visible': False, 'order': 6},
    {'key': 'created_by', 'label': 'Created By', 'visible': False, 'order': 7},
    {'key': 'updated_by', 'label': 'Updated By', 'visible': False, 'order': 8},
    {'key': 'updated_at', 'label': 'Updated At', 'visible': False, 'order': 9},
    {'key': 'gaushala_id', 'label': 'Gaushala ID', 'visible': False, 'order': 10},
)

# column -> (record attribute, comparator kind)
COLUMN_FIELDS = {
    'created_date': ('created_at', 'date'),
    'shed_number': ('shed_number', 'text'),
    'quantity': ('milk_quantity', 'number'),
    'fat_percentage': ('fat_percentage', 'number'),
    'snf': ('snf', 'number'),
    'status': ('status', 'text'),
    'notes': ('notes', 'text'),
    'created_by': ('created_by_id', 'number'),
    'updated_by': ('updated_by_id', 'number'),
    'updated_at': ('updated_at', 'date'),
    'gaushala_id': ('gaushala_id', 'number'),
}

FIELD_QUERY_RE = re.compile(r'^(\w+):(.+)$', re.ASCII)

# Names accepted on the left of ``field:value``
FIELD_ALIASES = {
    'shed': 'shed_number',
    'shednumber': 'shed_number',
    'shed_number': 'shed_number',
    'quantity': 'quantity',
    'milk': 'quantity',
    'fat': 'fat_percentage',
    'fatpercentage': 'fat_percentage',
    'fat_percentage': 'fat_percentage',
    'snf': 'snf',
    'status': 'status',
    'notes': 'notes',
    'gaushala': 'gaushala_id',
    'gaushalaid': 'gaushala_id',
    'gaushala_id': 'gaushala_id',
}

# (attribute, substring weight, extra weight for an exact match)
SCORE_RULES = (
    ('shed_number', 50, 100),
    ('status', 40, 80),
    ('milk_quantity', 30, 0),
    ('fat_percentage', 25, 0),
    ('snf', 25, 0),
    ('notes', 20, 0),
    ('gaushala_id', 15, 0),
    ('id', 15, 0),
    ('created_at', 10, 0),
)

EMPTY_CELL = '-'


class InvalidColumnError(ValueError):
    """Raised for a column key outside SORTABLE_COLUMNS"""


class InvalidSortError(ValueError):
    """Raised for a malformed sort specification"""


def _value(record, attr):
    if isinstance(record, dict):
        return record.get(attr)
    return getattr(record, attr, None)


def check_column(column):
    if column not in COLUMN_FIELDS:
        raise InvalidColumnError(f"Unknown column: {column!r}")
    return column


# ==================== SORTING ====================

def _timestamp(value):
    if value is None or value == '':
        return 0.0
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace('Z', '+00:00'))
        except ValueError:
            return 0.0
    if isinstance(value, datetime):
        return value.timestamp()
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day).timestamp()
    return 0.0


def _number(value):
    if value is None or value == '':
        return 0
    if isinstance(value, (int, float, Decimal)):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return 0


def sort_key(column, record):
    """Comparable key of one record for one column"""
    attr, kind = COLUMN_FIELDS[check_column(column)]
    value = _value(record, attr)
    if kind == 'date':
        return _timestamp(value)
    if kind == 'number':
        return _number(value)
    return str(value or '').casefold()


def normalize_sort_spec(sort_spec):
    """
    Validate a sort spec and return it as a list of column/direction dicts.

    Accepts dicts or ``(column, direction)`` pairs. A column listed twice keeps
    its first position.
    """
    normalized = []
    seen = set()
    for entry in sort_spec or []:
        if isinstance(entry, dict):
            column, direction = entry.get('column'), entry.get('direction', ASC)
        elif isinstance(entry, (list, tuple)) and len(entry) == 2:
            column, direction = entry
        else:
            raise InvalidSortError(f"Malformed sort entry: {entry!r}")
        check_column(column)
        if direction not in DIRECTIONS:
            raise InvalidSortError(f"Invalid sort direction for {column}: {direction!r}")
        if column in seen:
            continue
        seen.add(column)
        normalized.append({'column': column, 'direction': direction})
    return normalized


def load_sort_spec(stored):
    """Validated copy of a stored sort spec; an invalid one loads as unsorted"""
    try:
        return normalize_sort_spec(stored)
    except (InvalidColumnError, InvalidSortError, TypeError):
        return []


def parse_sort_param(value):
    """
    Parse ``shed_number,-quantity`` into a sort spec; ``-`` marks descending.
    """
    spec = []
    for part in (value or '').split(','):
        part = part.strip()
        if not part:
            continue
        direction = DESC if part.startswith('-') else ASC
        spec.append({'column': part.lstrip('-'), 'direction': direction})
    return normalize_sort_spec(spec)


def toggle_sort(sort_spec, column, multi=False):
    """
    Next sort spec after a header click on ``column``.

    Plain click: the column becomes the only key, cycling
    asc -> desc -> unsorted. With the modifier (``multi``) the column is
    appended as asc, flipped to desc in place, then removed, leaving the other
    keys untouched.
    """
    check_column(column)
    spec = normalize_sort_spec(sort_spec)
    existing = next((i for i, entry in enumerate(spec) if entry['column'] == column), None)

    if multi:
        if existing is None:
            return spec + [{'column': column, 'direction': ASC}]
        if spec[existing]['direction'] == ASC:
            spec[existing] = {'column': column, 'direction': DESC}
            return spec
        return [entry for i, entry in enumerate(spec) if i != existing]

    if existing is None:
        return [{'column': column, 'direction': ASC}]
    if spec[existing]['direction'] == ASC:
        return [{'column': column, 'direction': DESC}]
    return []


def sort_indicators(sort_spec):
    """
    Header indicators for the active sort keys.

    ``rank`` is the 1-based badge shown only while more than one key is active.
    """
    spec = normalize_sort_spec(sort_spec)
    multi = len(spec) > 1
    return [
        {
            'column': entry['column'],
            'direction': entry['direction'],
            'rank': index + 1 if multi else None,
        }
        for index, entry in enumerate(spec)
    ]


def sort_records(records, sort_spec):
    """Return records ordered by the sort spec; an empty spec keeps input order"""
    spec = normalize_sort_spec(sort_spec)
    result = list(records)
    # Stable sorts applied from the last key to the first give lexicographic order
    for entry in reversed(spec):
        column = entry['column']
        result.sort(key=lambda record: sort_key(column, record), reverse=entry['direction'] == DESC)
    return result


# ==================== SEARCHING ====================

def format_number(value):
    """Shortest decimal text of a number: 50, 50.5, 3.25"""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, int):
        return str(value)
    number = value if isinstance(value, Decimal) else Decimal(repr(value))
    if number == number.to_integral_value():
        return str(int(number))
    return format(number.normalize(), 'f')


def search_text(value):
    """Lower-cased text a search term is matched against; None if missing"""
    if value is None:
        return None
    if isinstance(value, (int, float, Decimal)):
        return format_number(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat().lower()
    return str(value).lower()


def field_matches(record, column, value):
    text = search_text(_value(record, COLUMN_FIELDS[column][0]))
    return text is not None and value in text


def score_record(record, terms):
    """Relevance score of a record for the given lower-cased search terms"""
    score = 0
    for term in terms:
        for attr, weight, exact_weight in SCORE_RULES:
            text = search_text(_value(record, attr))
            if text is None:
                continue
            if term in text:
                score += weight
            if exact_weight and text == term:
                score += exact_weight
    return score


def search_records(records, query):
    """
    Filter records by a search query.

    ``shed:A1`` style queries keep input order; free text is ranked by score.
    """
    text = (query or '').strip().lower()
    if not text:
        return list(records)

    match = FIELD_QUERY_RE.match(text)
    if match:
        column = FIELD_ALIASES.get(match.group(1))
        if column is None:
            return []
        value = match.group(2).strip()
        return [record for record in records if field_matches(record, column, value)]

    terms = text.split()
    scored = [(score_record(record, terms), record) for record in records]
    matched = [item for item in scored if item[0] > 0]
    matched.sort(key=lambda item: item[0], reverse=True)
    return [record for _, record in matched]


def build_table(records, query='', sort_spec=None):
    """Search, then sort; an active sort overrides relevance, ties keep it"""
    return sort_records(search_records(records, query), sort_spec or [])


# ==================== COLUMN LAYOUT ====================

class ColumnLayout:
    """Visibility and order of the table columns"""

    def __init__(self, columns=None):
        source = DEFAULT_COLUMNS if columns is None else columns
        self.columns = [dict(column) for column in source]
        self.fallback = False

    @classmethod
    def defaults(cls):
        return cls()

    @classmethod
    def from_stored(cls, columns, version):
        """
        Restore a saved layout.

        A version mismatch or a malformed layout yields the defaults with
        ``fallback`` set, so the caller can save them back.
        """
        if version == LAYOUT_VERSION and cls.is_valid(columns):
            return cls(columns)
        layout = cls()
        layout.fallback = True
        return layout

    @staticmethod
    def is_valid(columns):
        if not isinstance(columns, list) or len(columns) != len(DEFAULT_COLUMNS):
            return False
        keys = set()
        orders = set()
        for column in columns:
            if not isinstance(column, dict):
                return False
            key = column.get('key')
            order = column.get('order')
            if key not in COLUMN_FIELDS or key in keys:
                return False
            if not isinstance(column.get('visible'), bool):
                return False
            if not isinstance(order, int) or isinstance(order, bool):
                return False
            if not isinstance(column.get('label'), str):
                return False
            keys.add(key)
            orders.add(order)
        return orders == set(range(len(columns)))

    def to_list(self):
        return [dict(column) for column in self.columns]

    def get(self, key):
        check_column(key)
        for column in self.columns:
            if column['key'] == key:
                return column
        raise InvalidColumnError(f"Column not configured: {key!r}")

    def ordered_columns(self):
        return sorted(self.columns, key=lambda column: column['order'])

    def visible_columns(self):
        return [column for column in self.ordered_columns() if column['visible']]

    def visible_keys(self):
        return [column['key'] for column in self.visible_columns()]

    def toggle_visibility(self, key):
        column = self.get(key)
        column['visible'] = not column['visible']
        return column['visible']

    def reset(self):
        self.columns = [dict(column) for column in DEFAULT_COLUMNS]

    def swap(self, source, target):
        """Swap the order integers of two columns; same key is a no-op"""
        source_column = self.get(source)
        target_column = self.get(target)
        if source == target:
            return False
        source_column['order'], target_column['order'] = target_column['order'], source_column['order']
        return True


class ColumnDrag:
    """Drag-and-drop reorder gesture over a ColumnLayout"""

    def __init__(self, layout):
        self.layout = layout
        self.source = None
        self.over = None

    def start(self, key):
        self.source = check_column(key)
        self.over = None

    def drag_over(self, key):
        self.over = check_column(key)

    def drop(self, target):
        """Swap source and target; returns True when the layout changed"""
        source = self.source
        changed = False
        if source is not None and target is not None and source != target:
            changed = self.layout.swap(source, target)
        self.end()
        return changed

    def end(self):
        self.source = None
        self.over = None


# ==================== RENDERING ====================

def _format_date(value):
    if value is None or value == '':
        return EMPTY_CELL
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace('Z', '+00:00'))
        except ValueError:
            return value
    if isinstance(value, datetime) and timezone.is_aware(value):
        value = timezone.localtime(value)
    return value.strftime('%d/%m/%Y')


def _format_decimal(value, places, suffix=''):
    if value is None or value == '':
        return EMPTY_CELL
    # Ties round up, so 4.25 shows as 4.3
    rounded = Decimal(str(value)).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    return f"{rounded:.{places}f}{suffix}"


def render_cell(column, record):
    """Display text of one table cell"""
    attr, _kind = COLUMN_FIELDS[check_column(column)]
    value = _value(record, attr)
    if column in ('created_date', 'updated_at'):
        return _format_date(value)
    if column == 'quantity':
        return _format_decimal(value, 2)
    if column == 'fat_percentage':
        return _format_decimal(value, 1, '%')
    if column == 'snf':
        return _format_decimal(value, 1)
    if value is None or value == '':
        return EMPTY_CELL
    return str(value)


def render_row(record, columns):
    return {column: render_cell(column, record) for column in columns}
