"""
Test suite for the milk production module
Tests: table sorting/searching/layout engine, milk record CRUD, aggregates, saved table layouts
"""
from datetime import date, datetime, timedelta
from decimal import Decimal

from django.test import SimpleTestCase, TestCase
from django.utils import timezone
from rest_framework import status

from gaushala.core.models import AuditLog
from gaushala.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import MilkRecord, TableLayout
from .table import (
    ASC, DESC, TABLE_KEY, ColumnDrag, ColumnLayout, InvalidColumnError, InvalidSortError,
    build_table, format_number, load_sort_spec, normalize_sort_spec, parse_sort_param,
    render_cell, render_row, search_records, sort_indicators, sort_records, toggle_sort,
)


def make_records():
    return [
        {
            'id': 1, 'shed_number': 'A1', 'milk_quantity': Decimal('50.00'),
            'fat_percentage': Decimal('4.5'), 'snf': Decimal('8.5'), 'status': 'GOOD', 'notes': '',
            'created_at': datetime(2024, 1, 1, 8, 0), 'gaushala_id': 7,
        },
        {
            'id': 2, 'shed_number': 'B2', 'milk_quantity': Decimal('30.00'),
            'fat_percentage': None, 'snf': None, 'status': 'POOR', 'notes': 'rain delayed collection',
            'created_at': datetime(2024, 1, 3, 8, 0), 'gaushala_id': 7,
        },
        {
            'id': 3, 'shed_number': 'a10', 'milk_quantity': Decimal('50.00'),
            'fat_percentage': Decimal('3.9'), 'snf': Decimal('8.1'), 'status': 'GOOD', 'notes': '',
            'created_at': datetime(2024, 1, 2, 8, 0), 'gaushala_id': 8,
        },
    ]


def ids(records):
    return [record['id'] for record in records]


class TableSortingTests(SimpleTestCase):
    """Test multi-column sorting of table rows"""

    def setUp(self):
        self.records = make_records()

    def test_single_column_ascending_keeps_ties_in_input_order(self):
        result = sort_records(self.records, [{'column': 'quantity', 'direction': ASC}])
        self.assertEqual(ids(result), [2, 1, 3])

    def test_single_column_descending_is_stable(self):
        result = sort_records(self.records, [{'column': 'quantity', 'direction': DESC}])
        self.assertEqual(ids(result), [1, 3, 2])

    def test_secondary_key_breaks_ties(self):
        spec = [{'column': 'quantity', 'direction': DESC}, {'column': 'created_date', 'direction': DESC}]
        self.assertEqual(ids(sort_records(self.records, spec)), [3, 1, 2])

    def test_text_columns_compare_case_insensitively(self):
        result = sort_records(self.records, [('shed_number', ASC)])
        self.assertEqual(ids(result), [1, 3, 2])

    def test_missing_numbers_sort_as_zero(self):
        result = sort_records(self.records, [('fat_percentage', ASC)])
        self.assertEqual(ids(result)[0], 2)

    def test_empty_spec_keeps_input_order(self):
        self.assertEqual(ids(sort_records(self.records, [])), [1, 2, 3])

    def test_normalize_rejects_unknown_column(self):
        with self.assertRaises(InvalidColumnError):
            normalize_sort_spec([{'column': 'weight', 'direction': ASC}])

    def test_normalize_rejects_bad_direction(self):
        with self.assertRaises(InvalidSortError):
            normalize_sort_spec([{'column': 'snf', 'direction': 'up'}])

    def test_normalize_keeps_first_duplicate(self):
        spec = normalize_sort_spec([('snf', DESC), ('status', ASC), ('snf', ASC)])
        self.assertEqual(spec, [{'column': 'snf', 'direction': DESC}, {'column': 'status', 'direction': ASC}])

    def test_load_sort_spec_drops_invalid_spec(self):
        self.assertEqual(load_sort_spec([{'column': 'nope', 'direction': ASC}]), [])
        self.assertEqual(load_sort_spec(None), [])

    def test_parse_sort_param(self):
        self.assertEqual(parse_sort_param('shed_number,-quantity'), [
            {'column': 'shed_number', 'direction': ASC},
            {'column': 'quantity', 'direction': DESC},
        ])
        self.assertEqual(parse_sort_param(''), [])


class SortToggleTests(SimpleTestCase):
    """Test header-click sort transitions"""

    def test_plain_click_cycles_asc_desc_unsorted(self):
        spec = toggle_sort([], 'quantity')
        self.assertEqual(spec, [{'column': 'quantity', 'direction': ASC}])
        spec = toggle_sort(spec, 'quantity')
        self.assertEqual(spec, [{'column': 'quantity', 'direction': DESC}])
        self.assertEqual(toggle_sort(spec, 'quantity'), [])

    def test_plain_click_replaces_other_keys(self):
        spec = [{'column': 'shed_number', 'direction': ASC}, {'column': 'quantity', 'direction': ASC}]
        self.assertEqual(toggle_sort(spec, 'status'), [{'column': 'status', 'direction': ASC}])

    def test_multi_click_appends_flips_and_removes(self):
        spec = toggle_sort([], 'shed_number')
        spec = toggle_sort(spec, 'quantity', multi=True)
        self.assertEqual([entry['column'] for entry in spec], ['shed_number', 'quantity'])
        spec = toggle_sort(spec, 'quantity', multi=True)
        self.assertEqual(spec[1], {'column': 'quantity', 'direction': DESC})
        spec = toggle_sort(spec, 'quantity', multi=True)
        self.assertEqual(spec, [{'column': 'shed_number', 'direction': ASC}])

    def test_toggle_unknown_column(self):
        with self.assertRaises(InvalidColumnError):
            toggle_sort([], 'weight')

    def test_indicators_rank_only_with_several_keys(self):
        self.assertEqual(sort_indicators([('snf', DESC)]), [{'column': 'snf', 'direction': DESC, 'rank': None}])
        ranks = [entry['rank'] for entry in sort_indicators([('snf', DESC), ('status', ASC)])]
        self.assertEqual(ranks, [1, 2])


class TableSearchTests(SimpleTestCase):
    """Test field queries and relevance-scored free text search"""

    def setUp(self):
        self.records = make_records()

    def test_blank_query_returns_everything(self):
        self.assertEqual(ids(search_records(self.records, '   ')), [1, 2, 3])

    def test_field_query_is_substring_and_keeps_order(self):
        self.assertEqual(ids(search_records(self.records, 'shed:A1')), [1, 3])

    def test_field_query_on_numbers(self):
        self.assertEqual(ids(search_records(self.records, 'fat:4.5')), [1])
        self.assertEqual(ids(search_records(self.records, 'quantity:30')), [2])

    def test_field_query_unknown_field(self):
        self.assertEqual(search_records(self.records, 'weight:40'), [])

    def test_exact_match_ranks_first(self):
        self.assertEqual(ids(search_records(self.records, 'a1')), [1, 3])

    def test_equal_scores_keep_input_order(self):
        self.assertEqual(ids(search_records(self.records, 'good')), [1, 3])

    def test_notes_are_searched(self):
        self.assertEqual(ids(search_records(self.records, 'rain')), [2])

    def test_no_match(self):
        self.assertEqual(search_records(self.records, 'zzz'), [])

    def test_sort_overrides_relevance(self):
        spec = [{'column': 'shed_number', 'direction': DESC}]
        self.assertEqual(ids(build_table(self.records, 'a1', spec)), [3, 1])

    def test_format_number(self):
        self.assertEqual(format_number(Decimal('50.00')), '50')
        self.assertEqual(format_number(Decimal('3.250')), '3.25')
        self.assertEqual(format_number(7), '7')


class ColumnLayoutTests(SimpleTestCase):
    """Test column visibility, ordering and drag reorder"""

    def test_defaults(self):
        layout = ColumnLayout.defaults()
        self.assertEqual(layout.visible_keys(), [
            'created_date', 'shed_number', 'quantity', 'fat_percentage', 'snf', 'status',
        ])
        self.assertFalse(layout.fallback)

    def test_toggle_visibility(self):
        layout = ColumnLayout()
        self.assertTrue(layout.toggle_visibility('notes'))
        self.assertEqual(layout.visible_keys()[-1], 'notes')
        self.assertFalse(layout.toggle_visibility('notes'))
        self.assertNotIn('notes', layout.visible_keys())

    def test_swap_exchanges_orders(self):
        layout = ColumnLayout()
        self.assertTrue(layout.swap('created_date', 'quantity'))
        self.assertEqual(layout.visible_keys()[:3], ['quantity', 'shed_number', 'created_date'])
        orders = sorted(column['order'] for column in layout.columns)
        self.assertEqual(orders, list(range(len(layout.columns))))

    def test_swap_same_column_is_noop(self):
        layout = ColumnLayout()
        self.assertFalse(layout.swap('snf', 'snf'))
        self.assertEqual(layout.to_list(), ColumnLayout().to_list())

    def test_unknown_column(self):
        with self.assertRaises(InvalidColumnError):
            ColumnLayout().toggle_visibility('weight')

    def test_reset(self):
        layout = ColumnLayout()
        layout.toggle_visibility('status')
        layout.swap('snf', 'notes')
        layout.reset()
        self.assertEqual(layout.to_list(), ColumnLayout().to_list())

    def test_from_stored_version_mismatch_falls_back(self):
        stored = ColumnLayout()
        stored.toggle_visibility('notes')
        layout = ColumnLayout.from_stored(stored.to_list(), '0.9')
        self.assertTrue(layout.fallback)
        self.assertNotIn('notes', layout.visible_keys())

    def test_from_stored_valid(self):
        stored = ColumnLayout()
        stored.toggle_visibility('notes')
        layout = ColumnLayout.from_stored(stored.to_list(), '1.0')
        self.assertFalse(layout.fallback)
        self.assertIn('notes', layout.visible_keys())

    def test_is_valid_rejects_broken_orders(self):
        columns = ColumnLayout().to_list()
        columns[1]['order'] = 0
        self.assertFalse(ColumnLayout.is_valid(columns))
        self.assertFalse(ColumnLayout.is_valid(columns[:-1]))
        self.assertFalse(ColumnLayout.is_valid('columns'))

    def test_drag_drop(self):
        layout = ColumnLayout()
        drag = ColumnDrag(layout)
        drag.start('status')
        drag.drag_over('shed_number')
        self.assertTrue(drag.drop('shed_number'))
        self.assertEqual(layout.get('status')['order'], 1)
        self.assertEqual(layout.get('shed_number')['order'], 5)
        self.assertIsNone(drag.source)

    def test_drop_on_itself_or_without_start(self):
        layout = ColumnLayout()
        drag = ColumnDrag(layout)
        self.assertFalse(drag.drop('snf'))
        drag.start('snf')
        self.assertFalse(drag.drop('snf'))
        self.assertEqual(layout.to_list(), ColumnLayout().to_list())


class CellRenderingTests(SimpleTestCase):
    """Test display formatting of table cells"""

    def setUp(self):
        self.records = make_records()

    def test_numbers(self):
        record = self.records[0]
        self.assertEqual(render_cell('quantity', record), '50.00')
        self.assertEqual(render_cell('fat_percentage', record), '4.5%')
        self.assertEqual(render_cell('snf', record), '8.5')
        self.assertEqual(render_cell('quantity', {'milk_quantity': Decimal('0')}), '0.00')

    def test_numbers_round_ties_up(self):
        self.assertEqual(render_cell('fat_percentage', {'fat_percentage': Decimal('4.25')}), '4.3%')
        self.assertEqual(render_cell('snf', {'snf': Decimal('8.25')}), '8.3')
        self.assertEqual(render_cell('quantity', {'milk_quantity': Decimal('12.345')}), '12.35')

    def test_missing_values(self):
        record = self.records[1]
        self.assertEqual(render_cell('fat_percentage', record), '-')
        self.assertEqual(render_cell('snf', record), '-')
        self.assertEqual(render_cell('notes', self.records[0]), '-')
        self.assertEqual(render_cell('created_by', record), '-')

    def test_dates(self):
        self.assertEqual(render_cell('created_date', self.records[1]), '03/01/2024')
        self.assertEqual(render_cell('updated_at', {'updated_at': date(2024, 2, 29)}), '29/02/2024')

    def test_render_row(self):
        row = render_row(self.records[0], ['shed_number', 'gaushala_id'])
        self.assertEqual(row, {'shed_number': 'A1', 'gaushala_id': '7'})


class MilkRecordTests(TestCase):
    """Test milk record endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.gaushala = TestDataFactory.create_gaushala()

    def test_create_milk_record(self):
        response = self.client.post('/api/v1/milk-records/', {
            'gaushala': self.gaushala.id,
            'shed_number': 'A1',
            'record_date': '2024-01-15',
            'session': 'MORNING',
            'milk_quantity': '42.50',
            'fat_percentage': '4.2',
            'status': 'GOOD',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['created_by'], self.user.id)
        self.assertEqual(response.data['created_by_name'], self.user.username)
        self.assertTrue(AuditLog.objects.filter(model_name='MilkRecord', action='create').exists())

    def test_create_rejects_non_positive_quantity(self):
        response = self.client.post('/api/v1/milk-records/', {
            'gaushala': self.gaushala.id,
            'shed_number': 'A1',
            'record_date': '2024-01-15',
            'milk_quantity': '0',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('milk_quantity', response.data)

    def test_create_rejects_fat_out_of_range(self):
        response = self.client.post('/api/v1/milk-records/', {
            'gaushala': self.gaushala.id,
            'shed_number': 'A1',
            'record_date': '2024-01-15',
            'milk_quantity': '10',
            'fat_percentage': '120',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cattle_entry_requires_cattle(self):
        response = self.client.post('/api/v1/milk-records/', {
            'gaushala': self.gaushala.id,
            'entry_type': 'CATTLE',
            'shed_number': 'A1',
            'record_date': '2024-01-15',
            'milk_quantity': '10',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('cattle', response.data)

    def test_cattle_entry_takes_shed_from_animal(self):
        shed = TestDataFactory.create_shed(gaushala=self.gaushala, shed_number='C3')
        cattle = TestDataFactory.create_cattle(shed=shed)
        response = self.client.post('/api/v1/milk-records/', {
            'gaushala': self.gaushala.id,
            'entry_type': 'CATTLE',
            'cattle': cattle.id,
            'record_date': '2024-01-15',
            'milk_quantity': '8.5',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['shed_number'], 'C3')
        self.assertEqual(response.data['cattle_animal_id'], cattle.unique_animal_id)

    def test_cattle_from_other_gaushala_rejected(self):
        cattle = TestDataFactory.create_cattle()
        response = self.client.post('/api/v1/milk-records/', {
            'gaushala': self.gaushala.id,
            'entry_type': 'CATTLE',
            'cattle': cattle.id,
            'shed_number': 'A1',
            'record_date': '2024-01-15',
            'milk_quantity': '8.5',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_and_delete(self):
        record = TestDataFactory.create_milk_record(gaushala=self.gaushala, user=self.user)
        response = self.client.patch(f'/api/v1/milk-records/{record.id}/', {'status': 'POOR'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'POOR')
        self.assertTrue(AuditLog.objects.filter(
            model_name='MilkRecord', action='update', object_id=str(record.id)
        ).exists())

        response = self.client.delete(f'/api/v1/milk-records/{record.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(MilkRecord.objects.filter(pk=record.id).exists())

    def test_list_returns_table_payload(self):
        TestDataFactory.create_milk_record(gaushala=self.gaushala, milk_quantity=Decimal('12.50'))
        response = self.client.get('/api/v1/milk-records/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(len(response.data['columns']), 6)
        self.assertEqual(response.data['sort'], [])
        self.assertEqual(response.data['results'][0]['cells']['quantity'], '12.50')

    def test_list_sort_param(self):
        TestDataFactory.create_milk_record(gaushala=self.gaushala, shed_number='A1', milk_quantity=Decimal('10'))
        TestDataFactory.create_milk_record(gaushala=self.gaushala, shed_number='B2', milk_quantity=Decimal('30'))
        TestDataFactory.create_milk_record(gaushala=self.gaushala, shed_number='C3', milk_quantity=Decimal('20'))
        response = self.client.get('/api/v1/milk-records/?sort=-quantity')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([r['shed_number'] for r in response.data['results']], ['B2', 'C3', 'A1'])
        self.assertEqual(response.data['sort_indicators'], [{'column': 'quantity', 'direction': 'desc', 'rank': None}])

    def test_list_invalid_sort_param(self):
        response = self.client.get('/api/v1/milk-records/?sort=weight')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_search(self):
        TestDataFactory.create_milk_record(gaushala=self.gaushala, shed_number='A1')
        TestDataFactory.create_milk_record(gaushala=self.gaushala, shed_number='B2')
        response = self.client.get('/api/v1/milk-records/?q=shed:b2')
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['shed_number'], 'B2')
        self.assertEqual(response.data['query'], 'shed:b2')

    def test_list_status_filter_accepts_several(self):
        TestDataFactory.create_milk_record(gaushala=self.gaushala, status='GOOD')
        TestDataFactory.create_milk_record(gaushala=self.gaushala, status='POOR')
        TestDataFactory.create_milk_record(gaushala=self.gaushala, status='AVERAGE')
        response = self.client.get('/api/v1/milk-records/?status=good,poor')
        self.assertEqual(response.data['count'], 2)

    def test_list_applies_saved_sort(self):
        TestDataFactory.create_milk_record(gaushala=self.gaushala, shed_number='A1')
        TestDataFactory.create_milk_record(gaushala=self.gaushala, shed_number='B2')
        response = self.client.get('/api/v1/milk-records/')
        self.assertEqual([r['shed_number'] for r in response.data['results']], ['B2', 'A1'])
        self.client.post('/api/v1/milk-records/layout/sort/', {'column': 'shed_number'}, format='json')
        response = self.client.get('/api/v1/milk-records/')
        self.assertEqual([r['shed_number'] for r in response.data['results']], ['A1', 'B2'])

    def test_non_admin_only_sees_granted_gaushalas(self):
        other = TestDataFactory.create_gaushala()
        TestDataFactory.create_milk_record(gaushala=self.gaushala)
        TestDataFactory.create_milk_record(gaushala=other)
        staff = TestDataFactory.create_user()
        TestDataFactory.grant_access(staff, self.gaushala)
        self.client.authenticate_user(staff)

        response = self.client.get('/api/v1/milk-records/')
        self.assertEqual(response.data['count'], 1)
        response = self.client.post('/api/v1/milk-records/', {
            'gaushala': other.id,
            'shed_number': 'A1',
            'record_date': '2024-01-15',
            'milk_quantity': '10',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_records_by_shed(self):
        TestDataFactory.create_milk_record(gaushala=self.gaushala, shed_number='A1')
        TestDataFactory.create_milk_record(gaushala=self.gaushala, shed_number='B2')
        response = self.client.get('/api/v1/milk-records/shed/a1/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)

    def test_records_by_date_range(self):
        today = timezone.localdate()
        TestDataFactory.create_milk_record(gaushala=self.gaushala, record_date=today)
        TestDataFactory.create_milk_record(gaushala=self.gaushala, record_date=today - timedelta(days=10))
        start = (today - timedelta(days=2)).isoformat()
        response = self.client.get(f'/api/v1/milk-records/range/?start_date={start}&end_date={today.isoformat()}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)

    def test_records_by_date_range_requires_dates(self):
        response = self.client.get('/api/v1/milk-records/range/?start_date=2024-01-01')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_total_quantity(self):
        TestDataFactory.create_milk_record(gaushala=self.gaushala, shed_number='A1', milk_quantity=Decimal('10.25'))
        TestDataFactory.create_milk_record(gaushala=self.gaushala, shed_number='A1', milk_quantity=Decimal('4.75'))
        TestDataFactory.create_milk_record(gaushala=self.gaushala, shed_number='B2', milk_quantity=Decimal('5'))
        response = self.client.get(f'/api/v1/milk-records/total-quantity/?gaushala={self.gaushala.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Decimal(str(response.data['total_quantity'])), Decimal('20'))
        by_shed = {row['shed_number']: row for row in response.data['by_shed']}
        self.assertEqual(by_shed['A1']['record_count'], 2)

    def test_total_quantity_without_records(self):
        response = self.client.get('/api/v1/milk-records/total-quantity/')
        self.assertEqual(Decimal(str(response.data['total_quantity'])), Decimal('0'))

    def test_stats(self):
        TestDataFactory.create_milk_record(gaushala=self.gaushala, fat_percentage=Decimal('4.0'), snf=Decimal('8.0'))
        TestDataFactory.create_milk_record(gaushala=self.gaushala, fat_percentage=Decimal('5.0'), snf=Decimal('9.0'))
        response = self.client.get('/api/v1/milk-records/stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['record_count'], 2)
        self.assertEqual(Decimal(str(response.data['average_fat'])), Decimal('4.5'))


class TableLayoutTests(TestCase):
    """Test the saved milk table layout endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_default_layout_created_on_first_read(self):
        response = self.client.get('/api/v1/milk-records/layout/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['table_key'], TABLE_KEY)
        self.assertEqual(len(response.data['columns']), 11)
        self.assertEqual(len(response.data['visible_columns']), 6)
        self.assertTrue(TableLayout.objects.filter(user=self.user, table_key=TABLE_KEY).exists())

    def test_toggle_column_visibility(self):
        response = self.client.post('/api/v1/milk-records/layout/visibility/', {'key': 'notes'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('notes', response.data['visible_columns'])
        self.assertTrue(AuditLog.objects.filter(action='layout_change', user=self.user).exists())

        response = self.client.get('/api/v1/milk-records/layout/')
        self.assertIn('notes', response.data['visible_columns'])

    def test_toggle_unknown_column(self):
        response = self.client.post('/api/v1/milk-records/layout/visibility/', {'key': 'weight'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_reorder_and_reset(self):
        response = self.client.post('/api/v1/milk-records/layout/reorder/', {
            'source': 'status', 'target': 'created_date',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['visible_columns'][0], 'status')
        self.assertEqual(response.data['visible_columns'][-1], 'created_date')

        response = self.client.post('/api/v1/milk-records/layout/reset/')
        self.assertEqual(response.data['visible_columns'][0], 'created_date')

    def test_replace_layout(self):
        layout = ColumnLayout()
        layout.toggle_visibility('snf')
        response = self.client.put('/api/v1/milk-records/layout/', {
            'columns': layout.to_list(),
            'sort': [{'column': 'quantity', 'direction': 'desc'}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertNotIn('snf', response.data['visible_columns'])
        self.assertEqual(response.data['sort'], [{'column': 'quantity', 'direction': 'desc'}])

    def test_replace_layout_rejects_broken_columns(self):
        columns = ColumnLayout().to_list()
        columns[0]['order'] = 3
        response = self.client.put('/api/v1/milk-records/layout/', {'columns': columns}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_toggle_sort_and_clear(self):
        self.client.post('/api/v1/milk-records/layout/sort/', {'column': 'shed_number'}, format='json')
        response = self.client.post('/api/v1/milk-records/layout/sort/', {
            'column': 'quantity', 'multi': True,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([entry['rank'] for entry in response.data['sort_indicators']], [1, 2])

        response = self.client.post('/api/v1/milk-records/layout/sort/clear/')
        self.assertEqual(response.data['sort'], [])
        self.assertEqual(TableLayout.objects.get(user=self.user).sort_spec, [])

    def test_stale_layout_replaced_with_defaults(self):
        stored = ColumnLayout()
        stored.toggle_visibility('notes')
        TableLayout.objects.create(
            user=self.user, table_key=TABLE_KEY, version='0.1',
            columns=stored.to_list(), sort_spec=[{'column': 'weight', 'direction': 'asc'}],
        )
        response = self.client.get('/api/v1/milk-records/layout/')
        self.assertNotIn('notes', response.data['visible_columns'])
        self.assertEqual(response.data['sort'], [])
        row = TableLayout.objects.get(user=self.user)
        self.assertEqual(row.version, '1.0')
        self.assertEqual(row.sort_spec, [])

    def test_layouts_are_per_user(self):
        self.client.post('/api/v1/milk-records/layout/visibility/', {'key': 'notes'}, format='json')
        other = TestDataFactory.create_user()
        self.client.authenticate_user(other)
        response = self.client.get('/api/v1/milk-records/layout/')
        self.assertNotIn('notes', response.data['visible_columns'])
