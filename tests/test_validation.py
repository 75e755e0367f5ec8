from datetime import datetime

import pytest

from weather_api.errors import InvalidArgument
from weather_api.models.ids import new_object_id
from weather_api.utils import (
    format_datetime,
    is_object_id,
    parse_authentication_key,
    parse_datetime,
    parse_day_range,
    parse_object_id,
    parse_object_ids,
    parse_page,
    subtract_months,
)
from weather_api.utils.validation import MAX_SQL_INTEGER


def test_new_object_ids_are_hex_and_ordered():
    ids = [new_object_id() for _ in range(50)]
    assert all(is_object_id(i) for i in ids)
    assert len(set(ids)) == 50
    assert ids == sorted(ids)


@pytest.mark.parametrize('value', [
    '', 'abc', '64b7f0c2a1e4f3d2c1b0a9z8', '64b7f0c2a1e4f3d2c1b0a9f80', 'a' * 24 + '\n', None, 12,
])
def test_parse_object_id_rejects_malformed(value):
    with pytest.raises(InvalidArgument):
        parse_object_id(value)


def test_parse_object_id_normalises_case():
    assert parse_object_id('64B7F0C2A1E4F3D2C1B0A9F8') == '64b7f0c2a1e4f3d2c1b0a9f8'


def test_parse_object_ids_rejects_whole_list_on_one_bad_id():
    with pytest.raises(InvalidArgument):
        parse_object_ids(['64b7f0c2a1e4f3d2c1b0a9f8', 'nope'])
    with pytest.raises(InvalidArgument):
        parse_object_ids([])
    with pytest.raises(InvalidArgument):
        parse_object_ids('64b7f0c2a1e4f3d2c1b0a9f8')


def test_parse_page():
    assert parse_page('0') == 0
    assert parse_page('3') == 3
    assert parse_page('007') == 7
    for bad in ('-1', 'x', '1.5', '', '3\n', '\u00b2', '\u0663', ' 3'):
        with pytest.raises(InvalidArgument):
            parse_page(bad)


def test_parse_page_clamps_numbers_beyond_sql_range():
    assert parse_page('9' * 25) == MAX_SQL_INTEGER
    assert parse_page('0' * 30 + '4') == 4


def test_parse_day_range_expands_to_whole_days():
    start, end = parse_day_range('20240101', '20240131')
    assert start == datetime(2024, 1, 1, 0, 0, 0)
    assert end == datetime(2024, 1, 31, 23, 59, 59, 999000)


@pytest.mark.parametrize('start,end', [('2024-01-01', '20240131'), ('20241301', '20241302'), ('20240101', None), ('20240101\n', '20240102')])
def test_parse_day_range_rejects_malformed(start, end):
    with pytest.raises(InvalidArgument):
        parse_day_range(start, end)


def test_parse_datetime_handles_offsets():
    assert parse_datetime('2024-08-25T12:30:00Z') == datetime(2024, 8, 25, 12, 30)
    assert parse_datetime('2024-08-25T22:30:00.000+10:00') == datetime(2024, 8, 25, 12, 30)
    assert parse_datetime('2024-08-25') == datetime(2024, 8, 25)
    with pytest.raises(InvalidArgument):
        parse_datetime('yesterday')


def test_format_datetime():
    assert format_datetime(datetime(2024, 8, 25, 12, 30)) == '2024-08-25T12:30:00.000Z'
    assert format_datetime(None) is None


def test_subtract_months_clamps_day():
    assert subtract_months(datetime(2024, 7, 31), 5) == datetime(2024, 2, 29)
    assert subtract_months(datetime(2024, 3, 15, 8), 5) == datetime(2023, 10, 15, 8)


def test_parse_authentication_key():
    key = '1b4e28ba-2fa1-41d2-883f-0016d3cca427'
    assert parse_authentication_key(key) == key
    for bad in ('', 'not-a-uuid', '1b4e28ba2fa141d2883f0016d3cca427'):
        with pytest.raises(InvalidArgument):
            parse_authentication_key(bad)
