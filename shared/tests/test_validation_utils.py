"""
Tests for shared validation helpers
"""
import pytest

from shared.exceptions import ValidationError
from shared.validation_utils import (
    validate_required_fields, validate_file_name, normalize_album_id,
    validate_album_name, validate_item_keys, is_media_sort_key
)


def test_required_fields():
    assert validate_required_fields({'a': 1, 'b': '', 'c': None}, ['a', 'b', 'c', 'd']) == ['b', 'c', 'd']
    assert validate_required_fields({'items': []}, ['items']) == []
    assert validate_required_fields(None, ['a']) == ['a']


@pytest.mark.parametrize('file_name', ['', '  ', None, 'a/b.jpg', 'a\\b.jpg', '..', 'x..y.jpg', 42])
def test_invalid_file_names(file_name):
    with pytest.raises(ValidationError):
        validate_file_name(file_name)


def test_file_name_is_stripped():
    assert validate_file_name('  IMG 0001.jpg ') == 'IMG 0001.jpg'


def test_album_id_prefix_is_optional():
    assert normalize_album_id('1234') == 'ALBUM#1234'
    assert normalize_album_id('ALBUM#1234') == 'ALBUM#1234'
    with pytest.raises(ValidationError):
        normalize_album_id('  ')


def test_album_name_is_trimmed():
    assert validate_album_name('  Trips ') == 'Trips'
    with pytest.raises(ValidationError):
        validate_album_name('')


class TestItemKeys:

    def test_valid_keys(self):
        items = [{'PK': 'user-1', 'SK': '2024', 'fileName': 'x.jpg'}]

        assert validate_item_keys(items, 'user-1') == [{'PK': 'user-1', 'SK': '2024'}]

    @pytest.mark.parametrize('items', [
        [],
        None,
        [{'PK': 'user-1'}],
        ['not-a-dict'],
        [{'PK': 'user-2', 'SK': '2024'}],
    ])
    def test_invalid_keys(self, items):
        with pytest.raises(ValidationError):
            validate_item_keys(items, 'user-1')


def test_media_sort_keys_sort_before_prefixed_keys():
    assert is_media_sort_key('2024-05-01T10:00:00+00:00')
    assert not is_media_sort_key('ALBUM#1234')
    assert not is_media_sort_key('FACE#1234')
    assert not is_media_sort_key('')
