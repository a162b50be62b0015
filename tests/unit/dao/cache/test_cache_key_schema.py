"""Unit tests for CacheKeySchema

Test coverage includes:

1. Unprefixed keys live under the `url:` namespace
2. Prefixed keys
3. Invalid prefix types
"""

import pytest

from urlshortener.dao.cache import CacheKeySchema


def test_link_url_key_without_prefix():
    assert CacheKeySchema().link_url_key('aZ3kP9qL') == 'url:aZ3kP9qL'


def test_link_url_key_with_prefix(app_prefix):
    assert CacheKeySchema(prefix=app_prefix).link_url_key('aZ3kP9qL') == 'testapp:test:url:aZ3kP9qL'


@pytest.mark.parametrize('prefix', [123, b'bytes', ['list']])
def test_invalid_prefix_type(prefix):
    with pytest.raises(TypeError):
        CacheKeySchema(prefix=prefix)
