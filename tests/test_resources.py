import pytest

from oslc.rdfmapping.resources import OSLCResource, URI_KEY, is_iterable


def test_add_promotes_to_list():
    resource = OSLCResource('http://example.com/req/1')
    resource.add('subject', 'a')
    assert resource['subject'] == 'a'
    resource.add('subject', 'b')
    resource.add('subject', 'c')
    assert resource['subject'] == ['a', 'b', 'c']


def test_values_of():
    resource = OSLCResource(title='Foo', subject=['a', 'b'])
    assert resource.values_of('title') == ['Foo']
    assert resource.values_of('subject') == ['a', 'b']
    assert resource.values_of('creator') == []


def test_attribute_access():
    resource = OSLCResource(title='Foo')
    assert resource.title == 'Foo'
    with pytest.raises(AttributeError):
        _ = resource.creator
    with pytest.raises(AttributeError):
        _ = resource._secret


def test_mapping_interface():
    resource = OSLCResource('http://example.com/req/1', title='Foo', identifier='1')
    assert len(resource) == 2
    assert set(resource) == {'title', 'identifier'}
    assert 'title' in resource
    assert resource.get('creator') is None


def test_equality():
    assert OSLCResource('http://example.com/a', title='A') == OSLCResource('http://example.com/a', title='A')
    assert OSLCResource('http://example.com/a', title='A') != OSLCResource('http://example.com/b', title='A')
    assert OSLCResource('http://example.com/a', title='A') != OSLCResource('http://example.com/a', title='B')


def test_to_dict():
    creator = OSLCResource(name='Alice')
    resource = OSLCResource('http://example.com/req/1', title='Foo', creator=creator)
    resource.add('contributor', OSLCResource('http://example.com/person/2', name='Bob'))
    resource.add('contributor', 'http://example.com/person/3')
    assert resource.to_dict() == {
        '@id': 'http://example.com/req/1',
        'title': 'Foo',
        'creator': {'name': 'Alice'},
        'contributor': [
            {'@id': 'http://example.com/person/2', 'name': 'Bob'},
            'http://example.com/person/3',
        ],
    }


def test_str():
    assert str(OSLCResource('http://example.com/req/1')) == 'http://example.com/req/1'
    assert str(OSLCResource()).startswith('OSLCResource(uri=None')


@pytest.mark.parametrize(
    ('value', 'expected'),
    [
        ('foo', False),
        (1, False),
        (OSLCResource(title='Foo'), False),
        (['a', 'b'], True),
        (('a',), True),
    ]
)
def test_is_iterable(value, expected):
    assert is_iterable(value) is expected


def test_properties_shadowed_by_methods():
    resource = OSLCResource('http://example.com/req/1', keys='k', get='g')
    resource.add('uri', 'urn:other')
    assert resource['uri'] == 'urn:other'
    assert resource['keys'] == 'k'
    assert resource['get'] == 'g'
    assert resource.uri == 'http://example.com/req/1'
    assert resource.to_dict() == {
        URI_KEY: 'http://example.com/req/1',
        'uri': 'urn:other',
        'keys': 'k',
        'get': 'g',
    }
