from collections.abc import Mapping
from typing import Any, Iterator, Optional

URI_KEY = '@id'
"""Key of the resource URI in the output of `OSLCResource.to_dict()`"""


def is_iterable(value: Any) -> bool:
    """Returns `True` if `value` is iterable, but not a string. While strings
    in Python are technically iterable, there are many cases where we would
    prefer to not treat them as such."""
    try:
        iter(value)
    except TypeError:
        # this is non-iterable
        return False
    else:
        # special case for strings; they are technically iterable,
        # but in all but the most specialized cases we want to treat
        # them as single values
        return not isinstance(value, (str, OSLCResource))


class OSLCResource(Mapping):
    """Generic property bag for a single OSLC resource. Keys are the local names
    of the predicates (e.g., "title" for `dcterms:title`). A property that occurs
    once has a single value; a property that occurs more than once has a list
    of values, in the order they were added.

    Values are either strings (literal values, or the URIs of external
    references) or nested `OSLCResource` objects.

    Properties are also readable as attributes, but a property whose name is
    also a method or attribute of this class (e.g., "uri", "get", or "keys")
    is only reachable by item access, which always works.

    ```pycon
    >>> resource = OSLCResource('http://example.com/req/1')
    >>> resource.add('title', 'Foo')
    >>> resource.add('subject', 'a')
    >>> resource.add('subject', 'b')

    >>> resource['title']
    'Foo'

    >>> resource.subject
    ['a', 'b']
    ```
    """

    def __init__(self, uri: Optional[str] = None, **properties):
        self.uri: Optional[str] = str(uri) if uri is not None else None
        """URI of the resource, or `None` for a blank node"""

        self._properties: dict[str, Any] = {}
        for key, value in properties.items():
            if is_iterable(value):
                for v in value:
                    self.add(key, v)
            else:
                self.add(key, value)

    def __getitem__(self, key: str) -> Any:
        return self._properties[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._properties)

    def __len__(self) -> int:
        return len(self._properties)

    def __getattr__(self, name: str) -> Any:
        # only called when normal attribute lookup fails
        if name.startswith('_'):
            raise AttributeError(name)
        try:
            return self._properties[name]
        except KeyError:
            raise AttributeError(f"'{type(self).__name__}' has no property '{name}'") from None

    def __eq__(self, other):
        if not isinstance(other, OSLCResource):
            return NotImplemented
        return self.uri == other.uri and self._properties == other._properties

    def __str__(self):
        return self.uri or repr(self)

    def __repr__(self):
        return f'{type(self).__name__}(uri={self.uri!r}, properties={self._properties!r})'

    def add(self, key: str, value: Any):
        """Add a value for the property `key`. If the property already has a
        single value, it becomes a list containing the existing value followed
        by the new one."""
        if key in self._properties:
            existing = self._properties[key]
            if not isinstance(existing, list):
                self._properties[key] = [existing]
            self._properties[key].append(value)
        else:
            self._properties[key] = value

    def values_of(self, key: str) -> list[Any]:
        """Always return the values of `key` as a list, whether it is single-
        or multi-valued. Returns an empty list if the property is not present."""
        try:
            value = self._properties[key]
        except KeyError:
            return []
        return list(value) if isinstance(value, list) else [value]

    def to_dict(self) -> dict[str, Any]:
        """Return a plain nested `dict` copy of this resource, suitable for
        serializing to JSON or YAML. Nested resources are converted recursively,
        and the URI (if any) is included under the key `URI_KEY` ("@id"), which is not
        a valid XML name, so no RDF/XML predicate can collide with it."""
        data = {} if self.uri is None else {URI_KEY: self.uri}
        for key, value in self._properties.items():
            if isinstance(value, list):
                data[key] = [_plain(v) for v in value]
            else:
                data[key] = _plain(value)
        return data


def _plain(value: Any) -> Any:
    return value.to_dict() if isinstance(value, OSLCResource) else value
