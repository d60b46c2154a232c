import logging
import re
from typing import Optional
from xml.sax import SAXParseException

from rdflib import Graph, Literal, URIRef
from rdflib.exceptions import ParserError
from rdflib.plugin import PluginException
from rdflib.plugins.parsers.notation3 import BadSyntax
from rdflib.term import Node

from oslc.exceptions import CyclicGraphError, GraphParseError
from oslc.rdfmapping.resources import OSLCResource

logger = logging.getLogger(__name__)

DEFAULT_RDF_FORMAT = 'application/rdf+xml'


def parse_graph(data: str, base_uri: str = None, media_type: str = None) -> Graph:
    """Parse `data` into a new `rdflib.Graph`. The `media_type` may be a full
    `Content-Type` header value; any parameters (e.g., "charset") are ignored.
    If it is not given, or is not an RDF type, defaults to RDF/XML.

    Raises a `GraphParseError` if the data cannot be parsed."""
    rdf_format = DEFAULT_RDF_FORMAT
    if media_type:
        mime_type = media_type.split(';', 1)[0].strip().lower()
        # servers commonly label RDF/XML as generic XML
        if mime_type not in ('', 'application/xml', 'text/xml', 'text/plain', 'text/html'):
            rdf_format = mime_type
    graph = Graph()
    try:
        graph.parse(data=data, format=rdf_format, publicID=base_uri)
    except (SAXParseException, BadSyntax, ParserError, PluginException) as e:
        logger.error(f'Unable to parse {rdf_format} document from {base_uri}')
        raise GraphParseError(str(e)) from e
    return graph


def local_name(uri: str) -> str:
    """Return the local part of `uri`: everything following the last "#" or "/".

    ```pycon
    >>> local_name('http://purl.org/dc/terms/title')
    'title'

    >>> local_name('http://open-services.net/ns/core#queryBase')
    'queryBase'
    ```
    """
    return re.sub(r'.*[#/]', '', str(uri))


def project(
        graph: Graph,
        subject: Node,
        resource: Optional[OSLCResource] = None,
        _path: frozenset = frozenset(),
) -> OSLCResource | str:
    """Flatten the statements about `subject` in `graph` into an `OSLCResource`.

    Each predicate's local name becomes a property key. Literal objects are
    added as their lexical value. Other objects are projected recursively; if
    such an object has no statements of its own, it is added as its URI string
    instead (an external reference). When a key occurs more than once, its
    values are collected into a list, in statement order.

    If `subject` has no statements and no `resource` was given, returns
    `str(subject)`. If `resource` is given, it is populated and returned.

    Raises a `CyclicGraphError` if `subject` is reached again while it is
    still being projected."""
    if subject in _path:
        raise CyclicGraphError(subject)

    statements = list(graph.predicate_objects(subject))
    if resource is None:
        if not statements:
            return str(subject)
        resource = OSLCResource(uri=subject if isinstance(subject, URIRef) else None)

    path = _path | {subject}
    for predicate, obj in statements:
        if isinstance(obj, Literal):
            value = str(obj)
        else:
            value = project(graph, obj, _path=path)
        resource.add(local_name(predicate), value)

    return resource
