import logging
import re
from typing import Optional, Iterator

from rdflib import Graph, URIRef

from oslc.namespaces import dcterms

logger = logging.getLogger(__name__)


class ServiceProviderCatalog:
    """Parsed OSLC service provider catalog for one domain. Lists the service
    providers (e.g., Jazz project areas) of the server by title."""

    def __init__(self, uri: str, graph: Graph):
        self.uri = URIRef(uri)
        """URI of the catalog"""
        self.graph = graph
        """Parsed catalog document"""

    def __str__(self):
        return str(self.uri)

    def titles(self) -> Iterator[tuple[URIRef, str]]:
        """All `(URI, title)` pairs for titled resources in the catalog, in graph
        order. The catalog's own title is not included."""
        for subject, title in self.graph.subject_objects(dcterms.title):
            if isinstance(subject, URIRef) and subject != self.uri:
                yield subject, str(title)

    def find_service_provider(self, title: str) -> Optional[URIRef]:
        """Find the service provider whose `dcterms:title` contains `title`.
        The match is case-sensitive, and `title` is matched literally, even if
        it contains regular expression special characters.

        If more than one title matches, the first in graph order wins. Returns
        `None` if no title matches."""
        pattern = re.compile(re.escape(title))
        for subject, provider_title in self.titles():
            if pattern.search(provider_title):
                logger.debug(f'Service provider "{provider_title}" is {subject}')
                return subject
        logger.warning(f'Service provider "{title}" not found in {self.uri}')
        return None
