"""Namespaces used by OSLC servers, for use with `rdflib` code."""

import sys

from rdflib import Namespace

dcterms = Namespace('http://purl.org/dc/terms/')
"""[Dublin Core Terms](https://www.dublincore.org/specifications/dublin-core/dcmi-terms/#section-2)"""

jd = Namespace('http://jazz.net/xmlns/prod/jazz/discovery/1.0/')
"""Jazz Discovery vocabulary, used in Jazz `rootservices` documents"""

oslc = Namespace('http://open-services.net/ns/core#')
"""[OSLC Core](https://docs.oasis-open-projects.org/oslc-op/core/v3.0/oslc-core.html)"""

oslc_cm = Namespace('http://open-services.net/ns/cm#')
"""[OSLC Change Management](https://docs.oasis-open-projects.org/oslc-op/cm/v3.0/change-mgt-spec.html)"""

oslc_config = Namespace('http://open-services.net/ns/config#')
"""[OSLC Configuration Management](https://docs.oasis-open-projects.org/oslc-op/config/v1.0/config-resources.html)"""

oslc_qm = Namespace('http://open-services.net/ns/qm#')
"""[OSLC Quality Management](https://docs.oasis-open-projects.org/oslc-op/qm/v2.1/quality-management-spec.html)"""

oslc_qm1 = Namespace('http://open-services.net/xmlns/qm/1.0/')
"""OSLC Quality Management 1.0, still used for the `qmServiceProviders` root services link"""

oslc_rm = Namespace('http://open-services.net/ns/rm#')
"""[OSLC Requirements Management](https://docs.oasis-open-projects.org/oslc-op/rm/v2.1/requirements-management-spec.html)"""

oslc_rm1 = Namespace('http://open-services.net/xmlns/rm/1.0/')
"""OSLC Requirements Management 1.0, still used for the `rmServiceProviders` root services link"""

rdf = Namespace('http://www.w3.org/1999/02/22-rdf-syntax-ns#')
"""[RDF](https://www.w3.org/TR/rdf11-schema/)"""

rdfs = Namespace('http://www.w3.org/2000/01/rdf-schema#')
"""[RDF Schema](https://www.w3.org/TR/rdf11-schema/)"""

xsd = Namespace('http://www.w3.org/2001/XMLSchema#')
"""[XML Schema Datatypes](https://www.w3.org/TR/xmlschema-2/#built-in-datatypes)"""


def prefix_declaration(*prefixes: str) -> str:
    """Build an `oslc.prefix` query parameter value from one or more of the
    prefix names defined in this module.

    ```pycon
    >>> prefix_declaration('dcterms')
    'dcterms=<http://purl.org/dc/terms/>'

    >>> prefix_declaration('dcterms', 'oslc_rm')
    'dcterms=<http://purl.org/dc/terms/>,oslc_rm=<http://open-services.net/ns/rm#>'
    ```

    Raises a `KeyError` if a prefix is not defined in this module."""
    namespaces = {attr: value for attr, value in sys.modules[__name__].__dict__.items() if isinstance(value, Namespace)}
    return ','.join(f'{prefix}=<{namespaces[prefix]}>' for prefix in prefixes)

