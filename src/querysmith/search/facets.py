"""Parse facet counts from a search response."""

from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Union


def parse_facets(
    response: Optional[Union[Mapping, List[Mapping]]],
) -> Dict[str, List[Dict[str, Any]]]:
    """Re-key the engine's facet counts by field name.

    Args:
        response: Full search response (its ``facet_counts`` entry is used)
            or the ``facet_counts`` list itself. May be None.

    Returns:
        Mapping of field name -> list of ``{"count", "highlighted", "value"}``
        entries, in the order the engine returned them
    """
    if response is None:
        return {}

    if isinstance(response, Mapping):
        facet_counts = response.get("facet_counts") or []
    else:
        facet_counts = response

    facets: Dict[str, List[Dict[str, Any]]] = {}
    for raw_facet in facet_counts:
        facets[raw_facet["field_name"]] = raw_facet.get("counts", [])
    return facets
