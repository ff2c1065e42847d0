"""Assemble Typesense search parameters from SearchCriteria."""

import logging
from collections.abc import Mapping
from typing import Any, Dict, Optional, Sequence, Union

from ..schema.fields import Schema
from .criteria import FacetRequest, SearchCriteria
from .filters import compile_filter


logger = logging.getLogger(__name__)


def _join(values) -> str:
    return ",".join(str(v) for v in values)


def _facet_name(facet) -> str:
    if isinstance(facet, FacetRequest):
        return facet.field or ""
    return facet or ""


def _check_fields(names, allowed, what: str):
    unknown = [name for name in names if name not in allowed]
    if unknown:
        raise ValueError(
            f"Fields {unknown} are not {what}. Available: {list(allowed)}"
        )


def to_search_params(
    criteria: Union[SearchCriteria, Mapping, None],
    schema: Union[Schema, Mapping],
) -> Dict[str, Any]:
    """Convert search criteria into the engine's flat parameter set.

    Only parameters derived from supplied criteria are emitted, apart from
    ``q`` and ``query_by`` which are always present. Raw ``search_params``
    are merged last and win over every computed value.

    Args:
        criteria: SearchCriteria or mapping accepted by SearchCriteria.from_dict
        schema: Collection field schema

    Returns:
        Dict of search parameters (a new dict on every call)

    Raises:
        UnknownOperatorError: If the structured filter uses an unknown operator
        ValueError: If criteria or filter values are invalid, if a query_by
            field is not searchable, if a facet or group_by field is not
            facetable, or if more than one facet_query is given
    """
    criteria = SearchCriteria.coerce(criteria)
    schema = Schema.coerce(schema)

    # Weights are only sent when query_by was given explicitly
    if criteria.query_by is not None:
        _check_fields(criteria.query_by.keys(), schema.searchable_fields, "searchable")
        query_by = _join(criteria.query_by.keys())
        query_by_weights = _join(criteria.query_by.values())
    else:
        query_by = _join(schema.searchable_fields)
        query_by_weights = None

    params: Dict[str, Any] = {
        "q": criteria.q or "*",
        "query_by": query_by,
    }
    if query_by_weights is not None:
        params["query_by_weights"] = query_by_weights

    # Sorting
    if criteria.sort:
        if isinstance(criteria.sort, str):
            params["sort_by"] = criteria.sort
        else:
            params["sort_by"] = _join(criteria.sort)

    # Facets
    if criteria.facets:
        facet_names = [name for name in (_facet_name(f) for f in criteria.facets) if name]
        _check_fields(facet_names, schema.facetable_fields, "facetable")
        params["facet_by"] = _join(facet_names)
        if criteria.max_facet_values is not None:
            params["max_facet_values"] = criteria.max_facet_values

        # The engine accepts a single field:prefix facet query per search
        facet_queries = [
            f.facet_query for f in criteria.facets
            if isinstance(f, FacetRequest) and f.facet_query
        ]
        if len(facet_queries) > 1:
            raise ValueError(
                f"Only one facet_query is supported per search, got {facet_queries}"
            )
        if facet_queries:
            params["facet_query"] = facet_queries[0]

    # Filters
    if criteria.filter:
        if isinstance(criteria.filter, str):
            params["filter_by"] = criteria.filter
        else:
            filter_by = compile_filter(criteria.filter, schema)
            # An empty filter means "no filter", never "match everything" as ""
            if filter_by:
                params["filter_by"] = filter_by

    # Field projection
    if criteria.include:
        params["include_fields"] = _join(criteria.include)
    if criteria.exclude:
        params["exclude_fields"] = _join(criteria.exclude)

    # Pagination and grouping
    if criteria.page is not None:
        params["page"] = criteria.page
    if criteria.per_page is not None:
        params["per_page"] = criteria.per_page
    if criteria.group_by:
        _check_fields(criteria.group_by, schema.facetable_fields, "facetable")
        params["group_by"] = _join(criteria.group_by)
    if criteria.group_limit is not None:
        params["group_limit"] = criteria.group_limit
    if criteria.prefix is not None:
        params["prefix"] = "true" if criteria.prefix else "false"

    if criteria.search_params:
        params.update(criteria.search_params)

    logger.debug(f"Search params: {params}")
    return params


def to_vector_query(
    field: str,
    vector: Sequence[float],
    k: Optional[int] = None,
    schema: Optional[Union[Schema, Mapping]] = None,
) -> str:
    """Render a nearest-neighbour ``vector_query`` parameter.

    Example:
        >>> to_vector_query("embedding", [0.1, 0.2], k=10)
        'embedding:([0.1,0.2], k:10)'

    Raises:
        ValueError: If the schema is given and ``field`` is not a float[] field,
            or if the vector is empty
    """
    if schema is not None:
        schema = Schema.coerce(schema)
        if field not in schema.vector_fields:
            raise ValueError(
                f"Field '{field}' is not a vector field. "
                f"Available: {list(schema.vector_fields)}"
            )
    if not vector:
        raise ValueError("Vector cannot be empty")

    values = _join(vector)
    if k is not None:
        return f"{field}:([{values}], k:{k})"
    return f"{field}:([{values}])"
