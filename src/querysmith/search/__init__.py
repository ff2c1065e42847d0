"""Search module: filter compilation and search parameter assembly for Typesense."""

from .filters import (
    FILTER_TOKENS,
    FilterOperator,
    OperatorMap,
    Predicate,
    UnknownOperatorError,
    compile_filter,
    render_value,
)
from .criteria import FacetRequest, SearchCriteria
from .params import to_search_params, to_vector_query
from .facets import parse_facets

__all__ = [
    # Filters
    "FILTER_TOKENS",
    "FilterOperator",
    "OperatorMap",
    "Predicate",
    "UnknownOperatorError",
    "compile_filter",
    "render_value",
    # Criteria
    "FacetRequest",
    "SearchCriteria",
    # Params
    "to_search_params",
    "to_vector_query",
    # Facets
    "parse_facets",
]
