"""Search criteria: the declarative description of a search request."""

from collections.abc import Mapping
from dataclasses import dataclass, field, fields as dataclass_fields
from typing import Any, Dict, List, Optional, Union

from .filters import Predicate


@dataclass(frozen=True)
class FacetRequest:
    """Object-form facet request.

    ``facet_query`` filters the returned facet values, e.g. ``category:shoe``
    returns only category values starting with "shoe". The engine takes a
    single facet query per search, so at most one request may set it.
    """
    field: str
    facet_query: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping) -> "FacetRequest":
        """Build a FacetRequest from ``{"field": ..., "facet_query": ...}``.

        Raises:
            ValueError: If the mapping has unknown keys or no ``field``
        """
        known = {f.name for f in dataclass_fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown facet request keys: {sorted(unknown)}")
        if "field" not in data:
            raise ValueError("Facet request is missing 'field'")
        return cls(**data)


FacetSpec = Union[str, FacetRequest]
SortSpec = Union[str, List[str]]
FilterSpec = Union[str, Predicate, Mapping]


@dataclass
class SearchCriteria:
    """What to search for. Every attribute is optional.

    Attributes:
        q: Free-text query (defaults to "*")
        query_by: Field name -> relative weight; defaults to all searchable fields
        sort: "field:asc|desc" or a list of them; defaults to relevance ranking
        page: Page number (engine default 1)
        per_page: Results per page (engine max 250)
        facets: Field names or FacetRequest objects
        max_facet_values: Maximum values returned per facet
        filter: Structured predicate or a raw filter_by string
        include: Fields to include in the hits
        exclude: Fields to exclude from the hits
        group_by: Facetable fields to group hits by
        group_limit: Maximum hits per group
        prefix: Prefix matching on the last query token (typeahead)
        search_params: Raw parameters merged over the computed ones
    """
    q: Optional[str] = None
    query_by: Optional[Dict[str, Any]] = None
    sort: Optional[SortSpec] = None
    page: Optional[int] = None
    per_page: Optional[int] = None
    facets: Optional[List[FacetSpec]] = None
    max_facet_values: Optional[int] = None
    filter: Optional[FilterSpec] = None
    include: Optional[List[str]] = None
    exclude: Optional[List[str]] = None
    group_by: Optional[List[str]] = None
    group_limit: Optional[int] = None
    prefix: Optional[bool] = None
    search_params: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping) -> "SearchCriteria":
        """Build criteria from a mapping.

        Accepts snake_case attribute names as well as the camelCase names
        used by JSON clients (``queryBy``, ``maxFacetValues``, ``groupBy``,
        ``groupLimit``, ``perPage``, ``_searchParams``).

        Raises:
            ValueError: If the mapping has unknown keys
        """
        known = {f.name for f in dataclass_fields(cls)}
        kwargs: Dict[str, Any] = {}
        unknown = []

        for key, value in data.items():
            name = CAMEL_CASE_ALIASES.get(key, key)
            if name not in known:
                unknown.append(key)
                continue
            kwargs[name] = value

        if unknown:
            raise ValueError(f"Unknown search criteria keys: {sorted(unknown)}")

        facets = kwargs.get("facets")
        if facets:
            kwargs["facets"] = [
                FacetRequest.from_dict(facet) if isinstance(facet, Mapping) else facet
                for facet in facets
            ]

        if kwargs.get("search_params") is None:
            kwargs.pop("search_params", None)

        return cls(**kwargs)

    @classmethod
    def coerce(cls, criteria: Union["SearchCriteria", Mapping, None]) -> "SearchCriteria":
        if criteria is None:
            return cls()
        if isinstance(criteria, SearchCriteria):
            return criteria
        return cls.from_dict(criteria)


CAMEL_CASE_ALIASES = {
    "queryBy": "query_by",
    "perPage": "per_page",
    "maxFacetValues": "max_facet_values",
    "groupBy": "group_by",
    "groupLimit": "group_limit",
    "_searchParams": "search_params",
    "searchParams": "search_params",
}
