"""Typesense collection wrapper for Querysmith."""

import logging
from dataclasses import replace
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import typesense
from typesense.exceptions import ObjectAlreadyExists, ObjectNotFound

from ..schema import CollectionSchema, to_collection_declaration
from ..search import (
    Predicate,
    SearchCriteria,
    compile_filter,
    parse_facets,
    to_search_params,
    to_vector_query,
)


logger = logging.getLogger(__name__)

IMPORT_OPTIONS = {
    "action": "upsert",
    "dirty_values": "coerce_or_drop",
    "return_id": True,
}


class TypesenseCollection:
    """Manages one Typesense collection described by a CollectionSchema.

    The wrapper compiles criteria and filters into engine parameters and
    delegates every call to the client. It does not retry or cache; client
    errors propagate to the caller.
    """

    def __init__(self, client: typesense.Client, collection_schema: CollectionSchema):
        """
        Initialize the collection wrapper.

        Args:
            client: Configured Typesense client
            collection_schema: Collection name and field schema
        """
        self.client = client
        self.schema = collection_schema

    @property
    def name(self) -> str:
        return self.schema.name

    def _collection(self):
        return self.client.collections[self.name]

    def exists(self) -> bool:
        """Check if the collection exists on the server."""
        try:
            self._collection().retrieve()
            return True
        except ObjectNotFound:
            return False

    def ensure_collection(self):
        """Create the collection if it does not exist yet.

        Returns:
            Collection handle from the client
        """
        if not self.exists():
            logger.info(f"Creating collection '{self.name}'")
            try:
                self.client.collections.create(to_collection_declaration(self.schema))
            except ObjectAlreadyExists:
                # Created concurrently by another caller
                logger.debug(f"Collection '{self.name}' already exists")
        return self._collection()

    def delete_collection(self) -> bool:
        """Delete the collection.

        Returns:
            True if the collection existed and was deleted
        """
        if not self.exists():
            return False
        self._collection().delete()
        logger.info(f"Deleted collection '{self.name}'")
        return True

    def import_documents(self, documents: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Upsert documents into the collection.

        Args:
            documents: List of document dictionaries

        Returns:
            Per-document import results (``success``, ``id``, ``error``)
        """
        if not documents:
            return []
        collection = self.ensure_collection()
        results = collection.documents.import_(documents, dict(IMPORT_OPTIONS))

        failed = [r for r in results if isinstance(r, dict) and not r.get("success", True)]
        if failed:
            logger.warning(f"{len(failed)} of {len(documents)} documents failed to import into '{self.name}'")
        return results

    def search(self, criteria: Union[SearchCriteria, Mapping, None] = None) -> Dict[str, Any]:
        """
        Search the collection.

        Args:
            criteria: Search criteria (query, weights, sort, facets, filter, ...)

        Returns:
            Raw search response with ``hits`` as a list and ``facets`` keyed by field
        """
        collection = self.ensure_collection()
        params = to_search_params(criteria, self.schema.fields)
        logger.debug(f"Searching '{self.name}' with {params}")

        response = collection.documents.search(params)

        result = dict(response)
        result["hits"] = list(response.get("hits") or [])
        result["facets"] = parse_facets(response)
        return result

    def vector_search(
        self,
        field: str,
        vector: Sequence[float],
        criteria: Union[SearchCriteria, Mapping, None] = None,
        k: Optional[int] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Nearest-neighbour search on a vector field through multi-search.

        Args:
            field: float[] field to query
            vector: Query embedding
            criteria: Additional criteria (filters, include, ...)
            k: Number of neighbours (engine default when omitted)

        Returns:
            First multi-search result, or None if the engine returned none
        """
        criteria = SearchCriteria.coerce(criteria)
        # Vector search matches on the embedding only unless told otherwise
        if criteria.query_by is None:
            criteria = replace(criteria, query_by={})
        if not criteria.q:
            criteria = replace(criteria, q="*")

        search = {
            "collection": self.name,
            "vector_query": to_vector_query(field, vector, k=k, schema=self.schema.fields),
        }
        search.update(to_search_params(criteria, self.schema.fields))

        response = self.client.multi_search.perform({"searches": [search]}, {})
        results = response.get("results") or []
        return results[0] if results else None

    def get_document(self, document_id: str) -> Optional[Dict[str, Any]]:
        """Get a document by id, or None if it does not exist."""
        collection = self.ensure_collection()
        try:
            return collection.documents[document_id].retrieve()
        except ObjectNotFound:
            return None

    def delete_document(self, document_id: str) -> Optional[Dict[str, Any]]:
        """Delete a document by id.

        Returns:
            Deleted document, or None if it did not exist
        """
        collection = self.ensure_collection()
        if self.get_document(document_id) is None:
            return None
        return collection.documents[document_id].delete()

    def delete_documents(self, predicate: Union[Predicate, Mapping]) -> Optional[Dict[str, Any]]:
        """Delete every document matching a structured filter.

        An empty filter is a no-op rather than a request to delete everything.

        Returns:
            Engine response (``num_deleted``), or None when the filter was empty
        """
        filter_by = compile_filter(predicate, self.schema.fields)
        if not filter_by:
            logger.info(f"Empty filter, nothing deleted from '{self.name}'")
            return None
        collection = self.ensure_collection()
        return collection.documents.delete({"filter_by": filter_by})

    def update_document(self, document_id: str, document: Dict[str, Any]) -> Dict[str, Any]:
        """Update a document, creating it when it does not exist."""
        collection = self.ensure_collection()
        if self.get_document(document_id) is None:
            return collection.documents.create(document)
        return collection.documents[document_id].update(document)
