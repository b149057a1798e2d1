"""Domain errors raised by the catalog services."""


class CatalogError(Exception):
    """Base class for errors the RPC layer reports to clients as-is."""

    status_code = 400
    error_code = "catalog_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class CollectionNotFoundError(CatalogError):
    status_code = 404
    error_code = "collection_not_found"

    def __init__(self, collection_id: int):
        super().__init__(f"Window collection with id {collection_id} not found")
        self.collection_id = collection_id
