"""Domain exceptions raised by the workspace and the share codec."""


class ListIQError(Exception):
    pass


class InvalidInput(ListIQError):
    """User-supplied values were rejected before any state changed."""


class PropertyValidationError(InvalidInput):
    """A property is missing a required field or has a non-positive price/size."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Missing or invalid required fields: {', '.join(missing)}")


class PropertyNotFound(ListIQError):
    def __init__(self, property_id: str):
        self.property_id = property_id
        super().__init__(f"Property {property_id} not found")


class SearchNotFound(ListIQError):
    def __init__(self, search_id: str):
        self.search_id = search_id
        super().__init__(f"Saved search {search_id} not found")


class SearchNameConflict(ListIQError):
    """A saved search with the same name exists and overwrite was not confirmed."""

    def __init__(self, name: str, existing_id: str):
        self.name = name
        self.existing_id = existing_id
        super().__init__(f'A saved search named "{name}" already exists')


class SharedSearchError(ListIQError):
    """Raised for malformed shared-search payloads. The message is user-facing."""
