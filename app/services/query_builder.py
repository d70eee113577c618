"""
Translate caller filters into FHIR query descriptors.
"""

from app.errors import UnsupportedFilterError
from app.models.query import (
    ById,
    BySubjectReference,
    ByTextSearch,
    FilterKind,
    QueryDescriptor,
    ResourceType,
)
from app.validation import validate_resource_id, validate_search_text

# String search parameter used for text matching, per resource type
TEXT_SEARCH_FIELDS: dict[ResourceType, str] = {
    ResourceType.PATIENT: "name",
}

SUPPORTED_FILTERS: dict[ResourceType, frozenset[FilterKind]] = {
    ResourceType.PATIENT: frozenset({FilterKind.BY_ID, FilterKind.BY_TEXT_SEARCH}),
    ResourceType.OBSERVATION: frozenset({FilterKind.BY_ID, FilterKind.BY_SUBJECT_REFERENCE}),
    ResourceType.DOCUMENT_REFERENCE: frozenset(
        {FilterKind.BY_ID, FilterKind.BY_SUBJECT_REFERENCE}
    ),
    ResourceType.DIAGNOSTIC_REPORT: frozenset(
        {FilterKind.BY_ID, FilterKind.BY_SUBJECT_REFERENCE}
    ),
}


def is_supported(resource_type: ResourceType, filter_kind: FilterKind) -> bool:
    """Check whether a filter kind is offered for a resource type."""
    return filter_kind in SUPPORTED_FILTERS.get(resource_type, frozenset())


def build_query(
    resource_type: ResourceType,
    filter_kind: FilterKind,
    filter_value: str | None,
    input_name: str | None = None,
) -> QueryDescriptor:
    """
    Build the descriptor for one remote query.

    Args:
        resource_type: Resource type the query targets
        filter_kind: How filter_value selects resources
        filter_value: Identifier, patient id or search text from the caller
        input_name: Name of the caller's parameter, used in validation messages

    Returns:
        A ById, BySubjectReference or ByTextSearch descriptor

    Raises:
        UnsupportedFilterError: If the filter kind is not offered for the type
        InvalidInputError: If filter_value is blank or malformed
    """
    if not is_supported(resource_type, filter_kind):
        raise UnsupportedFilterError(resource_type.value, filter_kind.value)

    if filter_kind is FilterKind.BY_ID:
        return ById(resource_type, validate_resource_id(filter_value, input_name or "id"))

    if filter_kind is FilterKind.BY_SUBJECT_REFERENCE:
        return BySubjectReference(
            resource_type, validate_resource_id(filter_value, input_name or "patientId")
        )

    field = TEXT_SEARCH_FIELDS[resource_type]
    text = validate_search_text(filter_value, input_name or field)
    return ByTextSearch(resource_type, field, text)
