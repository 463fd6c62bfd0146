"""
Record construction through Pydantic validation.

Records are pydantic models, so every instance is built through
``model_validate``. Pydantic failures (missing or unknown fields) are converted
into the framework ``RecordConstructionError`` here, in one place.
"""

from typing import Any, List, Mapping, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from recordlib.core.errors.errors import ErrorContext, RecordConstructionError
from recordlib.core.errors.models import ValidationErrorDetail

T = TypeVar("T", bound=BaseModel)


def convert_validation_errors(error: PydanticValidationError, location: str) -> List[ValidationErrorDetail]:
    """Convert a pydantic ValidationError into framework error details."""
    details = []
    for item in error.errors():
        loc_path = ".".join(str(loc) for loc in item["loc"])
        details.append(
            ValidationErrorDetail(
                location=f"{location}.{loc_path}" if loc_path else location,
                message=item["msg"],
                error_type=item["type"],
            )
        )
    return details


def construct_record(
    record_type: Type[T],
    fields: Mapping[str, Any],
    schema_name: str,
    operation: str = "construct",
) -> T:
    """
    Build a record instance from already-coerced field values.

    Args:
        record_type: Pydantic record class
        fields: Field values keyed by attribute name
        schema_name: Schema name for error reporting
        operation: Operation name for error reporting

    Returns:
        Record instance

    Raises:
        RecordConstructionError: If pydantic rejects the field set
    """
    try:
        return record_type.model_validate(dict(fields))
    except PydanticValidationError as e:
        validation_errors = convert_validation_errors(e, schema_name)
        fields_str = ", ".join(sorted({d.location.rsplit(".", 1)[-1] for d in validation_errors}))
        raise RecordConstructionError(
            message=f"Cannot construct {schema_name} record: invalid fields {fields_str}",
            validation_errors=validation_errors,
            context=ErrorContext.create(
                schema_name=schema_name,
                error_type="RecordConstructionError",
                error_location=f"validation.{record_type.__name__}",
                component="record_constructor",
                operation=operation,
            ),
            cause=e,
        ) from e
