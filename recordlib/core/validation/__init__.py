"""Record construction helpers."""

from .validation import construct_record, convert_validation_errors

__all__ = ["construct_record", "convert_validation_errors"]
