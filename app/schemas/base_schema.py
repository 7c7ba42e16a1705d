from marshmallow import Schema, fields, ValidationError

from app.utils.aggregation import isoformat_utc


class UtcDateTimeField(fields.Field):
    """Custom field rendering datetimes as ISO-8601 UTC strings with a Z suffix"""

    def _serialize(self, value, attr, obj, **kwargs):
        if value is None:
            return None
        return isoformat_utc(value)

    def _deserialize(self, value, attr, data, **kwargs):
        raise ValidationError('Timestamps are read-only')


class BaseSchema(Schema):
    """Base schema containing the identity field shared by all models"""
    id = fields.Int(dump_only=True)


def validate_string_length(value, field_name, max_length, allow_empty=True):
    """
    Utility function to validate string length
    :param value: The value to validate
    :param field_name: Name of the field for error message
    :param max_length: Maximum allowed length
    :param allow_empty: Whether empty/None values are allowed
    :return: List of validation errors
    """
    errors = []

    if value is None or (isinstance(value, str) and len(value.strip()) == 0):
        if not allow_empty:
            errors.append(f'{field_name} is required')
        return errors

    if isinstance(value, str) and len(value) > max_length:
        errors.append(f'{field_name} must be {max_length} characters or less')

    return errors
