from marshmallow import Schema, fields, validates, ValidationError

from app.schemas.base_schema import BaseSchema, validate_string_length

PASSWORD_MIN_LENGTH = 6


class UserPublicSchema(BaseSchema):
    """Schema for public display (excludes sensitive information)"""
    name = fields.Str()
    email = fields.Email()
    role = fields.Str()
    restaurant_id = fields.Int(data_key='restaurantId')


class LoginSchema(Schema):
    """Schema for the admin login payload"""
    email = fields.Email(required=True)
    password = fields.Str(required=True, load_only=True)

    @validates('password')
    def validate_password(self, value, **kwargs):
        errors = validate_string_length(value, 'Password', 128, allow_empty=False)
        if errors:
            raise ValidationError(errors[0])


class RegisterSchema(Schema):
    """Schema for registering a restaurant together with its first admin"""
    restaurant_name = fields.Str(required=True, data_key='restaurantName')
    name = fields.Str(required=True)
    email = fields.Email(required=True)
    password = fields.Str(required=True, load_only=True)

    @validates('restaurant_name')
    def validate_restaurant_name(self, value, **kwargs):
        errors = validate_string_length(value, 'Restaurant name', 200, allow_empty=False)
        if errors:
            raise ValidationError(errors[0])

    @validates('name')
    def validate_name(self, value, **kwargs):
        errors = validate_string_length(value, 'Name', 100, allow_empty=False)
        if errors:
            raise ValidationError(errors[0])

    @validates('password')
    def validate_password(self, value, **kwargs):
        if len(value) < PASSWORD_MIN_LENGTH:
            raise ValidationError(f'Password must be at least {PASSWORD_MIN_LENGTH} characters')
        errors = validate_string_length(value, 'Password', 128, allow_empty=False)
        if errors:
            raise ValidationError(errors[0])
