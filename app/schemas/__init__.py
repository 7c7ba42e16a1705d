"""Schemas package for the application.

This module exports all the schema classes that can be imported
when someone imports from the schemas package.
"""

from .base_schema import (
    UtcDateTimeField,
    BaseSchema,
    validate_string_length
)
from .user_schema import (
    UserPublicSchema,
    LoginSchema,
    RegisterSchema
)
from .feedback_schema import (
    FeedbackFormSummarySchema,
    QuestionSummarySchema,
    FeedbackAnswerSchema,
    FeedbackResponseSchema,
    FeedbackResponseDetailSchema,
    QuestionSchema,
    QuestionUpdateSchema,
    FeedbackSubmissionSchema
)

# Export all the schema classes for easy import
__all__ = [
    # Base schema classes and utilities
    'UtcDateTimeField',
    'BaseSchema',
    'validate_string_length',

    # User-related schemas
    'UserPublicSchema',
    'LoginSchema',
    'RegisterSchema',

    # Feedback-related schemas
    'FeedbackFormSummarySchema',
    'QuestionSummarySchema',
    'FeedbackAnswerSchema',
    'FeedbackResponseSchema',
    'FeedbackResponseDetailSchema',
    'QuestionSchema',
    'QuestionUpdateSchema',
    'FeedbackSubmissionSchema'
]
