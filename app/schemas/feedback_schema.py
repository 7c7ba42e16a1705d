from marshmallow import Schema, fields, validate

from app.models import QuestionTypes
from app.schemas.base_schema import BaseSchema, UtcDateTimeField


class FeedbackFormSummarySchema(Schema):
    """Form fields shown alongside a single response"""
    name = fields.Str()
    description = fields.Str(allow_none=True)
    thank_you_message = fields.Str(data_key='thankYouMessage', allow_none=True)


class QuestionSummarySchema(BaseSchema):
    """Question fields attached to answers"""
    text = fields.Str()
    type = fields.Str()
    options = fields.Raw(allow_none=True)
    has_been_modified = fields.Boolean(data_key='hasBeenModified')


class FeedbackAnswerSchema(BaseSchema):
    """Schema for FeedbackAnswer model"""
    response_id = fields.Int(data_key='responseId')
    question_id = fields.Int(data_key='questionId')
    value = fields.Raw(allow_none=True)
    created_at = UtcDateTimeField(data_key='createdAt')


class FeedbackResponseSchema(BaseSchema):
    """Schema for FeedbackResponse model"""
    form_id = fields.Int(data_key='formId')
    restaurant_id = fields.Int(data_key='restaurantId')
    customer_visit_id = fields.Int(data_key='customerVisitId', allow_none=True)
    overall_rating = fields.Int(data_key='overallRating', allow_none=True)
    submitted_at = UtcDateTimeField(data_key='submittedAt')


class FeedbackResponseDetailSchema(FeedbackResponseSchema):
    """Single response view including the Google review hand-off fields"""
    submitted_to_google = fields.Boolean(data_key='submittedToGoogle')
    google_review_text = fields.Str(data_key='googleReviewText', allow_none=True)


class QuestionSchema(BaseSchema):
    """Full question representation returned after an edit"""
    form_id = fields.Int(data_key='formId')
    text = fields.Str()
    description = fields.Str(allow_none=True)
    type = fields.Str()
    required = fields.Boolean()
    order = fields.Int()
    options = fields.Raw(allow_none=True)
    settings = fields.Raw(allow_none=True)
    modification_history = fields.Raw(data_key='modificationHistory')
    has_been_modified = fields.Boolean(data_key='hasBeenModified')
    updated_at = UtcDateTimeField(data_key='updatedAt')


class QuestionUpdateSchema(Schema):
    """Editable question fields; every field is optional"""
    text = fields.Str(validate=validate.Length(min=1, max=1000))
    description = fields.Str(allow_none=True)
    type = fields.Str(validate=validate.OneOf([t.value for t in QuestionTypes]))
    required = fields.Boolean()
    order = fields.Int()
    options = fields.List(fields.Raw(), allow_none=True)
    settings = fields.Dict(allow_none=True)


class FeedbackSubmissionSchema(Schema):
    """Customer submission: answers keyed by question id"""
    answers = fields.Dict(keys=fields.Str(), values=fields.Raw(allow_none=True), required=True)
    restaurant_id = fields.Int(data_key='restaurantId', allow_none=True, load_default=None)
    customer_visit_id = fields.Int(data_key='customerVisitId', allow_none=True, load_default=None)
