from datetime import datetime
import enum

from app.extensions import db
from app.models.user import User, UserRoles


class QuestionTypes(enum.Enum):
    RATING = 'rating'
    TEXT = 'text'
    MULTIPLE_CHOICE = 'multiplechoice'
    CHECKBOX = 'checkbox'
    DROPDOWN = 'dropdown'


CHOICE_QUESTION_TYPES = (
    QuestionTypes.MULTIPLE_CHOICE.value,
    QuestionTypes.CHECKBOX.value,
    QuestionTypes.DROPDOWN.value,
)


class Restaurant(db.Model):
    __tablename__ = 'restaurant'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    logo = db.Column(db.String(255))  # URL to logo image
    contact_email = db.Column(db.String(120))
    contact_phone = db.Column(db.String(50))
    google_place_id = db.Column(db.String(120))  # For Google review integration
    active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    users = db.relationship('User', backref='restaurant', lazy=True)
    forms = db.relationship('FeedbackForm', backref='restaurant', lazy=True)

    def __repr__(self):
        return f'<Restaurant {self.name}>'


class CustomerVisit(db.Model):
    __tablename__ = 'customer_visit'

    id = db.Column(db.Integer, primary_key=True)
    restaurant_id = db.Column(db.Integer, db.ForeignKey('restaurant.id'), nullable=False, index=True)
    table_id = db.Column(db.Integer)
    customer_name = db.Column(db.String(120))
    customer_phone = db.Column(db.String(50))
    customer_email = db.Column(db.String(120))
    google_id = db.Column(db.String(120))  # If the customer signs in with Google
    visit_date = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<CustomerVisit {self.id}>'


class FeedbackForm(db.Model):
    __tablename__ = 'feedback_form'

    id = db.Column(db.Integer, primary_key=True)
    restaurant_id = db.Column(db.Integer, db.ForeignKey('restaurant.id'), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    is_default = db.Column(db.Boolean, default=False)
    active = db.Column(db.Boolean, default=True)
    thank_you_message = db.Column(db.String(255), default='Thank you for your feedback!')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    questions = db.relationship('FeedbackQuestion', backref='form', lazy=True,
                                order_by='FeedbackQuestion.order')
    responses = db.relationship('FeedbackResponse', backref='form', lazy=True)

    def __repr__(self):
        return f'<FeedbackForm {self.name}>'


class FeedbackQuestion(db.Model):
    __tablename__ = 'feedback_question'

    id = db.Column(db.Integer, primary_key=True)
    form_id = db.Column(db.Integer, db.ForeignKey('feedback_form.id'), nullable=False, index=True)
    text = db.Column(db.Text, nullable=False)
    description = db.Column(db.Text)
    type = db.Column(db.String(30), nullable=False)  # one of QuestionTypes values
    required = db.Column(db.Boolean, default=True)
    order = db.Column(db.Integer, nullable=False, default=0)
    options = db.Column(db.JSON)  # strings or {value, label} maps
    settings = db.Column(db.JSON, default=dict)  # e.g. {"allowOther": true}
    modification_history = db.Column(db.JSON, default=list)  # [{text, changedAt}]
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    answers = db.relationship('FeedbackAnswer', backref='question', lazy=True)

    @property
    def has_been_modified(self):
        return bool(self.modification_history)

    @property
    def allow_other(self):
        return bool((self.settings or {}).get('allowOther'))

    def __repr__(self):
        return f'<FeedbackQuestion {self.text[:50]}>'


class FeedbackResponse(db.Model):
    __tablename__ = 'feedback_response'

    id = db.Column(db.Integer, primary_key=True)
    form_id = db.Column(db.Integer, db.ForeignKey('feedback_form.id'), nullable=False, index=True)
    restaurant_id = db.Column(db.Integer, db.ForeignKey('restaurant.id'), nullable=False, index=True)
    customer_visit_id = db.Column(db.Integer, db.ForeignKey('customer_visit.id'))
    overall_rating = db.Column(db.Integer)  # 1-5 when present
    submitted_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    submitted_to_google = db.Column(db.Boolean, default=False)
    google_review_text = db.Column(db.Text)

    # Relationships
    answers = db.relationship('FeedbackAnswer', backref='response', lazy=True)

    def __repr__(self):
        return f'<FeedbackResponse {self.id}>'


class FeedbackAnswer(db.Model):
    __tablename__ = 'feedback_answer'

    id = db.Column(db.Integer, primary_key=True)
    response_id = db.Column(db.Integer, db.ForeignKey('feedback_response.id'), nullable=False, index=True)
    question_id = db.Column(db.Integer, db.ForeignKey('feedback_question.id'), nullable=False, index=True)
    # Number, string, list of strings or map ({"other": "..."}) depending on the question
    value = db.Column(db.JSON)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<FeedbackAnswer {self.id}>'
