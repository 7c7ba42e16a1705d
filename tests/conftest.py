"""Test configuration and fixtures"""

from datetime import datetime

import pytest
from flask_jwt_extended import create_access_token

from app import create_app
from app.extensions import db
from app.models import (
    User, Restaurant, FeedbackForm, FeedbackQuestion, FeedbackResponse, FeedbackAnswer
)


@pytest.fixture
def app():
    """Create application for testing"""
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client"""
    return app.test_client()


def _make_user(restaurant, email, role='admin', password='password123'):
    user = User(restaurant_id=restaurant.id, name='Test Admin', email=email, role=role)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    return user


def _headers_for(user):
    token = create_access_token(identity=str(user.id), additional_claims=user.token_claims())
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def restaurant(app):
    restaurant = Restaurant(name='Test Bistro', contact_email='owner@example.com')
    db.session.add(restaurant)
    db.session.commit()
    return restaurant


@pytest.fixture
def admin(restaurant):
    return _make_user(restaurant, 'admin@example.com')


@pytest.fixture
def auth_headers(admin):
    return _headers_for(admin)


@pytest.fixture
def staff_headers(restaurant):
    return _headers_for(_make_user(restaurant, 'staff@example.com', role='staff'))


@pytest.fixture
def other_restaurant_headers(app):
    other = Restaurant(name='Rival Diner')
    db.session.add(other)
    db.session.commit()
    return _headers_for(_make_user(other, 'rival@example.com'))


@pytest.fixture
def form(restaurant):
    """A form with a rating, a checkbox and a text question"""
    form = FeedbackForm(
        restaurant_id=restaurant.id,
        name='Dinner feedback',
        description='Tell us about your evening'
    )
    db.session.add(form)
    db.session.flush()

    db.session.add_all([
        FeedbackQuestion(form_id=form.id, text='How was the food?', type='rating', order=1),
        FeedbackQuestion(
            form_id=form.id, text='What did you enjoy?', type='checkbox', order=2,
            options=['Food', 'Service', 'Ambience'], settings={'allowOther': True}
        ),
        FeedbackQuestion(form_id=form.id, text='Anything else?', type='text', order=3, required=False),
    ])
    db.session.commit()
    return form


@pytest.fixture
def questions(form):
    rating, choice, text = FeedbackQuestion.query.filter_by(form_id=form.id).order_by(
        FeedbackQuestion.order
    ).all()
    return {'rating': rating, 'choice': choice, 'text': text}


@pytest.fixture
def add_response(form):
    """Factory creating a response and its answers"""
    def _add(rating=None, submitted_at=None, answers=None):
        response = FeedbackResponse(
            form_id=form.id,
            restaurant_id=form.restaurant_id,
            overall_rating=rating,
            submitted_at=submitted_at or datetime.utcnow()
        )
        db.session.add(response)
        db.session.flush()
        for question, value in (answers or {}).items():
            db.session.add(FeedbackAnswer(
                response_id=response.id,
                question_id=question.id,
                value=value,
                created_at=response.submitted_at
            ))
        db.session.commit()
        return response
    return _add
