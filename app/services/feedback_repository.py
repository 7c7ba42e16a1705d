from app.extensions import db
from app.models import (
    Restaurant, CustomerVisit, FeedbackForm, FeedbackQuestion, FeedbackResponse, FeedbackAnswer
)

RESPONSE_SORT_COLUMNS = {
    'submittedAt': FeedbackResponse.submitted_at,
    'overallRating': FeedbackResponse.overall_rating,
}


def _ordered(column, sort_order):
    return column.asc() if sort_order == 'asc' else column.desc()


class FeedbackRepository:
    """Queries shared by the analytics, export and submission services."""

    @staticmethod
    def find_restaurant_by_id(restaurant_id):
        return db.session.get(Restaurant, restaurant_id)

    @staticmethod
    def find_customer_visit_by_id(visit_id):
        return db.session.get(CustomerVisit, visit_id)

    @staticmethod
    def find_form_by_id(form_id):
        return db.session.get(FeedbackForm, form_id)

    @staticmethod
    def find_question_by_id(question_id):
        return db.session.get(FeedbackQuestion, question_id)

    @staticmethod
    def find_response_by_id(response_id):
        return db.session.get(FeedbackResponse, response_id)

    @staticmethod
    def find_questions_by_form(form_id, ordered=True):
        query = FeedbackQuestion.query.filter_by(form_id=form_id)
        if ordered:
            query = query.order_by(FeedbackQuestion.order.asc(), FeedbackQuestion.id.asc())
        return query.all()

    @staticmethod
    def find_questions_by_ids(question_ids):
        if not question_ids:
            return []
        return FeedbackQuestion.query.filter(FeedbackQuestion.id.in_(list(question_ids))).all()

    @staticmethod
    def find_responses_by_form(form_id, sort_by='submittedAt', sort_order='desc'):
        column = RESPONSE_SORT_COLUMNS.get(sort_by, FeedbackResponse.submitted_at)
        return FeedbackResponse.query.filter_by(form_id=form_id).order_by(
            _ordered(column, sort_order), _ordered(FeedbackResponse.id, sort_order)
        ).all()

    @staticmethod
    def paginate_responses_by_form(form_id, page, per_page, sort_by='submittedAt', sort_order='desc'):
        column = RESPONSE_SORT_COLUMNS.get(sort_by, FeedbackResponse.submitted_at)
        return FeedbackResponse.query.filter_by(form_id=form_id).order_by(
            _ordered(column, sort_order), _ordered(FeedbackResponse.id, sort_order)
        ).paginate(page=page, per_page=per_page, error_out=False, count=False)

    @staticmethod
    def find_responses_by_ids(response_ids):
        if not response_ids:
            return []
        return FeedbackResponse.query.filter(FeedbackResponse.id.in_(list(response_ids))).all()

    @staticmethod
    def find_answers_by_response_ids(response_ids):
        if not response_ids:
            return []
        return FeedbackAnswer.query.filter(
            FeedbackAnswer.response_id.in_(list(response_ids))
        ).order_by(FeedbackAnswer.id.asc()).all()

    @staticmethod
    def find_answers_by_question(question_id):
        return FeedbackAnswer.query.filter_by(question_id=question_id).order_by(
            FeedbackAnswer.id.asc()
        ).all()

    @staticmethod
    def paginate_answers_by_question(question_id, page, per_page, sort_order='desc'):
        return FeedbackAnswer.query.filter_by(question_id=question_id).order_by(
            _ordered(FeedbackAnswer.created_at, sort_order), _ordered(FeedbackAnswer.id, sort_order)
        ).paginate(page=page, per_page=per_page, error_out=False, count=False)

    @staticmethod
    def count_responses(**filters):
        return FeedbackResponse.query.filter_by(**filters).count()

    @staticmethod
    def count_answers(**filters):
        return FeedbackAnswer.query.filter_by(**filters).count()
