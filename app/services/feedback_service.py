from datetime import datetime

from flask import current_app

from app.extensions import db
from app.models import FeedbackResponse, FeedbackAnswer, QuestionTypes
from app.services.feedback_repository import FeedbackRepository
from app.utils.aggregation import js_round
from app.utils.answer_value import AnswerValue, ValueKind

FORM_NOT_FOUND = "Feedback form not found"
RESTAURANT_NOT_FOUND = "Restaurant not found"
VISIT_NOT_FOUND = "Customer visit not found"
RESTAURANT_MISMATCH = "Form does not belong to this restaurant"
MISSING_REQUIRED = "Some required questions are not answered"
UNKNOWN_QUESTIONS = "Answers reference questions that are not on this form"

NOT_FOUND_ERRORS = (FORM_NOT_FOUND, RESTAURANT_NOT_FOUND, VISIT_NOT_FOUND)


def _is_answered(value):
    answer = AnswerValue(value)
    if answer.kind == ValueKind.EMPTY:
        return False
    if answer.kind == ValueKind.TEXT:
        return answer.as_text() is not None
    if answer.kind in (ValueKind.SEQUENCE, ValueKind.MAPPING):
        return len(value) > 0
    return True


def overall_rating(answers, questions_by_id):
    """Rounded mean of the numeric answers given to rating questions, or None."""
    ratings = []
    for question_id, value in answers.items():
        question = questions_by_id.get(question_id)
        if question is None or question.type != QuestionTypes.RATING.value:
            continue
        number = AnswerValue(value).as_number()
        if number is not None:
            ratings.append(number)
    if not ratings:
        return None
    return js_round(sum(ratings) / len(ratings))


class FeedbackService:
    @staticmethod
    def submit_feedback(form_id, data):
        """
        Stores a customer's submission as one response plus one answer per question.

        :param form_id: id of the form being answered
        :param data: loaded submission with ``answers`` keyed by question id
        :return: (result, error). On failure result may carry details such as
                 ``missingQuestions``; error is one of the module's messages.
        """
        form = FeedbackRepository.find_form_by_id(form_id)
        if not form:
            return None, FORM_NOT_FOUND

        restaurant_id = data.get('restaurant_id')
        if restaurant_id is not None:
            if not FeedbackRepository.find_restaurant_by_id(restaurant_id):
                return None, RESTAURANT_NOT_FOUND
            if restaurant_id != form.restaurant_id:
                return None, RESTAURANT_MISMATCH

        visit_id = data.get('customer_visit_id')
        if visit_id is not None:
            visit = FeedbackRepository.find_customer_visit_by_id(visit_id)
            if not visit or visit.restaurant_id != form.restaurant_id:
                return None, VISIT_NOT_FOUND

        questions_by_id = {
            q.id: q for q in FeedbackRepository.find_questions_by_form(form_id, ordered=True)
        }

        answers = {}
        unknown = []
        for key, value in data['answers'].items():
            try:
                question_id = int(key)
            except (TypeError, ValueError):
                question_id = None
            if question_id not in questions_by_id:
                unknown.append(key)
                continue
            if _is_answered(value):
                answers[question_id] = value

        if unknown:
            return {'unknownQuestions': unknown}, UNKNOWN_QUESTIONS

        missing = [
            question_id for question_id, question in questions_by_id.items()
            if question.required and question_id not in answers
        ]
        if missing:
            return {'missingQuestions': missing}, MISSING_REQUIRED

        rating = overall_rating(answers, questions_by_id)
        submitted_at = datetime.utcnow()

        response = FeedbackResponse(
            form_id=form.id,
            restaurant_id=form.restaurant_id,
            customer_visit_id=visit_id,
            overall_rating=rating,
            submitted_at=submitted_at
        )
        db.session.add(response)
        db.session.flush()

        for question_id, value in answers.items():
            db.session.add(FeedbackAnswer(
                response_id=response.id,
                question_id=question_id,
                value=value,
                created_at=submitted_at
            ))
        db.session.commit()

        current_app.logger.info(
            f"Stored feedback response {response.id} for form {form.id}: "
            f"answers={len(answers)} overall_rating={rating}"
        )
        return {'responseId': response.id, 'overallRating': rating}, None
