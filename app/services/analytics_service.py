from flask import current_app

from app.services.feedback_repository import FeedbackRepository
from app.utils.aggregation import isoformat_utc
from app.utils.analytics import (
    answers_by_question,
    build_timeline,
    first_and_last_dates,
    question_trend,
    analyze_question,
    response_date_range,
    response_trend,
    submission_lookup,
    summarize_question,
    summarize_ratings,
)
from app.utils.answer_value import annotate_answers


class AnalyticsService:
    @staticmethod
    def get_form_analytics(form_id):
        """
        Builds the analytics document for a form.

        Loads the form, its questions, responses and answers, then derives
        response-level metrics, per-question summaries and timeline rollups.
        Returns (data, error); error is set when the form does not exist.
        """
        form = FeedbackRepository.find_form_by_id(form_id)
        if not form:
            return None, "Form not found"

        responses = FeedbackRepository.find_responses_by_form(form_id)
        questions = FeedbackRepository.find_questions_by_form(form_id, ordered=True)
        answers = FeedbackRepository.find_answers_by_response_ids([r.id for r in responses])

        dated_answers = annotate_answers(answers, submission_lookup(responses))
        grouped = answers_by_question(dated_answers)
        first_date, last_date = response_date_range(responses)

        data = {
            'totalResponses': len(responses),
            'firstResponseDate': isoformat_utc(first_date),
            'lastResponseDate': isoformat_utc(last_date),
        }
        data.update(summarize_ratings(responses))
        data['responseTrend'] = response_trend(responses)
        data['questionAnalytics'] = [
            summarize_question(question, grouped.get(question.id, [])) for question in questions
        ]
        data['timelineData'] = build_timeline(responses)

        current_app.logger.info(
            f"Computed analytics for form {form_id}: responses={len(responses)} "
            f"questions={len(questions)} answers={len(answers)}"
        )
        return data, None

    @staticmethod
    def get_question_analytics(question_id):
        """
        Builds the analytics document for a single question, including its daily trend.
        """
        question = FeedbackRepository.find_question_by_id(question_id)
        if not question:
            return None, "Question not found"

        answers = FeedbackRepository.find_answers_by_question(question_id)
        response_ids = {answer.response_id for answer in answers}
        responses = FeedbackRepository.find_responses_by_ids(response_ids)

        dated_answers = annotate_answers(answers, submission_lookup(responses))
        first_date, last_date = first_and_last_dates(dated_answers)

        data = {
            'questionId': question.id,
            'questionText': question.text,
            'questionType': question.type,
            'hasBeenModified': question.has_been_modified,
            'modificationHistory': question.modification_history or [],
            'firstResponseDate': first_date,
            'lastResponseDate': last_date,
            'responseCount': len(dated_answers),
            'data': analyze_question(question, dated_answers),
            'trendData': question_trend(question, dated_answers),
        }

        current_app.logger.debug(
            f"Computed analytics for question {question_id}: answers={len(dated_answers)}"
        )
        return data, None
