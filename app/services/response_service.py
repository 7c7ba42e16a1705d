import math

from flask import current_app

from app.schemas import (
    FeedbackAnswerSchema,
    FeedbackFormSummarySchema,
    FeedbackResponseDetailSchema,
    FeedbackResponseSchema,
    QuestionSummarySchema,
)
from app.services.feedback_repository import FeedbackRepository
from app.utils.aggregation import group_by_key, isoformat_utc
from app.utils.export import (
    build_form_export_rows,
    build_question_export_rows,
    serialize_rows,
)

response_schema = FeedbackResponseSchema()
response_detail_schema = FeedbackResponseDetailSchema()
answer_schema = FeedbackAnswerSchema()
question_summary_schema = QuestionSummarySchema()
form_summary_schema = FeedbackFormSummarySchema()


def _pagination(total, page, limit):
    return {
        'total': total,
        'page': page,
        'limit': limit,
        'pages': math.ceil(total / limit) if limit else 0
    }


class ResponseService:
    @staticmethod
    def get_form_responses(form_id, page, limit, sort_by='submittedAt', sort_order='desc'):
        """
        Gets a page of responses for a form, each with its answers.
        """
        page_obj = FeedbackRepository.paginate_responses_by_form(
            form_id, page, limit, sort_by=sort_by, sort_order=sort_order
        )
        total = FeedbackRepository.count_responses(form_id=form_id)

        responses = page_obj.items
        answers = FeedbackRepository.find_answers_by_response_ids([r.id for r in responses])
        questions = {q.id: q for q in FeedbackRepository.find_questions_by_form(form_id, ordered=False)}

        grouped = group_by_key(answers, lambda answer: answer.response_id)

        data = []
        for response in responses:
            response_data = response_schema.dump(response)
            response_data['answers'] = []
            for answer in grouped.get(response.id, []):
                question = questions.get(answer.question_id)
                answer_data = answer_schema.dump(answer)
                answer_data['type'] = question.type if question else 'unknown'
                answer_data['questionText'] = question.text if question else 'Unknown question'
                response_data['answers'].append(answer_data)
            data.append(response_data)

        return {'responses': data, 'pagination': _pagination(total, page, limit)}

    @staticmethod
    def get_question_responses(question_id, page, limit, sort_order='desc'):
        """
        Gets a page of answers for a question with the submission time of each response.
        """
        page_obj = FeedbackRepository.paginate_answers_by_question(
            question_id, page, limit, sort_order=sort_order
        )
        total = FeedbackRepository.count_answers(question_id=question_id)

        answers = page_obj.items
        responses = {
            r.id: r for r in FeedbackRepository.find_responses_by_ids({a.response_id for a in answers})
        }

        data = []
        for answer in answers:
            response = responses.get(answer.response_id)
            answer_data = answer_schema.dump(answer)
            answer_data['feedbackId'] = answer.response_id
            answer_data['submittedAt'] = isoformat_utc(
                response.submitted_at if response else answer.created_at
            )
            data.append(answer_data)

        return {'answers': data, 'pagination': _pagination(total, page, limit)}

    @staticmethod
    def get_feedback_response(response_id):
        """
        Gets a single response with its answers, their questions and the form summary.
        """
        response = FeedbackRepository.find_response_by_id(response_id)
        if not response:
            return None, "Feedback response not found"

        answers = FeedbackRepository.find_answers_by_response_ids([response.id])
        questions = {
            q.id: q for q in FeedbackRepository.find_questions_by_ids({a.question_id for a in answers})
        }
        form = FeedbackRepository.find_form_by_id(response.form_id)

        data = response_detail_schema.dump(response)
        data['form'] = form_summary_schema.dump(form) if form else None
        data['answers'] = []
        for answer in answers:
            question = questions.get(answer.question_id)
            answer_data = answer_schema.dump(answer)
            answer_data['question'] = question_summary_schema.dump(question) if question else None
            data['answers'].append(answer_data)

        return data, None

    @staticmethod
    def export_form_responses(form_id, format_type, sort_order='desc'):
        """
        Exports a form's responses as one row per response and one column per question.

        Returns ((content, mimetype, filename), error).
        """
        form = FeedbackRepository.find_form_by_id(form_id)
        if not form:
            return None, "Form not found"

        questions = FeedbackRepository.find_questions_by_form(form_id, ordered=True)
        responses = FeedbackRepository.find_responses_by_form(form_id, sort_order=sort_order)
        answers = FeedbackRepository.find_answers_by_response_ids([r.id for r in responses])

        rows = build_form_export_rows(questions, responses, answers)
        content, mimetype, extension = serialize_rows(rows, format_type)

        current_app.logger.info(
            f"Exported form {form_id} as {extension}: rows={len(rows) - 1}"
        )
        return (content, mimetype, f'feedback_{form_id}.{extension}'), None

    @staticmethod
    def export_question_responses(question_id, format_type):
        """
        Exports every answer to one question together with its response metadata.

        Returns ((content, mimetype, filename), error).
        """
        question = FeedbackRepository.find_question_by_id(question_id)
        if not question:
            return None, "Question not found"

        answers = FeedbackRepository.find_answers_by_question(question_id)
        responses = {
            r.id: r for r in FeedbackRepository.find_responses_by_ids({a.response_id for a in answers})
        }

        rows = build_question_export_rows(question, answers, responses)
        content, mimetype, extension = serialize_rows(rows, format_type)

        current_app.logger.info(
            f"Exported question {question_id} as {extension}: rows={len(rows) - 1}"
        )
        return (content, mimetype, f'question_{question_id}.{extension}'), None
