from flask import jsonify, current_app
from marshmallow import ValidationError

from app.feedback import bp
from app.schemas import FeedbackSubmissionSchema, QuestionSchema, QuestionUpdateSchema
from app.services.feedback_repository import FeedbackRepository
from app.services.feedback_service import FeedbackService, NOT_FOUND_ERRORS
from app.services.form_service import FormService
from app.utils.decorators import admin_required, tenant_guard
from app.utils.helpers import get_request_data, log_route

submission_schema = FeedbackSubmissionSchema()
question_update_schema = QuestionUpdateSchema()
question_schema = QuestionSchema()

form_guard = tenant_guard('form_id', FeedbackRepository.find_form_by_id, 'Form not found')


@bp.route('/forms/<int:form_id>/submit', methods=['POST'])
@log_route
def submit_feedback(form_id):
    """Submit a customer's answers to a feedback form"""
    try:
        data = submission_schema.load(get_request_data())
    except ValidationError as err:
        return jsonify({'success': False, 'message': 'Invalid input data', 'details': err.messages}), 400

    try:
        result, error = FeedbackService.submit_feedback(form_id, data)
        if error:
            body = {'success': False, 'message': error}
            body.update(result or {})
            return jsonify(body), 404 if error in NOT_FOUND_ERRORS else 400
        return jsonify({'success': True, 'data': result}), 201
    except Exception as e:
        current_app.logger.exception(f"Error submitting feedback for form {form_id}: {e}")
        return jsonify({'success': False, 'message': 'Error submitting feedback', 'error': str(e)}), 500


@bp.route('/forms/<int:form_id>/questions/<int:question_id>', methods=['PUT'])
@log_route
@admin_required
@form_guard
def update_question(form_id, question_id, current_user):
    """Edit a question; wording changes are kept in its modification history"""
    try:
        data = question_update_schema.load(get_request_data())
    except ValidationError as err:
        return jsonify({'success': False, 'message': 'Invalid input data', 'details': err.messages}), 400

    try:
        question, error = FormService.update_question(form_id, question_id, data)
        if error:
            return jsonify({'success': False, 'message': error}), 404
        return jsonify({'success': True, 'data': question_schema.dump(question)}), 200
    except Exception as e:
        current_app.logger.exception(f"Error updating question {question_id}: {e}")
        return jsonify({'success': False, 'message': 'Failed to update question', 'error': str(e)}), 500
