from flask import request, jsonify, current_app, Response

from app.analytics import bp
from app.services.analytics_service import AnalyticsService
from app.services.feedback_repository import FeedbackRepository
from app.services.response_service import ResponseService
from app.utils.decorators import admin_required, tenant_guard
from app.utils.helpers import get_pagination_params, get_sort_order, log_route


def _question_restaurant(question):
    return question.form.restaurant_id if question.form else None


form_guard = tenant_guard('form_id', FeedbackRepository.find_form_by_id, 'Form not found')
question_guard = tenant_guard(
    'question_id', FeedbackRepository.find_question_by_id, 'Question not found',
    restaurant_of=_question_restaurant
)
response_guard = tenant_guard(
    'response_id', FeedbackRepository.find_response_by_id, 'Feedback response not found'
)


def _export_format():
    return request.args.get('format', current_app.config['EXPORT_DEFAULT_FORMAT'], type=str).lower()


def _attachment(content, mimetype, filename):
    return Response(
        content,
        mimetype=mimetype,
        headers={'Content-Disposition': f'attachment; filename={filename}'}
    )


def _server_error(message, e):
    current_app.logger.exception(f"{message}: {e}")
    return jsonify({'success': False, 'message': message, 'error': str(e)}), 500


# ---------------------------------------------------------------------------
# Forms
# ---------------------------------------------------------------------------

@bp.route('/forms/<int:form_id>/analytics', methods=['GET'])
@log_route
@admin_required
@form_guard
def get_form_analytics(form_id, current_user):
    """Get analytics data for a form"""
    try:
        data, error = AnalyticsService.get_form_analytics(form_id)
        if error:
            return jsonify({'success': False, 'message': error}), 404
        return jsonify({'success': True, 'data': data}), 200
    except Exception as e:
        return _server_error('Error getting form analytics', e)


@bp.route('/forms/<int:form_id>/responses', methods=['GET'])
@log_route
@admin_required
@form_guard
def get_form_responses(form_id, current_user):
    """Get paginated responses for a form"""
    try:
        page, limit = get_pagination_params()
        sort_by = request.args.get('sortBy', 'submittedAt', type=str)
        sort_order = get_sort_order()

        result = ResponseService.get_form_responses(
            form_id, page, limit, sort_by=sort_by, sort_order=sort_order
        )
        return jsonify({
            'success': True,
            'data': result['responses'],
            'pagination': result['pagination']
        }), 200
    except Exception as e:
        return _server_error('Error getting form responses', e)


@bp.route('/forms/<int:form_id>/export', methods=['GET'])
@log_route
@admin_required
@form_guard
def export_form_responses(form_id, current_user):
    """Export all responses of a form as a downloadable file"""
    try:
        result, error = ResponseService.export_form_responses(
            form_id, _export_format(), sort_order=get_sort_order()
        )
        if error:
            return jsonify({'success': False, 'message': error}), 404
        return _attachment(*result)
    except Exception as e:
        return _server_error('Error exporting form data', e)


# ---------------------------------------------------------------------------
# Questions
# ---------------------------------------------------------------------------

@bp.route('/questions/<int:question_id>/analytics', methods=['GET'])
@log_route
@admin_required
@question_guard
def get_question_analytics(question_id, current_user):
    """Get detailed analytics for a single question"""
    try:
        data, error = AnalyticsService.get_question_analytics(question_id)
        if error:
            return jsonify({'success': False, 'message': error}), 404
        return jsonify({'success': True, 'data': data}), 200
    except Exception as e:
        return _server_error('Error getting question analytics', e)


@bp.route('/questions/<int:question_id>/responses', methods=['GET'])
@log_route
@admin_required
@question_guard
def get_question_responses(question_id, current_user):
    """Get paginated answers for a question"""
    try:
        page, limit = get_pagination_params()
        result = ResponseService.get_question_responses(
            question_id, page, limit, sort_order=get_sort_order()
        )
        return jsonify({
            'success': True,
            'data': result['answers'],
            'pagination': result['pagination']
        }), 200
    except Exception as e:
        return _server_error('Error getting question responses', e)


@bp.route('/questions/<int:question_id>/export', methods=['GET'])
@log_route
@admin_required
@question_guard
def export_question_responses(question_id, current_user):
    """Export all answers to a question as a downloadable file"""
    try:
        result, error = ResponseService.export_question_responses(question_id, _export_format())
        if error:
            return jsonify({'success': False, 'message': error}), 404
        return _attachment(*result)
    except Exception as e:
        return _server_error('Error exporting question data', e)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

@bp.route('/responses/<int:response_id>', methods=['GET'])
@log_route
@admin_required
@response_guard
def get_feedback_response(response_id, current_user):
    """Get a single feedback response with its answers"""
    try:
        data, error = ResponseService.get_feedback_response(response_id)
        if error:
            return jsonify({'success': False, 'message': error}), 404
        return jsonify({'success': True, 'data': data}), 200
    except Exception as e:
        return _server_error('Error getting feedback response', e)
