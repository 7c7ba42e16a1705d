"""Tests for analytics routes"""

from datetime import datetime

from app.services.analytics_service import AnalyticsService


def _seed(add_response, questions):
    return [
        add_response(rating=5, submitted_at=datetime(2024, 3, 1, 10), answers={
            questions['rating']: 5, questions['choice']: ['Food']
        }),
        add_response(rating=2, submitted_at=datetime(2024, 3, 2, 10), answers={
            questions['rating']: 2, questions['text']: 'Cold soup'
        }),
    ]


def test_form_analytics_requires_token(client, form):
    response = client.get(f'/api/forms/{form.id}/analytics')

    assert response.status_code == 401
    assert response.get_json()['success'] is False


def test_form_analytics_rejects_invalid_token(client, form):
    response = client.get(f'/api/forms/{form.id}/analytics',
                          headers={'Authorization': 'Bearer not-a-token'})
    assert response.status_code == 401


def test_form_analytics_requires_admin_role(client, form, staff_headers):
    response = client.get(f'/api/forms/{form.id}/analytics', headers=staff_headers)
    assert response.status_code == 403


def test_form_analytics_rejects_other_restaurant(client, form, other_restaurant_headers):
    response = client.get(f'/api/forms/{form.id}/analytics', headers=other_restaurant_headers)

    assert response.status_code == 403
    assert response.get_json() == {
        'success': False,
        'message': 'Not authorized to access this restaurant'
    }


def test_form_analytics_not_found(client, auth_headers):
    response = client.get('/api/forms/404/analytics', headers=auth_headers)

    assert response.status_code == 404
    assert response.get_json() == {'success': False, 'message': 'Form not found'}


def test_form_analytics(client, form, questions, add_response, auth_headers):
    _seed(add_response, questions)

    response = client.get(f'/api/forms/{form.id}/analytics', headers=auth_headers)

    assert response.status_code == 200
    body = response.get_json()
    assert body['success'] is True
    assert body['data']['totalResponses'] == 2
    assert body['data']['averageRating'] == 3.5
    assert body['data']['timelineData']['week']['responses']['0'] == [
        {'name': 'Fri', 'value': 1}, {'name': 'Sat', 'value': 1}
    ]


def test_form_analytics_unexpected_error(client, form, auth_headers, monkeypatch):
    def explode(form_id):
        raise RuntimeError('database unavailable')

    monkeypatch.setattr(AnalyticsService, 'get_form_analytics', staticmethod(explode))

    response = client.get(f'/api/forms/{form.id}/analytics', headers=auth_headers)

    assert response.status_code == 500
    body = response.get_json()
    assert body['success'] is False
    assert body['error'] == 'database unavailable'


def test_form_responses_pagination(client, form, questions, add_response, auth_headers):
    _seed(add_response, questions)

    response = client.get(f'/api/forms/{form.id}/responses?page=1&limit=1', headers=auth_headers)

    body = response.get_json()
    assert response.status_code == 200
    assert len(body['data']) == 1
    assert body['pagination'] == {'total': 2, 'page': 1, 'limit': 1, 'pages': 2}


def test_form_responses_malformed_params_fall_back(client, form, auth_headers):
    response = client.get(f'/api/forms/{form.id}/responses?page=abc&limit=-3', headers=auth_headers)
    assert response.get_json()['pagination']['page'] == 1
    assert response.get_json()['pagination']['limit'] == 20

    response = client.get(f'/api/forms/{form.id}/responses?limit=5000', headers=auth_headers)
    assert response.get_json()['pagination']['limit'] == 100


def test_export_form_csv(client, form, questions, add_response, auth_headers):
    _seed(add_response, questions)

    response = client.get(f'/api/forms/{form.id}/export?format=csv', headers=auth_headers)

    assert response.status_code == 200
    assert response.mimetype == 'text/csv'
    assert response.headers['Content-Disposition'] == f'attachment; filename=feedback_{form.id}.csv'
    assert len(response.get_data(as_text=True).split('\n')) == 3


def test_export_form_follows_sort_order(client, form, questions, add_response, auth_headers):
    oldest, newest = _seed(add_response, questions)

    rows = client.get(f'/api/forms/{form.id}/export?format=csv&sortOrder=asc',
                      headers=auth_headers).get_data(as_text=True).split('\n')
    assert rows[1].startswith(f'"{oldest.id}"')

    rows = client.get(f'/api/forms/{form.id}/export?format=csv',
                      headers=auth_headers).get_data(as_text=True).split('\n')
    assert rows[1].startswith(f'"{newest.id}"')


def test_export_form_defaults_to_csv(client, form, auth_headers):
    response = client.get(f'/api/forms/{form.id}/export', headers=auth_headers)
    assert response.mimetype == 'text/csv'


def test_export_form_unknown_format_falls_back_to_json(client, form, auth_headers):
    response = client.get(f'/api/forms/{form.id}/export?format=pdf', headers=auth_headers)

    assert response.mimetype == 'application/json'
    assert response.headers['Content-Disposition'].endswith(f'feedback_{form.id}.json')


def test_export_form_xlsx(client, form, questions, add_response, auth_headers):
    _seed(add_response, questions)

    response = client.get(f'/api/forms/{form.id}/export?format=xlsx', headers=auth_headers)

    assert response.status_code == 200
    assert response.headers['Content-Disposition'].endswith('.xlsx')
    assert response.data[:2] == b'PK'


def test_question_analytics(client, questions, add_response, auth_headers):
    _seed(add_response, questions)
    question = questions['rating']

    response = client.get(f'/api/questions/{question.id}/analytics', headers=auth_headers)

    body = response.get_json()
    assert response.status_code == 200
    assert body['data']['questionText'] == 'How was the food?'
    assert body['data']['data']['average'] == 3.5
    assert [point['date'] for point in body['data']['trendData']] == ['2024-03-01', '2024-03-02']


def test_question_analytics_not_found(client, auth_headers):
    response = client.get('/api/questions/404/analytics', headers=auth_headers)
    assert response.status_code == 404
    assert response.get_json()['message'] == 'Question not found'


def test_question_routes_reject_other_restaurant(client, questions, other_restaurant_headers):
    question_id = questions['text'].id
    for path in ('analytics', 'responses', 'export'):
        response = client.get(f'/api/questions/{question_id}/{path}', headers=other_restaurant_headers)
        assert response.status_code == 403


def test_question_responses(client, questions, add_response, auth_headers):
    _seed(add_response, questions)

    response = client.get(f'/api/questions/{questions["text"].id}/responses', headers=auth_headers)

    body = response.get_json()
    assert body['pagination']['total'] == 1
    assert body['data'][0]['value'] == 'Cold soup'


def test_question_export(client, questions, add_response, auth_headers):
    _seed(add_response, questions)
    question = questions['rating']

    response = client.get(f'/api/questions/{question.id}/export?format=csv', headers=auth_headers)

    assert response.headers['Content-Disposition'] == f'attachment; filename=question_{question.id}.csv'
    assert response.get_data(as_text=True).split('\n')[0] == (
        '"Response ID","Submission Date","Response Value","Overall Form Rating"'
    )


def test_feedback_response_detail(client, questions, add_response, auth_headers):
    first, _ = _seed(add_response, questions)

    response = client.get(f'/api/responses/{first.id}', headers=auth_headers)

    body = response.get_json()
    assert response.status_code == 200
    assert body['data']['id'] == first.id
    assert body['data']['form']['name'] == 'Dinner feedback'
    assert len(body['data']['answers']) == 2


def test_feedback_response_not_found(client, auth_headers):
    response = client.get('/api/responses/404', headers=auth_headers)
    assert response.status_code == 404
    assert response.get_json()['message'] == 'Feedback response not found'


def test_feedback_response_rejects_other_restaurant(client, questions, add_response,
                                                    other_restaurant_headers):
    first, _ = _seed(add_response, questions)
    response = client.get(f'/api/responses/{first.id}', headers=other_restaurant_headers)
    assert response.status_code == 403
