"""Tests for feedback submission and question editing routes"""


def test_submit_feedback(client, form, questions):
    response = client.post(f'/api/feedback/forms/{form.id}/submit', json={
        'restaurantId': form.restaurant_id,
        'answers': {
            str(questions['rating'].id): 5,
            str(questions['choice'].id): ['Service'],
        }
    })

    assert response.status_code == 201
    body = response.get_json()
    assert body['success'] is True
    assert body['data']['overallRating'] == 5
    assert body['data']['responseId']


def test_submitted_feedback_is_listed(client, form, questions, auth_headers):
    client.post(f'/api/feedback/forms/{form.id}/submit', json={
        'answers': {str(questions['rating'].id): 2, str(questions['choice'].id): ['Food']}
    })

    response = client.get(f'/api/forms/{form.id}/responses', headers=auth_headers)

    body = response.get_json()
    assert body['pagination']['total'] == 1
    assert body['data'][0]['overallRating'] == 2


def test_submit_feedback_missing_required(client, form, questions):
    response = client.post(f'/api/feedback/forms/{form.id}/submit', json={
        'answers': {str(questions['rating'].id): 4}
    })

    assert response.status_code == 400
    body = response.get_json()
    assert body['message'] == 'Some required questions are not answered'
    assert body['missingQuestions'] == [questions['choice'].id]


def test_submit_feedback_requires_answers(client, form):
    response = client.post(f'/api/feedback/forms/{form.id}/submit', json={})
    assert response.status_code == 400
    assert 'answers' in response.get_json()['details']


def test_submit_feedback_unknown_form(client):
    response = client.post('/api/feedback/forms/404/submit', json={'answers': {}})
    assert response.status_code == 404
    assert response.get_json()['message'] == 'Feedback form not found'


def test_update_question(client, form, questions, auth_headers):
    question = questions['rating']

    response = client.put(f'/api/feedback/forms/{form.id}/questions/{question.id}',
                          json={'text': 'How was dinner?'}, headers=auth_headers)

    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['text'] == 'How was dinner?'
    assert data['hasBeenModified'] is True
    assert data['modificationHistory'][0]['text'] == 'How was the food?'

    analytics = client.get(f'/api/questions/{question.id}/analytics', headers=auth_headers)
    assert analytics.get_json()['data']['hasBeenModified'] is True


def test_update_question_validates_payload(client, form, questions, auth_headers):
    response = client.put(f'/api/feedback/forms/{form.id}/questions/{questions["text"].id}',
                          json={'type': 'slider'}, headers=auth_headers)
    assert response.status_code == 400
    assert 'type' in response.get_json()['details']


def test_update_question_not_on_form(client, form, auth_headers):
    response = client.put(f'/api/feedback/forms/{form.id}/questions/404',
                          json={'text': 'x'}, headers=auth_headers)
    assert response.status_code == 404


def test_update_question_requires_owner(client, form, questions, other_restaurant_headers):
    response = client.put(f'/api/feedback/forms/{form.id}/questions/{questions["text"].id}',
                          json={'text': 'x'}, headers=other_restaurant_headers)
    assert response.status_code == 403


def test_update_question_requires_token(client, form, questions):
    response = client.put(f'/api/feedback/forms/{form.id}/questions/{questions["text"].id}',
                          json={'text': 'x'})
    assert response.status_code == 401
