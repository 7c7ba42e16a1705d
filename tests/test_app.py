import logging

from flask import Flask

from app import create_app
from app.config import ProductionConfig, TestingConfig


def test_create_app_uses_requested_config():
    app = create_app('testing')
    assert app.config['TESTING'] is True
    assert app.config['DEFAULT_PAGE_SIZE'] == 20
    assert app.config['MAX_PAGE_SIZE'] == 100
    assert app.config['EXPORT_DEFAULT_FORMAT'] == 'csv'
    assert app.config['SQLALCHEMY_DATABASE_URI'] == TestingConfig.SQLALCHEMY_DATABASE_URI


def test_home_page(client):
    """Test the liveness route"""
    response = client.get('/')
    assert response.status_code == 200
    assert response.get_json() == {'message': 'Restaurant QR Feedback API is running'}


def test_unknown_route_returns_json(client):
    response = client.get('/api/does-not-exist')
    assert response.status_code == 404
    body = response.get_json()
    assert body['success'] is False
    assert body['error']['type'] == 'not_found'


def test_method_not_allowed(client, form, auth_headers):
    response = client.post(f'/api/forms/{form.id}/analytics', headers=auth_headers)
    assert response.status_code == 405
    assert response.get_json()['success'] is False


def test_user_login(client, admin):
    response = client.post('/api/auth/login', json={
        'email': 'admin@example.com',
        'password': 'password123'
    })
    assert response.status_code == 200
    data = response.get_json()
    assert data['success'] is True
    assert data['token']
    assert data['user']['email'] == 'admin@example.com'
    assert data['user']['restaurantId'] == admin.restaurant_id
    assert 'password' not in data['user']


def test_login_token_grants_access(client, admin, form):
    token = client.post('/api/auth/login', json={
        'email': 'admin@example.com',
        'password': 'password123'
    }).get_json()['token']

    response = client.get(f'/api/forms/{form.id}/analytics',
                          headers={'Authorization': f'Bearer {token}'})
    assert response.status_code == 200


def test_login_wrong_password(client, admin):
    response = client.post('/api/auth/login', json={
        'email': 'admin@example.com',
        'password': 'wrong-password'
    })
    assert response.status_code == 401
    assert response.get_json()['success'] is False


def test_login_missing_fields(client):
    response = client.post('/api/auth/login', json={'email': 'admin@example.com'})
    assert response.status_code == 400
    assert 'password' in response.get_json()['details']


def test_me(client, admin, auth_headers):
    response = client.get('/api/auth/me', headers=auth_headers)
    assert response.status_code == 200
    assert response.get_json()['data']['name'] == 'Test Admin'


def test_me_requires_token(client):
    response = client.get('/api/auth/me')
    assert response.status_code == 401


def test_production_logging_uses_configured_level(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    prod_app = Flask('production-logging')

    ProductionConfig.init_app(prod_app)
    try:
        expected = getattr(logging, ProductionConfig.LOG_LEVEL.upper())
        assert prod_app.logger.level == expected
        assert all(handler.level == expected for handler in prod_app.logger.handlers)
        assert (tmp_path / 'logs' / 'app.log').exists()
    finally:
        for handler in list(prod_app.logger.handlers):
            handler.close()
            prod_app.logger.removeHandler(handler)


def test_register(client):
    response = client.post('/api/auth/register', json={
        'restaurantName': 'Harbour Grill',
        'name': 'Owner',
        'email': 'owner@example.com',
        'password': 'secret123'
    })
    assert response.status_code == 201
    data = response.get_json()
    assert data['token']
    assert data['user']['role'] == 'admin'
    assert data['restaurant']['name'] == 'Harbour Grill'

    login = client.post('/api/auth/login', json={
        'email': 'owner@example.com',
        'password': 'secret123'
    })
    assert login.status_code == 200


def test_register_duplicate_email(client, admin):
    response = client.post('/api/auth/register', json={
        'restaurantName': 'Copycat',
        'name': 'Someone',
        'email': 'admin@example.com',
        'password': 'secret123'
    })
    assert response.status_code == 400
    assert response.get_json()['message'] == 'Email already in use'


def test_register_short_password(client):
    response = client.post('/api/auth/register', json={
        'restaurantName': 'Harbour Grill',
        'name': 'Owner',
        'email': 'owner@example.com',
        'password': '123'
    })
    assert response.status_code == 400
    assert 'password' in response.get_json()['details']
