import pytest
from fastapi.testclient import TestClient

from alumniconnect.auth.dependencies import get_identity_client
from alumniconnect.database import get_db
from alumniconnect.main import app
from alumniconnect.models.profile import Profile


@pytest.fixture
def client(fake_identity, profile_db):
    def override_get_db():
        yield profile_db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_client] = lambda: fake_identity
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_root_reports_status(client) -> None:
    response = client.get('/')

    assert response.status_code == 200
    assert response.json() == {'status': 'AlumniConnect API Running'}


def test_dashboard_target_for_admin_token(client, profile_db, make_token) -> None:
    profile_db.add(Profile(id='admin-1', email='admin@example.edu', full_name='Admin Person', role='admin'))
    profile_db.commit()

    response = client.get(
        '/navigation/dashboard',
        headers={'Authorization': f"Bearer {make_token(sub='admin-1', role='student')}"},
    )

    assert response.status_code == 200
    assert response.json() == {'target': '/admin-dashboard'}


def test_dashboard_target_without_session_is_null(client) -> None:
    response = client.get('/navigation/dashboard')

    assert response.status_code == 200
    assert response.json() == {'target': None}


def test_dashboard_target_reads_session_cookie(client, make_token) -> None:
    token = make_token(sub='user-7', role='alumni')

    response = client.get('/navigation/dashboard', headers={'Cookie': f'access_token={token}'})

    assert response.json() == {'target': '/alumni-dashboard'}


def test_menu_for_anonymous_visitor(client) -> None:
    response = client.get('/navigation/menu')

    assert response.status_code == 200
    assert [item['key'] for item in response.json()['items']] == ['sign-in', 'sign-up']


def test_session_endpoint_hides_tokens(client, make_token) -> None:
    response = client.get('/auth/session', headers={'Authorization': f'Bearer {make_token()}'})

    body = response.json()
    assert body['user']['role'] == 'student'
    assert body['loading'] is False
    assert 'session' not in body


def test_me_requires_authentication(client) -> None:
    response = client.get('/auth/me')

    assert response.status_code == 401
    assert response.json() == {'detail': 'Not authenticated'}


def test_sign_out_then_navigation_goes_nowhere(client, fake_identity, signed_in_result, make_token) -> None:
    fake_identity.respond('sign_in_with_password', signed_in_result(access_token=make_token()))
    sign_in = client.post('/auth/sign-in', json={'email': 'student@example.edu', 'password': 'secret1'})
    assert sign_in.status_code == 200
    assert sign_in.json()['redirect_to'] == '/student-dashboard'
    assert client.get('/navigation/dashboard').json() == {'target': '/student-dashboard'}

    response = client.post('/auth/sign-out')

    assert response.status_code == 200
    assert len(fake_identity.called('sign_out')) == 1
    assert client.get('/navigation/dashboard').json() == {'target': None}


def test_student_dashboard_forbidden_for_alumni(client, make_token) -> None:
    response = client.get(
        '/dashboard/student',
        headers={'Authorization': f"Bearer {make_token(sub='user-8', role='alumni')}"},
    )

    assert response.status_code == 403


def test_student_dashboard_overview(client, make_token) -> None:
    response = client.get('/dashboard/student', headers={'Authorization': f'Bearer {make_token()}'})

    assert response.status_code == 200
    body = response.json()
    assert body['stats'] == {'profile_score': 85, 'applications': 12, 'referrals': 5}
    assert [job['title'] for job in body['recommended_jobs']] == [
        'Frontend Developer',
        'UI/UX Designer',
        'Software Engineer',
    ]
    assert len(body['active_alumni']) == 2
