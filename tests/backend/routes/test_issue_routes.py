from backend.core import config
from backend.models.issue import Issue

from conftest import auth_header


def _create_issue(client, token, title='Leaky pipe', category='Water', files=None):
    return client.post(
        '/api/issues',
        data={'title': title, 'description': 'Water dripping in room 204', 'category': category},
        files=files,
        headers=auth_header(token),
    )


def test_create_issue_without_image(client, student) -> None:
    response = _create_issue(client, student['token'])

    assert response.status_code == 201
    issue = response.json()['issue']
    assert issue['title'] == 'Leaky pipe'
    assert issue['status'] == 'Open'
    assert issue['imageUrl'] is None
    assert issue['remarks'] == []
    assert issue['createdBy'] == {'id': student['user']['id'], 'name': 'Alice', 'email': 'alice@x.edu'}


def test_create_issue_with_image_uses_uploader(client, student, uploader) -> None:
    response = _create_issue(
        client,
        student['token'],
        files={'image': ('pipe.jpg', b'\xff\xd8\xff\xe0fakejpeg', 'image/jpeg')},
    )

    assert response.status_code == 201
    assert response.json()['issue']['imageUrl'] == uploader.url
    assert uploader.uploads == [(b'\xff\xd8\xff\xe0fakejpeg', 'pipe.jpg')]


def test_create_issue_rejects_non_image_upload(client, student, session_factory) -> None:
    response = _create_issue(
        client,
        student['token'],
        files={'image': ('notes.txt', b'hello', 'text/plain')},
    )

    assert response.status_code == 400
    assert response.json()['errors'] == [{'field': 'image', 'message': 'Only image files are allowed'}]
    with session_factory() as db:
        assert db.query(Issue).count() == 0


def test_create_issue_rejects_oversized_image(client, student, monkeypatch) -> None:
    monkeypatch.setattr(config, 'MAX_IMAGE_BYTES', 16)

    response = _create_issue(
        client,
        student['token'],
        files={'image': ('big.png', b'x' * 17, 'image/png')},
    )

    assert response.status_code == 400
    assert 'File size too large' in response.json()['errors'][0]['message']


def test_create_issue_upload_failure_is_500_and_persists_nothing(client, student, uploader, session_factory) -> None:
    uploader.fail = True

    response = _create_issue(
        client,
        student['token'],
        files={'image': ('pipe.jpg', b'\xff\xd8', 'image/jpeg')},
    )

    assert response.status_code == 500
    assert response.json() == {'error': 'Failed to upload image'}
    with session_factory() as db:
        assert db.query(Issue).count() == 0


def test_create_issue_validates_fields(client, student) -> None:
    response = _create_issue(client, student['token'], title='   ', category='Plumbing')

    assert response.status_code == 400
    errors = response.json()['errors']
    assert {'field': 'title', 'message': 'Title is required'} in errors
    assert {'field': 'category', 'message': 'Invalid category'} in errors


def test_admin_cannot_use_student_routes(client, admin) -> None:
    response = _create_issue(client, admin['token'])

    assert response.status_code == 403


def test_my_issues_only_lists_own(client, student, other_student) -> None:
    _create_issue(client, student['token'], title='Alice issue')
    _create_issue(client, other_student['token'], title='Bob issue')

    response = client.get('/api/issues/my-issues', headers=auth_header(student['token']))

    assert response.status_code == 200
    body = response.json()
    assert body['count'] == 1
    assert [issue['title'] for issue in body['issues']] == ['Alice issue']


def test_filtered_issues_echo_filters(client, student) -> None:
    _create_issue(client, student['token'], title='Leak', category='Water')
    _create_issue(client, student['token'], title='Wifi down', category='Internet')

    response = client.get(
        '/api/issues',
        params={'category': 'Internet', 'status': 'Open'},
        headers=auth_header(student['token']),
    )

    body = response.json()
    assert body['filters'] == {'category': 'Internet', 'status': 'Open'}
    assert body['count'] == 1
    assert body['issues'][0]['title'] == 'Wifi down'


def test_filtered_issues_without_filters(client, student) -> None:
    _create_issue(client, student['token'])

    body = client.get('/api/issues', headers=auth_header(student['token'])).json()

    assert body['filters'] == {'category': None, 'status': None}
    assert body['count'] == 1


def test_get_issue_enforces_ownership(client, student, other_student) -> None:
    issue_id = _create_issue(client, student['token']).json()['issue']['id']

    own = client.get(f'/api/issues/{issue_id}', headers=auth_header(student['token']))
    foreign = client.get(f'/api/issues/{issue_id}', headers=auth_header(other_student['token']))
    missing = client.get('/api/issues/does-not-exist', headers=auth_header(other_student['token']))

    assert own.status_code == 200
    assert own.json()['issue']['id'] == issue_id
    assert foreign.status_code == 403
    assert foreign.json() == {'error': 'Access denied. You can only view your own issues.'}
    assert missing.status_code == 404
    assert missing.json() == {'error': 'Issue not found'}
