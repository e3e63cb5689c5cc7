from exam_portal.models.user import UserRole

from tests.conftest import API, PASSWORD, auth_headers, make_user


def test_register_signs_in(client):
    resp = client.post(
        f"{API}/auth/register",
        json={"name": "Ada", "email": "Ada@Example.com", "password": "secret123"},
    )

    assert resp.status_code == 201
    assert resp.json()["email"] == "ada@example.com"
    assert resp.json()["role"] == UserRole.STUDENT
    assert "token" in resp.cookies

    me = client.get(f"{API}/auth/me")
    assert me.status_code == 200
    assert me.json()["name"] == "Ada"


def test_register_duplicate_email(client, student):
    resp = client.post(
        f"{API}/auth/register",
        json={"name": "Again", "email": student.email, "password": "secret123"},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "User with this email already exists"


def test_register_validation(client):
    resp = client.post(f"{API}/auth/register", json={"name": "X", "email": "x@example.com", "password": "123"})
    assert resp.status_code == 400
    assert resp.json()["detail"].startswith("password")


def test_login(client, teacher):
    resp = client.post(f"{API}/auth/login", data={"username": teacher.email, "password": PASSWORD})

    assert resp.status_code == 200
    body = resp.json()
    assert body["tokenType"] == "bearer"
    assert body["user"]["role"] == UserRole.TEACHER

    client.cookies.clear()
    me = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {body['accessToken']}"})
    assert me.json()["id"] == teacher.id


def test_login_failures(client, db, student):
    resp = client.post(f"{API}/auth/login", data={"username": student.email, "password": "wrong"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid email or password"

    make_user(db, "gone@example.com", is_active=False)
    resp = client.post(f"{API}/auth/login", data={"username": "gone@example.com", "password": PASSWORD})
    assert resp.status_code == 400


def test_logout_clears_cookie(client, teacher):
    client.post(f"{API}/auth/login", data={"username": teacher.email, "password": PASSWORD})
    assert client.get(f"{API}/auth/me").status_code == 200

    client.post(f"{API}/auth/logout")

    assert client.get(f"{API}/auth/me").status_code == 401


def test_identity_is_reloaded_every_request(client, db, student):
    headers = auth_headers(student)
    assert client.get(f"{API}/auth/me", headers=headers).status_code == 200

    student.is_active = False
    db.commit()

    assert client.get(f"{API}/auth/me", headers=headers).status_code == 401


def test_garbage_token(client):
    resp = client.get(f"{API}/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401


def test_student_management(client, student, teacher_headers):
    url = f"{API}/students"
    created = client.post(
        url,
        json={"name": "Bob", "email": "bob@example.com", "password": "secret123", "college": "MIT", "group": "A"},
        headers=teacher_headers,
    )
    assert created.status_code == 201
    assert created.json()["group"] == "A"
    bob_id = created.json()["id"]

    duplicate = client.post(
        url,
        json={"name": "Bob", "email": "bob@example.com", "password": "secret123"},
        headers=teacher_headers,
    )
    assert duplicate.status_code == 400

    assert len(client.get(url, headers=teacher_headers).json()) == 2

    updated = client.put(
        f"{url}/{bob_id}",
        json={"name": "Robert", "email": "bob@example.com", "college": "MIT", "group": "B"},
        headers=teacher_headers,
    )
    assert updated.json()["name"] == "Robert"
    assert updated.json()["group"] == "B"

    assert client.delete(f"{url}/{bob_id}", headers=teacher_headers).status_code == 200
    assert client.get(f"{url}/{bob_id}", headers=teacher_headers).status_code == 404


def test_students_cannot_manage_students(client, student_headers):
    assert client.get(f"{API}/students", headers=student_headers).status_code == 403


def test_update_own_profile(client, student, student_headers):
    resp = client.patch(
        f"{API}/auth/me",
        json={"name": " Stu ", "phone": "555-0100", "group": "B2", "photo": "/uploads/me.png"},
        headers=student_headers,
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "Stu"
    assert (body["phone"], body["group"], body["photo"]) == ("555-0100", "B2", "/uploads/me.png")
    assert body["email"] == student.email


def test_update_own_profile_rejections(client, student, other_student, student_headers):
    url = f"{API}/auth/me"

    empty = client.patch(url, json={}, headers=student_headers)
    assert empty.status_code == 400
    assert empty.json()["detail"] == "No valid fields to update"

    blank_name = client.patch(url, json={"name": "   "}, headers=student_headers)
    assert blank_name.json()["detail"] == "Name cannot be empty"

    blank_email = client.patch(url, json={"email": " "}, headers=student_headers)
    assert blank_email.json()["detail"] == "Email cannot be empty"

    taken = client.patch(url, json={"email": other_student.email.upper()}, headers=student_headers)
    assert taken.status_code == 400
    assert taken.json()["detail"] == "Email already in use by another account"


def test_update_profile_requires_login(client):
    assert client.patch(f"{API}/auth/me", json={"name": "Nobody"}).status_code == 401
