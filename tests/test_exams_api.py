from exam_portal.models.exam import Exam

from tests.conftest import API, make_exam

URL = f"{API}/exams"


def test_create_exam_keeps_question_order(client, two_questions, teacher, teacher_headers):
    q1, q2 = two_questions
    payload = {
        "title": "Midterm",
        "category": "General",
        "duration": 45,
        "passPercentage": 60,
        "questions": [q2.id, q1.id, q2.id],
    }

    resp = client.post(URL, json=payload, headers=teacher_headers)

    assert resp.status_code == 201
    body = resp.json()
    assert body["questionCount"] == 3
    assert body["createdBy"] == teacher.id
    assert [q["id"] for q in body["questions"]] == [q2.id, q1.id, q2.id]
    assert "isCorrect" in body["questions"][0]["options"][0]


def test_create_exam_with_unknown_questions(client, two_questions, teacher_headers):
    payload = {
        "title": "Broken",
        "category": "General",
        "duration": 10,
        "passPercentage": 50,
        "questions": [two_questions[0].id, 9999],
    }

    resp = client.post(URL, json=payload, headers=teacher_headers)

    assert resp.status_code == 404
    assert resp.json()["detail"] == "Questions not found: 9999"


def test_create_exam_rejects_blank_title(client, db, two_questions, teacher_headers):
    payload = {
        "title": "   ",
        "category": "General",
        "duration": 10,
        "passPercentage": 50,
        "questions": [two_questions[0].id],
    }

    resp = client.post(URL, json=payload, headers=teacher_headers)

    assert resp.status_code == 400
    assert resp.json()["detail"].startswith("title")
    assert db.query(Exam).count() == 0


def test_create_exam_trims_title_and_category(client, two_questions, teacher_headers):
    payload = {
        "title": "  Final  ",
        "category": " General ",
        "duration": 10,
        "passPercentage": 50,
        "questions": [two_questions[0].id],
    }

    body = client.post(URL, json=payload, headers=teacher_headers).json()

    assert (body["title"], body["category"]) == ("Final", "General")


def test_create_exam_validation(client, two_questions, teacher_headers):
    payload = {
        "title": "Too strict",
        "category": "General",
        "duration": 10,
        "passPercentage": 120,
        "questions": [two_questions[0].id],
    }

    resp = client.post(URL, json=payload, headers=teacher_headers)

    assert resp.status_code == 400
    assert resp.json()["detail"].startswith("passPercentage")
    assert resp.json()["errors"]


def test_list_get_and_toggle(client, db, two_questions, teacher_headers):
    exam = make_exam(db, list(two_questions))

    listing = client.get(URL, headers=teacher_headers).json()
    assert [e["id"] for e in listing] == [exam.id]

    detail = client.get(f"{URL}/{exam.id}", headers=teacher_headers).json()
    assert len(detail["questions"]) == 2

    resp = client.patch(f"{URL}/{exam.id}/active", json={"isActive": False}, headers=teacher_headers)
    assert resp.json()["isActive"] is False

    assert client.get(f"{URL}/12345", headers=teacher_headers).status_code == 404


def test_stats(client, db, two_questions, teacher_headers):
    make_exam(db, list(two_questions), pass_percentage=40)
    make_exam(db, list(two_questions), pass_percentage=60, is_active=False)

    stats = client.get(f"{URL}/stats", headers=teacher_headers).json()

    assert stats == {"totalExams": 2, "activeExams": 1, "totalQuestions": 2, "avgPassRate": 50}


def test_students_cannot_manage_exams(client, student_headers):
    assert client.get(URL, headers=student_headers).status_code == 403
