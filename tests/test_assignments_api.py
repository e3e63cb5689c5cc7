from exam_portal.models.assignment import ExamAssignment

from tests.conftest import API, assign, auth_headers, make_exam

URL = f"{API}/assignments"


def test_assign_to_every_student(client, db, two_questions, student, other_student, teacher_headers):
    exam = make_exam(db, list(two_questions))

    resp = client.post(URL, json={"examId": exam.id}, headers=teacher_headers)

    assert resp.status_code == 201
    assert resp.json() == {"message": "Exam assigned to 2 students", "assignedCount": 2, "skippedCount": 0}
    assert db.query(ExamAssignment).filter_by(exam_id=exam.id).count() == 2


def test_assign_skips_existing_pairs(client, db, two_questions, student, other_student, teacher_headers):
    exam = make_exam(db, list(two_questions))
    assign(db, exam, student)

    body = client.post(URL, json={"examId": exam.id}, headers=teacher_headers).json()
    assert (body["assignedCount"], body["skippedCount"]) == (1, 1)

    body = client.post(URL, json={"examId": exam.id}, headers=teacher_headers).json()
    assert (body["assignedCount"], body["skippedCount"]) == (0, 2)
    assert db.query(ExamAssignment).filter_by(exam_id=exam.id).count() == 2


def test_assign_without_students(client, db, two_questions, teacher_headers):
    exam = make_exam(db, list(two_questions))

    resp = client.post(URL, json={"examId": exam.id}, headers=teacher_headers)

    assert resp.status_code == 404
    assert resp.json()["detail"] == "No students found to assign"


def test_assign_unknown_exam(client, student, teacher_headers):
    resp = client.post(URL, json={"examId": 404}, headers=teacher_headers)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Exam not found"


def test_student_cannot_assign(client, assigned_exam, student_headers):
    resp = client.post(URL, json={"examId": assigned_exam.id}, headers=student_headers)
    assert resp.status_code == 403


def test_list_own_assignments(client, assigned_exam, student_headers):
    body = client.get(URL, headers=student_headers).json()

    assert len(body["assignments"]) == 1
    entry = body["assignments"][0]
    assert entry["status"] == "pending"
    assert entry["exam"]["id"] == assigned_exam.id
    assert entry["exam"]["questionCount"] == 2


def test_student_scope(client, assigned_exam, student, other_student, teacher_headers):
    resp = client.get(URL, params={"studentId": student.id}, headers=auth_headers(other_student))
    assert resp.status_code == 403

    resp = client.get(URL, params={"studentId": student.id}, headers=teacher_headers)
    assert resp.status_code == 200
    assert len(resp.json()["assignments"]) == 1
