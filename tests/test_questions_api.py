from exam_portal.models.question import Question

from tests.conftest import API, make_question

URL = f"{API}/questions"


def _row(i, **overrides):
    row = {"category": "Math", "question": f"Question {i}", "options": ["a", "b", "c"], "correctIndex": 1}
    row.update(overrides)
    return row


def test_requires_staff(client, student_headers):
    assert client.get(URL).status_code == 401
    assert client.get(URL, headers=student_headers).status_code == 403


def test_create_and_fetch(client, teacher_headers):
    resp = client.post(
        URL,
        json={"category": "Math", "text": "2 + 2?", "options": ["3", "4"], "correctIndex": 1},
        headers=teacher_headers,
    )

    assert resp.status_code == 201
    created = resp.json()
    assert [o["isCorrect"] for o in created["options"]] == [False, True]

    fetched = client.get(f"{URL}/{created['id']}", headers=teacher_headers).json()
    assert fetched["text"] == "2 + 2?"


def test_create_with_flagged_options(client, teacher_headers):
    payload = {
        "category": "Math",
        "text": "3 * 3?",
        "options": [{"text": "6"}, {"text": "9", "isCorrect": True}, {"text": "12"}],
    }

    resp = client.post(URL, json=payload, headers=teacher_headers)

    assert resp.status_code == 201
    assert [o["isCorrect"] for o in resp.json()["options"]] == [False, True, False]

    payload["options"][0]["isCorrect"] = True
    payload["text"] = "3 * 4?"
    resp = client.post(URL, json=payload, headers=teacher_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Only one correct option allowed"


def test_create_invalid_question(client, teacher_headers):
    resp = client.post(
        URL,
        json={"category": "Math", "text": "Lonely?", "options": ["only"], "correctIndex": 0},
        headers=teacher_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "At least 2 options required"


def test_create_duplicate(client, db, teacher_headers):
    make_question(db, "Dup?", category="Math")

    resp = client.post(
        URL,
        json={"category": "Math", "text": "Dup?", "options": ["a", "b"], "correctIndex": 0},
        headers=teacher_headers,
    )
    assert resp.status_code == 409
    assert resp.json()["detail"] == "Duplicate question (category + text)"


def test_list_with_search_and_paging(client, db, teacher_headers):
    for i in range(15):
        make_question(db, f"Geometry {i}", category="Math")
    make_question(db, "Atoms", category="Chemistry")

    body = client.get(URL, params={"q": "geometry", "pageSize": 10, "page": 2}, headers=teacher_headers).json()
    assert body["total"] == 15
    assert len(body["data"]) == 5

    categories = client.get(f"{URL}/categories", headers=teacher_headers).json()
    assert categories == {"categories": ["Chemistry", "Math"]}


def test_bulk_import_partial_success(client, db, teacher_headers):
    rows = [_row(i) for i in range(5)]
    rows.append({"category": "Math", "options": ["a", "b"], "correctIndex": 0})
    rows.append({"question": "No category", "options": ["a", "b"], "correctIndex": 0})

    resp = client.post(f"{URL}/bulk", json={"questions": rows}, headers=teacher_headers)

    assert resp.status_code == 207
    body = resp.json()
    assert body["insertedCount"] == 5
    assert body["failedCount"] == 2
    assert [e["index"] for e in body["errors"]] == [5, 6]
    assert db.query(Question).count() == 5


def test_bulk_import_status_codes(client, teacher_headers):
    ok = client.post(f"{URL}/bulk", json={"questions": [_row(1), _row(2)]}, headers=teacher_headers)
    assert ok.status_code == 201

    none_inserted = client.post(f"{URL}/bulk", json={"questions": [_row(1)]}, headers=teacher_headers)
    assert none_inserted.status_code == 400
    assert none_inserted.json()["insertedCount"] == 0

    empty = client.post(f"{URL}/bulk", json={"questions": []}, headers=teacher_headers)
    assert empty.status_code == 400


def test_bulk_upload_csv(client, db, teacher_headers):
    content = (
        "category,question,option1,option2,option3,correctIndex\n"
        "Math,1 + 1?,1,2,3,2\n"
        "Math,,1,2,3,1\n"
    ).encode()

    resp = client.post(
        f"{URL}/bulk/upload",
        files={"file": ("questions.csv", content, "text/csv")},
        headers=teacher_headers,
    )

    assert resp.status_code == 207
    body = resp.json()
    assert body["insertedCount"] == 1
    assert body["errors"] == [{"index": 3, "message": "Row 3: question missing"}]
    stored = db.query(Question).one()
    assert stored.correct_option.text == "2"


def test_bulk_upload_rejects_other_files(client, teacher_headers):
    resp = client.post(
        f"{URL}/bulk/upload",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=teacher_headers,
    )
    assert resp.status_code == 400


def test_update_with_two_correct_options_changes_nothing(client, db, teacher_headers):
    question = make_question(db, "Original?", options=("A", "B"), correct_index=0)

    resp = client.put(
        f"{URL}/{question.id}",
        json={
            "category": "General",
            "text": "Edited?",
            "options": [{"text": "A", "isCorrect": True}, {"text": "B", "isCorrect": True}],
        },
        headers=teacher_headers,
    )

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Only one correct option allowed"
    fetched = client.get(f"{URL}/{question.id}", headers=teacher_headers).json()
    assert fetched["text"] == "Original?"
    assert [o["isCorrect"] for o in fetched["options"]] == [True, False]


def test_update_question(client, db, teacher_headers):
    question = make_question(db, "Original?", options=("A", "B"), correct_index=0)
    option_ids = [o.id for o in question.options]

    resp = client.put(
        f"{URL}/{question.id}",
        json={
            "category": "General",
            "text": "Edited?",
            "options": [
                {"id": option_ids[0], "text": "A", "isCorrect": False},
                {"id": option_ids[1], "text": "B", "isCorrect": True},
            ],
        },
        headers=teacher_headers,
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["text"] == "Edited?"
    assert [o["id"] for o in body["options"]] == option_ids
    assert [o["isCorrect"] for o in body["options"]] == [False, True]


def test_delete_and_bulk_delete(client, db, teacher_headers):
    ids = [make_question(db, f"Q{i}").id for i in range(3)]

    assert client.delete(f"{URL}/{ids[0]}", headers=teacher_headers).status_code == 200
    assert client.get(f"{URL}/{ids[0]}", headers=teacher_headers).status_code == 404

    resp = client.post(f"{URL}/bulk-delete", json={"ids": ids}, headers=teacher_headers)
    assert resp.json() == {"deletedCount": 2}
