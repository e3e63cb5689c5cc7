import pytest

from exam_portal.services.spreadsheet import read_rows, rows_to_questions


def test_read_csv_rows():
    content = b"category,question,option1,option2,option3,correctIndex\nMath,1+1?,1,2,3,2\n"

    rows = read_rows("questions.csv", content)

    assert rows == [
        {"category": "Math", "question": "1+1?", "option1": "1", "option2": "2", "option3": "3", "correctIndex": "2"}
    ]


def test_read_rows_rejects_unknown_extension():
    with pytest.raises(ValueError):
        read_rows("questions.txt", b"whatever")


def test_one_based_index_is_normalised():
    rows, numbers, errors = rows_to_questions([
        {"category": "Math", "question": "1+1?", "option1": "1", "option2": "2", "correctIndex": "2"},
    ])

    assert errors == []
    assert numbers == [2]
    assert rows == [{"category": "Math", "question": "1+1?", "options": ["1", "2"], "correctIndex": 1}]


def test_zero_index_is_kept():
    rows, _, errors = rows_to_questions([
        {"category": "Math", "question": "Q", "option1": "a", "option2": "b", "correctIndex": "0"},
    ])
    assert errors == []
    assert rows[0]["correctIndex"] == 0


def test_invalid_rows_report_spreadsheet_row_numbers():
    rows, numbers, errors = rows_to_questions([
        {"category": "Math", "question": "Good", "option1": "a", "option2": "b", "correctIndex": "1"},
        {"category": "", "question": "Bad", "option1": "a", "correctIndex": "9"},
    ])

    assert len(rows) == 1
    assert numbers == [2]
    assert errors == [(3, "Row 3: category missing; need at least 2 options; correctIndex out of range")]
