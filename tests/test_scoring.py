from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from exam_portal.services.scoring import NOT_ANSWERED, compute_time_taken, score_exam


def _question(qid, texts, correct):
    options = [
        SimpleNamespace(id=qid * 10 + i, text=text, is_correct=i == correct)
        for i, text in enumerate(texts)
    ]
    correct_option = next((o for o in options if o.is_correct), None)
    return SimpleNamespace(id=qid, text=f"Question {qid}", options=options, correct_option=correct_option)


def _option_id(question, index):
    return question.options[index].id


def test_one_right_one_wrong():
    q1 = _question(1, ["A", "B", "C"], correct=0)
    q2 = _question(2, ["A", "B", "C"], correct=1)

    card = score_exam([q1, q2], {1: _option_id(q1, 0), 2: _option_id(q2, 2)}, 60)

    assert card.score == 1
    assert card.correct_answers == 1
    assert card.wrong_answers == 1
    assert card.percentage == 50
    assert card.passed is False
    assert card.result == "fail"
    assert [r["selected_text"] for r in card.review] == ["A", "C"]
    assert [r["correct_text"] for r in card.review] == ["A", "B"]


def test_all_correct():
    questions = [_question(i, ["x", "y", "z", "w"], correct=i % 4) for i in range(1, 6)]
    answers = {q.id: q.correct_option.id for q in questions}

    card = score_exam(questions, answers, 100)

    assert card.score == card.total == 5
    assert card.percentage == 100
    assert card.passed is True


def test_empty_answer_map():
    questions = [_question(1, ["a", "b"], correct=0), _question(2, ["a", "b"], correct=1)]

    card = score_exam(questions, {}, 50)

    assert card.score == 0
    assert card.correct_answers == 0
    assert card.wrong_answers == 0
    assert card.percentage == 0
    assert all(r["selected_text"] == NOT_ANSWERED for r in card.review)
    assert all(rec["selectedOptionId"] is None for rec in card.answers)


def test_pass_threshold_is_inclusive():
    questions = [_question(i, ["a", "b"], correct=0) for i in range(1, 6)]
    answers = {1: questions[0].options[0].id, 2: questions[1].options[0].id}

    card = score_exam(questions, answers, 40)

    assert card.percentage == 40
    assert card.passed is True


def test_null_selection_counts_as_unanswered():
    q = _question(1, ["a", "b"], correct=0)

    card = score_exam([q], {1: None}, 50)

    assert card.wrong_answers == 0
    assert card.review[0]["selected_text"] == NOT_ANSWERED


def test_question_without_correct_option_is_never_right():
    q = _question(1, ["a", "b"], correct=-1)

    card = score_exam([q], {1: q.options[0].id}, 0)

    assert card.score == 0
    assert card.wrong_answers == 1
    assert card.answers[0]["correctOptionId"] is None
    assert card.review[0]["correct_text"] == ""


def test_no_questions():
    card = score_exam([], {}, 50)
    assert card.total == 0
    assert card.percentage == 0
    assert card.passed is False


def test_answer_records_follow_question_order():
    q1 = _question(1, ["a", "b"], correct=1)
    q2 = _question(2, ["a", "b"], correct=0)

    card = score_exam([q2, q1], {1: q1.options[1].id}, 50)

    assert [rec["questionId"] for rec in card.answers] == [2, 1]
    assert card.answers[1] == {
        "questionId": 1,
        "selectedOptionId": q1.options[1].id,
        "correctOptionId": q1.options[1].id,
        "isCorrect": True,
    }


def test_time_taken_prefers_client_number():
    start = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)
    end = start + timedelta(seconds=300)

    assert compute_time_taken(start, end, 120) == 120
    assert compute_time_taken(start, end, 12.6) == 13
    assert compute_time_taken(start, end, -5) == 0


def test_time_taken_falls_back_to_timestamps():
    start = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)
    end = start + timedelta(seconds=300)

    assert compute_time_taken(start, end, None) == 300
    assert compute_time_taken(start, end, "120") == 300
    assert compute_time_taken(start, end, True) == 300
    assert compute_time_taken(start, end, float("nan")) == 300
    # naive values from SQLite are read as UTC
    assert compute_time_taken(start.replace(tzinfo=None), end, None) == 300
    assert compute_time_taken(end, start, None) == 0
