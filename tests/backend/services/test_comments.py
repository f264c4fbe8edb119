from datetime import date

import pytest

from backend.auth.jwt_handler import TokenIdentity
from backend.core.errors import Forbidden, InvalidInput, NotFound
from backend.services import comments


def _as(user) -> TokenIdentity:
    return TokenIdentity(id=user.id, role=user.role)


def test_owner_and_instructor_share_one_thread(db, trainee, instructor, make_report) -> None:
    report = make_report(trainee, date(2024, 3, 1))

    comments.add_comment(db, _as(trainee), report.id, 'Is this detailed enough?')
    comments.add_comment(db, _as(instructor), report.id, 'Add the machine names.')

    thread = comments.list_comments(db, _as(trainee), report.id)
    assert [(c.author.email, c.text) for c in thread] == [
        ('azubi@example.com', 'Is this detailed enough?'),
        ('ausbilder@example.com', 'Add the machine names.'),
    ]
    assert thread[0].created_at <= thread[1].created_at


def test_other_trainee_cannot_read_or_write_comments(db, trainee, other_trainee, make_report) -> None:
    report = make_report(trainee, date(2024, 3, 1))

    with pytest.raises(Forbidden):
        comments.list_comments(db, _as(other_trainee), report.id)
    with pytest.raises(Forbidden):
        comments.add_comment(db, _as(other_trainee), report.id, 'Hi!')


def test_add_comment_rejects_blank_text(db, trainee, make_report) -> None:
    report = make_report(trainee, date(2024, 3, 1))

    with pytest.raises(InvalidInput) as exception_info:
        comments.add_comment(db, _as(trainee), report.id, '   ')

    assert exception_info.value.detail == 'Comment text is required.'


def test_comments_on_unknown_report(db, instructor) -> None:
    with pytest.raises(NotFound):
        comments.list_comments(db, _as(instructor), 12345)
