from datetime import datetime, timedelta, timezone

from backend.routes.report_routes import CommentResponse


def _comment(created_at: datetime) -> dict:
    return {
        'id': 1,
        'text': 'Looks fine.',
        'author': {'id': 2, 'email': 'ausbilder@example.com', 'role': 'AUSBILDER', 'name': None},
        'created_at': created_at,
    }


def test_naive_comment_timestamp_is_read_as_utc() -> None:
    comment = CommentResponse.model_validate(_comment(datetime(2024, 3, 1, 8, 30)))

    assert comment.created_at == datetime(2024, 3, 1, 8, 30, tzinfo=timezone.utc)


def test_offset_comment_timestamp_is_converted_to_utc() -> None:
    berlin = timezone(timedelta(hours=1))
    comment = CommentResponse.model_validate(_comment(datetime(2024, 3, 1, 9, 30, tzinfo=berlin)))

    assert comment.created_at.utcoffset() == timedelta(0)
    assert comment.created_at.hour == 8
