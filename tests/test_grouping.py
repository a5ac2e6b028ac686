"""
Tests for quotum/core/grouping.py - date buckets and post previews

Run with: pytest tests/test_grouping.py -v
"""

from datetime import datetime, timedelta, timezone

import pytest

from quotum.core.dto.content import ImageBlock, TextBlock
from quotum.core.dto.post import PostDTO
from quotum.core.grouping import (
    date_key_for,
    extract_preview,
    format_date_heading,
    format_relative_time,
    group_by_date,
    teaser_text,
    truncate_preview,
)


def _post(post_id, created_at, content=()):
    return PostDTO(id=post_id, title=f"Post {post_id}", content=content, created_at=created_at)


class TestGroupByDate:
    """Calendar-day buckets, newest day first"""

    def test_two_days_in_descending_order(self):
        """
        Test posts on the same day share a bucket regardless of time.

        Bucket order is newest day first; within a bucket the input order holds.
        """
        # ARRANGE
        morning = _post("a", datetime(2024, 1, 1, 9, 0))
        night = _post("b", datetime(2024, 1, 1, 23, 0))
        next_day = _post("c", datetime(2024, 1, 2, 0, 1))

        # ACT
        grouped = group_by_date([morning, night, next_day])

        # ASSERT
        assert [b.date_key for b in grouped] == ["2024-01-02", "2024-01-01"]
        assert grouped.buckets[0].posts == (next_day,)
        assert grouped.buckets[1].posts == (morning, night)

    def test_iso_strings_are_accepted(self):
        grouped = group_by_date([_post("a", "2024-01-01T09:00:00.000000Z")])
        assert grouped.buckets[0].date_key == "2024-01-01"

    def test_posts_without_timestamp_are_skipped(self):
        kept = _post("a", datetime(2024, 5, 1, 12, 0))
        grouped = group_by_date([kept, _post("b", None), _post("c", "not a date")])
        assert len(grouped) == 1
        assert grouped.buckets[0].posts == (kept,)

    def test_empty_input_signals_empty(self):
        assert group_by_date([]).is_empty
        assert group_by_date(None).is_empty

    def test_all_malformed_signals_empty(self):
        assert group_by_date([_post("a", None)]).is_empty

    def test_sorted_input_round_trips(self):
        """Already-sorted distinct-day posts keep their order with nothing lost"""
        posts = [
            _post(str(i), datetime(2024, 3, 10, 12, 0) - timedelta(days=i))
            for i in range(5)
        ]
        grouped = group_by_date(posts)
        flattened = [p for bucket in grouped for p in bucket.posts]
        assert flattened == posts
        assert len(grouped) == 5

    def test_explicit_timezone(self):
        late_utc = _post("a", datetime(2024, 1, 1, 23, 30, tzinfo=timezone.utc))
        plus_two = timezone(timedelta(hours=2))
        assert date_key_for(late_utc.created_at) == "2024-01-01"
        assert date_key_for(late_utc.created_at, plus_two) == "2024-01-02"

    def test_heading(self, sample_posts):
        grouped = group_by_date(sample_posts)
        assert grouped.buckets[0].heading == "January 2, 2024"


class TestExtractPreview:
    """First image and first text snippet"""

    def test_first_image_and_first_text(self):
        content = (
            ImageBlock(url="a"),
            TextBlock("x"),
            ImageBlock(url="b"),
        )
        preview = extract_preview(content)
        assert preview.image_url == "a"
        assert preview.text == "x"

    def test_empty_image_blocks_are_ignored(self):
        preview = extract_preview((ImageBlock(), ImageBlock(url="b")))
        assert preview.image_url == "b"

    def test_non_sequence_content(self):
        preview = extract_preview("not a list")
        assert preview.image_url is None
        assert preview.text == ""

    def test_long_text_is_truncated(self):
        preview = extract_preview((TextBlock("x" * 200),))
        assert preview.text == "x" * 120 + "..."

    def test_custom_length(self):
        preview = extract_preview((TextBlock("abcdef"),), max_length=3)
        assert preview.text == "abc..."

    @pytest.mark.parametrize("text,expected", [
        ("", ""),
        ("short", "short"),
        ("y" * 120, "y" * 120),
    ])
    def test_truncate_preview_only_marks_cut_text(self, text, expected):
        assert truncate_preview(text) == expected


class TestFormatting:
    def test_date_heading(self):
        assert format_date_heading("2024-01-02") == "January 2, 2024"

    def test_bad_date_key_is_returned_as_is(self):
        assert format_date_heading("someday") == "someday"

    @pytest.mark.parametrize("delta,expected", [
        (timedelta(seconds=10), "less than a minute ago"),
        (timedelta(minutes=5), "5 minutes ago"),
        (timedelta(hours=3), "about 3 hours ago"),
        (timedelta(days=1), "1 day ago"),
        (timedelta(days=3), "3 days ago"),
        (timedelta(days=400), "about 1 year ago"),
    ])
    def test_relative_time(self, delta, expected):
        now = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
        assert format_relative_time(now - delta, now) == expected

    def test_relative_time_future(self):
        now = datetime(2024, 6, 1, 12, 0)
        assert format_relative_time(now + timedelta(days=2), now) == "in 2 days"

    def test_relative_time_unusable(self):
        assert format_relative_time(None) == ""


class TestTeaser:
    def test_first_text_block_always_marked(self):
        content = (ImageBlock(url="https://cdn.example.com/a.png"), TextBlock("Short"), TextBlock("Second"))
        assert teaser_text(content) == "Short..."

    def test_cut_at_length(self):
        assert teaser_text((TextBlock("x" * 250),)) == "x" * 200 + "..."

    def test_no_text_block(self):
        assert teaser_text((ImageBlock(),)) == ""
        assert teaser_text(None) == ""
