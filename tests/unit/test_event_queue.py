from __future__ import annotations

import pytest

from logship.core.events import LogEvent, encoded_length
from logship.core.limits import (
    EVENT_OVERHEAD,
    MAX_BATCH_BYTES,
    MAX_EVENT_BYTES,
    MAX_EVENTS_PER_BATCH,
    TRUNCATION_SUFFIX,
)
from logship.core.queue import EventQueue, NextBatch, truncate_message

# A message whose billed size (bytes + overhead) is exactly half a batch
HALF_BATCH_MESSAGE = "x" * (MAX_BATCH_BYTES // 2 - EVENT_OVERHEAD)


@pytest.fixture
def queue() -> EventQueue:
    return EventQueue(clock=lambda: 1_700_000_000.123)


class TestAdd:
    def test_stores_message_with_millisecond_timestamp(self, queue: EventQueue) -> None:
        event = queue.add("test message")
        assert event == LogEvent("test message", 1_700_000_000_123)
        assert queue.get() == [LogEvent("test message", 1_700_000_000_123)]

    def test_empty_message_is_kept(self, queue: EventQueue) -> None:
        queue.add("")
        assert queue.size() == 1
        assert queue.get()[0].message == ""

    def test_multibyte_message_within_limit_is_unchanged(
        self, queue: EventQueue
    ) -> None:
        message = "日本語テキスト with emojis 😀🙏🌟 and symbols €£¥"
        queue.add(message)
        assert queue.get()[0].message == message

    @pytest.mark.critical
    def test_exact_boundary_message_is_verbatim(self, queue: EventQueue) -> None:
        message = "x" * MAX_EVENT_BYTES
        queue.add(message)
        stored = queue.get()[0].message
        assert stored == message
        assert TRUNCATION_SUFFIX not in stored

    @pytest.mark.critical
    def test_oversized_message_is_truncated_and_marked(
        self, queue: EventQueue
    ) -> None:
        message = "x" * (1024 * 1024 + 100)
        queue.add(message)
        stored = queue.get()[0].message
        assert stored.endswith(TRUNCATION_SUFFIX)
        assert encoded_length(stored) <= MAX_EVENT_BYTES
        assert encoded_length(stored) < encoded_length(message)

    def test_truncation_keeps_longest_ascii_prefix(self) -> None:
        message = "y" * (MAX_EVENT_BYTES + 1)
        truncated = truncate_message(message)
        assert len(truncated) == MAX_EVENT_BYTES
        assert truncated == "y" * (MAX_EVENT_BYTES - len(TRUNCATION_SUFFIX)) + (
            TRUNCATION_SUFFIX
        )

    def test_truncation_counts_bytes_not_characters(self) -> None:
        # 300k four-byte characters: far over the byte limit, under it in chars
        message = "😀" * 300_000
        truncated = truncate_message(message)
        assert truncated.endswith(TRUNCATION_SUFFIX)
        prefix = truncated[: -len(TRUNCATION_SUFFIX)]
        assert set(prefix) == {"😀"}
        assert encoded_length(truncated) <= MAX_EVENT_BYTES
        # One more character would no longer fit
        assert encoded_length("😀" * (len(prefix) + 1) + TRUNCATION_SUFFIX) > (
            MAX_EVENT_BYTES
        )

    def test_truncate_message_respects_custom_limit(self) -> None:
        assert truncate_message("abcdefghijklmnop", max_bytes=15) == "abcd[TRUNCATED]"
        assert truncate_message("short", max_bytes=15) == "short"


class TestGet:
    def test_returns_independent_copy(self, queue: EventQueue) -> None:
        queue.add("message 1")
        events = queue.get()
        events.pop()
        assert queue.size() == 1

    def test_returned_events_are_new_objects(self, queue: EventQueue) -> None:
        queue.add("message 1")
        first = queue.get()[0]
        second = queue.get()[0]
        assert first == second
        assert first is not second

    def test_events_are_immutable(self, queue: EventQueue) -> None:
        queue.add("message 1")
        event = queue.get()[0]
        with pytest.raises(AttributeError):
            event.message = "modified"  # type: ignore[misc]


class TestSizeAndReset:
    def test_size_tracks_adds_and_drains(self, queue: EventQueue) -> None:
        assert queue.size() == 0
        for i in range(5):
            queue.add(f"message {i}")
        assert queue.size() == 5
        assert len(queue) == 5
        queue.get_next_batch()
        assert queue.size() == 0

    def test_reset_empties_queue(self, queue: EventQueue) -> None:
        queue.add("message 1")
        queue.add("message 2")
        queue.reset()
        assert queue.size() == 0
        assert queue.get() == []

    def test_reset_on_empty_queue(self, queue: EventQueue) -> None:
        queue.reset()
        assert queue.size() == 0


class TestGetNextBatch:
    def test_empty_queue(self, queue: EventQueue) -> None:
        result = queue.get_next_batch()
        assert result == NextBatch([], False)
        batch, has_more = result
        assert batch == [] and has_more is False

    def test_small_messages_fit_in_one_batch(self, queue: EventQueue) -> None:
        for i in range(3):
            queue.add(f"message {i}")
        batch, has_more = queue.get_next_batch()
        assert [e.message for e in batch] == ["message 0", "message 1", "message 2"]
        assert has_more is False
        assert queue.size() == 0

    @pytest.mark.critical
    def test_three_half_batch_messages_split_two_then_one(
        self, queue: EventQueue
    ) -> None:
        for _ in range(3):
            queue.add(HALF_BATCH_MESSAGE)

        batch, has_more = queue.get_next_batch()
        assert len(batch) == 2
        assert has_more is True
        assert sum(e.size for e in batch) == MAX_BATCH_BYTES

        batch, has_more = queue.get_next_batch()
        assert len(batch) == 1
        assert has_more is False

    def test_raw_half_mebibyte_messages_exceed_batch_with_overhead(
        self, queue: EventQueue
    ) -> None:
        for _ in range(3):
            queue.add("x" * 524_288)
        batch, has_more = queue.get_next_batch()
        assert len(batch) == 1
        assert has_more is True
        assert queue.size() == 2

    @pytest.mark.critical
    def test_event_count_limit(self, queue: EventQueue) -> None:
        for i in range(MAX_EVENTS_PER_BATCH + 1):
            queue.add(f"message {i}")
        batch, has_more = queue.get_next_batch()
        assert len(batch) == MAX_EVENTS_PER_BATCH
        assert has_more is True
        assert queue.size() == 1
        assert queue.get()[0].message == f"message {MAX_EVENTS_PER_BATCH}"

    def test_stops_at_first_event_that_does_not_fit(self, queue: EventQueue) -> None:
        big = "x" * 600_000
        queue.add("small 1")
        queue.add(big)
        queue.add(big)
        queue.add("small 2")

        batch, has_more = queue.get_next_batch()
        # The small trailing event is not pulled ahead of the big one
        assert [e.message for e in batch] == ["small 1", big]
        assert has_more is True
        assert [e.message for e in queue.get()] == [big, "small 2"]

    def test_multibyte_sized_by_bytes(self, queue: EventQueue) -> None:
        multibyte = "😀" * 250_000
        queue.add(multibyte)
        queue.add(multibyte)
        batch, has_more = queue.get_next_batch()
        assert len(batch) == 1
        assert has_more is True

        queue.reset()

        single = "a" * 250_000
        for _ in range(3):
            queue.add(single)
        batch, has_more = queue.get_next_batch()
        assert len(batch) == 3
        assert has_more is False

    def test_repeated_batches_preserve_order(self, queue: EventQueue) -> None:
        messages = [f"{i}:" + "z" * 300_000 for i in range(7)]
        for message in messages:
            queue.add(message)

        drained: list[str] = []
        batch_count = 0
        has_more = True
        while has_more:
            batch, has_more = queue.get_next_batch()
            batch_count += 1
            assert sum(e.size for e in batch) <= MAX_BATCH_BYTES
            drained.extend(e.message for e in batch)

        assert batch_count > 1
        assert drained == messages
        assert queue.size() == 0

    def test_truncated_event_fits_single_batch(self, queue: EventQueue) -> None:
        queue.add("x" * (2 * MAX_BATCH_BYTES))
        batch, has_more = queue.get_next_batch()
        assert len(batch) == 1
        assert batch[0].size <= MAX_BATCH_BYTES
        assert has_more is False
