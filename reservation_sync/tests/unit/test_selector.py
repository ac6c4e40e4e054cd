"""Unit tests for MessageSelector."""

import pytest

from reservation_sync.core.models import MessageThread
from reservation_sync.processors.selector import MessageSelector
from reservation_sync.tests.fakes import SENDER, SUBJECT, InMemoryMessageSource, make_message


class TestMessageSelector:
    """Tests for candidate selection."""

    def test_yields_matching_unread_messages(self):
        message = make_message()
        selector = MessageSelector(InMemoryMessageSource([MessageThread("t", [message])]), SENDER, SUBJECT)

        assert list(selector.select()) == [message]

    def test_sender_match_is_exact_and_case_insensitive(self):
        selector = MessageSelector(InMemoryMessageSource(), SENDER.upper(), SUBJECT)

        assert selector.matches(make_message(sender=SENDER))
        assert not selector.matches(make_message(sender="noreply@reserve.example.jp.evil.com"))

    def test_subject_match_is_exact(self):
        selector = MessageSelector(InMemoryMessageSource(), SENDER, SUBJECT)

        assert selector.matches(make_message(subject=f" {SUBJECT} "))
        assert not selector.matches(make_message(subject=f"Re: {SUBJECT}"))

    def test_read_messages_in_thread_are_skipped(self):
        read = make_message(message_id="<a@x>", unread=False)
        unread = make_message(message_id="<b@x>")
        source = InMemoryMessageSource([MessageThread("t", [read, unread])])

        assert list(MessageSelector(source, SENDER, SUBJECT).select()) == [unread]

    def test_select_is_lazy(self):
        """Nothing is queried until iteration starts."""
        source = InMemoryMessageSource(search_error=ConnectionError("down"))
        candidates = MessageSelector(source, SENDER, SUBJECT).select()

        with pytest.raises(ConnectionError):
            next(candidates)

    def test_select_does_not_mutate(self):
        message = make_message()
        source = InMemoryMessageSource([MessageThread("t", [message])])

        list(MessageSelector(source, SENDER, SUBJECT).select())

        assert message.unread is True
        assert source.marked_read == []
