import logging

from gallery_tree.core.event_log import LoggingErrorRecorder
from gallery_tree.core.exceptions import StaleReferenceError


class TestLoggingErrorRecorder:
    """Test cases for LoggingErrorRecorder."""

    def test_records_error_with_data(self, caplog):
        recorder = LoggingErrorRecorder()
        error = StaleReferenceError("gone", container_id=7)
        error.add_data("reconciliation_step", "load pinned container")

        with caplog.at_level(logging.WARNING, logger="gallery_tree.core.event_log"):
            recorder.record_error(error, scope_id=1)

        [entry] = recorder.entries
        assert entry.error is error
        assert entry.scope_id == 1
        assert entry.data == {"reconciliation_step": "load pinned container"}
        assert "StaleReferenceError" in caplog.text
        assert "[Container: 7] gone" in caplog.text

    def test_plain_exceptions_are_accepted(self):
        recorder = LoggingErrorRecorder()
        recorder.record_error(RuntimeError("boom"))

        assert recorder.entries[0].data == {}
        assert recorder.entries[0].scope_id is None

    def test_bounded(self):
        recorder = LoggingErrorRecorder(max_entries=2)
        for i in range(5):
            recorder.record_error(RuntimeError(str(i)))

        assert [str(e.error) for e in recorder.entries] == ["3", "4"]

    def test_entries_is_a_copy_and_clear(self):
        recorder = LoggingErrorRecorder()
        recorder.record_error(RuntimeError("x"))
        recorder.entries.clear()
        assert len(recorder.entries) == 1

        recorder.clear()
        assert recorder.entries == []

    def test_custom_logger(self):
        log = logging.getLogger("tests.event_log.custom")
        recorder = LoggingErrorRecorder(log=log)
        recorder.record_error(RuntimeError("x"))
        assert len(recorder.entries) == 1
