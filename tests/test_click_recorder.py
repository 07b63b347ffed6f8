"""
Tests for fire-and-forget click recording.
"""
import asyncio

from shortlink_app.click_processor.click_worker import ClickRecorder
from shortlink_app.database.connection import SessionLocal
from shortlink_app.models.click import Click
from shortlink_app.queue.bounded import BoundedClickQueue
from shortlink_app.storage.strategies import SQLClickStorage

CHROME_WINDOWS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class FlakyStorage(SQLClickStorage):
    """Fails the first `failures` writes, then behaves normally"""

    def __init__(self, session_factory, failures=1):
        super().__init__(session_factory)
        self.failures = failures

    def store_click(self, click):
        if self.failures > 0:
            self.failures -= 1
            raise RuntimeError("store exploded")
        super().store_click(click)


def clicks_for(db_session, code):
    return db_session.query(Click).filter(Click.code == code).all()


class TestClickRecorder:

    def test_records_one_row_per_click(self, click_storage, db_session):
        async def scenario():
            recorder = ClickRecorder(storage=click_storage, workers=2)
            await recorder.start()
            assert recorder.record("abc123", ip="10.0.0.1", user_agent=CHROME_WINDOWS,
                                   referer="https://news.example.com")
            await recorder.stop()
            return recorder

        recorder = asyncio.run(scenario())

        rows = clicks_for(db_session, "abc123")
        assert len(rows) == 1
        click = rows[0]
        assert click.ip == "10.0.0.1"
        assert click.browser == "Chrome"
        assert click.os == "Windows"
        assert click.device == "Desktop"
        assert click.raw_ua == CHROME_WINDOWS
        assert click.referer == "https://news.example.com"
        assert click.created_at is not None
        assert recorder.processed_count == 1

    def test_missing_metadata(self, click_storage, db_session):
        async def scenario():
            recorder = ClickRecorder(storage=click_storage, workers=1)
            await recorder.start()
            recorder.record("abc123", ip="", user_agent="", referer=None)
            await recorder.stop()

        asyncio.run(scenario())

        click = clicks_for(db_session, "abc123")[0]
        assert click.ip is None
        assert click.raw_ua is None
        assert click.referer is None
        assert (click.browser, click.os, click.device) == ("Unknown", "Unknown", "Unknown")

    def test_record_returns_before_write(self, click_storage, db_session):
        """Nothing is written until a worker picks the event up"""
        async def scenario():
            recorder = ClickRecorder(storage=click_storage, workers=1)
            assert recorder.record("abc123", ip="10.0.0.1")
            assert recorder.queue.get_queue_length() == 1
            assert clicks_for(db_session, "abc123") == []

            await recorder.start()
            await recorder.stop()

        asyncio.run(scenario())

        assert len(clicks_for(db_session, "abc123")) == 1

    def test_full_backlog_drops(self, click_storage, db_session):
        async def scenario():
            recorder = ClickRecorder(storage=click_storage, queue=BoundedClickQueue(maxsize=2), workers=1)
            results = [recorder.record("abc123", ip=f"10.0.0.{i}") for i in range(3)]

            await recorder.start()
            await recorder.stop()
            return recorder, results

        recorder, results = asyncio.run(scenario())

        assert results == [True, True, False]
        assert recorder.queue.dropped == 1
        assert len(clicks_for(db_session, "abc123")) == 2

    def test_failed_write_is_isolated(self, db_session):
        async def scenario():
            recorder = ClickRecorder(storage=FlakyStorage(SessionLocal, failures=1), workers=1)
            await recorder.start()
            recorder.record("abc123", ip="10.0.0.1")
            recorder.record("abc123", ip="10.0.0.2")
            await recorder.stop()
            return recorder

        recorder = asyncio.run(scenario())

        assert recorder.failed_count == 1
        assert recorder.processed_count == 1
        rows = clicks_for(db_session, "abc123")
        assert [row.ip for row in rows] == ["10.0.0.2"]

    def test_stop_drains_backlog(self, click_storage, db_session):
        async def scenario():
            recorder = ClickRecorder(storage=click_storage, workers=3)
            await recorder.start()
            for i in range(25):
                recorder.record("burst", ip=f"10.0.1.{i}")
            await recorder.stop()
            assert not recorder.running

        asyncio.run(scenario())

        assert len(clicks_for(db_session, "burst")) == 25

    def test_cancelled_request_keeps_its_click(self, click_storage, db_session):
        """Cancelling the caller after record() does not cancel the queued write"""
        async def scenario():
            recorder = ClickRecorder(storage=click_storage, workers=1)
            recorded = asyncio.Event()

            async def handle_request():
                recorder.record("abc123", ip="10.0.0.1", user_agent=CHROME_WINDOWS)
                recorded.set()
                await asyncio.sleep(3600)

            request = asyncio.create_task(handle_request())
            await recorded.wait()
            request.cancel()
            await asyncio.gather(request, return_exceptions=True)
            assert request.cancelled()

            await recorder.start()
            await recorder.stop()
            return recorder

        recorder = asyncio.run(scenario())

        assert recorder.processed_count == 1
        assert len(clicks_for(db_session, "abc123")) == 1
