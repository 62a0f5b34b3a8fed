"""
Live shift subscriptions.

A subscription watches one namespace through a MongoDB change stream and,
after every change, re-reads the whole namespace and hands the listener a
complete snapshot (date key -> record). Listeners never see diffs.

Change streams only work against a replica set. When the stream fails the
error goes to ``on_error`` and the stream is reopened after a pause; the
subscription only ends when ``unsubscribe`` is called.
"""

import asyncio
import inspect
import logging
import os
from typing import Any, Callable, Dict, Optional

from shift_tracker.utils.logger import log_event, log_error, EventTypes

logger = logging.getLogger(__name__)

RecordSet = Dict[str, Dict[str, Any]]


async def read_record_set(collection, session=None) -> RecordSet:
    """Full scan of a namespace, keyed by date."""
    documents = await collection.find({}, session=session).to_list(None)
    records = {}
    for document in documents:
        date_key = document.pop("_id")
        records[date_key] = document
    return records


async def read_snapshot(collection) -> RecordSet:
    """
    Full scan at a single point in time, so a write landing mid-scan cannot
    produce a set that never existed. Snapshot sessions need a replica set,
    which change streams already require.
    """
    async with await collection.database.client.start_session(snapshot=True) as session:
        return await read_record_set(collection, session=session)


async def _call(callback: Callable, *args):
    result = callback(*args)
    if inspect.isawaitable(result):
        await result


class ShiftSubscription:
    def __init__(
        self,
        collection,
        on_update: Callable[[RecordSet], Any],
        on_error: Optional[Callable[[Exception], Any]] = None,
        retry_delay: Optional[float] = None,
        user_id: Optional[str] = None,
    ):
        self.collection = collection
        self.on_update = on_update
        self.on_error = on_error
        self.user_id = user_id
        if retry_delay is None:
            retry_delay = float(os.getenv("SUBSCRIPTION_RETRY_SECONDS", "2"))
        self.retry_delay = retry_delay
        self._task: Optional[asyncio.Task] = None
        self._closed = False

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> "ShiftSubscription":
        if self._task is None and not self._closed:
            self._task = asyncio.create_task(self._run())
            log_event(EventTypes.SUBSCRIPTION_OPENED, {"namespace": self.collection.name}, self.user_id)
        return self

    def unsubscribe(self):
        """Stop delivery. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        if self._task is not None and not self._task.done():
            self._task.cancel()
        log_event(EventTypes.SUBSCRIPTION_CLOSED, {"namespace": self.collection.name}, self.user_id)

    async def _run(self):
        while not self._closed:
            try:
                # Open the stream before the first read so no change can fall
                # between the initial snapshot and the first event.
                async with self.collection.watch() as stream:
                    await self._deliver_snapshot()
                    async for _change in stream:
                        await self._deliver_snapshot()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                log_error("Live shift subscription failed", e, self.user_id)
                log_event(EventTypes.SUBSCRIPTION_ERROR, {"error": str(e)}, self.user_id)
                if self.on_error is not None:
                    try:
                        await _call(self.on_error, e)
                    except Exception as callback_error:
                        log_error("Subscription error listener raised", callback_error, self.user_id)
                await asyncio.sleep(self.retry_delay)

    async def _deliver_snapshot(self):
        records = await read_snapshot(self.collection)
        if self._closed:
            return
        try:
            await _call(self.on_update, records)
        except Exception as e:
            # a failing listener must not end the subscription
            log_error("Subscription update listener raised", e, self.user_id)
