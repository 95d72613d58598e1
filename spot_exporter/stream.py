# spot_exporter/stream.py
import queue

_CLOSED = object()


class SampleStream:
    """
    Handoff between region fetchers and the snapshot aggregator.

    Sends block while the buffer is full, so a slow consumer throttles the
    producers. close() must be called once, after every producer is done;
    iteration stops when the close marker is reached.
    """

    def __init__(self, maxsize=1):
        self._queue = queue.Queue(maxsize=maxsize)
        self._closed = False

    def send(self, sample):
        if self._closed:
            raise RuntimeError("send on closed stream")
        self._queue.put(sample)

    def close(self):
        if self._closed:
            return
        self._closed = True
        self._queue.put(_CLOSED)

    @property
    def closed(self):
        return self._closed

    def __iter__(self):
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                return
            yield item
