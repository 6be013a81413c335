import threading
import weakref


class SeatLocks:
    # one lock per flight id; an entry lives only while some thread holds a reference

    def __init__(self):
        self._guard = threading.Lock()
        self._locks = weakref.WeakValueDictionary()

    def for_flight(self, flight_id):
        with self._guard:
            lock = self._locks.get(flight_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[flight_id] = lock
            return lock

    def __len__(self):
        return len(self._locks)


seat_locks = SeatLocks()
