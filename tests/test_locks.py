import threading

from locks import SeatLocks


def test_same_flight_shares_a_lock():
    locks = SeatLocks()
    first = locks.for_flight(7)
    assert locks.for_flight(7) is first
    assert locks.for_flight(8) is not first


def test_released_locks_are_dropped():
    locks = SeatLocks()
    with locks.for_flight(7):
        assert len(locks) == 1
    assert len(locks) == 0


def test_lock_held_by_another_thread_is_reused():
    locks = SeatLocks()
    held = threading.Event()
    release = threading.Event()

    def holder():
        with locks.for_flight(7):
            held.set()
            release.wait(5)

    worker = threading.Thread(target=holder)
    worker.start()
    held.wait(5)
    try:
        assert locks.for_flight(7).locked()
    finally:
        release.set()
        worker.join(5)
    assert len(locks) == 0
