import functools
import threading

from cairn.thread_pool import ThreadPool


def _record(results, lock, done, value):
    with lock:
        results.append(value)
    done.release()


def _record_thread(barrier, names, lock, finished):
    barrier.wait()
    with lock:
        names.add(threading.current_thread().name)
    finished.release()


def _stop_then_set(pool, stopped):
    pool.stop()
    stopped.set()


def test_runs_all_pushed_tasks():
    pool = ThreadPool()
    pool.start(4)
    lock = threading.Lock()
    done = threading.Semaphore(0)
    results = []

    for i in range(20):
        pool.push(functools.partial(_record, results, lock, done, i))
    for _ in range(20):
        assert done.acquire(timeout=5)
    pool.stop()
    assert sorted(results) == list(range(20))


def test_tasks_use_several_threads():
    barrier = threading.Barrier(3, timeout=5)
    names = set()
    lock = threading.Lock()
    finished = threading.Semaphore(0)
    with ThreadPool() as pool:
        pool.start(3)
        for _ in range(3):
            pool.push(functools.partial(_record_thread, barrier, names, lock, finished))
        for _ in range(3):
            assert finished.acquire(timeout=5)
    assert len(names) == 3


def test_pending_tasks_are_discarded_on_stop():
    pool = ThreadPool()
    counter = []
    pool.push(lambda: counter.append(1))
    pool.push(lambda: counter.append(2))
    pool.stop()
    pool.start(1)
    pool.stop()
    assert counter == []


def test_stop_from_inside_a_task():
    pool = ThreadPool()
    pool.start(2)
    stopped = threading.Event()
    pool.push(functools.partial(_stop_then_set, pool, stopped))
    assert stopped.wait(timeout=5)
    assert stopped.is_set()


def test_failing_task_does_not_kill_worker():
    pool = ThreadPool()
    pool.start(1)
    ran = threading.Event()

    def bad():
        raise RuntimeError("boom")

    pool.push(bad)
    pool.push(ran.set)
    assert ran.wait(timeout=5)
    pool.stop()