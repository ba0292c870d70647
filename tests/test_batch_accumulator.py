import random
from concurrent.futures import ThreadPoolExecutor

import pytest

from windowed_dispatch.parallel import BatchAccumulator, ProgressTracker


def _spans(batches):
    return [(b.start_index, b.stop_index) for b in batches]


def test_in_order_windows_emit_in_order():
    emitted = []
    acc = BatchAccumulator(total=6, batch_size=2, on_batch_complete=emitted.append)
    acc.on_window_complete(0, 3, ["a", "b", "c"])
    assert _spans(emitted) == [(0, 1)]
    acc.on_window_complete(3, 6, ["d", "e", "f"])
    assert _spans(emitted) == [(0, 1), (2, 3), (4, 5)]
    assert [b.results for b in emitted] == [["a", "b"], ["c", "d"], ["e", "f"]]


def test_out_of_order_windows_wait_for_gap():
    emitted = []
    acc = BatchAccumulator(total=9, batch_size=3, on_batch_complete=emitted.append)
    acc.on_window_complete(6, 9, [6, 7, 8])
    acc.on_window_complete(3, 6, [3, 4, 5])
    assert emitted == []
    assert acc.cursor == 0

    # One window completion releases every pending grouping
    acc.on_window_complete(0, 3, [0, 1, 2])
    assert _spans(emitted) == [(0, 2), (3, 5), (6, 8)]
    assert acc.emitted_count == 3
    assert acc.cursor == 9


def test_grouping_straddles_windows():
    emitted = []
    acc = BatchAccumulator(total=4, batch_size=3, on_batch_complete=emitted.append)
    acc.on_window_complete(2, 4, ["c", "d"])
    assert emitted == []
    acc.on_window_complete(0, 2, ["a", "b"])
    assert [(b.start_index, b.stop_index, b.results) for b in emitted] == [
        (0, 2, ["a", "b", "c"]),
        (3, 3, ["d"]),
    ]


def test_batch_larger_than_total_never_emits():
    emitted = []
    acc = BatchAccumulator(total=3, batch_size=4, on_batch_complete=emitted.append)
    acc.on_window_complete(0, 3, [1, 2, 3])
    assert emitted == []
    assert acc.emitted_count == 0


def test_batch_equal_to_total_emits_once():
    emitted = []
    acc = BatchAccumulator(total=4, batch_size=4, on_batch_complete=emitted.append)
    acc.on_window_complete(0, 2, [1, 2])
    assert emitted == []
    acc.on_window_complete(2, 4, [3, 4])
    assert _spans(emitted) == [(0, 3)]
    assert emitted[0].results == [1, 2, 3, 4]


def test_none_values_count_as_populated():
    emitted = []
    acc = BatchAccumulator(total=2, batch_size=2, on_batch_complete=emitted.append)
    acc.on_window_complete(0, 2, [None, None])
    assert len(emitted) == 1


def test_result_length_mismatch():
    acc = BatchAccumulator(total=4, batch_size=2, on_batch_complete=None)
    with pytest.raises(ValueError):
        acc.on_window_complete(0, 2, [1])


def test_batch_size_must_be_positive():
    with pytest.raises(ValueError):
        BatchAccumulator(total=4, batch_size=0, on_batch_complete=None)


def test_first_callback_error_raised_after_scan():
    seen = []

    def on_batch(batch):
        seen.append(batch.start_index)
        if batch.start_index == 0:
            raise RuntimeError("observer failed")

    acc = BatchAccumulator(total=4, batch_size=2, on_batch_complete=on_batch)
    with pytest.raises(RuntimeError, match="observer failed"):
        acc.on_window_complete(0, 4, [0, 1, 2, 3])
    assert seen == [0, 2]
    assert acc.cursor == 4


def test_windows_from_worker_threads():
    total, window, batch_size = 200, 5, 7
    windows = [(s, min(s + window, total)) for s in range(0, total, window)]
    random.Random(7).shuffle(windows)

    emitted = []
    progress = []
    acc = BatchAccumulator(total=total, batch_size=batch_size, on_batch_complete=emitted.append)
    tracker = ProgressTracker(total=total, on_progress=progress.append)

    def settle(bounds):
        start, end = bounds
        acc.on_window_complete(start, end, list(range(start, end)))
        tracker.on_window_complete(start, end)

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(settle, windows))

    spans = _spans(emitted)
    assert len(spans) == len(set(spans)) == -(-total // batch_size)
    expected_start = 0
    for batch in emitted:
        assert batch.start_index == expected_start
        assert batch.results == list(range(batch.start_index, batch.stop_index + 1))
        expected_start = batch.stop_index + 1
    assert expected_start == total

    assert tracker.completed == total
    completed = [p.completed_requests for p in progress]
    assert len(completed) == len(windows)
    assert completed == sorted(completed)
    assert completed[-1] == total
