import pytest

from shotform_service.models import FrameMetrics, MetricHistory


def _metrics(value):
    return FrameMetrics(elbow_angle=value, release_angle=value, knee_angle=value, alignment_score=value)


def test_empty_history_means_zero():
    smoothed = MetricHistory().smoothed()
    assert smoothed.elbow_angle == 0.0
    assert smoothed.alignment_score == 0.0
    assert smoothed.window_size == 0


def test_single_value_is_returned_exactly():
    history = MetricHistory()
    history.push(FrameMetrics(elbow_angle=91.3, release_angle=47.1, knee_angle=118.9, alignment_score=96.5))

    smoothed = history.smoothed()
    assert smoothed.elbow_angle == 91.3
    assert smoothed.release_angle == 47.1
    assert smoothed.knee_angle == 118.9
    assert smoothed.alignment_score == 96.5


def test_window_never_exceeds_capacity():
    history = MetricHistory(capacity=30)
    for i in range(100):
        history.push(_metrics(float(i)))
        assert len(history) <= 30
    assert len(history) == 30


def test_oldest_value_is_evicted_after_31_pushes():
    history = MetricHistory(capacity=30)
    history.push(_metrics(1000.0))
    for _ in range(30):
        history.push(_metrics(10.0))

    assert history.values("elbow_angle") == [10.0] * 30
    assert history.smoothed().elbow_angle == pytest.approx(10.0)


def test_mean_of_sliding_window():
    history = MetricHistory(capacity=3)
    for v in (1.0, 2.0, 3.0, 4.0):
        history.push(_metrics(v))
    assert history.smoothed().knee_angle == pytest.approx(3.0)


def test_metrics_are_kept_in_separate_windows():
    history = MetricHistory()
    history.push(FrameMetrics(elbow_angle=80.0, release_angle=40.0, knee_angle=120.0, alignment_score=100.0))
    history.push(FrameMetrics(elbow_angle=100.0, release_angle=60.0, knee_angle=110.0, alignment_score=90.0))

    smoothed = history.smoothed()
    assert smoothed.elbow_angle == pytest.approx(90.0)
    assert smoothed.release_angle == pytest.approx(50.0)
    assert smoothed.knee_angle == pytest.approx(115.0)
    assert smoothed.alignment_score == pytest.approx(95.0)
    assert smoothed.window_size == 2


def test_reset_empties_every_window():
    history = MetricHistory()
    for _ in range(5):
        history.push(_metrics(42.0))
    history.reset()

    assert len(history) == 0
    for name in ("elbow_angle", "release_angle", "knee_angle", "alignment_score"):
        assert history.values(name) == []


@pytest.mark.parametrize("capacity", [0, -5])
def test_invalid_capacity_rejected(capacity):
    with pytest.raises(ValueError):
        MetricHistory(capacity=capacity)
