from offset_sampler import random_source
from offset_sampler.random_source import UniformSource, get_process_source


def test_same_seed_same_draws():
    a, b = UniformSource(123), UniformSource(123)
    assert [a.uniform() for _ in range(5)] == [b.uniform() for _ in range(5)]
    assert [a.raw_integer(31) for _ in range(5)] == [b.raw_integer(31) for _ in range(5)]


def test_draw_ranges():
    source = UniformSource(5)
    for _ in range(200):
        assert 0.0 <= source.uniform() < 1.0
        assert 0 <= source.raw_integer(31) < 2 ** 31
        assert 0 <= source.raw_integer(63) < 2 ** 63
        assert 0 <= source.index(3) <= 3
    assert source.index(0) == 0


def test_index_reaches_upper_bound():
    source = UniformSource(9)
    assert {source.index(2) for _ in range(200)} == {0, 1, 2}


def test_unseeded_source_records_seed():
    assert isinstance(UniformSource().seed, int)


def test_process_source_seeded_once(monkeypatch):
    monkeypatch.setattr(random_source, "_process_source", None)
    first = get_process_source(seed=7)
    second = get_process_source(seed=8)
    assert first is second
    assert first.seed == 7
