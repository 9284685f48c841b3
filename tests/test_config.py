import os

import pytest

from hybrid_pi.config import DEFAULT_BATCH_SIZE, DEFAULT_MIN_LEN, Settings


def test_defaults():
    settings = Settings()
    assert settings.lanes == 1
    assert settings.batch_size == DEFAULT_BATCH_SIZE == 2000
    assert settings.min_len == DEFAULT_MIN_LEN
    assert settings.strategy == "batched"
    assert settings.partition_policy == "strided"


def test_from_env_reads_variables():
    settings = Settings.from_env({
        "HYBRID_PI_NUM_THREADS": "6",
        "HYBRID_PI_BATCH_SIZE": "512",
        "HYBRID_PI_MIN_LEN": "64",
        "HYBRID_PI_STRATEGY": "chunked",
        "HYBRID_PI_PARTITION": "block",
    })
    assert settings == Settings(lanes=6, batch_size=512, min_len=64, strategy="chunked", partition_policy="block")


def test_from_env_lane_count_defaults_to_cpu_count():
    assert Settings.from_env({}).lanes == (os.cpu_count() or 1)


def test_blank_variable_uses_default():
    assert Settings.from_env({"HYBRID_PI_BATCH_SIZE": " "}).batch_size == DEFAULT_BATCH_SIZE


def test_malformed_variable_is_named():
    with pytest.raises(ValueError, match="HYBRID_PI_NUM_THREADS"):
        Settings.from_env({"HYBRID_PI_NUM_THREADS": "many"})


@pytest.mark.parametrize(
    "name, raw",
    [
        ("HYBRID_PI_STRATEGY", "fast"),
        ("HYBRID_PI_PARTITION", "cyclic"),
        ("HYBRID_PI_NUM_THREADS", "0"),
        ("HYBRID_PI_BATCH_SIZE", "-5"),
    ],
)
def test_invalid_variable_is_named(name, raw):
    with pytest.raises(ValueError, match=name):
        Settings.from_env({name: raw})


def test_blank_choice_uses_default():
    settings = Settings.from_env({"HYBRID_PI_STRATEGY": "", "HYBRID_PI_PARTITION": "  "})
    assert settings.strategy == "batched"
    assert settings.partition_policy == "strided"


def test_choice_is_stripped():
    assert Settings.from_env({"HYBRID_PI_PARTITION": " block\n"}).partition_policy == "block"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"lanes": 0},
        {"batch_size": 0},
        {"min_len": -1},
        {"strategy": "greedy"},
        {"partition_policy": "random"},
    ],
)
def test_invalid_settings(kwargs):
    with pytest.raises(ValueError):
        Settings(**kwargs)


def test_override_ignores_none():
    settings = Settings(lanes=4).override(lanes=None, batch_size=100)
    assert settings.lanes == 4
    assert settings.batch_size == 100
