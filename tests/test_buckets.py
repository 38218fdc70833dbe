import pytest

from dictserver.buckets import MISC_BUCKET, bucket_of, shard_filename


@pytest.mark.parametrize("key, bucket", [
    ("apple", "a"),
    ("Apple", "a"),
    ("  Zebra ", "z"),
    ("42", "4"),
    ("_x", "_"),
    ("élan", "é"),
    ("Élan", "É"),
    ("日本", "日"),
    ("", MISC_BUCKET),
    ("   \t\n", MISC_BUCKET),
])
def test_bucket_of(key, bucket):
    assert bucket_of(key) == bucket


def test_bucket_of_none_is_misc():
    assert bucket_of(None) == MISC_BUCKET


def test_bucket_of_is_deterministic():
    keys = ["cat", "Cat", "éclair", " x", "", "😀smile"]
    first = [bucket_of(k) for k in keys]
    for _ in range(5):
        assert [bucket_of(k) for k in keys] == first


def test_combining_mark_uses_first_raw_codepoint():
    # "e" + COMBINING ACUTE ACCENT: routed by the bare "e"
    assert bucket_of("e\u0301tude") == "e"


def test_shard_filename_plain():
    assert shard_filename("a") == "a.json"
    assert shard_filename("é") == "é.json"
    assert shard_filename(MISC_BUCKET) == "misc.json"


@pytest.mark.parametrize("bucket", ["/", "\\", "%", "\x00"])
def test_shard_filename_escapes_unsafe(bucket):
    name = shard_filename(bucket)
    assert name.endswith(".json")
    assert "/" not in name and "\\" not in name and "\x00" not in name
    assert name.startswith("%")
