"""Filename policy and resize math."""
from datetime import datetime

import pytest

from optimizer.conversion.models import OutputFormat, RenameMode
from optimizer.conversion.naming import build_file_name, dedupe_names, split_name
from optimizer.conversion.resize import scaled_size

STAMP_TIME = datetime(2024, 3, 5, 9, 7, 42)


class TestBuildFileName:
    @pytest.mark.parametrize(
        "args, expected",
        [
            (("photo.png", "jpeg", "original", ""), "photo.jpeg"),
            (("photo.png", "", "suffix", ""), "photo-optimized.png"),
            (("a.b.jpg", "webp", "custom", "brand"), "brand-a.b.webp"),
            (("photo.png", "webp", "custom", ""), "photo-optimized.webp"),
            (("photo.png", "webp", "nonsense", ""), "photo-optimized.webp"),
            (("photo", None, "suffix", ""), "photo-optimized.webp"),
            (("photo", None, "original", ""), "photo.webp"),
        ],
    )
    def test_modes(self, args, expected):
        assert build_file_name(*args) == expected

    def test_timestamp_uses_given_time(self):
        assert build_file_name("photo.png", "webp", "timestamp", "", now=STAMP_TIME) == "202403050907-photo.webp"

    def test_accepts_enums(self):
        name = build_file_name("shot.JPG", OutputFormat.AVIF, RenameMode.CUSTOM, "tri")
        assert name == "tri-shot.avif"


class TestSplitAndDedupe:
    def test_split_only_last_extension(self):
        assert split_name("a.b.jpg") == ("a.b", "jpg")
        assert split_name("noext") == ("noext", "")
        assert split_name(".hidden") == ("", "hidden")

    def test_unique_names_untouched(self):
        assert dedupe_names(["a.webp", "b.webp"]) == ["a.webp", "b.webp"]

    def test_repeats_get_index(self):
        assert dedupe_names(["a.webp", "a.webp", "a.webp"]) == ["a.webp", "a-2.webp", "a-3.webp"]

    def test_generated_name_avoids_later_names(self):
        assert dedupe_names(["a.webp", "a.webp", "a-2.webp"]) == ["a.webp", "a-3.webp", "a-2.webp"]


class TestScaledSize:
    def test_half(self):
        assert scaled_size(800, 600, 50) == (400, 300)

    @pytest.mark.parametrize("percent", [0, 100, 120, -5])
    def test_out_of_range_means_no_resize(self, percent):
        assert scaled_size(800, 600, percent) is None

    def test_unknown_width(self):
        assert scaled_size(None, 600, 50) is None

    def test_unknown_height(self):
        assert scaled_size(800, None, 50) == (400, None)

    def test_rounds_half_up_and_never_zero(self):
        assert scaled_size(333, 3, 50) == (167, 2)
        assert scaled_size(1, 1, 10) == (1, 1)
