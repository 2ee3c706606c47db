"""Highlight segmentation tests for result rows.

Checks that segments always partition the display path losslessly, that only
filename characters are highlighted, and that adjacent runs are coalesced.
"""

from __future__ import annotations

import random
import unittest

from quickfile.highlight import DIRECTORY, FILENAME, HighlightSegment, directory_end, segment


def highlighted_text(segments: list[HighlightSegment]) -> str:
    return "".join(item.text for item in segments if item.highlighted)


def _assert_well_formed(test: unittest.TestCase, path: str, segments: list[HighlightSegment]) -> None:
    test.assertEqual("".join(item.text for item in segments), path)
    for left, right in zip(segments, segments[1:]):
        test.assertFalse(
            left.highlighted == right.highlighted and left.part == right.part,
            f"adjacent segments not coalesced: {left!r} {right!r}",
        )
    for item in segments:
        if item.part == DIRECTORY:
            test.assertFalse(item.highlighted)


class SegmentScenarioTests(unittest.TestCase):
    def test_match_offsets_in_filename_highlight_single_characters(self) -> None:
        path = "~/proj/app/main.txt"
        base = directory_end(path)
        offsets = [base, base + 3]  # "m" and "n" of "main"

        segments = segment(path, offsets)

        self.assertEqual(
            segments,
            [
                HighlightSegment("~/proj/app/", False, DIRECTORY),
                HighlightSegment("m", True, FILENAME),
                HighlightSegment("ai", False, FILENAME),
                HighlightSegment("n", True, FILENAME),
                HighlightSegment(".txt", False, FILENAME),
            ],
        )

    def test_adjacent_matches_merge_into_one_run(self) -> None:
        path = "~/proj/app/main.txt"
        base = directory_end(path)

        segments = segment(path, [base, base + 1, base + 2])

        self.assertEqual(segments[1], HighlightSegment("mai", True, FILENAME))
        self.assertEqual(highlighted_text(segments), "mai")

    def test_path_without_separator_is_single_filename_segment(self) -> None:
        self.assertEqual(segment("readme", []), [HighlightSegment("readme", False, FILENAME)])

    def test_empty_path_yields_one_empty_filename_segment(self) -> None:
        self.assertEqual(segment("", [0, 1]), [HighlightSegment("", False, FILENAME)])


class SegmentEdgeCaseTests(unittest.TestCase):
    def test_offsets_inside_directory_are_ignored(self) -> None:
        segments = segment("src/app.py", [0, 1, 2])

        self.assertEqual(
            segments,
            [HighlightSegment("src/", False, DIRECTORY), HighlightSegment("app.py", False, FILENAME)],
        )

    def test_offset_on_separator_is_ignored(self) -> None:
        segments = segment("src/app.py", [3])

        self.assertEqual(highlighted_text(segments), "")

    def test_offsets_past_end_are_ignored(self) -> None:
        segments = segment("a/bc", [3, 4, 99])

        self.assertEqual(
            segments,
            [
                HighlightSegment("a/", False, DIRECTORY),
                HighlightSegment("b", False, FILENAME),
                HighlightSegment("c", True, FILENAME),
            ],
        )

    def test_offset_zero_without_directory_highlights_first_char(self) -> None:
        segments = segment("readme", [0])

        self.assertEqual(segments[0], HighlightSegment("r", True, FILENAME))
        self.assertEqual(segments[1], HighlightSegment("eadme", False, FILENAME))

    def test_whole_filename_match_is_one_run(self) -> None:
        path = "dir/abc"
        segments = segment(path, [4, 5, 6])

        self.assertEqual(
            segments,
            [HighlightSegment("dir/", False, DIRECTORY), HighlightSegment("abc", True, FILENAME)],
        )

    def test_path_ending_in_separator_has_no_filename_segment(self) -> None:
        segments = segment("dir/sub/", [1, 7, 8])

        self.assertEqual(segments, [HighlightSegment("dir/sub/", False, DIRECTORY)])

    def test_unsorted_duplicate_offsets_are_normalized(self) -> None:
        segments = segment("x/abcd", [5, 2, 5, 2])

        self.assertEqual(highlighted_text(segments), "ad")
        _assert_well_formed(self, "x/abcd", segments)


class SegmentPropertyTests(unittest.TestCase):
    def test_random_paths_partition_losslessly(self) -> None:
        rng = random.Random(1234)
        alphabet = "ab/._é"
        for _ in range(500):
            path = "".join(rng.choice(alphabet) for _ in range(rng.randint(0, 14)))
            offsets = [rng.randint(-2, len(path) + 2) for _ in range(rng.randint(0, 6))]
            segments = segment(path, offsets)
            with self.subTest(path=path, offsets=offsets):
                _assert_well_formed(self, path, segments)
                base = directory_end(path)
                expected = "".join(
                    path[offset] for offset in sorted(set(offsets)) if base <= offset < len(path)
                )
                self.assertEqual(highlighted_text(segments), expected)


if __name__ == "__main__":
    unittest.main()
