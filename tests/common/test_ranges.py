#-------------------------------------------------------------------------
# Copyright (c) Microsoft.  All rights reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#   http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#--------------------------------------------------------------------------
import unittest

from filestorage import FILE_RANGE_ALIGNMENT
from filestorage.file import (
    Range,
    normalize_ranges,
)


# ------------------------------------------------------------------------------


class NormalizeRangesTest(unittest.TestCase):

    def test_empty(self):
        self.assertEqual(normalize_ranges([]), [])

    def test_alignment_constant(self):
        self.assertEqual(FILE_RANGE_ALIGNMENT, 512)

    def test_aligned_range_is_unchanged(self):
        self.assertEqual(normalize_ranges([Range(0, 511)]), [Range(0, 511)])

    def test_start_rounds_down_and_end_rounds_up(self):
        self.assertEqual(normalize_ranges([Range(2000, 3000)]), [Range(1536, 3071)])

    def test_single_byte(self):
        self.assertEqual(normalize_ranges([Range(513, 513)]), [Range(512, 1023)])

    def test_end_on_unit_boundary(self):
        self.assertEqual(normalize_ranges([Range(100, 1024)]), [Range(0, 1535)])

    def test_two_separate_writes(self):
        # 512 bytes at 0 and 512 bytes at 1512
        ranges = normalize_ranges([Range(0, 511), Range(1512, 2023)])

        self.assertEqual(ranges, [Range(0, 511), Range(1024, 2047)])

    def test_touching_rounded_ranges_merge(self):
        ranges = normalize_ranges([Range(0, 99), Range(600, 699)])

        self.assertEqual(ranges, [Range(0, 1023)])

    def test_overlapping_ranges_merge(self):
        ranges = normalize_ranges([Range(0, 511), Range(0, 1000), Range(300, 400)])

        self.assertEqual(ranges, [Range(0, 1023)])

    def test_ranges_one_unit_apart_stay_separate(self):
        ranges = normalize_ranges([Range(0, 511), Range(1024, 1535)])

        self.assertEqual(ranges, [Range(0, 511), Range(1024, 1535)])

    def test_unsorted_input(self):
        ranges = normalize_ranges([Range(4096, 4100), Range(10, 20), Range(2048, 2049)])

        self.assertEqual(ranges, [Range(0, 511), Range(2048, 2559), Range(4096, 4607)])

    def test_tuples(self):
        self.assertEqual(normalize_ranges([(5, 6)]), [Range(0, 511)])

    def test_result_is_aligned(self):
        writes = [(7, 900), (1500, 1500), (3000, 5000), (5100, 5200)]

        for file_range in normalize_ranges(writes):
            self.assertEqual(file_range.start % FILE_RANGE_ALIGNMENT, 0)
            self.assertEqual((file_range.end + 1) % FILE_RANGE_ALIGNMENT, 0)

    def test_result_contains_written_bytes(self):
        writes = [(7, 900), (1500, 1500), (3000, 5000)]
        ranges = normalize_ranges(writes)

        for start, end in writes:
            self.assertTrue(any(r.start <= start and end <= r.end for r in ranges))

    def test_custom_alignment(self):
        ranges = normalize_ranges([Range(5, 6), Range(20, 20)], alignment=8)

        self.assertEqual(ranges, [Range(0, 7), Range(16, 23)])

    def test_invalid_range(self):
        with self.assertRaises(ValueError):
            normalize_ranges([Range(10, 5)])
        with self.assertRaises(ValueError):
            normalize_ranges([Range(-1, 5)])

    def test_invalid_alignment(self):
        with self.assertRaises(ValueError):
            normalize_ranges([Range(0, 5)], alignment=0)


# ------------------------------------------------------------------------------
if __name__ == '__main__':
    unittest.main()
