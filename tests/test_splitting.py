# ========================
# tests/test_splitting.py
# ========================

import unittest
import sys
import os

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.pipeline.splitting import (
    MultiValueSplitter, developer_splitter, genre_splitter, split_ranked, strip_artifacts
)

class TestSplitRanked(unittest.TestCase):

    def test_two_developers(self):
        self.assertEqual(
            split_ranked("['Nintendo', 'Game Freak']", 3),
            ['Nintendo', 'Game Freak', None]
        )

    def test_single_genre(self):
        self.assertEqual(split_ranked("['Action']", 4), ['Action', None, None, None])

    def test_full_arity(self):
        self.assertEqual(
            split_ranked("['Action', 'Adventure', 'Open-World', 'Fantasy']", 4),
            ['Action', 'Adventure', 'Open-World', 'Fantasy']
        )

    def test_values_past_arity_are_dropped(self):
        self.assertEqual(
            split_ranked("['A', 'B', 'C', 'D', 'E']", 3),
            ['A', 'B', 'C']
        )

    def test_absent_and_empty_fields(self):
        """No list at all gives all-absent slots, unlike a one-item list."""
        self.assertEqual(split_ranked(None, 3), [None, None, None])
        self.assertEqual(split_ranked('', 3), [None, None, None])
        self.assertEqual(split_ranked('[]', 3), [None, None, None])

    def test_trailing_separator_is_absent_not_empty(self):
        self.assertEqual(split_ranked("['Action', ]", 4), ['Action', None, None, None])
        self.assertEqual(split_ranked("Action, Puzzle, ", 4), ['Action', 'Puzzle', None, None])

    def test_whitespace_only_item_is_absent(self):
        self.assertEqual(split_ranked("Nintendo,  ", 3), ['Nintendo', None, None])
        self.assertEqual(split_ranked("['Action', ' ', 'Puzzle']", 4), ['Action', None, 'Puzzle', None])

    def test_bare_comma_does_not_separate(self):
        self.assertEqual(
            split_ranked("['Action,Adventure', 'Puzzle']", 3),
            ['Action,Adventure', 'Puzzle', None]
        )

    def test_unwrapped_value(self):
        self.assertEqual(split_ranked("Nintendo EPD", 3), ['Nintendo EPD', None, None])

    def test_strip_artifacts_removes_every_occurrence(self):
        self.assertEqual(strip_artifacts("[['Kirby''s', 'HAL']]"), "Kirbys, HAL")


class TestMultiValueSplitter(unittest.TestCase):

    def test_developer_split_replaces_combined_field(self):
        record = {'title': 'Pokemon Sun', 'developers': "['Game Freak', 'Nintendo']"}
        developer_splitter().split_record(record)
        
        self.assertNotIn('developers', record)
        self.assertEqual(record['main_developer'], 'Game Freak')
        self.assertEqual(record['sub_developer_1'], 'Nintendo')
        self.assertIsNone(record['sub_developer_2'])

    def test_genre_slot_names(self):
        splitter = genre_splitter()
        self.assertEqual(splitter.slot_fields, ['main_genre', 'sub_genre_1', 'sub_genre_2', 'sub_genre_3'])
        self.assertEqual(splitter.arity, 4)

    def test_already_split_record_is_left_alone(self):
        record = {'main_developer': 'Retro Studios', 'sub_developer_1': None}
        developer_splitter().split_record(record)
        
        self.assertEqual(record['main_developer'], 'Retro Studios')
        self.assertIsNone(record['sub_developer_2'])

    def test_truncation_is_counted(self):
        splitter = developer_splitter()
        splitter.split_table([
            {'developers': "['A', 'B', 'C', 'D']"},
            {'developers': "['A']"},
        ])
        self.assertEqual(splitter.truncated, 1)

    def test_requires_slots(self):
        with self.assertRaises(ValueError):
            MultiValueSplitter('genres', [])

if __name__ == '__main__':
    unittest.main()
