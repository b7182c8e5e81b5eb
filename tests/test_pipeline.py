# ========================
# tests/test_pipeline.py
# ========================

import unittest
import sys
import os
import csv
import json
import tempfile
from datetime import date
from pathlib import Path

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.pipeline import DataPipeline, TypeCoercionError
from src.pipeline.ingestion import REQUIRED_COLUMNS
from src.utils import Config, DataGenerator

RAW_ROWS = [
    ['Super Mario Odyssey', 'Switch', 'October 27, 2017', '97', '8.5', 'E10+',
     "['Nintendo EPD']", "['Platform']", '/game/switch/super-mario-odyssey'],
    ['Pokemon Sun', '3DS', 'November 18, 2016', '87', '7.6', 'E',
     "['Game Freak', 'Nintendo']", "['Role-Playing', 'Console-style RPG', ]", '/game/3ds/pokemon-sun'],
    ['Metroid Prime 4', 'Switch', 'TBA', '', '', '',
     "['Retro Studios']", "['Action']", '/game/switch/metroid-prime-4'],
    ['Club Nintendo Picross', 'DS', 'March 1, 2009', '', '', '',
     "['Jupiter']", "['Puzzle', 'Logic']", '/game/ds/club-nintendo-picross'],
    ['The Legend of Zelda: Breath of the Wild', 'Switch', 'March 3, 2017', '97', '8.7', 'E10+',
     "['Nintendo EPD', 'Monolith Soft', 'Nintendo', 'Extra Studio']",
     "['Action Adventure', 'Open-World', 'Fantasy', 'Sandbox', 'Survival']", '/game/switch/botw'],
]

class TestDataPipeline(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.tmp = Path(self._tmp.name)
        self.output_dir = self.tmp / "processed"
        self.config = Config({'log_level': 'WARNING'})

    def _write_input(self, rows):
        path = self.tmp / "nintendo_games.csv"
        with open(path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(['title', 'platform', 'date', 'meta_score', 'user_score',
                             'esrb_rating', 'developers', 'genres', 'link'])
            writer.writerows(rows)
        return str(path)

    def _read_output(self, name):
        with open(self.output_dir / name, newline='', encoding='utf-8') as f:
            return list(csv.DictReader(f))

    def test_end_to_end(self):
        pipeline = DataPipeline(self._write_input(RAW_ROWS), str(self.output_dir), config=self.config)
        self.assertTrue(pipeline.validate_input())
        
        results = pipeline.run()
        
        self.assertEqual(results['pipeline_status'], 'completed')
        self.assertEqual(results['data_quality_stats']['records_dropped'], 1)
        self.assertEqual(len(pipeline.table), 4)
        
        odyssey = pipeline.table.get('Super Mario Odyssey', 'Switch')
        self.assertEqual(odyssey['issuance_date'], date(2017, 10, 27))
        self.assertEqual(odyssey['main_developer'], 'Nintendo EPD')
        self.assertIsNone(odyssey['sub_developer_1'])
        self.assertEqual(odyssey['main_genre'], 'Platform')
        
        pokemon = pipeline.table.get('Pokemon Sun', '3DS')
        self.assertEqual(pokemon['sub_developer_1'], 'Nintendo')
        self.assertIsNone(pokemon['sub_developer_2'])
        self.assertEqual(pokemon['sub_genre_1'], 'Console-style RPG')
        self.assertIsNone(pokemon['sub_genre_2'])
        
        zelda = pipeline.table.get('The Legend of Zelda: Breath of the Wild', 'Switch')
        self.assertEqual(zelda['sub_developer_2'], 'Nintendo')
        self.assertEqual(zelda['sub_genre_3'], 'Sandbox')
        
        self.assertIsNone(pipeline.table.get('Metroid Prime 4', 'Switch'))

    def test_reports(self):
        pipeline = DataPipeline(self._write_input(RAW_ROWS), str(self.output_dir), config=self.config)
        reports = pipeline.run()['reports']
        
        developers = [row['main_developer'] for row in reports['top_developers']]
        self.assertEqual(developers, ['Nintendo EPD', 'Game Freak'])
        self.assertNotIn('Jupiter', developers)
        
        themes = {row['popular_aspect']: row['avg_meta_score'] for row in reports['thematic_meta_scores']}
        self.assertEqual(float(themes['Mario game']), 97.0)
        self.assertIsNone(themes['Other-topic game'])

    def test_output_files(self):
        pipeline = DataPipeline(self._write_input(RAW_ROWS), str(self.output_dir), config=self.config)
        saved = pipeline.run()['saved_files']
        
        for key in ('cleaned_games', 'top_developers', 'platform_user_scores',
                    'thematic_meta_scores', 'monthly_scores', 'summary', 'data_dictionary'):
            self.assertTrue(Path(saved[key]).exists(), key)
        
        cleaned = self._read_output("cleaned_games.csv")
        self.assertEqual(len(cleaned), 4)
        self.assertEqual(cleaned[0]['issuance_date'], '2017-10-27')
        self.assertEqual(cleaned[0]['sub_developer_1'], '')
        picross = [row for row in cleaned if row['title'] == 'Club Nintendo Picross'][0]
        self.assertEqual(picross['meta_score'], '')
        self.assertNotIn('link', cleaned[0])
        
        monthly = self._read_output("monthly_scores.csv")
        self.assertEqual([row['month_of_issuance'] for row in monthly], ['March', 'October', 'November'])
        
        with open(saved['summary'], encoding='utf-8') as f:
            summary = json.load(f)
        self.assertEqual(summary['records_processed'], 4)

    def test_bad_score_aborts_run(self):
        rows = [list(RAW_ROWS[0])]
        rows[0][3] = 'tbd'
        pipeline = DataPipeline(self._write_input(rows), str(self.output_dir), config=self.config)
        
        with self.assertRaises(TypeCoercionError) as ctx:
            pipeline.run()
        self.assertEqual(ctx.exception.record['title'], 'Super Mario Odyssey')

    def test_validate_input_missing_file(self):
        pipeline = DataPipeline(str(self.tmp / "missing.csv"), str(self.output_dir), config=self.config)
        self.assertFalse(pipeline.validate_input())

    def test_low_retention_warning(self):
        rows = [RAW_ROWS[2], RAW_ROWS[2][:1] + ['Wii U'] + RAW_ROWS[2][2:], RAW_ROWS[0]]
        pipeline = DataPipeline(self._write_input(rows), str(self.output_dir), config=self.config)
        
        with self.assertLogs('src.pipeline.orchestrator', level='WARNING'):
            pipeline.run()

    def test_generated_sample_runs_clean(self):
        input_file = str(self.tmp / "raw" / "sample.csv")
        stats = DataGenerator(seed=7).generate_dataset(input_file, num_rows=200, error_rate=0.3)
        
        results = DataPipeline(input_file, str(self.output_dir), config=self.config).run()
        
        quality = results['data_quality_stats']
        self.assertEqual(quality['records_processed'], stats['total_rows'])
        self.assertLessEqual(quality['records_dropped'], stats['error_types'].get('unreleased', 0))
        self.assertLessEqual(len(results['reports']['top_developers']), 10)


class TestDataGenerator(unittest.TestCase):

    def test_same_seed_same_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            first = Path(tmp) / "a.csv"
            second = Path(tmp) / "b.csv"
            DataGenerator(seed=42).generate_dataset(str(first), num_rows=50)
            DataGenerator(seed=42).generate_dataset(str(second), num_rows=50)
            
            self.assertEqual(first.read_text(encoding='utf-8'), second.read_text(encoding='utf-8'))
            with open(first, newline='', encoding='utf-8') as f:
                header = next(csv.reader(f))
            self.assertEqual(sorted(header), sorted(REQUIRED_COLUMNS))


class TestConfig(unittest.TestCase):

    def test_defaults_are_valid(self):
        config = Config()
        self.assertTrue(all(config.validate_config().values()))
        self.assertEqual(config.DEVELOPER_SLOTS, 3)
        self.assertEqual(config.GENRE_SLOTS, 4)

    def test_overrides_and_file_round_trip(self):
        config = Config({'top_developers_limit': 5, 'unknown_key': 1})
        self.assertEqual(config.TOP_DEVELOPERS_LIMIT, 5)
        self.assertFalse(hasattr(config, 'UNKNOWN_KEY'))
        
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "config.json")
            config.save_to_file(path)
            self.assertEqual(Config.load_from_file(path).TOP_DEVELOPERS_LIMIT, 5)

    def test_invalid_values_are_flagged(self):
        config = Config({'genre_slots': 0, 'log_level': 'LOUD'})
        validations = config.validate_config()
        self.assertFalse(validations['genre_slots'])
        self.assertFalse(validations['log_level'])

if __name__ == '__main__':
    unittest.main()
