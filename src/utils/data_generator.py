# ========================
# src/utils/data_generator.py
# ========================

"""
Data Generation Utilities

Writes a synthetic review export shaped like the scraped Nintendo dataset,
including the artifacts the cleaning stages have to deal with.
"""

import csv
import random
import logging
from datetime import date, timedelta
from typing import List, Dict, Any, Optional
from pathlib import Path

logger = logging.getLogger(__name__)

HEADER = [
    'meta_score', 'title', 'platform', 'date', 'user_score',
    'link', 'esrb_rating', 'developers', 'genres'
]

class DataGenerator:
    """
    Generates raw review rows with controlled error injection.
    """
    
    def __init__(self, seed: Optional[int] = None):
        """
        Initialize data generator.
        
        Args:
            seed (int): Random seed for reproducible data generation
        """
        self.random = random.Random(seed)
        self._initialize_data_patterns()
        logger.info(f"DataGenerator initialized with seed: {seed}")
    
    def _initialize_data_patterns(self) -> None:
        """Initialize catalog values."""
        self.franchises = [
            "Super Mario", "Mario Kart", "Pokemon", "The Legend of Zelda",
            "Metroid", "Kirby", "Fire Emblem", "Xenoblade Chronicles",
            "Animal Crossing", "Splatoon", "Donkey Kong", "Pikmin"
        ]
        self.subtitles = [
            "Odyssey", "Adventures", "Legends", "Returns", "Deluxe",
            "Origins", "Quest", "Party", "World", "Tactics"
        ]
        self.platforms = ["Switch", "3DS", "Wii U", "Wii", "DS", "GameCube", "N64", "GBA", "iOS"]
        self.developers = [
            "Nintendo", "Nintendo EPD", "Game Freak", "Retro Studios", "HAL Labs",
            "Intelligent Systems", "Monolith Soft", "Camelot", "Game Arts",
            "Silicon Knights", "Next Level Games", "Grezzo"
        ]
        self.genres = [
            "Action", "Adventure", "Platformer", "3D", "2D", "Role-Playing",
            "Racing", "Puzzle", "Strategy", "Party", "Simulation", "Shooter"
        ]
        self.esrb_ratings = ["E", "E10+", "T", "M", ""]
        self.placeholder_dates = ["TBA", "Cancelled", "Early 2024", ""]
    
    def generate_dataset(self, 
                        file_path: str, 
                        num_rows: int,
                        error_rate: float = 0.15,
                        start_date: Optional[date] = None) -> Dict[str, Any]:
        """
        Generate a review export with controlled artifact injection.
        
        Args:
            file_path (str): Output CSV file path
            num_rows (int): Number of rows to generate
            error_rate (float): Fraction of rows with injected artifacts
            start_date (date): Earliest release date
            
        Returns:
            dict: Generation statistics
        """
        logger.info(f"Generating {num_rows:,} rows with {error_rate:.1%} error rate...")
        
        if start_date is None:
            start_date = date(1996, 1, 1)
        
        stats = {
            'total_rows': 0,
            'error_rate': error_rate,
            'records_with_errors': 0,
            'error_types': {}
        }
        
        Path(file_path).parent.mkdir(parents=True, exist_ok=True)
        seen_keys = set()
        
        with open(file_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=HEADER)
            writer.writeheader()
            
            for i in range(num_rows):
                record = self._generate_single_record(i, start_date, error_rate, stats)
                key = (record['title'], record['platform'])
                if key in seen_keys:
                    continue
                seen_keys.add(key)
                writer.writerow(record)
                stats['total_rows'] += 1
        
        stats['error_rate_actual'] = stats['records_with_errors'] / stats['total_rows'] if stats['total_rows'] else 0.0
        
        logger.info(f"Dataset generated: {file_path} ({stats['total_rows']:,} unique releases)")
        logger.info(f"Error breakdown: {stats['error_types']}")
        
        return stats
    
    def _generate_single_record(self, 
                               index: int, 
                               start_date: date, 
                               error_rate: float,
                               stats: Dict[str, Any]) -> Dict[str, Any]:
        """Generate a single raw row, possibly with injected artifacts."""
        rng = self.random
        title = f"{rng.choice(self.franchises)} {rng.choice(self.subtitles)} {index % 7 or ''}".strip()
        platform = rng.choice(self.platforms)
        released = start_date + timedelta(days=rng.randint(0, 365 * 27))
        
        record = {
            'meta_score': str(rng.randint(45, 98)),
            'title': title,
            'platform': platform,
            'date': f"{released.strftime('%B')} {released.day}, {released.year}",
            'user_score': f"{rng.randint(30, 98) / 10:.1f}",
            'link': f"/game/{platform.lower().replace(' ', '-')}/{title.lower().replace(' ', '-')}",
            'esrb_rating': rng.choice(self.esrb_ratings),
            'developers': self._format_list(rng.sample(self.developers, rng.randint(1, 4))),
            'genres': self._format_list(rng.sample(self.genres, rng.randint(1, 5))),
        }
        
        if rng.random() < error_rate:
            stats['records_with_errors'] += 1
            self._inject_errors(record, stats)
        
        return record
    
    def _format_list(self, values: List[str]) -> str:
        """Serialize a list the way the scraper did: "['a', 'b']"."""
        return "[" + ", ".join(f"'{value}'" for value in values) + "]"
    
    def _inject_errors(self, record: Dict[str, Any], stats: Dict[str, Any]) -> None:
        """Inject one kind of artifact into the row."""
        error_type = self.random.choice([
            'unreleased', 'missing_meta_score', 'missing_user_score',
            'trailing_separator', 'missing_developers'
        ])
        
        if error_type == 'unreleased':
            record['date'] = self.random.choice(self.placeholder_dates)
        elif error_type == 'missing_meta_score':
            record['meta_score'] = ''
        elif error_type == 'missing_user_score':
            record['user_score'] = ''
        elif error_type == 'trailing_separator':
            record['genres'] = record['genres'][:-1] + ", ]"
        elif error_type == 'missing_developers':
            record['developers'] = ''
        
        self._track_error_type(stats, error_type)
    
    def _track_error_type(self, stats: Dict[str, Any], error_type: str) -> None:
        """Track error types for statistics."""
        if error_type not in stats['error_types']:
            stats['error_types'][error_type] = 0
        stats['error_types'][error_type] += 1
