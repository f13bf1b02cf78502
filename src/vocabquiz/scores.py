import logging
import os
import threading
from abc import ABC, abstractmethod
from typing import List

import pandas as pd

from .errors import InvalidSubmission, PersistenceError
from .models import GameStats, PlayerScore

logger = logging.getLogger(__name__)

COLUMNS = [
    "name",
    "school",
    "className",
    "correctCount",
    "wrongCount",
    "skippedCount",
    "completedAt",
]


def new_player_score(
    stats: GameStats, name: str, school: str, class_name: str
) -> PlayerScore:
    """Combine finished game stats with the player's form fields.

    Blank fields are rejected; the others are stored exactly as given.
    """
    fields = {"name": name, "school": school, "className": class_name}
    fields = {key: value or "" for key, value in fields.items()}
    missing = [key for key, value in fields.items() if not value.strip()]
    if missing:
        raise InvalidSubmission(f"Missing required fields: {', '.join(missing)}")
    counts = stats.model_dump(by_alias=True, include=set(GameStats.model_fields))
    return PlayerScore(**counts, **fields)


class ScoreRepository(ABC):
    @abstractmethod
    def get_scores(self) -> List[PlayerScore]:
        pass

    @abstractmethod
    def append_score(self, score: PlayerScore) -> None:
        pass


class CsvScoreRepository(ScoreRepository):
    """Append-only leaderboard in a CSV file with a header row.

    Values are CSV-quoted, so commas in names survive a round trip. Each
    append is one ``write`` call on a file opened in append mode, serialised
    by a lock within this process.
    """

    def __init__(self, file_path: str):
        self.file_path = file_path
        self._lock = threading.Lock()

    def ensure_file(self):
        if os.path.exists(self.file_path) and not self._is_blank():
            return
        directory = os.path.dirname(self.file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.file_path, "w", encoding="utf-8", newline="") as f:
            f.write(",".join(COLUMNS) + "\n")
        logger.info(f"Initialized empty score file {self.file_path}")

    def _is_blank(self) -> bool:
        if os.path.getsize(self.file_path) > 1024:
            return False
        with open(self.file_path, "rb") as f:
            return not f.read().strip()

    def get_scores(self) -> List[PlayerScore]:
        try:
            self.ensure_file()
            df = pd.read_csv(
                self.file_path,
                encoding="utf-8",
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
            )
        except (
            OSError,
            pd.errors.ParserError,
            pd.errors.EmptyDataError,
            UnicodeDecodeError,
        ) as e:
            raise PersistenceError(f"Failed to read {self.file_path}: {e}") from e

        missing = [c for c in COLUMNS if c not in df.columns]
        if missing:
            raise PersistenceError(
                f"{self.file_path} is missing columns: {', '.join(missing)}"
            )

        try:
            return [PlayerScore(**row) for row in df[COLUMNS].to_dict("records")]
        except ValueError as e:
            raise PersistenceError(f"Malformed record in {self.file_path}: {e}") from e

    def append_score(self, score: PlayerScore) -> None:
        row = score.model_dump(by_alias=True)
        line = pd.DataFrame([row], columns=COLUMNS).to_csv(
            header=False, index=False, lineterminator="\n"
        )
        with self._lock:
            try:
                self.ensure_file()
                if not self._ends_with_newline():
                    line = "\n" + line
                with open(self.file_path, "a", encoding="utf-8", newline="") as f:
                    f.write(line)
            except OSError as e:
                raise PersistenceError(f"Failed to write {self.file_path}: {e}") from e
        logger.info(
            f"Saved score for {score.name} ({score.school}/{score.class_name}): "
            f"{score.correct_count}/{score.wrong_count}/{score.skipped_count}"
        )

    def _ends_with_newline(self) -> bool:
        with open(self.file_path, "rb") as f:
            f.seek(-1, os.SEEK_END)
            return f.read(1) == b"\n"
