import logging
import os
from abc import ABC, abstractmethod
from typing import List, Optional

import pandas as pd

from .errors import VocabularyUnavailable
from .models import Word

logger = logging.getLogger(__name__)


class VocabularyRepository(ABC):
    @abstractmethod
    def get_vocabulary(self) -> List[Word]:
        pass


class CsvVocabularyRepository(VocabularyRepository):
    """Loads (english, chinese) pairs from a CSV file.

    The first row is a header and its names are ignored: the first column is
    the term, the second its translation. The list is cached after the first
    successful load; ``reload()`` re-reads the file.
    """

    def __init__(self, file_path: str):
        self.file_path = file_path
        self._words: Optional[List[Word]] = None

    def get_vocabulary(self) -> List[Word]:
        if self._words is None:
            self.reload()
        return list(self._words)

    def reload(self) -> List[Word]:
        if not os.path.exists(self.file_path):
            raise VocabularyUnavailable(f"Vocabulary file {self.file_path} not found")

        try:
            df = pd.read_csv(
                self.file_path, encoding="utf-8", dtype=str, keep_default_na=False
            )
        except (
            OSError,
            pd.errors.ParserError,
            pd.errors.EmptyDataError,
            UnicodeDecodeError,
        ) as e:
            raise VocabularyUnavailable(f"Failed to read {self.file_path}: {e}") from e

        if len(df.columns) < 2:
            raise VocabularyUnavailable(
                f"{self.file_path}: expected 2 columns, found {len(df.columns)}"
            )

        df = df.iloc[:, :2].copy()
        df.columns = ["english", "chinese"]
        df["english"] = df["english"].str.strip()
        df["chinese"] = df["chinese"].str.strip()
        df = df[(df["english"] != "") & (df["chinese"] != "")]

        duplicated = df["english"].duplicated()
        if duplicated.any():
            logger.warning(
                f"Dropping {int(duplicated.sum())} duplicate terms from {self.file_path}"
            )
            df = df[~duplicated]

        self._words = [Word(**row) for row in df.to_dict("records")]
        logger.info(f"Loaded {len(self._words)} words from {self.file_path}")
        return self._words
