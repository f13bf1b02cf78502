import random

import pytest
from fastapi.testclient import TestClient

from vocabquiz.app import create_app
from vocabquiz.config import Settings
from vocabquiz.generator import RandomQuizGenerator
from vocabquiz.models import Word
from vocabquiz.scores import CsvScoreRepository
from vocabquiz.session import QuizSession
from vocabquiz.timers import Scheduler

WORDS = [
    ("apple", "苹果"),
    ("banana", "香蕉"),
    ("book", "书"),
    ("school", "学校"),
    ("teacher", "老师"),
    ("water", "水"),
    ("friend", "朋友"),
    ("river", "河流"),
]
TRANSLATIONS = dict(WORDS)


class FakeHandle:
    def __init__(self, when, seq, callback, scheduler):
        self.when = when
        self.seq = seq
        self.callback = callback
        self.scheduler = scheduler
        self.cancelled = False

    def cancel(self):
        if not self.scheduler.ignore_cancel:
            self.cancelled = True


class FakeScheduler(Scheduler):
    """Runs callbacks only when the test advances the clock."""

    def __init__(self):
        self.now = 0.0
        self.handles = []
        self.ignore_cancel = False
        self._seq = 0

    def call_later(self, delay, callback):
        self._seq += 1
        handle = FakeHandle(self.now + delay, self._seq, callback, self)
        self.handles.append(handle)
        return handle

    def advance(self, seconds):
        target = self.now + seconds
        while True:
            due = [h for h in self.handles if not h.cancelled and h.when <= target]
            if not due:
                break
            handle = min(due, key=lambda h: (h.when, h.seq))
            self.handles.remove(handle)
            self.now = handle.when
            handle.callback()
        self.now = target

    @property
    def pending(self):
        return [h for h in self.handles if not h.cancelled]


@pytest.fixture
def words():
    return [Word(term=term, translation=translation) for term, translation in WORDS]


@pytest.fixture
def translations():
    return dict(TRANSLATIONS)


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def test_settings(tmp_path):
    settings = Settings()
    settings.LOG_DIR = str(tmp_path / "log")
    settings.DB_DIR = str(tmp_path / "db")
    settings.LOG_TO_DB = False
    settings.VOCAB_FILE = str(tmp_path / "vocabulary.csv")
    settings.SCORES_FILE = str(tmp_path / "scores.csv")
    return settings


@pytest.fixture
def vocab_file(test_settings):
    lines = ["english,chinese"] + [f"{term},{translation}" for term, translation in WORDS]
    with open(test_settings.VOCAB_FILE, "w", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")
    return test_settings.VOCAB_FILE


@pytest.fixture
def score_repo(test_settings):
    return CsvScoreRepository(test_settings.SCORES_FILE)


@pytest.fixture
def quiz(words, score_repo, scheduler, test_settings):
    return QuizSession(
        words,
        score_repo,
        scheduler,
        generator=RandomQuizGenerator(random.Random(42)),
        settings=test_settings,
    )


@pytest.fixture
def app(test_settings, vocab_file, scheduler):
    return create_app(
        settings=test_settings,
        scheduler=scheduler,
        generator_factory=lambda: RandomQuizGenerator(random.Random(7)),
    )


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client
