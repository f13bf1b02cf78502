import random
from abc import ABC, abstractmethod
from typing import List, Optional, Set

from .errors import InsufficientVocabulary
from .models import Question, Word

NUM_OPTIONS = 4


class QuizGenerator(ABC):
    """Abstract Base Class for question generation strategies."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    @abstractmethod
    def generate(self, vocabulary: List[Word], used_terms: Set[str]) -> Question:
        pass

    def _generate_options(self, target: Word, vocabulary: List[Word]) -> List[str]:
        """Helper to pick distinct distractors and shuffle them with the answer."""
        all_translations = {w.translation for w in vocabulary}
        all_translations.discard(target.translation)

        num_distractors = NUM_OPTIONS - 1
        if len(all_translations) < num_distractors:
            raise InsufficientVocabulary(
                f"Need {num_distractors} translations other than "
                f"'{target.translation}', found {len(all_translations)}"
            )
        # sorted so a seeded rng gives the same options every run
        incorrect = self.rng.sample(sorted(all_translations), num_distractors)

        options = [target.translation] + incorrect
        self.rng.shuffle(options)
        return options


class RandomQuizGenerator(QuizGenerator):
    """Picks an unused word uniformly at random.

    Once every term has been used, ``used_terms`` is cleared in place and the
    whole vocabulary is eligible again. The caller records the chosen term.
    """

    def generate(self, vocabulary: List[Word], used_terms: Set[str]) -> Question:
        if len(vocabulary) < NUM_OPTIONS:
            raise InsufficientVocabulary(
                f"Vocabulary has {len(vocabulary)} words, at least {NUM_OPTIONS} are required"
            )

        candidates = [w for w in vocabulary if w.term not in used_terms]
        if not candidates:
            used_terms.clear()
            candidates = list(vocabulary)

        target = self.rng.choice(candidates)
        return Question(word=target, options=self._generate_options(target, vocabulary))
