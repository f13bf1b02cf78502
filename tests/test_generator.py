import random

import pytest

from vocabquiz.errors import InsufficientVocabulary
from vocabquiz.generator import RandomQuizGenerator
from vocabquiz.models import Word


def test_options_hold_one_correct_and_three_distinct_distractors(words):
    for seed in range(50):
        generator = RandomQuizGenerator(random.Random(seed))
        question = generator.generate(words, set())

        assert len(question.options) == 4
        assert len(set(question.options)) == 4
        assert question.options.count(question.word.translation) == 1


def test_used_terms_are_not_picked_again(words):
    generator = RandomQuizGenerator(random.Random(1))
    used = {w.term for w in words[1:]}

    question = generator.generate(words, used)

    assert question.word == words[0]


def test_exhausted_vocabulary_resets_used_terms(words):
    generator = RandomQuizGenerator(random.Random(2))
    used = {w.term for w in words}

    question = generator.generate(words, used)

    assert used == set()
    assert question.word in words
    assert len(set(question.options)) == 4


def test_shared_translation_never_appears_as_distractor():
    vocabulary = [
        Word(term="big", translation="大"),
        Word(term="large", translation="大"),
        Word(term="small", translation="小"),
        Word(term="long", translation="长"),
        Word(term="short", translation="短"),
    ]
    for seed in range(30):
        generator = RandomQuizGenerator(random.Random(seed))
        question = generator.generate(vocabulary, {"small", "long", "short"})

        assert question.word.translation == "大"
        assert question.options.count("大") == 1
        assert sorted(question.options) == sorted(["大", "小", "长", "短"])


def test_fewer_than_four_words_is_rejected(words):
    generator = RandomQuizGenerator()

    with pytest.raises(InsufficientVocabulary):
        generator.generate(words[:3], set())


def test_too_few_distinct_translations_is_rejected():
    vocabulary = [
        Word(term="big", translation="大"),
        Word(term="large", translation="大"),
        Word(term="small", translation="小"),
        Word(term="long", translation="长"),
    ]
    generator = RandomQuizGenerator(random.Random(0))

    with pytest.raises(InsufficientVocabulary):
        generator.generate(vocabulary, {"small", "long"})


def test_same_seed_gives_same_question(words):
    first = RandomQuizGenerator(random.Random(9)).generate(words, set())
    second = RandomQuizGenerator(random.Random(9)).generate(words, set())

    assert first == second
