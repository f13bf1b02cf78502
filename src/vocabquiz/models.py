from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

SKIPPED = "Skipped"


class Word(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    term: str = Field(alias="english")
    translation: str = Field(alias="chinese")


class Question(BaseModel):
    word: Word
    options: List[str]


class Mistake(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    term: str = Field(alias="english")
    correct_translation: str = Field(alias="chinese")
    selected_answer: str = Field(alias="selectedAnswer")

    @property
    def skipped(self) -> bool:
        return self.selected_answer == SKIPPED


class GameStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    correct_count: int = Field(0, ge=0, alias="correctCount")
    wrong_count: int = Field(0, ge=0, alias="wrongCount")
    skipped_count: int = Field(0, ge=0, alias="skippedCount")
    completed_at: str = Field(alias="completedAt")


class PlayerScore(GameStats):
    name: str
    school: str
    class_name: str = Field(alias="className")


class AnswerFeedback(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    correct: bool
    selected_answer: str = Field(alias="selectedAnswer")
    correct_translation: str = Field(alias="correctTranslation")


class QuestionView(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    term: str
    options: List[str]
    number: int


class SessionView(BaseModel):
    """Everything the presentation layer needs to render one phase."""

    model_config = ConfigDict(populate_by_name=True)

    phase: str
    time_remaining: int = Field(alias="timeRemaining")
    duration: int
    score: int
    question_number: int = Field(alias="questionNumber")
    questions_answered: int = Field(alias="questionsAnswered")
    accuracy: int
    perfect_score: bool = Field(alias="perfectScore")
    question: Optional[QuestionView] = None
    selected_answer: Optional[str] = Field(None, alias="selectedAnswer")
    correct_translation: Optional[str] = Field(None, alias="correctTranslation")
    mistakes: List[Mistake] = []
    stats: Optional[GameStats] = None
    leaderboard: List[PlayerScore] = []
    error: Optional[str] = None


class SubmitRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    school: str = ""
    class_name: str = Field("", alias="className")


class ScoreSubmission(GameStats):
    """Body of POST /api/scores. Player fields are checked before storing."""

    name: str = ""
    school: str = ""
    class_name: str = Field("", alias="className")


class AnswerRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    selected_option_index: Optional[int] = Field(None, alias="selectedOptionIndex")
    answer: Optional[str] = None
