import os


class Settings:
    PROJECT_NAME: str = "vocabquiz"
    DEBUG: bool = os.environ.get("DEBUG", "") == "1"
    LOG_DIR: str = os.environ.get("LOG_DIR", "log")
    LOG_FILE: str = "vocabquiz.log"
    LOG_TO_DB: bool = os.environ.get("LOG_TO_DB", "") == "1"
    DB_DIR: str = os.environ.get("DB_DIR", "db")
    DB_FILE: str = "vocabquiz.db"
    VOCAB_FILE: str = os.environ.get("VOCAB_FILE", "data/vocabulary.csv")
    SCORES_FILE: str = os.environ.get("SCORES_FILE", "data/scores.csv")
    GAME_DURATION: int = int(os.environ.get("GAME_DURATION", "300"))
    CORRECT_ANSWER_DELAY: float = 0.5
    INCORRECT_ANSWER_DELAY: float = 2.0
    UTC_OFFSET_HOURS: int = 8
    SESSION_COOKIE_NAME: str = "quiz_session_id"
    SESSION_TIMEOUT_MINUTES: int = 120
    ROOT_PATH: str = os.environ.get("ROOT_PATH", "")


settings = Settings()
