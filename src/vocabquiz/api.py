"""Vocabulary and leaderboard endpoints used by the quiz client."""

import logging
from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from .dependencies import get_score_repository, get_vocab_repository
from .errors import PersistenceError, VocabularyUnavailable
from .models import PlayerScore, ScoreSubmission, Word
from .ranking import rank
from .scores import ScoreRepository, new_player_score
from .vocabulary import VocabularyRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["scores"])


@router.get("/vocabulary", response_model=List[Word])
async def get_vocabulary(repo: VocabularyRepository = Depends(get_vocab_repository)):
    try:
        return repo.get_vocabulary()
    except VocabularyUnavailable:
        logger.exception("Error reading vocabulary")
        return JSONResponse({"error": "Failed to read vocabulary"}, status_code=500)


@router.get("/scores", response_model=List[PlayerScore])
async def get_scores(repo: ScoreRepository = Depends(get_score_repository)):
    try:
        return repo.get_scores()
    except PersistenceError:
        logger.exception("Error reading scores")
        return JSONResponse({"error": "Failed to read scores"}, status_code=500)


@router.get("/leaderboard", response_model=List[PlayerScore])
async def get_leaderboard(repo: ScoreRepository = Depends(get_score_repository)):
    try:
        return rank(repo.get_scores())
    except PersistenceError:
        logger.exception("Error reading scores")
        return JSONResponse({"error": "Failed to read scores"}, status_code=500)


@router.post("/scores")
async def add_score(
    submission: ScoreSubmission, repo: ScoreRepository = Depends(get_score_repository)
):
    # InvalidSubmission is answered with 400 by the app's QuizError handler
    score = new_player_score(
        submission, submission.name, submission.school, submission.class_name
    )
    try:
        repo.append_score(score)
    except PersistenceError:
        logger.exception("Error saving score")
        return JSONResponse({"error": "Failed to save score"}, status_code=500)
    return {"success": True}
