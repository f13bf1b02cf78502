"""Quiz session endpoints: the JSON session API and the HTML page."""

import logging
from typing import Callable, Dict, Optional

from fastapi import APIRouter, Depends, Form, Request, Response
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from .dependencies import get_active_session, get_session_id, get_session_store
from .errors import PersistenceError, QuizError, VocabularyUnavailable
from .globals import templates
from .models import AnswerFeedback, AnswerRequest, SessionView, SubmitRequest
from .session import QuizSession
from .sessions import SessionStore

logger = logging.getLogger(__name__)

router = APIRouter()


def _set_session_cookie(request: Request, response: Response, session_id: str):
    response.set_cookie(
        key=request.app.state.settings.SESSION_COOKIE_NAME,
        value=session_id,
        httponly=True,
        samesite="lax",
    )


# --- JSON session API ---


@router.post("/api/session", response_model=SessionView)
async def create_session(
    request: Request,
    response: Response,
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
):
    store.discard(session_id)
    new_id, quiz = store.create()
    _set_session_cookie(request, response, new_id)
    return quiz.snapshot()


@router.get("/api/session", response_model=SessionView)
async def get_session(quiz: QuizSession = Depends(get_active_session)):
    return quiz.snapshot()


@router.post("/api/session/start", response_model=SessionView)
async def start_game(quiz: QuizSession = Depends(get_active_session)):
    quiz.start_game()
    return quiz.snapshot()


@router.post("/api/session/answer", response_model=AnswerFeedback)
async def submit_answer(
    body: AnswerRequest, quiz: QuizSession = Depends(get_active_session)
):
    if body.selected_option_index is not None:
        feedback = quiz.answer_option(body.selected_option_index)
    elif body.answer is not None:
        feedback = quiz.answer(body.answer)
    else:
        return JSONResponse({"error": "No answer given"}, status_code=400)
    if feedback is None:
        return JSONResponse({"error": "Answer not accepted"}, status_code=400)
    return feedback


@router.post("/api/session/skip", response_model=AnswerFeedback)
async def skip_question(quiz: QuizSession = Depends(get_active_session)):
    feedback = quiz.skip()
    if feedback is None:
        return JSONResponse({"error": "Skip not accepted"}, status_code=400)
    return feedback


@router.post("/api/session/submit", response_model=SessionView)
async def submit_score(
    body: SubmitRequest, quiz: QuizSession = Depends(get_active_session)
):
    quiz.submit(body.name, body.school, body.class_name)
    return quiz.snapshot()


SIMPLE_ACTIONS: Dict[str, Callable[[QuizSession], None]] = {
    "review": QuizSession.review_mistakes,
    "back": QuizSession.back,
    "proceed": QuizSession.proceed_to_submit,
    "skip-submit": QuizSession.skip_submit,
    "leaderboard": QuizSession.view_leaderboard,
    "reset": QuizSession.reset,
}


@router.post("/api/session/{action}", response_model=SessionView)
async def session_action(action: str, quiz: QuizSession = Depends(get_active_session)):
    handler = SIMPLE_ACTIONS.get(action)
    if handler is None:
        return JSONResponse({"error": f"Unknown action: {action}"}, status_code=404)
    handler(quiz)
    return quiz.snapshot()


# --- HTML ---


@router.get("/", response_class=HTMLResponse)
async def home(
    request: Request,
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
):
    quiz = store.get(session_id)
    new_id = None
    if quiz is None:
        try:
            new_id, quiz = store.create()
        except VocabularyUnavailable:
            logger.exception("Cannot start a session without vocabulary")
            return HTMLResponse(
                "<h1>Error: 词库加载失败</h1>", status_code=500
            )

    response = templates.TemplateResponse(
        request, "index.html", {"view": quiz.snapshot()}
    )
    if new_id:
        _set_session_cookie(request, response, new_id)
    return response


@router.post("/play/{action}", response_class=RedirectResponse)
async def play(
    request: Request,
    action: str,
    option_index: Optional[int] = Form(None),
    name: str = Form(""),
    school: str = Form(""),
    class_name: str = Form("", alias="className"),
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
):
    quiz = store.get(session_id)
    if quiz is None:
        return RedirectResponse(url=request.url_for("home"), status_code=302)

    try:
        if action == "start":
            quiz.start_game()
        elif action == "answer":
            if option_index is not None:
                quiz.answer_option(option_index)
        elif action == "skip":
            quiz.skip()
        elif action == "submit":
            quiz.submit(name, school, class_name)
        elif action in SIMPLE_ACTIONS:
            SIMPLE_ACTIONS[action](quiz)
        else:
            return HTMLResponse("<h1>Unknown action</h1>", status_code=404)
    except PersistenceError as e:
        # the session already holds the message shown to the player
        logger.warning(f"Action {action} failed: {e.message}")
    except QuizError as e:
        logger.warning(f"Action {action} failed: {e.message}")
        quiz.error = e.message
    return RedirectResponse(url=request.url_for("home"), status_code=302)
