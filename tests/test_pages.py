import logging
import sqlite3
from datetime import date

from fastapi.testclient import TestClient

from vocabquiz.app import create_app


def test_home_page_creates_session(client, app):
    response = client.get("/")

    assert response.status_code == 200
    assert "开始游戏" in response.text
    assert "quiz_session_id" in response.cookies
    assert len(app.state.session_store.sessions) == 1


def test_home_page_reuses_session(client, app):
    client.get("/")
    client.get("/")

    assert len(app.state.session_store.sessions) == 1


def test_play_through_forms(client, scheduler, test_settings):
    client.get("/")

    page = client.post("/play/start")
    assert page.status_code == 200
    assert "跳过" in page.text
    assert 'http-equiv="refresh"' in page.text

    page = client.post("/play/skip")
    assert "错误。正确答案是" in page.text

    scheduler.advance(test_settings.GAME_DURATION)
    page = client.get("/")
    assert "时间到" in page.text
    assert "查看错题 (1)" in page.text

    page = client.post("/play/review")
    assert "跳过的单词 (1)" in page.text

    client.post("/play/back")
    page = client.post("/play/proceed")
    assert 'name="className"' in page.text

    page = client.post("/play/submit", data={"name": "A", "school": "", "className": "C"})
    assert "Missing required fields: school" in page.text

    page = client.post(
        "/play/submit", data={"name": "Li", "school": "S", "className": "C"}
    )
    assert "排行榜" in page.text
    assert "<td>Li</td>" in page.text

    page = client.post("/play/reset")
    assert "开始游戏" in page.text


def test_answer_form_shows_feedback(client):
    client.get("/")
    client.post("/play/start")

    page = client.post("/play/answer", data={"option_index": "0"})

    assert "正确！" in page.text or "错误。正确答案是" in page.text


def test_leaderboard_from_start_page(client):
    client.get("/")

    page = client.post("/play/leaderboard")

    assert "排行榜" in page.text
    assert "关闭" in page.text


def test_invalid_form_action_shows_error(client):
    client.get("/")

    page = client.post("/play/proceed")

    assert page.status_code == 200
    assert "Cannot proceed while start" in page.text


def test_play_without_session_redirects_home(client):
    page = client.post("/play/start")

    assert page.status_code == 200
    assert "开始游戏" in page.text


def test_home_page_without_vocabulary(test_settings, scheduler):
    app = create_app(settings=test_settings, scheduler=scheduler)

    with TestClient(app) as client:
        response = client.get("/")

    assert response.status_code == 500


def test_static_css_is_served(client):
    assert client.get("/static/style.css").status_code == 200


def test_warnings_are_written_to_log_db(test_settings, vocab_file, scheduler):
    test_settings.LOG_TO_DB = True
    create_app(settings=test_settings, scheduler=scheduler)

    logging.getLogger("vocabquiz.tests").warning("score file locked")

    conn = sqlite3.connect(f"{test_settings.DB_DIR}/{test_settings.DB_FILE}")
    rows = conn.execute("SELECT level, logger, message FROM logs").fetchall()
    (timestamp,) = conn.execute("SELECT timestamp FROM logs").fetchone()
    conn.close()
    assert rows == [("WARNING", "vocabquiz.tests", "score file locked")]
    assert timestamp.startswith(str(date.today()))
