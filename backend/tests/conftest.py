"""Pytest fixtures: settings, canned provider payloads and fake HTTP sessions."""

from unittest.mock import MagicMock

import pytest
import requests

from app.config import Settings, get_settings
from app.search.clients import reddit
from app.search.schemas import ResultSource, SearchResult


@pytest.fixture(autouse=True)
def reset_reddit_token():
    reddit.reset_token()
    yield
    reddit.reset_token()


@pytest.fixture
def settings():
    return Settings(
        reddit_client_id="client-id",
        reddit_client_secret="client-secret",
        reddit_refresh_token="refresh-token",
        email_user="sender@example.com",
        email_pass="app-password",
        max_results_per_source=5,
        detail_fetch_workers=3,
    )


@pytest.fixture
def env_settings(monkeypatch):
    """Credentials via environment, for code paths that call get_settings()."""
    monkeypatch.setenv("REDDIT_CLIENT_ID", "client-id")
    monkeypatch.setenv("REDDIT_CLIENT_SECRET", "client-secret")
    monkeypatch.setenv("REDDIT_REFRESH_TOKEN", "refresh-token")
    monkeypatch.setenv("EMAIL_USER", "sender@example.com")
    monkeypatch.setenv("EMAIL_PASS", "app-password")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def make_response():
    """Build a requests.Response stand-in with a JSON body and status code."""

    def _make(json_data=None, status_code=200):
        response = MagicMock()
        response.status_code = status_code
        response.json.return_value = json_data if json_data is not None else {}
        if status_code >= 400:
            response.raise_for_status.side_effect = requests.exceptions.HTTPError(
                f"{status_code} Error", response=response
            )
        return response

    return _make


def se_question(question_id, title="Question", tags=None, owner=True):
    item = {
        "question_id": question_id,
        "title": title,
        "link": f"https://stackoverflow.com/questions/{question_id}/q",
        "tags": tags if tags is not None else ["python", "recursion"],
        "body": f"<p>Body of {question_id}</p>",
        "score": 10,
        "answer_count": 2,
        "is_answered": True,
    }
    if owner:
        item["owner"] = {"display_name": f"user{question_id}", "link": f"https://stackoverflow.com/users/{question_id}"}
    return item


@pytest.fixture
def se_questions():
    return {
        101: se_question(101, title="What is tail recursion?"),
        102: se_question(102, title="Recursion vs iteration in &quot;Python&quot;"),
        103: se_question(103, title="Recursive descent parser", tags=[]),
    }


@pytest.fixture
def stackexchange_session(make_response, se_questions):
    """Fake session answering /search, /questions/{id} and /questions/{id}/answers."""

    def _build(failing_ids=(), search_status=200, answers=None, malformed_ids=()):
        session = MagicMock()

        def fake_get(url, params=None, timeout=None):
            path = url.split("/2.3", 1)[-1]
            if path == "/search":
                items = [{"question_id": qid, "title": q["title"]} for qid, q in se_questions.items()]
                return make_response({"items": items, "quota_remaining": 299}, status_code=search_status)
            parts = path.strip("/").split("/")
            qid = int(parts[1])
            if qid in malformed_ids:
                return make_response([{"oops": 1}])
            if len(parts) == 3 and parts[2] == "answers":
                return make_response({"items": (answers or {}).get(qid, [])})
            if qid in failing_ids:
                return make_response({"error_id": 502, "error_name": "throttle_violation"}, status_code=502)
            return make_response({"items": [se_questions[qid]]})

        session.get.side_effect = fake_get
        return session

    return _build


@pytest.fixture
def reddit_post_data():
    return {
        "title": "ELI5: recursion",
        "subreddit": "explainlikeimfive",
        "author": "bob",
        "permalink": "/r/explainlikeimfive/comments/x1/eli5_recursion/",
        "selftext": "",
        "score": 42,
    }


@pytest.fixture
def reddit_session(make_response, reddit_post_data):
    def _build(search_status=200, token_payload=None):
        session = MagicMock()
        session.post.return_value = make_response(token_payload or {"access_token": "token-abc", "expires_in": 3600})
        session.get.return_value = make_response(
            {"data": {"children": [{"kind": "t3", "data": reddit_post_data}]}},
            status_code=search_status,
        )
        return session

    return _build


@pytest.fixture
def qa_result():
    return SearchResult(
        source=ResultSource.QA,
        title="How does recursion work?",
        url="https://stackoverflow.com/questions/101/how-does-recursion-work",
        author="Jane Doe",
        author_url="https://stackoverflow.com/users/1/jane-doe",
        community_label="python, recursion",
        tags=["python", "recursion"],
        question_id=101,
    )


@pytest.fixture
def social_result():
    return SearchResult(
        source=ResultSource.SOCIAL,
        title="ELI5: recursion",
        url="https://reddit.com/r/explainlikeimfive/comments/x1/eli5_recursion/",
        author="bob",
        community_label="explainlikeimfive",
    )
