"""ansi_stream FastAPI server: ANSI to styled chunks / HTML over HTTP."""

from __future__ import annotations

import hashlib
import logging
import secrets
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Literal, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from ansi_stream import __version__
from ansi_stream.html import render
from ansi_stream.parser import Parser, StyledText
from ansi_stream.settings import Settings, load_settings
from ansi_stream.tokenizer import Tokenizer

logger = logging.getLogger(__name__)

OutputFormat = Literal["json", "html"]


class ParseRequest(BaseModel):
    text: str
    format: OutputFormat = "json"


class TokensRequest(BaseModel):
    text: str


class CreateSessionRequest(BaseModel):
    format: OutputFormat = "json"


class PushRequest(BaseModel):
    text: str


def format_chunks(chunks: list[StyledText], fmt: OutputFormat) -> list[Any]:
    if fmt == "html":
        return [render(chunk) for chunk in chunks]
    return [chunk.to_dict() for chunk in chunks]


class _RateLimiter:
    """Simple in-memory sliding-window rate limiter."""

    def __init__(self, max_per_sec: int = 20, clock: Callable[[], float] = time.monotonic):
        self._max = max_per_sec
        self._clock = clock
        self._timestamps: list[float] = []

    def check(self) -> None:
        now = self._clock()
        self._timestamps = [t for t in self._timestamps if now - t < 1.0]
        if len(self._timestamps) >= self._max:
            raise HTTPException(status_code=429, detail="Rate limit exceeded")
        self._timestamps.append(now)


@dataclass
class Session:
    format: OutputFormat
    last_used: float
    parser: Parser = field(default_factory=Parser)


class SessionStore:
    """Streaming sessions, each owning one Parser.

    Idle sessions expire after *ttl* seconds. Parser.push never awaits, so the
    event loop already serializes calls into a single session.
    """

    def __init__(self, max_sessions: int, ttl: float, clock: Callable[[], float] = time.monotonic):
        self._max = max_sessions
        self._ttl = ttl
        self._clock = clock
        self._sessions: dict[str, Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def expire(self) -> None:
        now = self._clock()
        stale = [sid for sid, s in self._sessions.items() if now - s.last_used >= self._ttl]
        for sid in stale:
            del self._sessions[sid]
            logger.info("Session %s expired", sid)

    def create(self, fmt: OutputFormat) -> str:
        self.expire()
        if len(self._sessions) >= self._max:
            raise HTTPException(status_code=429, detail="Too many sessions")
        sid = secrets.token_urlsafe(12)
        self._sessions[sid] = Session(format=fmt, last_used=self._clock())
        logger.info("Session %s created (%s)", sid, fmt)
        return sid

    def get(self, sid: str) -> Session:
        self.expire()
        session = self._sessions.get(sid)
        if session is None:
            raise HTTPException(status_code=404, detail="Unknown session")
        session.last_used = self._clock()
        return session

    def delete(self, sid: str) -> None:
        if self._sessions.pop(sid, None) is None:
            raise HTTPException(status_code=404, detail="Unknown session")
        logger.info("Session %s closed", sid)


def create_app(settings: Optional[Settings] = None, clock: Callable[[], float] = time.monotonic) -> FastAPI:
    settings = settings or load_settings()
    app = FastAPI(title="ansi_stream", version=__version__)
    security = HTTPBearer(auto_error=False)
    sessions = SessionStore(settings.max_sessions, settings.session_ttl, clock=clock)
    push_limiter = _RateLimiter(max_per_sec=settings.rate_limit, clock=clock)
    app.state.settings = settings
    app.state.sessions = sessions

    def _verify(creds: Optional[HTTPAuthorizationCredentials] = Depends(security)) -> None:
        if not settings.auth_enabled:
            return
        if creds is None or not secrets.compare_digest(creds.credentials, settings.token):
            raise HTTPException(status_code=401, detail="Invalid token")

    def _check_size(text: str) -> None:
        if len(text) > settings.max_input:
            raise HTTPException(
                status_code=413,
                detail=f"Text exceeds {settings.max_input} characters",
            )

    @app.get("/health")
    async def health():
        return {"status": "ok", "sessions": len(sessions)}

    @app.post("/parse")
    async def parse(body: ParseRequest, _: None = Depends(_verify)):
        _check_size(body.text)
        chunks = Parser().push(body.text)
        return {
            "chunks": format_chunks(chunks, body.format),
            "hash": hashlib.sha256(body.text.encode()).hexdigest()[:16],
        }

    @app.post("/tokens")
    async def tokens(body: TokensRequest, _: None = Depends(_verify)):
        _check_size(body.text)
        tokenizer = Tokenizer()
        return {
            "tokens": [token.to_dict() for token in tokenizer.push(body.text)],
            "pending": tokenizer.pending,
        }

    @app.post("/sessions")
    async def create_session(body: CreateSessionRequest, _: None = Depends(_verify)):
        return {"id": sessions.create(body.format)}

    @app.post("/sessions/{sid}/push")
    async def push_session(sid: str, body: PushRequest, _: None = Depends(_verify)):
        push_limiter.check()
        _check_size(body.text)
        session = sessions.get(sid)
        chunks = session.parser.push(body.text)
        if len(session.parser.pending) > settings.max_input:
            # An unterminated sequence must not grow across requests.
            session.parser.reset()
            logger.info("Session %s reset: pending sequence too long", sid)
            raise HTTPException(
                status_code=413,
                detail=f"Unterminated sequence exceeds {settings.max_input} characters",
            )
        return {"chunks": format_chunks(chunks, session.format)}

    @app.post("/sessions/{sid}/reset")
    async def reset_session(sid: str, _: None = Depends(_verify)):
        sessions.get(sid).parser.reset()
        return {"ok": True}

    @app.delete("/sessions/{sid}")
    async def delete_session(sid: str, _: None = Depends(_verify)):
        sessions.delete(sid)
        return {"ok": True}

    return app


app = create_app()
