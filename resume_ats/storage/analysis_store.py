from __future__ import annotations

import json
import sqlite3
import uuid
from collections.abc import Iterator
from contextlib import closing, contextmanager
from datetime import datetime, timezone
from pathlib import Path

from resume_ats.schemas.analysis import AnalysisRecord
from resume_ats.schemas.optimized import OptimizationResult
from resume_ats.schemas.portfolio import Portfolio


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


class AnalysisStore:
    """SQLite persistence for portfolio snapshots, analyses and optimized resumes.

    Each analysis is written with a single INSERT once the pipeline has
    produced every metric and the recommendation set.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)

    @property
    def db_path(self) -> Path:
        return self._db_path

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        with closing(sqlite3.connect(self._db_path, timeout=5)) as conn:
            conn.row_factory = sqlite3.Row
            with conn:
                yield conn

    def init(self) -> None:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS portfolios (
                    user_id TEXT PRIMARY KEY,
                    payload_json TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS ats_analyses (
                    analysis_id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    resume_id TEXT,
                    created_at TEXT NOT NULL,
                    overall_score REAL NOT NULL,
                    cosine_similarity REAL NOT NULL,
                    keyword_match_percent REAL NOT NULL,
                    skill_overlap_percent REAL NOT NULL,
                    experience_relevance REAL NOT NULL,
                    payload_json TEXT NOT NULL
                )
                """
            )
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_ats_analyses_lookup
                ON ats_analyses (user_id, resume_id, created_at)
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS optimized_resumes (
                    optimized_resume_id TEXT PRIMARY KEY,
                    analysis_id TEXT,
                    user_id TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    ats_score REAL,
                    payload_json TEXT NOT NULL
                )
                """
            )

    def save_portfolio(self, user_id: str, portfolio: Portfolio) -> datetime:
        updated_at = _utc_now()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO portfolios (user_id, payload_json, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    payload_json = excluded.payload_json,
                    updated_at = excluded.updated_at
                """,
                (user_id, portfolio.model_dump_json(), updated_at.isoformat()),
            )
        return updated_at

    def get_portfolio(self, user_id: str) -> Portfolio | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT payload_json FROM portfolios WHERE user_id = ?",
                (user_id,),
            ).fetchone()
        if row is None:
            return None
        return Portfolio.model_validate_json(row["payload_json"])

    def save_analysis(self, record: AnalysisRecord) -> None:
        scores = record.scores
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO ats_analyses (
                    analysis_id, user_id, resume_id, created_at, overall_score, cosine_similarity,
                    keyword_match_percent, skill_overlap_percent, experience_relevance, payload_json
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    record.analysis_id,
                    record.user_id,
                    record.resume_id,
                    record.created_at.isoformat(),
                    scores.overall_score,
                    scores.cosine_similarity,
                    scores.keyword_match_percent,
                    scores.skill_overlap_percent,
                    scores.experience_relevance,
                    record.model_dump_json(),
                ),
            )

    def get_analysis(self, analysis_id: str) -> AnalysisRecord | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT payload_json FROM ats_analyses WHERE analysis_id = ?",
                (analysis_id,),
            ).fetchone()
        if row is None:
            return None
        return AnalysisRecord.model_validate_json(row["payload_json"])

    def latest_analysis(self, user_id: str, resume_id: str | None = None) -> AnalysisRecord | None:
        with self._connect() as conn:
            row = conn.execute(
                """
                SELECT payload_json FROM ats_analyses
                WHERE user_id = ? AND resume_id IS ?
                ORDER BY created_at DESC
                LIMIT 1
                """,
                (user_id, resume_id),
            ).fetchone()
        if row is None:
            return None
        return AnalysisRecord.model_validate_json(row["payload_json"])

    def save_optimized_resume(self, user_id: str, result: OptimizationResult) -> str:
        optimized_resume_id = result.optimized_resume_id or new_id()
        stored = result.model_copy(update={"optimized_resume_id": optimized_resume_id})
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO optimized_resumes (
                    optimized_resume_id, analysis_id, user_id, created_at, ats_score, payload_json
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    optimized_resume_id,
                    result.analysis_id,
                    user_id,
                    _utc_now().isoformat(),
                    result.ats_score,
                    stored.model_dump_json(),
                ),
            )
        return optimized_resume_id

    def get_optimized_resume(
        self, optimized_resume_id: str, user_id: str | None = None
    ) -> OptimizationResult | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT user_id, payload_json FROM optimized_resumes WHERE optimized_resume_id = ?",
                (optimized_resume_id,),
            ).fetchone()
        if row is None or (user_id is not None and row["user_id"] != user_id):
            return None
        return OptimizationResult.model_validate(json.loads(row["payload_json"]))

    def list_optimized_resumes(self, user_id: str, resume_id: str | None = None) -> list[OptimizationResult]:
        """Optimized resumes for a user, newest first; ``resume_id`` narrows to rewrites of that resume."""
        query = """
            SELECT o.payload_json FROM optimized_resumes o
            LEFT JOIN ats_analyses a ON a.analysis_id = o.analysis_id
            WHERE o.user_id = ?
        """
        params: list[str] = [user_id]
        if resume_id is not None:
            query += " AND a.resume_id = ?"
            params.append(resume_id)
        query += " ORDER BY o.created_at DESC, o.rowid DESC"
        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [OptimizationResult.model_validate(json.loads(row["payload_json"])) for row in rows]
