from skillshub.services.auth import (
    Identity,
    hash_password,
    verify_password,
    generate_session_token,
    create_session,
    resolve_session,
    destroy_session,
    purge_expired_sessions,
    generate_otp,
    hash_otp,
)
from skillshub.services.matching import (
    ScoreMode,
    job_match_score,
    talent_match_score,
    match_score,
    rank_by_score,
    matching_skill_count,
)

__all__ = [
    "Identity",
    "hash_password",
    "verify_password",
    "generate_session_token",
    "create_session",
    "resolve_session",
    "destroy_session",
    "purge_expired_sessions",
    "generate_otp",
    "hash_otp",
    "ScoreMode",
    "job_match_score",
    "talent_match_score",
    "match_score",
    "rank_by_score",
    "matching_skill_count",
]
