"""Domain layer (pure logic).

- Keep contest rules and calculations here: daily selection, scoring,
  lifelines, submission sanitising and leaderboard ranking.
- Avoid I/O: no DB sessions, no HTTP/FastAPI, no network clients.
- Prefer deterministic functions (time/random passed in as arguments if needed).
"""
