"""Global pytest configuration."""

import os

# Settings for tests before any imports: in-memory store, no artificial latency
os.environ.pop("DATABASE_URL", None)
os.environ.setdefault("ANSWER_DELAY_MS", "0")
os.environ.setdefault("ANSWER_RNG_SEED", "42")
