from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

MIN_RATING = 1
MAX_RATING = 5


@dataclass(frozen=True)
class ReviewPolicyConfig:
    edit_window_hours: float = float(os.getenv("REVIEW_EDIT_WINDOW_HOURS", "48"))

    @property
    def edit_window(self) -> timedelta:
        return timedelta(hours=self.edit_window_hours)


DEFAULT_REVIEW_POLICY = ReviewPolicyConfig()
