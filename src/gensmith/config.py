"""Configuration management for gensmith."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel

from .placeholders import DEFAULT_PLACEHOLDER_PATTERN

load_dotenv()


class Settings(BaseModel):
    """Application settings."""

    # Directory generated files are written to
    output_dir: Path = Path(os.getenv("GENSMITH_OUTPUT_DIR", "."))

    # Capitalization rule for _Name_ placeholders ('title' or 'keep')
    case_rule: str = os.getenv("GENSMITH_CASE_RULE", "title")

    # Regular expression finding placeholder runs inside identifiers
    placeholder_pattern: str = os.getenv("GENSMITH_PLACEHOLDER_PATTERN", DEFAULT_PLACEHOLDER_PATTERN)

    # File name suffix kept last when naming generated test modules
    test_suffix: str = os.getenv("GENSMITH_TEST_SUFFIX", "_test")

    # Logging
    log_level: str = os.getenv("GENSMITH_LOG_LEVEL", "WARNING")

    # Render templates without writing any file
    dry_run: bool = os.getenv("GENSMITH_DRY_RUN", "false").lower() == "true"


settings = Settings()
