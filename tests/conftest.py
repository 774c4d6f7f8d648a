"""Shared test fixtures for runfile."""

from pathlib import Path

import pytest


@pytest.fixture
def sample_runfile_content() -> str:
    """Return a Runfile with ungrouped and grouped commands."""
    return """\
# Say hello
hello name?:
  echo "Hello, ${name:-world}"

# -----------
# Build
# -----------

# Compile the project
b, build -r, --release --output=<file>:
  cargo build $release
  if [ -n "$OUTPUT" ]; then
    cp target/app "$OUTPUT"
  fi

t, test ...args:
  cargo test $args

# --- Deploy ---
deploy target:
  ./deploy.sh "$target"
"""


@pytest.fixture
def runfile_dir(tmp_path: Path, sample_runfile_content: str) -> Path:
    """A directory holding the sample Runfile."""
    (tmp_path / "Runfile").write_text(sample_runfile_content)
    return tmp_path
