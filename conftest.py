import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def log_records():
    """Capture all log output, as a list of loguru records."""
    records = []
    logger.remove()
    logger.add(lambda msg: records.append(msg.record), level="DEBUG")
    yield records
    logger.remove()


@pytest.fixture
def log_messages(log_records):
    """Return a function giving the messages logged so far, optionally by level."""

    def messages(level: str | None = None) -> list[str]:
        return [
            record["message"]
            for record in log_records
            if level is None or record["level"].name == level
        ]

    return messages
