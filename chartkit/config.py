"""
Chartkit Configuration

Loads defaults from environment variables. Components always accept their
parameters explicitly; these values are only used when a caller omits one.
"""

import os
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class Config:
    """Library defaults loaded from environment variables."""

    # Admission gate
    MAX_TOOLS: int = int(os.getenv("CHARTKIT_MAX_TOOLS", "3"))
    # Retry policy for AdmissionGate.acquire_with_retry (plain acquire never waits)
    ACQUIRE_ATTEMPTS: int = int(os.getenv("CHARTKIT_ACQUIRE_ATTEMPTS", "5"))
    ACQUIRE_WAIT_SECONDS: float = float(os.getenv("CHARTKIT_ACQUIRE_WAIT_SECONDS", "0.05"))

    # Graph building
    CONNECTIVITY: int = int(os.getenv("CHARTKIT_CONNECTIVITY", "4"))
    TELEPORT_COST: int = int(os.getenv("CHARTKIT_TELEPORT_COST", "30"))

    # Logging
    LOG_LEVEL: str = os.getenv("CHARTKIT_LOG_LEVEL", "INFO").upper()

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and raise errors on inconsistent values."""
        if cls.MAX_TOOLS < 1:
            raise ValueError("CHARTKIT_MAX_TOOLS must be at least 1")

        if cls.CONNECTIVITY not in (4, 8):
            raise ValueError(
                "CHARTKIT_CONNECTIVITY must be 4 (orthogonal) or 8 (orthogonal + diagonal)"
            )

        if cls.TELEPORT_COST < 0:
            raise ValueError("CHARTKIT_TELEPORT_COST cannot be negative")

        if cls.ACQUIRE_ATTEMPTS < 1:
            raise ValueError("CHARTKIT_ACQUIRE_ATTEMPTS must be at least 1")

        if cls.ACQUIRE_WAIT_SECONDS < 0:
            raise ValueError("CHARTKIT_ACQUIRE_WAIT_SECONDS cannot be negative")

        if cls.LOG_LEVEL not in LOG_LEVELS:
            raise ValueError(
                f"CHARTKIT_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {cls.LOG_LEVEL!r}"
            )

    @classmethod
    def display(cls) -> str:
        """Return a formatted string showing current configuration."""
        lines = [
            "Chartkit Configuration:",
            f"  Max Tools: {cls.MAX_TOOLS}",
            f"  Acquire Retry: {cls.ACQUIRE_ATTEMPTS} attempts, {cls.ACQUIRE_WAIT_SECONDS}s apart",
            f"  Connectivity: {cls.CONNECTIVITY}",
            f"  Teleport Cost: {cls.TELEPORT_COST}",
            f"  Log Level: {cls.LOG_LEVEL}",
        ]
        return "\n".join(lines)
