"""
Application configuration
"""

import os


class Settings:
    """Application settings"""

    def __init__(self):
        # ScreenshotOne credentials and endpoint
        self.SCREENSHOTONE_ACCESS_KEY: str = os.getenv("SCREENSHOTONE_ACCESS_KEY", "")
        self.SCREENSHOTONE_API_URL: str = os.getenv(
            "SCREENSHOTONE_API_URL", "https://api.screenshotone.com"
        ).rstrip("/")
        # Videos and full-page renders can take a while on the remote side
        self.SCREENSHOTONE_TIMEOUT: float = float(os.getenv("SCREENSHOTONE_TIMEOUT", "60"))

        # Rate limiting
        self.RATE_LIMIT_PER_MINUTE: int = int(os.getenv("RATE_LIMIT_PER_MINUTE", "30"))

        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
