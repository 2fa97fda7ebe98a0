"""
Configuration for Peptide Dose Calculator
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Application configuration"""

    # Database for saved calculations - DATABASE_URL from environment if available
    DATABASE_URL = os.getenv("DATABASE_URL")

    # If no DATABASE_URL is set, fall back to SQLite for local development
    if not DATABASE_URL:
        DATABASE_URL = "sqlite:///peptide_tracker.db"

    # Syringe the calculators assume when a request does not name one
    DEFAULT_SYRINGE_TYPE = os.getenv("DEFAULT_SYRINGE_TYPE", "u100")

    # Application settings
    DEBUG = os.getenv("DEBUG", "False").lower() == "true"
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    @classmethod
    def get_database_url(cls, use_sqlite: bool = False) -> str:
        """Get database URL, optionally forcing SQLite"""
        if use_sqlite:
            return "sqlite:///peptide_tracker.db"
        return cls.DATABASE_URL

    @classmethod
    def print_config(cls):
        """Print current configuration"""
        print("\n" + "="*60)
        print("PEPTIDE DOSE CALCULATOR CONFIGURATION")
        print("="*60)
        print(f"Database: {cls.DATABASE_URL.split('@')[-1]}")
        print(f"Default syringe: {cls.DEFAULT_SYRINGE_TYPE}")
        print(f"Debug mode: {cls.DEBUG}")
        print(f"Log level: {cls.LOG_LEVEL}")
        print("="*60 + "\n")


if __name__ == "__main__":
    Config.print_config()
