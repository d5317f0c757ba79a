import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

@dataclass
class Settings:
    # Application
    app_name: str = os.getenv("APP_NAME", "Library")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Server
    api_host: str = os.getenv("API_HOST", "127.0.0.1")
    api_port: int = int(os.getenv("API_PORT", "8000"))

    # Database
    database_file: str = os.getenv("LIBRARY_DB_FILE", "library.db")
    seed_file: str = os.getenv("SEED_FILE", "books.json")

    # Pagination
    page_size: int = int(os.getenv("PAGE_SIZE", "5"))


settings = Settings()
