import os
from dotenv import load_dotenv

load_dotenv()


def _instances(raw):
    # "" is the global settings instance and is always present
    ids = [""]
    for item in (raw or "").split(","):
        item = item.strip()
        if item and item not in ids:
            ids.append(item)
    return ids


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "dev-jwt-secret")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Editor behaviour
    AUTOSAVE_DEBOUNCE_SECONDS = float(os.getenv("AUTOSAVE_DEBOUNCE_SECONDS", "0.5"))
    AUTOSAVE_SAVED_DISPLAY_SECONDS = float(os.getenv("AUTOSAVE_SAVED_DISPLAY_SECONDS", "2.0"))
    MAX_EMBED_DEPTH = int(os.getenv("MAX_EMBED_DEPTH", "1"))
    AUTOCOMPLETE_MAX_RESULTS = 50
    BLOCK_ENCODING = os.getenv("BLOCK_ENCODING", "attributes")

    # Block types and settings pages
    BLOCK_PACKAGES = ["blockforge.blocks"]
    SETTINGS_INSTANCES = _instances(os.getenv("SETTINGS_INSTANCES"))


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv("DEV_DATABASE_URI", "sqlite:///blockforge-dev.db")


class ProductionConfig(BaseConfig):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI")


class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    JWT_SECRET_KEY = "testing-jwt-secret-with-enough-length"
    SETTINGS_INSTANCES = ["", "de_DE"]


config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
