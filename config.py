import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key")
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///claimflow.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    WTF_CSRF_ENABLED = False
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    CURRENCY_SYMBOL = os.environ.get("CURRENCY_SYMBOL", "₹")
    GROQ_API_KEY = os.environ.get("GROQ_API_KEY")
    GROQ_API_URL = os.environ.get("GROQ_API_URL", "https://api.groq.com/openai/v1/chat/completions")
    GROQ_MODEL = os.environ.get("GROQ_MODEL", "llama-3.3-70b-versatile")
    INSIGHTS_TEMPERATURE = float(os.environ.get("INSIGHTS_TEMPERATURE", 0.7))
    INSIGHTS_MAX_TOKENS = int(os.environ.get("INSIGHTS_MAX_TOKENS", 800))
    INSIGHTS_TIMEOUT = int(os.environ.get("INSIGHTS_TIMEOUT", 30))


class DevelopmentConfig(Config):
    DEBUG = True


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    GROQ_API_KEY = None
    LOG_LEVEL = "WARNING"


class ProductionConfig(Config):
    DEBUG = False


config_by_name = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}
