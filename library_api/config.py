import os
from datetime import timedelta


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "super-secret-key")

    # sqlite for local runs; postgresql:// or mssql+pyodbc:// URIs work as well
    SQLALCHEMY_DATABASE_URI = os.getenv("SQLALCHEMY_DATABASE_URI", "sqlite:///library.db")

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "jwt-super-secret")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.getenv("JWT_EXPIRES_HOURS", "72")))

    API_PREFIX = os.getenv("API_PREFIX", "/api")

    ANALYTICS_TOP_N = int(os.getenv("ANALYTICS_TOP_N", "10"))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # migrations are the long-term path; create_all keeps a fresh checkout usable
    AUTO_CREATE_TABLES = os.getenv("AUTO_CREATE_TABLES", "1") == "1"
