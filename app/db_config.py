"""Database URI and engine options for each deployment environment."""
import os

# Environment -> env vars checked in order for its database URL
DATABASE_URL_VARS = {
    "local": ("LOCAL_DATABASE_URL",),
    "sandbox": ("SANDBOX_DATABASE_URL",),
    "production": ("PRODUCTION_DATABASE_URL", "DATABASE_URL"),
}

ENVIRONMENT_ALIASES = {
    "development": "local",
    "dev": "local",
    "staging": "sandbox",
    "stage": "sandbox",
    "prod": "production",
}

DEFAULT_LOCAL_URL = "sqlite:///jobs.sqlite"


def resolve_environment(environment=None):
    """Canonical environment name; unknown values fall back to 'local'."""
    if environment is None:
        environment = os.environ.get("FLASK_ENV") or os.environ.get("ENVIRONMENT", "local")
    name = environment.strip().lower()
    name = ENVIRONMENT_ALIASES.get(name, name)
    return name if name in DATABASE_URL_VARS else "local"


def normalize_database_url(url):
    """Hosted providers still hand out postgres:// URLs; SQLAlchemy wants postgresql://."""
    if url and url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://"):]
    return url


def postgres_engine_options():
    """
    Engine options for the hosted PostgreSQL databases.

    The calendar issues short read queries and single-row writes, so a
    small pool is enough. Connections are pinged and recycled before the
    host's idle timeout closes them.
    """
    return {
        "pool_pre_ping": True,
        "pool_recycle": 280,
        "pool_size": 3,
        "max_overflow": 5,
        "connect_args": {
            "sslmode": os.environ.get("DATABASE_SSLMODE", "require"),
            "connect_timeout": 10,
            "application_name": "job_calendar",
        },
    }


def get_database_config(environment=None):
    """
    Database URI and engine options for an environment.

    Returns:
        tuple: (database_uri, engine_options or None)

    Raises:
        ValueError: If sandbox or production has no database URL configured
    """
    name = resolve_environment(environment)
    url_vars = DATABASE_URL_VARS[name]
    url = next((os.environ[var] for var in url_vars if os.environ.get(var)), None)

    if name == "local":
        return normalize_database_url(url or DEFAULT_LOCAL_URL), None
    if not url:
        raise ValueError(f"{' or '.join(url_vars)} must be set for the {name} environment")

    url = normalize_database_url(url)
    options = postgres_engine_options() if url.startswith("postgresql") else None
    return url, options


def configure_database(app, environment=None):
    """Set the SQLALCHEMY_* keys on the Flask app for the current environment."""
    database_uri, engine_options = get_database_config(environment)

    app.config["SQLALCHEMY_DATABASE_URI"] = database_uri
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config["SQLALCHEMY_ECHO"] = False

    if engine_options:
        app.config["SQLALCHEMY_ENGINE_OPTIONS"] = engine_options
