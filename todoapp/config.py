import os

SECRET_KEY = os.environ.get("SECRET_KEY", "CHANGE_ME_DEV_SECRET_KEY")
ALGORITHM = os.environ.get("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = float(os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", 60))
SESSION_COOKIE_NAME = os.environ.get("SESSION_COOKIE_NAME", "session_token")

# Default to local SQLite for dev/tests; override via env in Docker/Prod
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./todo.db")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# (provider name, client id env var, client secret env var)
_SOCIAL_PROVIDER_ENV = (
    ("google", "GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_SECRET"),
    ("github", "GITHUB_CLIENT_ID", "GITHUB_CLIENT_SECRET"),
)


def build_social_providers(environ=None) -> dict:
    """Return {name: {"client_id", "client_secret"}} for every provider whose
    id and secret are both set. Missing or blank credentials disable it.
    """
    environ = os.environ if environ is None else environ
    providers = {}
    for name, id_var, secret_var in _SOCIAL_PROVIDER_ENV:
        client_id = (environ.get(id_var) or "").strip()
        client_secret = (environ.get(secret_var) or "").strip()
        if client_id and client_secret:
            providers[name] = {"client_id": client_id, "client_secret": client_secret}
    return providers


SOCIAL_PROVIDERS = build_social_providers()
