# server/core/config.py

import os
from dotenv import load_dotenv


load_dotenv()


def _as_bool(value: str | None) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


# -------------------------------
# Auth
# -------------------------------

SECRET_KEY = os.getenv("JWT_SECRET_KEY")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "10"))

# Off by default: any authenticated user may release any Pokémon by id.
RELEASE_REQUIRES_OWNERSHIP = _as_bool(os.getenv("RELEASE_REQUIRES_OWNERSHIP"))


# -------------------------------
# Storage & external services
# -------------------------------

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./pokemon.db")

POKEAPI_BASE_URL = os.getenv("POKEAPI_BASE_URL", "https://pokeapi.co/api/v2").rstrip("/")
POKEAPI_TIMEOUT = float(os.getenv("POKEAPI_TIMEOUT", "10"))


# -------------------------------
# Server
# -------------------------------

ALLOWED_ORIGINS = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
