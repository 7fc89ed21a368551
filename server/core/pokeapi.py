# server/core/pokeapi.py

import logging
import requests
from requests.utils import quote
from core.config import POKEAPI_BASE_URL, POKEAPI_TIMEOUT


logger = logging.getLogger(__name__)

# Shared connection pool for every outbound PokeAPI request.
session = requests.Session()


class PokemonLookupError(Exception):
    """The PokeAPI lookup failed or the Pokémon does not exist."""


def fetch_pokemon(name: str) -> dict:
    """
    Fetches a Pokémon by name from PokeAPI and returns the decoded JSON.
    Every kind of failure (network, non-2xx status, bad body) is reported
    as PokemonLookupError.
    """
    url = f"{POKEAPI_BASE_URL}/pokemon/{quote(name, safe='')}"
    try:
        response = session.get(url, timeout=POKEAPI_TIMEOUT)
        response.raise_for_status()
        return response.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning("PokeAPI lookup for %r failed: %s", name, e)
        raise PokemonLookupError(name) from e


def close_session():
    session.close()
