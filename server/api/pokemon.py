# server/api/pokemon.py

import logging
from pydantic import BaseModel
from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from core.crud import (
    RecordNotFound,
    UniqueViolation,
    create_pokemon,
    delete_pokemon,
    list_pokemons,
    update_pokemon,
)
from core.pokeapi import PokemonLookupError, fetch_pokemon
from database import get_db


logger = logging.getLogger(__name__)

router = APIRouter()


class PokemonRequest(BaseModel):
    """
    Request schema for a catalog entry: creation and catching.
    """
    name: str
    type: str
    image: str


class PokemonUpdateRequest(PokemonRequest):
    id: int


# -------------------------------
# Catalog Endpoints
# -------------------------------

@router.post("/pokemon")
def create_record(req: PokemonRequest, db: Session = Depends(get_db)):
    try:
        pokemon = create_pokemon(db, name=req.name, type=req.type, image=req.image)
    except UniqueViolation:
        logger.warning("Pokemon %r already exists", req.name)
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"message": "Pokemon already exists"})
    except Exception:
        logger.exception("Failed to create Pokemon %r", req.name)
        return JSONResponse(status_code=500, content={"message": "An error occurred"})

    return {"message": f"{pokemon.name} created successfully"}


# Registered before /pokemon/{name} so "records" is not taken as a name.
@router.get("/pokemon/records")
def list_records(db: Session = Depends(get_db)):
    try:
        return [pokemon.to_dict() for pokemon in list_pokemons(db)]
    except Exception:
        logger.exception("Failed to fetch Pokemon records")
        return JSONResponse(
            status_code=500,
            content={"message": "An error occurred while fetching Pokémon records"}
        )


@router.patch("/pokemon/update")
def update_record(req: PokemonUpdateRequest, db: Session = Depends(get_db)):
    try:
        pokemon = update_pokemon(db, req.id, name=req.name, type=req.type, image=req.image)
    except RecordNotFound:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"message": "Pokémon not found"})
    except UniqueViolation:
        logger.warning("Rename of Pokemon %s to %r collides", req.id, req.name)
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"message": "Pokemon already exists"})
    except Exception:
        logger.exception("Failed to update Pokemon %s", req.id)
        return JSONResponse(
            status_code=500,
            content={"message": "An error occurred while updating the Pokémon record"}
        )

    return {"message": f"{pokemon.name} updated successfully", "pokemon": pokemon.to_dict()}


@router.delete("/pokemon/delete")
def delete_record(pokemon_id: int = Body(..., embed=True, alias="id"), db: Session = Depends(get_db)):
    """
    Deletes a catalog entry by id. A missing id is reported the same way
    as any other failure.
    """
    try:
        delete_pokemon(db, pokemon_id)
    except RecordNotFound:
        logger.warning("Pokemon %s does not exist", pokemon_id)
        return JSONResponse(status_code=500, content={"message": "Failed to delete Pokemon"})
    except Exception:
        logger.exception("Failed to delete Pokemon %s", pokemon_id)
        return JSONResponse(status_code=500, content={"message": "Failed to delete Pokemon"})

    return {"message": f"Pokemon with ID {pokemon_id} deleted successfully"}


# -------------------------------
# PokeAPI Passthrough
# -------------------------------

@router.get("/pokemon/{name}")
def lookup(name: str):
    try:
        data = fetch_pokemon(name)
    except PokemonLookupError:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"message": "Pokemon not found"})
    return {"data": data}
