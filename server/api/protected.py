# server/api/protected.py

import logging
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from api.auth import get_current_user_id
from api.pokemon import PokemonRequest
from core import config
from core.crud import get_or_create_pokemon, get_user, link_caught, list_caught, release_pokemon
from database import get_db
from models.user import User


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/protected", dependencies=[Depends(get_current_user_id)])


def get_current_user(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolves the token subject to a stored user. A token for a user that
    does not exist is treated like an invalid token.
    """
    user = get_user(db, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


@router.post("/catch")
def catch(req: PokemonRequest, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    pokemon = get_or_create_pokemon(db, name=req.name, type=req.type, image=req.image)
    pokemon = link_caught(db, user.id, pokemon)
    logger.info("User %s caught %r", user.id, pokemon.name)
    return {"message": "Pokemon caught", "data": pokemon.to_dict()}


@router.delete("/release/{pokemon_id}")
def release(pokemon_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    if config.RELEASE_REQUIRES_OWNERSHIP:
        if not release_pokemon(db, pokemon_id, user_id=user.id):
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={"message": "Pokemon not caught by user"}
            )
    else:
        # Any authenticated user may release any id, owned or not.
        release_pokemon(db, pokemon_id)

    logger.info("User %s released Pokemon %s", user.id, pokemon_id)
    return {"message": "Pokemon released"}


@router.get("/caught")
def caught(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"data": [pokemon.to_dict() for pokemon in list_caught(db, user.id)]}
