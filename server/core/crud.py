# server/core/crud.py

from sqlalchemy import update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.user import User
from models.pokemon import Pokemon, caught_pokemons


# -------------------------------
# Store Errors
# -------------------------------

class StoreError(Exception):
    """Base class for failures raised by the store helpers."""


class UniqueViolation(StoreError):
    """A write collided with a unique column (user email, Pokémon name)."""


class RecordNotFound(StoreError):
    """No row exists for the requested id."""


_UPSERT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def _commit(db: Session):
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise UniqueViolation(str(e.orig)) from e


def _insert_if_absent(db: Session, table, values: dict, conflict_columns: list[str]):
    """
    Issues a single INSERT that is a no-op when a row with the same
    conflict columns already exists.
    """
    insert = _UPSERT_INSERTS.get(db.get_bind().dialect.name)
    if insert is not None:
        stmt = insert(table).values(**values).on_conflict_do_nothing(index_elements=conflict_columns)
        db.execute(stmt)
        return

    # Dialects without ON CONFLICT: let the unique index decide inside a savepoint.
    try:
        with db.begin_nested():
            db.execute(table.insert().values(**values))
    except IntegrityError:
        pass


# -------------------------------
# Users
# -------------------------------

def create_user(db: Session, email: str, username: str, password_hash: str) -> User:
    user = User(email=email, username=username, password=password_hash)
    db.add(user)
    _commit(db)
    db.refresh(user)
    return user


def get_user(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


# -------------------------------
# Catalog
# -------------------------------

def create_pokemon(db: Session, name: str, type: str, image: str) -> Pokemon:
    pokemon = Pokemon(name=name, type=type, image=image)
    db.add(pokemon)
    _commit(db)
    db.refresh(pokemon)
    return pokemon


def list_pokemons(db: Session) -> list[Pokemon]:
    return db.query(Pokemon).order_by(Pokemon.id.asc()).all()


def update_pokemon(db: Session, pokemon_id: int, name: str, type: str, image: str) -> Pokemon:
    pokemon = db.get(Pokemon, pokemon_id)
    if pokemon is None:
        raise RecordNotFound(f"Pokemon {pokemon_id} does not exist")

    pokemon.name = name
    pokemon.type = type
    pokemon.image = image
    _commit(db)
    db.refresh(pokemon)
    return pokemon


def delete_pokemon(db: Session, pokemon_id: int):
    pokemon = db.get(Pokemon, pokemon_id)
    if pokemon is None:
        raise RecordNotFound(f"Pokemon {pokemon_id} does not exist")

    # caught links go with the row through the secondary relationship
    db.delete(pokemon)
    db.commit()


# -------------------------------
# Catch / Release
# -------------------------------

def get_or_create_pokemon(db: Session, name: str, type: str, image: str) -> Pokemon:
    """
    Returns the catalog row for `name`, inserting it first if it is missing.
    An existing row is reused as-is; its type and image are left untouched.
    """
    _insert_if_absent(
        db,
        Pokemon.__table__,
        {"name": name, "type": type, "image": image},
        ["name"],
    )
    return db.query(Pokemon).filter(Pokemon.name == name).one()


def link_caught(db: Session, user_id: int, pokemon: Pokemon) -> Pokemon:
    _insert_if_absent(
        db,
        caught_pokemons,
        {"user_id": user_id, "pokemon_id": pokemon.id},
        ["user_id", "pokemon_id"],
    )
    pokemon.caught_by_id = user_id
    _commit(db)
    db.refresh(pokemon)
    return pokemon


def release_pokemon(db: Session, pokemon_id: int, user_id: int | None = None) -> bool:
    """
    Clears the ownership of a Pokémon.

    Without `user_id` every link is dropped and `caught_by_id` is reset,
    whoever holds it; an unknown id is a silent no-op. With `user_id` only
    that user's link (and ownership, if theirs) is cleared.
    Returns whether any caught link was removed.
    """
    unlink = caught_pokemons.delete().where(caught_pokemons.c.pokemon_id == pokemon_id)
    disown = update(Pokemon).where(Pokemon.id == pokemon_id)
    if user_id is not None:
        unlink = unlink.where(caught_pokemons.c.user_id == user_id)
        disown = disown.where(Pokemon.caught_by_id == user_id)

    result = db.execute(unlink)
    db.execute(disown.values(caught_by_id=None))
    db.commit()
    return result.rowcount > 0


def list_caught(db: Session, user_id: int) -> list[Pokemon]:
    return (
        db.query(Pokemon)
        .join(caught_pokemons, caught_pokemons.c.pokemon_id == Pokemon.id)
        .filter(caught_pokemons.c.user_id == user_id)
        .order_by(Pokemon.id.asc())
        .all()
    )
