# server/models/user.py

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from . import Base


# -------------------------------
# User Model
# -------------------------------

class User(Base):
    """
    Database model for registered trainers.
    Stores the login email, display name and bcrypt password hash,
    plus the set of Pokémon the user has caught.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    username = Column(String, nullable=False)
    password = Column(String, nullable=False)

    pokemons = relationship(
        "Pokemon",
        secondary="caught_pokemons",
        back_populates="caught_by_users",
        order_by="Pokemon.id",
    )
