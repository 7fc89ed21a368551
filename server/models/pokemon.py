# server/models/pokemon.py

from sqlalchemy import Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import relationship
from . import Base


caught_pokemons = Table(
    "caught_pokemons",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("pokemon_id", Integer, ForeignKey("pokemons.id", ondelete="CASCADE"), primary_key=True),
)


class Pokemon(Base):
    __tablename__ = "pokemons"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, index=True, nullable=False)
    type = Column(String, nullable=False)
    image = Column(String, nullable=False)
    # Most recent catcher; null once released.
    caught_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    caught_by_users = relationship(
        "User",
        secondary=caught_pokemons,
        back_populates="pokemons",
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "image": self.image,
            "caughtById": self.caught_by_id,
        }
