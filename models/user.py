from sqlalchemy import Column, Integer, String
from core.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    username = Column(String, unique=True, index=True, nullable=False)

    # Stored as given; no hashing at this layer
    password = Column(String, nullable=False)

    def __repr__(self):
        return f"<User {self.username}>"
