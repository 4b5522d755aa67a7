# hostel_api/infrastructure/database/base_model.py

from sqlalchemy import BigInteger, Integer
from sqlalchemy.orm import DeclarativeBase

# SQLite só faz autoincrement em INTEGER PRIMARY KEY
PkType = BigInteger().with_variant(Integer, "sqlite")


class BaseModel(DeclarativeBase):
    pass
