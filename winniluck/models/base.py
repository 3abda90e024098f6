from sqlalchemy.orm import DeclarativeBase
from winniluck.db.metadata import metadata_obj


class Base(DeclarativeBase):
    metadata = metadata_obj
