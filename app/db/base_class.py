# /app/db/base_class.py

from sqlalchemy.orm import declarative_base

# Every ORM model inherits from this Base so that Alembic and `create_all`
# see the complete schema.
Base = declarative_base()
