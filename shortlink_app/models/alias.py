from sqlalchemy import Column, DateTime, Integer, String

from shortlink_app.database.connection import Base
from shortlink_app.timeutils import utc_now


class Alias(Base):
    """
    Alias record: a short code mapped to a target URL.

    Rows are written once at shorten time and never updated or deleted.
    Liveness is derived from `expires_at` at query time, never stored.
    """
    __tablename__ = "aliases"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    # unique=True makes the database the arbiter of code collisions
    code = Column(String(30), unique=True, nullable=False, index=True)
    target_url = Column(String, nullable=False)
    custom_alias = Column(String(30), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    expires_at = Column(DateTime(timezone=True), nullable=True)
