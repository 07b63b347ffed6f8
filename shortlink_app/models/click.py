from sqlalchemy import Column, DateTime, Integer, String

from shortlink_app.database.connection import Base
from shortlink_app.timeutils import utc_now


class Click(Base):
    """
    One click event, appended once per successful resolution.

    `code` is deliberately not a foreign key: clicks outlive the liveness of
    their alias and the log is append-only.
    """
    __tablename__ = "clicks"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    code = Column(String(30), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, index=True)
    ip = Column(String(64), nullable=True)
    browser = Column(String(128), nullable=True)
    os = Column(String(128), nullable=True)
    device = Column(String(32), nullable=True)
    raw_ua = Column(String, nullable=True)
    referer = Column(String, nullable=True)
