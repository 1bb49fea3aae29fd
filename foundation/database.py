from sqlmodel import create_engine

from foundation.config import get_database_url, sql_echo_enabled

DATABASE_URL = get_database_url()

engine = create_engine(DATABASE_URL, echo=sql_echo_enabled(), pool_pre_ping=True)
