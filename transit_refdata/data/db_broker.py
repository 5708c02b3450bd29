from transit_refdata.config.config_main import db_config

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from contextlib import contextmanager


class ConnectionBroker:

    _engine = None
    _SessionLocal = None

    @staticmethod
    def get_engine():
        """Get or create SQLAlchemy engine."""
        if ConnectionBroker._engine is None:
            ConnectionBroker._engine = create_engine(
                db_config.url,
                pool_pre_ping=True,  # Verify connections before using
                echo=db_config.echo
            )
        return ConnectionBroker._engine

    @staticmethod
    def get_session_factory(engine=None):
        """Get or create SQLAlchemy session factory."""
        if engine is not None:
            return sessionmaker(autocommit=False, autoflush=False, bind=engine)
        if ConnectionBroker._SessionLocal is None:
            ConnectionBroker._SessionLocal = sessionmaker(
                autocommit=False,
                autoflush=False,
                bind=ConnectionBroker.get_engine()
            )
        return ConnectionBroker._SessionLocal

    @staticmethod
    @contextmanager
    def get_session(engine=None):
        """
        Get a SQLAlchemy session with automatic cleanup.

        Usage:
            with ConnectionBroker.get_session() as session:
                session.query(Model).all()
        """
        SessionLocal = ConnectionBroker.get_session_factory(engine)
        session = SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
