"""Database query manager - handles all database operations."""

from functools import lru_cache
from typing import Any, Dict, List, Optional
from contextlib import contextmanager

from sqlalchemy import create_engine, asc
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.exc import SQLAlchemyError

from database.models import Base, User, AgentRecord, ChatMessage
from config.settings import settings
from utils.logger import logger

AGENT_FIELDS = ("name", "base_model", "system_prompt", "plugins", "user_id")


class DatabaseManager:
    """Manages database connections and operations."""

    def __init__(self, db_url: Optional[str] = None):
        """Initialize database connection."""
        self.db_url = db_url or settings.DATABASE_URL

        engine_kwargs: Dict[str, Any] = {"echo": settings.DEBUG}
        if self.db_url.startswith("sqlite"):
            # SQLite needs check_same_thread=False for multi-threaded access
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if ":memory:" in self.db_url or self.db_url == "sqlite://":
                # One shared connection, otherwise each thread sees an empty database
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs["pool_pre_ping"] = True

        self.engine = create_engine(self.db_url, **engine_kwargs)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_tables(self):
        """Create all database tables."""
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables created successfully")

    def drop_tables(self):
        """Drop all database tables (use with caution!)."""
        Base.metadata.drop_all(bind=self.engine)
        logger.warning("All database tables dropped")

    @contextmanager
    def get_session(self):
        """Context manager for database sessions."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Database error: {e}")
            raise
        finally:
            session.close()

    # ==================== User Operations ====================

    def get_user(self, user_id: int) -> Optional[User]:
        """Get user by id."""
        with self.get_session() as session:
            user = session.get(User, user_id)
            if user:
                session.expunge(user)
            return user

    def get_user_by_username(self, username: str) -> Optional[User]:
        """Get user by username."""
        with self.get_session() as session:
            user = session.query(User).filter(User.username == username).first()
            if user:
                session.expunge(user)
            return user

    def create_user(self, username: str) -> User:
        """Create a new user."""
        with self.get_session() as session:
            user = User(username=username)
            session.add(user)
            session.commit()
            session.refresh(user)
            session.expunge(user)
            logger.info(f"Created new user: {username}")
            return user

    # ==================== Agent Operations ====================

    def get_agent(self, agent_id: int) -> Optional[AgentRecord]:
        """Get agent by id."""
        with self.get_session() as session:
            agent = session.get(AgentRecord, agent_id)
            if agent:
                session.expunge(agent)
            return agent

    def get_all_agents(self) -> List[AgentRecord]:
        """Get all agents ordered by id."""
        with self.get_session() as session:
            agents = session.query(AgentRecord).order_by(asc(AgentRecord.id)).all()
            for agent in agents:
                session.expunge(agent)
            return agents

    def create_agent(
        self,
        name: str,
        base_model: str,
        system_prompt: str,
        plugins: Optional[List[Any]] = None,
        user_id: Optional[int] = None,
    ) -> AgentRecord:
        """Create a new agent."""
        with self.get_session() as session:
            agent = AgentRecord(
                name=name,
                base_model=base_model,
                system_prompt=system_prompt,
                plugins=list(plugins or []),
                user_id=user_id,
            )
            session.add(agent)
            session.commit()
            session.refresh(agent)
            session.expunge(agent)
            logger.info(f"Created agent {agent.id}: {name}")
            return agent

    def update_agent(self, agent_id: int, **updates) -> Optional[AgentRecord]:
        """
        Update agent fields.

        Only known fields with a non-empty value are applied; returns None
        if the agent does not exist.
        """
        with self.get_session() as session:
            agent = session.get(AgentRecord, agent_id)
            if not agent:
                return None

            for key, value in updates.items():
                if key in AGENT_FIELDS and value:
                    setattr(agent, key, list(value) if key == "plugins" else value)

            session.commit()
            session.refresh(agent)
            session.expunge(agent)
            return agent

    def delete_agent(self, agent_id: int) -> bool:
        """Delete an agent and its messages."""
        with self.get_session() as session:
            agent = session.get(AgentRecord, agent_id)
            if not agent:
                return False
            session.delete(agent)
            session.commit()
            return True

    # ==================== Chat Messages ====================

    def get_chat_message(self, message_id: int) -> Optional[ChatMessage]:
        """Get chat message by id."""
        with self.get_session() as session:
            message = session.get(ChatMessage, message_id)
            if message:
                session.expunge(message)
            return message

    def get_chat_messages_by_agent(self, agent_id: int) -> List[ChatMessage]:
        """Get all messages for an agent, oldest first."""
        with self.get_session() as session:
            messages = (
                session.query(ChatMessage)
                .filter(ChatMessage.agent_id == agent_id)
                .order_by(asc(ChatMessage.timestamp), asc(ChatMessage.id))
                .all()
            )
            for message in messages:
                session.expunge(message)
            return messages

    def create_chat_message(
        self,
        agent_id: int,
        role: str,
        content: str,
        mcp_data_used: bool = False,
        sources: Optional[List[Dict[str, Any]]] = None,
    ) -> ChatMessage:
        """Store one chat message."""
        with self.get_session() as session:
            message = ChatMessage(
                agent_id=agent_id,
                role=role,
                content=content,
                mcp_data_used=mcp_data_used,
                sources=sources,
            )
            session.add(message)
            session.commit()
            session.refresh(message)
            session.expunge(message)
            return message

    # ==================== Seeding ====================

    def seed_default_data(self) -> Optional[AgentRecord]:
        """
        Create the demo user and default agent on an empty database.

        Returns:
            The created agent, or None if users already existed
        """
        with self.get_session() as session:
            if session.query(User).first() is not None:
                logger.debug("Database already seeded")
                return None

        user = self.create_user(settings.DEFAULT_USERNAME)
        agent = self.create_agent(
            name=settings.DEFAULT_AGENT_NAME,
            base_model=settings.PRIMARY_LLM_MODEL,
            system_prompt=settings.DEFAULT_SYSTEM_PROMPT,
            plugins=list(settings.DEFAULT_PLUGINS),
            user_id=user.id,
        )
        logger.info(f"Seeded default user '{user.username}' and agent '{agent.name}'")
        return agent


@lru_cache()
def get_db_manager() -> DatabaseManager:
    """Get the process-wide database manager."""
    return DatabaseManager()
