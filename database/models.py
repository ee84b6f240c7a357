"""SQLAlchemy database models."""

from sqlalchemy import (
    Column, Integer, String, DateTime,
    Boolean, Text, JSON, ForeignKey, Index
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class User(Base):
    """Owner of one or more agents."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), unique=True, nullable=False, index=True)

    # Timestamps
    created_at = Column(DateTime, default=func.now(), nullable=False)

    # Relationships
    agents = relationship("AgentRecord", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username})>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class AgentRecord(Base):
    """Persisted agent configuration."""
    __tablename__ = "agents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True)

    name = Column(String(255), nullable=False)
    base_model = Column(String(255), nullable=False)
    system_prompt = Column(Text, nullable=False)
    plugins = Column(JSON, nullable=False, default=list)  # Plugin ids or {"id", "enabled"} dicts

    # Timestamps
    created_at = Column(DateTime, default=func.now(), nullable=False)

    # Relationships
    user = relationship("User", back_populates="agents")
    messages = relationship("ChatMessage", back_populates="agent", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<AgentRecord(id={self.id}, name={self.name})>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "base_model": self.base_model,
            "system_prompt": self.system_prompt,
            "plugins": self.plugins or [],
            "user_id": self.user_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class ChatMessage(Base):
    """One message of an agent conversation."""
    __tablename__ = "chat_messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    agent_id = Column(Integer, ForeignKey("agents.id", ondelete="CASCADE"), nullable=False)

    role = Column(String(20), nullable=False)  # "user" or "assistant"
    content = Column(Text, nullable=False)

    # Provenance of assistant answers
    mcp_data_used = Column(Boolean, default=False, nullable=False)
    sources = Column(JSON, nullable=True)  # List of {"plugin_id", "fetched_at"}

    timestamp = Column(DateTime, default=func.now(), nullable=False)

    # Relationship
    agent = relationship("AgentRecord", back_populates="messages")

    __table_args__ = (
        Index('idx_agent_timestamp', 'agent_id', 'timestamp'),
    )

    def __repr__(self):
        return f"<ChatMessage(agent_id={self.agent_id}, role={self.role})>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "agent_id": self.agent_id,
            "role": self.role,
            "content": self.content,
            "mcp_data_used": self.mcp_data_used,
            "sources": self.sources or [],
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }
