#!/usr/bin/env python3
"""
Database Setup Script

This script initializes the database and optionally seeds the default agent.

Usage:
    python scripts/setup_db.py          # Create tables
    python scripts/setup_db.py --reset  # Drop and recreate tables
    python scripts/setup_db.py --seed   # Add demo user and default agent
"""

import sys
import argparse
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from database.queries import get_db_manager
from database.models import User, AgentRecord, ChatMessage
from utils.logger import logger

db_manager = get_db_manager()


def create_tables():
    """Create all database tables."""
    logger.info("Creating database tables...")
    db_manager.create_tables()
    logger.info("Tables created successfully!")


def reset_database():
    """Drop and recreate all tables."""
    logger.warning("Resetting database - all data will be lost!")

    confirm = input("Are you sure? Type 'yes' to confirm: ")
    if confirm.lower() != 'yes':
        logger.info("Reset cancelled")
        return

    logger.info("Dropping all tables...")
    db_manager.drop_tables()

    logger.info("Recreating tables...")
    db_manager.create_tables()

    logger.info("Database reset complete!")


def seed_default_data():
    """Add the demo user and default agent."""
    logger.info("Seeding default data...")
    agent = db_manager.seed_default_data()
    if agent:
        logger.info(f"Created agent {agent.id}: {agent.name} (plugins: {agent.plugins})")
    else:
        logger.info("Database already has users; nothing seeded")


def show_stats():
    """Show database statistics."""
    with db_manager.get_session() as session:
        users = session.query(User).count()
        agents = session.query(AgentRecord).count()
        messages = session.query(ChatMessage).count()

        print("\n=== Database Statistics ===")
        print(f"Users:    {users}")
        print(f"Agents:   {agents}")
        print(f"Messages: {messages}")
        print("===========================\n")


def main():
    parser = argparse.ArgumentParser(description="Database setup script")
    parser.add_argument("--reset", action="store_true", help="Drop and recreate all tables")
    parser.add_argument("--seed", action="store_true", help="Add demo user and default agent")
    parser.add_argument("--stats", action="store_true", help="Show database statistics")

    args = parser.parse_args()

    if args.reset:
        reset_database()
    elif args.seed:
        create_tables()  # Ensure tables exist
        seed_default_data()
    elif args.stats:
        show_stats()
    else:
        create_tables()

    show_stats()


if __name__ == "__main__":
    main()
