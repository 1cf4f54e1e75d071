"""Person registry HTTP service (FastAPI + SQLAlchemy asyncio + PostgreSQL)."""
