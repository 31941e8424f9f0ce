"""ORM models package for database tables.

This package provides SQLAlchemy ORM models representing database tables:
- User: Identity attributes, premium flag and credit balances
- Resume: A resume document with embedded JSON sections
- Payment: Download-credit purchases and their gateway state

All models inherit from the shared Base declarative class defined in data.db.
"""

from resume_builder.data.db import Base
from resume_builder.data.models.payment import Payment
from resume_builder.data.models.resume import Resume
from resume_builder.data.models.user import User

__all__ = ["Base", "Payment", "Resume", "User"]
