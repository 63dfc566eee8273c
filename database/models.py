import uuid

from sqlalchemy import (
    Column, Integer, String, Boolean, Text, ForeignKey, TIMESTAMP, Float, Index
)
from sqlalchemy.sql import text as sql_text
from sqlalchemy.orm import relationship, declarative_base
from sqlalchemy.dialects.postgresql import UUID, JSONB, ARRAY

Base = declarative_base()

USER_ROLE_MODEL = 'model'
USER_ROLE_EMPLOYER = 'employer'
USER_ROLE_ADMIN = 'admin'

USER_STATUS_ACTIVE = 'active'

CASTING_STATUS_DRAFT = 'draft'
CASTING_STATUS_ACTIVE = 'active'
CASTING_STATUS_CLOSED = 'closed'
CASTING_STATUS_CANCELLED = 'cancelled'


class User(Base):
    __tablename__ = 'users'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(Text, nullable=False, unique=True)
    role = Column(String(20), nullable=False)  # model|employer|admin
    status = Column(String(20), nullable=False, default='pending')
    is_verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=sql_text("timezone('UTC', now())"))
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=sql_text("timezone('UTC', now())"))

    model_profile = relationship("ModelProfile", back_populates="user", uselist=False)


class ModelProfile(Base):
    __tablename__ = 'model_profiles'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey('users.id', ondelete='CASCADE'), nullable=False)

    name = Column(Text, nullable=False, default='')
    age = Column(Integer)
    height = Column(Float)  # cm
    weight = Column(Float)  # kg
    gender = Column(Text)
    experience = Column(Integer)  # years
    hourly_rate = Column(Float)
    description = Column(Text)
    city = Column(Text)

    languages = Column(ARRAY(Text), nullable=False, default=list)
    categories = Column(ARRAY(Text), nullable=False, default=list)

    rating = Column(Float, nullable=False, default=0.0)
    is_public = Column(Boolean, nullable=False, default=True)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=sql_text("timezone('UTC', now())"))
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=sql_text("timezone('UTC', now())"))

    user = relationship("User", back_populates="model_profile")

    __table_args__ = (
        Index('idx_model_profiles_city', 'city'),
        Index('idx_model_profiles_public_rating', 'is_public', 'rating'),
        Index('idx_model_profiles_categories', 'categories', postgresql_using='gin'),
    )


class Casting(Base):
    __tablename__ = 'castings'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    employer_id = Column(UUID(as_uuid=True), nullable=False, index=True)

    title = Column(Text, nullable=False)
    description = Column(Text)
    city = Column(Text, nullable=False)

    # JSON arrays of strings, e.g. ["fashion", "sport"]
    categories = Column(JSONB)
    languages = Column(JSONB)

    gender = Column(Text)
    age_min = Column(Integer)
    age_max = Column(Integer)
    height_min = Column(Float)
    height_max = Column(Float)
    weight_min = Column(Float)
    weight_max = Column(Float)

    job_type = Column(Text)  # one_time|permanent
    status = Column(String(20), nullable=False, default=CASTING_STATUS_DRAFT)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=sql_text("timezone('UTC', now())"))
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=sql_text("timezone('UTC', now())"))


class Notification(Base):
    __tablename__ = 'notifications'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)

    type = Column(Text, nullable=False)  # casting_match|new_response|new_message
    title = Column(Text, nullable=False)
    message = Column(Text)
    data = Column(JSONB, nullable=False, default=dict)  # {"casting_id": ..., "model_id": ...}

    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(TIMESTAMP(timezone=True))
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=sql_text("timezone('UTC', now())"))
