# file: database/models.py

from sqlalchemy import Column, Integer, String, Date, DateTime, Text, Boolean, JSON, ForeignKey, func
from sqlalchemy.orm import relationship

from quorumflow.database.connection import Base


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    firebase_uid = Column(String(255), unique=True, index=True, nullable=False)
    email = Column(Text, unique=True, nullable=True, index=True)
    full_name = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")
    push_subscriptions = relationship("PushSubscription", back_populates="user", cascade="all, delete-orphan")


class Activity(Base):
    __tablename__ = "activities"
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    date = Column(DateTime, nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    time = Column(String(20), nullable=True)
    location = Column(String(255), nullable=True)
    context = Column(Text, nullable=True)
    learning = Column(Text, nullable=True)
    additional_text = Column(Text, nullable=True)
    image_urls = Column(JSON, nullable=False, default=list)


# Manually registered baptisms
class Baptism(Base):
    __tablename__ = "baptisms"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    date = Column(DateTime, nullable=False, index=True)
    photo_urls = Column(JSON, nullable=False, default=list)


# Pre-registered future members; a past baptism_date counts as a baptism
class FutureMember(Base):
    __tablename__ = "future_members"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    baptism_date = Column(DateTime, nullable=True, index=True)
    baptism_photos = Column(JSON, nullable=False, default=list)


class AnnualReportAnswers(Base):
    __tablename__ = "annual_report_answers"
    year = Column(Integer, primary_key=True, autoincrement=False)
    p1 = Column(Text, nullable=True)
    p2 = Column(Text, nullable=True)
    p3 = Column(Text, nullable=True)
    p4 = Column(Text, nullable=True)
    p5 = Column(Text, nullable=True)
    p6 = Column(Text, nullable=True)


class Service(Base):
    __tablename__ = "services"
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    date = Column(DateTime, nullable=False)
    time = Column(String(20), nullable=True)


class Birthday(Base):
    __tablename__ = "birthdays"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    birth_date = Column(Date, nullable=False)


class Companionship(Base):
    __tablename__ = "companionships"
    id = Column(Integer, primary_key=True, index=True)
    companions = Column(JSON, nullable=False, default=list)
    families = relationship("Family", back_populates="companionship", cascade="all, delete-orphan",
                            lazy="selectin")


class Family(Base):
    __tablename__ = "families"
    id = Column(Integer, primary_key=True, index=True)
    companionship_id = Column(Integer, ForeignKey("companionships.id"), nullable=False)
    name = Column(String(255), nullable=False)
    is_urgent = Column(Boolean, default=False, nullable=False)
    observation = Column(Text, nullable=True)
    companionship = relationship("Companionship", back_populates="families")


class Member(Base):
    __tablename__ = "members"
    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False, index=True)
    phone = Column(String(50), nullable=True)
    birth_date = Column(Date, nullable=True)
    baptism_date = Column(DateTime, nullable=True)
    status = Column(String(20), nullable=True, index=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class MissionaryAssignment(Base):
    __tablename__ = "missionary_assignments"
    id = Column(Integer, primary_key=True, index=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())


class PushSubscription(Base):
    __tablename__ = "push_subscriptions"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    endpoint = Column(Text, nullable=False, unique=True)
    subscription = Column(JSON, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    user = relationship("User", back_populates="push_subscriptions")


class Notification(Base):
    __tablename__ = "notifications"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    title = Column(String(255), nullable=False)
    body = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    is_read = Column(Boolean, default=False, nullable=False)
    action_url = Column(String(255), nullable=True)
    action_type = Column(String(20), nullable=True)
    context_type = Column(String(50), nullable=True)
    context_id = Column(String(255), nullable=True)
    user = relationship("User", back_populates="notifications")
