# src/members/models.py
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Boolean
from sqlalchemy.orm import relationship
from database import Base
from datetime import datetime


class Member(Base):
    """A profile inside a family account. The owner profile has uid == owner_id."""
    __tablename__ = "members"

    id = Column(Integer, primary_key=True, index=True)
    uid = Column(String, unique=True, index=True, nullable=False)
    owner_id = Column(String, index=True, nullable=False)
    name = Column(String, nullable=False)
    last_name = Column(String, nullable=False, default="")
    email = Column(String, nullable=True)
    role = Column(String, nullable=False, default="adult")
    is_owner_profile = Column(Boolean, nullable=False, default=False)
    subscription_plan = Column(String, nullable=True)
    subscription_status = Column(String, nullable=True)  # active, trial, inactive, past_due, canceled
    trial_ends_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    flow_subscription = relationship(
        "FlowSubscription", back_populates="member", uselist=False, cascade="all, delete-orphan"
    )


class FlowSubscription(Base):
    """Gateway customer and subscription ids attached to a member."""
    __tablename__ = "flow_subscriptions"

    id = Column(Integer, primary_key=True, index=True)
    member_id = Column(Integer, ForeignKey("members.id"), unique=True, nullable=False)
    customer_id = Column(String, unique=True, index=True, nullable=False)
    subscription_id = Column(String, nullable=False, default="")
    plan_name = Column(String, nullable=False)  # Plan Mensual, Plan Semestral, Plan Anual
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    activated_at = Column(DateTime, nullable=True)
    subscription_started_at = Column(DateTime, nullable=True)
    last_payment_status = Column(Boolean, nullable=False, default=False)

    member = relationship("Member", back_populates="flow_subscription")
