from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, JSON, ForeignKey
from sqlalchemy.orm import relationship
from database import Base

CONTRACT_STATUSES = ("actif", "resilie", "a_renouveler")


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String(64), ForeignKey("users.id"), primary_key=True)
    email = Column(String(320), nullable=True)
    full_name = Column(Text, nullable=True)
    avatar_url = Column(Text, nullable=True)
    subscription_plan = Column(String(16), default="free", nullable=False)
    documents_uploaded = Column(Integer, default=0, nullable=False)
    documents_limit = Column(Integer, default=3, nullable=False)  # -1 = unlimited
    stripe_customer_id = Column(String(255), nullable=True)
    stripe_subscription_id = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="profile")


class Contract(Base):
    __tablename__ = "contracts"

    id = Column(String(64), primary_key=True)
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    file_name = Column(Text, nullable=False)
    file_url = Column(Text, nullable=True)
    contract_type = Column(String(64), nullable=True, index=True)
    status = Column(String(16), default="actif")
    extracted_text = Column(Text, nullable=True)
    main_coverages = Column(JSON, nullable=True)
    amounts = Column(JSON, nullable=True)
    exclusions = Column(JSON, nullable=True)
    optimization_score = Column(Integer, nullable=True)
    potential_savings = Column(Integer, nullable=True)
    coverage_gaps = Column(JSON, nullable=True)
    recommendations = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="contracts")
    messages = relationship("ChatMessage", back_populates="contract")


class ChatMessage(Base):
    __tablename__ = "chat_messages"

    id = Column(String(64), primary_key=True)
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False)
    contract_id = Column(String(64), ForeignKey("contracts.id"), nullable=True, index=True)
    role = Column(String(16), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    contract = relationship("Contract", back_populates="messages")
