# academy/models/fee_management.py
from sqlalchemy import Column, String, Integer, Numeric, Text, DateTime, ForeignKey, UniqueConstraint
from .base import Base
from ..services.fee_calculator import PaymentStatus
import enum


class PaymentType(str, enum.Enum):
    SCHOOL_FEES = "School Fees"
    EXAMINATION_FEES = "Examination Fees"
    BOOKS = "Books"
    UNIFORM = "Uniform"
    TRANSPORT = "Transport"
    OTHERS = "Others"


FEE_COMPONENTS = (
    "tuition_fee",
    "development_levy",
    "sports_fee",
    "exam_fee",
    "books_fee",
    "uniform_fee",
    "transport_fee",
)


class FeeStructure(Base):
    __tablename__ = "fee_structures"

    # Foreign Keys
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False, index=True)

    term = Column(String(20), nullable=False)
    academic_year = Column(String(10), nullable=False)

    # Components
    tuition_fee = Column(Numeric(12, 2), default=0, nullable=False)
    development_levy = Column(Numeric(12, 2), default=0, nullable=False)
    sports_fee = Column(Numeric(12, 2), default=0, nullable=False)
    exam_fee = Column(Numeric(12, 2), default=0, nullable=False)
    books_fee = Column(Numeric(12, 2), default=0, nullable=False)
    uniform_fee = Column(Numeric(12, 2), default=0, nullable=False)
    transport_fee = Column(Numeric(12, 2), default=0, nullable=False)
    total_fee = Column(Numeric(12, 2), default=0, nullable=False)

    status = Column(String(20), default="Active", nullable=False)

    __table_args__ = (
        UniqueConstraint("class_id", "term", "academic_year", name="uq_fee_structure"),
    )


class Scholarship(Base):
    __tablename__ = "scholarships"

    name = Column(String(100), nullable=False)
    scholarship_type = Column(String(20), nullable=False)
    value = Column(Numeric(12, 2), nullable=False)
    description = Column(Text)
    eligibility_criteria = Column(Text)
    total_budget = Column(Numeric(12, 2))
    academic_year = Column(String(10))
    status = Column(String(20), default="Active", nullable=False)


class ScholarshipAward(Base):
    __tablename__ = "scholarship_awards"

    scholarship_id = Column(Integer, ForeignKey("scholarships.id"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    term = Column(String(20), nullable=False)
    academic_year = Column(String(10), nullable=False)

    __table_args__ = (
        UniqueConstraint("scholarship_id", "student_id", "term", "academic_year", name="uq_scholarship_award"),
    )


class Payment(Base):
    __tablename__ = "payments"

    # Foreign Keys
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)

    # Payment Details
    amount = Column(Numeric(12, 2), nullable=False)
    payment_type = Column(String(30), default=PaymentType.SCHOOL_FEES.value, nullable=False)
    term = Column(String(20), nullable=False)
    academic_year = Column(String(10), nullable=False)
    payment_method = Column(String(30), nullable=False)
    transaction_reference = Column(String(100))
    receipt_number = Column(String(30), nullable=False, unique=True, index=True)
    notes = Column(Text)

    # Verification
    recorded_by = Column(Integer)
    status = Column(String(20), default=PaymentStatus.PENDING.value, nullable=False, index=True)
    verified_by = Column(Integer)
    verified_date = Column(DateTime(timezone=True))
