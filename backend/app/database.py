from sqlalchemy import create_engine, Column, Integer, String, Float, DateTime, Boolean, Text, Index
from sqlalchemy.orm import declarative_base, sessionmaker

from sellers.base import SellerRecord, utc_now

Base = declarative_base()


class SellerRecordRow(Base):
    __tablename__ = 'seller_records'

    id = Column(Integer, primary_key=True)

    # Target context
    product_id = Column(String, nullable=False)
    marketplace = Column(String, nullable=False)  # UK, DE, ...
    marketplace_domain = Column(String, nullable=False)

    # Seller identity
    seller_id = Column(String, nullable=False, index=True)
    seller_name = Column(String)  # Anchor text on the offer page
    seller_display_name = Column(String)  # h1 of the profile page
    source_url = Column(Text)
    discovery_strategy = Column(String)  # aag, sellerParam, soldBy, soldByPath
    profile_url = Column(Text)

    # Business details
    business_name = Column(String)
    business_type = Column(String)
    trade_register_number = Column(String)
    vat_number = Column(String)
    phone_number = Column(String)
    customer_service_phone = Column(String)
    email = Column(String)
    business_address = Column(Text)
    customer_service_address = Column(Text)

    # Ratings
    rating = Column(Float)
    positive_percent = Column(Integer)
    rating_count = Column(Integer)
    has_detailed_info = Column(Boolean, default=False)

    # Provenance
    first_seen_on_marketplace = Column(String)
    is_duplicate = Column(Boolean, default=False, index=True)
    profile_error = Column(Text)
    captured_at = Column(DateTime(timezone=True), default=utc_now)

    __table_args__ = (
        Index('ix_seller_records_product_marketplace', 'product_id', 'marketplace'),
    )

    @classmethod
    def from_record(cls, record: SellerRecord) -> 'SellerRecordRow':
        return cls(**record.to_dict() | {'captured_at': record.captured_at})


def create_session_factory(database_url: str):
    """Create an engine for database_url, make sure tables exist and return a session factory."""
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    engine = create_engine(
        database_url,
        echo=False,
        pool_pre_ping=True,    # Verify connections before use (handles stale connections)
        connect_args=connect_args,
    )
    init_db(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine):
    Base.metadata.create_all(bind=engine)
