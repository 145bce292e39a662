from sqlalchemy import Column, ForeignKey, Integer, Text, text

from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata


class Fields(Base):
    __tablename__ = 'fields'

    name = Column(Text, nullable=False)
    # JSON: "everyday" / "weekends" / "Monday" / ["weekdays", "Sunday"]
    operating_days = Column(Text)
    opening_time = Column(Text, nullable=False, server_default=text("'06:00'"))
    closing_time = Column(Text, nullable=False, server_default=text("'21:00'"))
    slot_duration_minutes = Column(Integer, nullable=False, server_default=text('60'))
    buffer_minutes = Column(Integer, nullable=False, server_default=text('0'))
    max_dogs_per_slot = Column(Integer, nullable=False, server_default=text('1'))
    timezone = Column(Text)
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    id = Column(Integer, primary_key=True)
    owner_id = Column(Integer)
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    bookings = relationship('Bookings', back_populates='field')


class Bookings(Base):
    __tablename__ = 'bookings'

    field_id = Column(ForeignKey('fields.id', ondelete='CASCADE'), nullable=False)
    user_id = Column(Integer, nullable=False)
    date = Column(Text, nullable=False)  # "YYYY-MM-DD", field-local
    start_time = Column(Text, nullable=False)  # "8:00AM"
    end_time = Column(Text, nullable=False)
    number_of_dogs = Column(Integer, nullable=False, server_default=text('1'))
    status = Column(Text, nullable=False, server_default=text("'pending'"))
    recurrence = Column(Text)
    created_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))  # UTC
    id = Column(Integer, primary_key=True)
    cancel_reason = Column(Text)

    field = relationship('Fields', back_populates='bookings')
