"""Custom SQLAlchemy column types."""

from decimal import Decimal

from sqlalchemy import Numeric, String, TypeDecorator


class ExactNumeric(TypeDecorator):
    """NUMERIC(28, 10) that round-trips Decimal values without loss.

    SQLite has no exact decimal storage, so there the value is kept as its
    string form and parsed back into a Decimal on load.
    """

    impl = Numeric(28, 10, asdecimal=True)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String(40))
        return dialect.type_descriptor(Numeric(28, 10, asdecimal=True))

    def process_bind_param(self, value, dialect):
        if value is None or dialect.name != "sqlite":
            return value
        return str(value if isinstance(value, Decimal) else Decimal(value))

    def process_result_value(self, value, dialect):
        if value is None or isinstance(value, Decimal):
            return value
        return Decimal(str(value))
