import re

from sqlalchemy.orm import DeclarativeBase, declared_attr

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


class Base(DeclarativeBase):
    """Declarative base; table names are the snake_case class name (``LinkedAccount`` -> ``linked_account``)."""

    @declared_attr.directive
    def __tablename__(cls) -> str:  # type: ignore
        return _CAMEL_BOUNDARY.sub("_", cls.__name__).lower()
