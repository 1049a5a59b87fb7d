from decimal import Decimal
from typing import Annotated

from pydantic import PlainSerializer
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Currency-agnostic amount. Kept as Decimal in memory, rendered as a JSON number.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
