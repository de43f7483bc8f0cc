from decimal import Decimal
from typing import Annotated

from pydantic import PlainSerializer

from app.services.pricing import round_money

# Money keeps full precision in Python and is rounded to cents only
# when rendered as JSON.
Money = Annotated[
    Decimal,
    PlainSerializer(lambda v: float(round_money(v)), return_type=float, when_used="json"),
]

# Units or grams; rendered as a JSON number
Quantity = Annotated[
    Decimal,
    PlainSerializer(lambda v: float(v), return_type=float, when_used="json"),
]
