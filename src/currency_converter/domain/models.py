from dataclasses import dataclass

# Shown instead of a number when neither source has the rate
UNAVAILABLE = "Conversion rate not available"


# A single completed conversion
@dataclass(frozen=True)
class Transaction:
    from_code: str
    to_code: str
    amount: float
    result: float
    date: str
